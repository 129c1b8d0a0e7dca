"""
Print layout engine.

Turns a structured document into pages of absolutely positioned draw
commands. All coordinates are millimeters from the top-left corner of the
page; a TextRun's y is its baseline.

Resumes use a full-width header (name, title, contact row, rule), any
unplaced header-area text at full width, then two independent columns.
Each column keeps its own cursor and page index, so a page break in one
column never moves the other. Letters and the plain layout flow in a
single column and always continue on new pages.

Every entry point is total: unexpected failures are logged and replaced by
a placeholder page.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from fpdf.errors import FPDFException

from scribe.contexts.intake.classifier import is_all_caps_label, is_section_label, looks_like_contact
from scribe.contexts.intake.document import DocumentKind, LineRole, RawDocument
from scribe.contexts.intake.normalizer import normalize
from scribe.contexts.intake.vocabulary import get_locale_cues
from scribe.contexts.rendering.exceptions import MeasurementError
from scribe.contexts.rendering.keywords import KeywordCategory, classify_keywords
from scribe.contexts.rendering.logger import (
    log_degradation,
    log_pagination_failure,
    log_pagination_result,
)
from scribe.contexts.rendering.measure import (
    PT_TO_MM,
    FixedWidthMeasurer,
    FpdfMeasurer,
    TextMeasurer,
    WidthCache,
    make_measurer,
    wrap_fragments,
)
from scribe.contexts.rendering.styles import RGB, StyleProfile, resolve_style
from scribe.contexts.structuring.document_structures import (
    CoverLetterDocument,
    ResumeDocument,
    Section,
)
from scribe.utils.config_loader import InvalidConfigError

PLACEHOLDER_TEXT = "No content available"

# Gap between a section header's baseline and the first content line
HEADER_RULE_GAP = 2.5

# Float slack when a reservation and the later line check sum heights differently
FIT_TOLERANCE = 1e-6

# Plain layout constants (linear raw-text download)
PLAIN_MARGIN = 20.0
PLAIN_LINE_HEIGHT = 6.0
PLAIN_HEADER_SIZE = 14
PLAIN_POSITION_SIZE = 11
PLAIN_BODY_SIZE = 10

# Job title or position line: pipe-delimited or carrying a year
POSITION_PATTERN = re.compile(r"\||\d{4}")


# =============================================================================
# GEOMETRY AND DRAW COMMANDS
# =============================================================================


@dataclass(frozen=True)
class PageSize:
    width: float
    height: float


A4 = PageSize(210.0, 297.0)
LETTER = PageSize(215.9, 279.4)


@dataclass(frozen=True)
class Margins:
    top: float
    right: float
    bottom: float
    left: float

    @classmethod
    def uniform(cls, value: float) -> "Margins":
        return cls(value, value, value, value)


@dataclass(frozen=True)
class TextRun:
    """A run of text in one font, size and color, drawn at its baseline."""

    x: float
    y: float
    text: str
    font_size: float
    bold: bool = False
    color: RGB = (0, 0, 0)
    category: KeywordCategory = KeywordCategory.NONE
    region: str = "body"
    source_index: int = -1


@dataclass(frozen=True)
class RuleLine:
    x1: float
    y1: float
    x2: float
    y2: float
    color: RGB = (0, 0, 0)
    width: float = 0.3
    region: str = "body"


@dataclass(frozen=True)
class FilledRect:
    x: float
    y: float
    width: float
    height: float
    color: RGB = (255, 255, 255)
    region: str = "body"


@dataclass(frozen=True)
class FilledCircle:
    x: float
    y: float
    radius: float
    color: RGB = (0, 0, 0)
    region: str = "body"


DrawCommand = Union[TextRun, RuleLine, FilledRect, FilledCircle]


@dataclass(frozen=True)
class Page:
    """One page of draw commands in paint order."""

    number: int
    commands: Tuple[DrawCommand, ...] = ()

    @property
    def text_runs(self) -> List[TextRun]:
        return [command for command in self.commands if isinstance(command, TextRun)]

    @property
    def text(self) -> str:
        """Text of the page, one output line per baseline per region."""
        lines: List[str] = []
        last_key = None
        for run in self.text_runs:
            key = (run.region, round(run.y, 3))
            if key == last_key:
                lines[-1] += run.text
            else:
                lines.append(run.text)
            last_key = key
        return "\n".join(lines)


@dataclass(frozen=True)
class PaginationResult:
    """
    Output of the print layout.

    Attributes:
        pages: Pages in order (never empty)
        truncated_lines: Source lines dropped by the truncate overflow policy
        warnings: Degradations that occurred while laying out
        style_name: Style profile used
        page_size: Page geometry
    """

    pages: List[Page]
    truncated_lines: int = 0
    warnings: List[str] = field(default_factory=list)
    style_name: str = ""
    page_size: PageSize = A4

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def command_count(self) -> int:
        return sum(len(page.commands) for page in self.pages)

    @property
    def text(self) -> str:
        return "\n".join(page.text for page in self.pages)


# =============================================================================
# COMPOSER
# =============================================================================


@dataclass
class _Cursor:
    """
    Vertical flow position of one region.

    y is the baseline of the last emitted line (or the region's top edge
    before anything is emitted).
    """

    region: str
    x: float
    width: float
    page: int
    y: float
    spill: bool = True
    stopped: bool = False


def _run_widths(wrapped, measure) -> List[List[float]]:
    """Advance of every fragment of every wrapped line."""
    return [[measure(text, tag) for text, tag in line] for line in wrapped]


class _Composer:
    """Accumulates draw commands across pages for one layout run."""

    def __init__(
        self,
        page_size: PageSize,
        margins: Margins,
        style: StyleProfile,
        measurer: TextMeasurer,
    ):
        self.page_size = page_size
        self.margins = margins
        self.style = style
        self.measurer = measurer
        self.pages: List[List[DrawCommand]] = [[]]
        self.warnings: List[str] = []
        self.truncated_lines = 0
        self._caches: Dict[Tuple[int, float], WidthCache] = {}
        self.fallback_measurer = FixedWidthMeasurer()

    # Geometry -----------------------------------------------------------

    @property
    def top(self) -> float:
        return self.margins.top

    @property
    def bottom(self) -> float:
        return self.page_size.height - self.margins.bottom

    @property
    def left(self) -> float:
        return self.margins.left

    @property
    def content_width(self) -> float:
        return max(self.page_size.width - self.margins.left - self.margins.right, 1.0)

    def line_height(self, font_size: float) -> float:
        return self.style.layout.line_height(font_size)

    def cursor(self, region: str, x: float = None, width: float = None, page: int = 0, y: float = None, spill: bool = True) -> _Cursor:
        return _Cursor(
            region=region,
            x=self.left if x is None else x,
            width=self.content_width if width is None else width,
            page=page,
            y=self.top if y is None else y,
            spill=spill,
        )

    # Paging -------------------------------------------------------------

    def ensure_page(self, page: int) -> None:
        while len(self.pages) <= page:
            self.pages.append([])

    def emit(self, page: int, command: DrawCommand) -> None:
        self.ensure_page(page)
        self.pages[page].append(command)

    def _fits(self, cursor: _Cursor, height: float) -> bool:
        # A fresh page always accepts a line so oversized margins cannot loop
        return cursor.y + height <= self.bottom + FIT_TOLERANCE or cursor.y <= self.top

    def _break(self, cursor: _Cursor) -> bool:
        """Move the cursor to the next page; False if the region truncates instead."""
        if not cursor.spill:
            cursor.stopped = True
            return False
        cursor.page += 1
        cursor.y = self.top
        self.ensure_page(cursor.page)
        return True

    def ensure_room(self, cursor: _Cursor, height: float) -> bool:
        if cursor.stopped:
            return False
        if self._fits(cursor, height):
            return True
        return self._break(cursor)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        log_degradation(message)

    # Text ---------------------------------------------------------------

    def _width_cache(self, measurer: TextMeasurer, font_size: float) -> WidthCache:
        key = (id(measurer), font_size)
        if key not in self._caches:
            self._caches[key] = WidthCache(measurer, font_size)
        return self._caches[key]

    def wrap_plain(self, text: str, width: float, font_size: float, bold: bool, measurer: TextMeasurer):
        cache = self._width_cache(measurer, font_size)

        def measure(fragment_text, _tag):
            return cache(fragment_text, bold)

        return wrap_fragments([(text, None)], width, measure)

    def _fragments(self, text: str, highlight: bool) -> List[Tuple[str, KeywordCategory]]:
        if highlight and self.style.features.highlight_keywords:
            return [(span.text, span.category) for span in classify_keywords(text)]
        return [(text, KeywordCategory.NONE)]

    def _is_bold(self, base_bold: bool, category: KeywordCategory, highlight: bool) -> bool:
        emphasized = highlight and category != KeywordCategory.NONE and self.style.features.bold_keywords
        return base_bold or emphasized

    def emit_line(
        self,
        cursor: _Cursor,
        text: str,
        font_size: float,
        color: RGB,
        bold: bool = False,
        indent: float = 0.0,
        highlight: bool = False,
        bullet: bool = False,
        keep_with_next: float = 0.0,
        center: bool = False,
        source_index: int = -1,
    ) -> bool:
        """
        Wrap and emit one logical line.

        Returns:
            False if the cursor's region stopped before the whole line fit
        """
        if cursor.stopped:
            return False

        available = max(cursor.width - indent, 1.0)
        try:
            fragments = self._fragments(text, highlight)
            cache = self._width_cache(self.measurer, font_size)

            def measure(fragment_text, tag):
                return cache(fragment_text, self._is_bold(bold, tag, highlight))

            wrapped = wrap_fragments(fragments, available, measure)
            advances = _run_widths(wrapped, measure)
        except MeasurementError as e:
            self.warn(f"Measurement failed, line rendered unstyled: {e.message} ({e.text!r})")
            highlight = False
            fallback = self._width_cache(self.fallback_measurer, font_size)

            def measure(fragment_text, tag):
                return fallback(fragment_text, bold)

            wrapped = wrap_fragments([(text, KeywordCategory.NONE)], available, measure)
            advances = _run_widths(wrapped, measure)

        height = self.line_height(font_size)
        for position, (fragments_line, widths) in enumerate(zip(wrapped, advances)):
            needed = height + (keep_with_next if position == 0 else 0.0)
            if not self.ensure_room(cursor, needed):
                return False
            cursor.y += height

            if bullet and position == 0:
                radius = self.style.layout.bullet_radius
                self.emit(
                    cursor.page,
                    FilledCircle(
                        x=cursor.x + radius + 0.5,
                        y=cursor.y - font_size * PT_TO_MM * 0.3,
                        radius=radius,
                        color=self.style.colors.accent,
                        region=cursor.region,
                    ),
                )

            x = cursor.x + indent
            if center:
                x = cursor.x + max((cursor.width - sum(widths)) / 2, 0.0)

            for (fragment_text, category), advance in zip(fragments_line, widths):
                run_bold = self._is_bold(bold, category, highlight)
                run_color = self.style.colors.for_category(category) if highlight and category != KeywordCategory.NONE else color
                self.emit(
                    cursor.page,
                    TextRun(
                        x=round(x, 3),
                        y=round(cursor.y, 3),
                        text=fragment_text,
                        font_size=font_size,
                        bold=run_bold,
                        color=run_color,
                        category=category if highlight else KeywordCategory.NONE,
                        region=cursor.region,
                        source_index=source_index,
                    ),
                )
                x += advance
        return True

    def emit_rule(self, cursor: _Cursor, offset: float = 1.2, width: float = 0.3, color: RGB = None) -> None:
        y = round(cursor.y + offset, 3)
        self.emit(
            cursor.page,
            RuleLine(
                x1=cursor.x,
                y1=y,
                x2=cursor.x + cursor.width,
                y2=y,
                color=color or self.style.colors.rule,
                width=width,
                region=cursor.region,
            ),
        )

    def emit_placeholder(self) -> None:
        cursor = self.cursor("placeholder", y=self.top + 20)
        self.emit_line(
            cursor, PLACEHOLDER_TEXT, self.style.fonts.body_size, self.style.colors.muted, center=True
        )

    def result(self) -> PaginationResult:
        pages = [Page(number=index + 1, commands=tuple(commands)) for index, commands in enumerate(self.pages)]
        return PaginationResult(
            pages=pages,
            truncated_lines=self.truncated_lines,
            warnings=list(self.warnings),
            style_name=self.style.name,
            page_size=self.page_size,
        )


# =============================================================================
# RESUMES
# =============================================================================


def _emit_section(composer: _Composer, cursor: _Cursor, section: Section) -> int:
    """
    Emit one section into a region.

    Returns:
        Number of source lines (headers included) that were fully emitted
    """
    style = composer.style
    emitted = 0
    body_height = composer.line_height(style.fonts.body_size)

    if section.header_lines:
        header_height = composer.line_height(style.fonts.header_size)
        # Header plus its first line (and the body line a subheader keeps with), or neither
        first_height = body_height
        if section.lines and section.lines[0].role == LineRole.SUBSECTION_HEADER:
            first_height += composer.line_height(style.fonts.subheader_size)
        if not composer.ensure_room(cursor, header_height + HEADER_RULE_GAP + first_height):
            return 0
        composer.emit_line(
            cursor,
            section.display_label.upper(),
            style.fonts.header_size,
            style.colors.primary,
            bold=True,
            source_index=section.header_lines[0].index,
        )
        if style.features.section_rule:
            composer.emit_rule(cursor)
        cursor.y += HEADER_RULE_GAP
        emitted += len(section.header_lines)

    for line in section.lines:
        if line.role == LineRole.SUBSECTION_HEADER:
            ok = composer.emit_line(
                cursor,
                line.content,
                style.fonts.subheader_size,
                style.colors.secondary,
                bold=True,
                keep_with_next=body_height,
                source_index=line.index,
            )
        elif line.role == LineRole.BULLET:
            ok = composer.emit_line(
                cursor,
                line.content,
                style.fonts.body_size,
                style.colors.text,
                indent=style.layout.bullet_indent,
                highlight=True,
                bullet=True,
                source_index=line.index,
            )
        elif line.role == LineRole.CONTACT_ITEM:
            ok = composer.emit_line(
                cursor, line.content, style.fonts.body_size, style.colors.muted, source_index=line.index
            )
        else:
            ok = composer.emit_line(
                cursor,
                line.content,
                style.fonts.body_size,
                style.colors.text,
                highlight=True,
                source_index=line.index,
            )
        if not ok:
            return emitted
        emitted += 1

    cursor.y += style.layout.section_spacing
    return emitted


def _emit_column(composer: _Composer, cursor: _Cursor, sections: Sequence[Section]) -> None:
    total = sum(section.line_count for section in sections)
    emitted = 0
    for section in sections:
        emitted += _emit_section(composer, cursor, section)
        if cursor.stopped:
            break
    dropped = total - emitted
    if dropped:
        composer.truncated_lines += dropped
        composer.warn(f"{dropped} line(s) in the {cursor.region} column did not fit on the page and were truncated")


def _layout_resume(composer: _Composer, document: ResumeDocument) -> None:
    style = composer.style
    header = composer.cursor("header")

    if document.name:
        composer.emit_line(
            header, document.name, style.fonts.name_size, style.colors.primary, bold=True, center=True,
            source_index=document.name_line.index,
        )
    if document.title:
        composer.emit_line(
            header, document.title, style.fonts.title_size, style.colors.secondary, center=True,
            source_index=document.title_line.index,
        )
    if document.contact:
        composer.emit_line(
            header,
            " | ".join(line.text for line in document.contact),
            style.fonts.contact_size,
            style.colors.muted,
            center=True,
            source_index=document.contact[0].index,
        )

    has_header = bool(document.name or document.title or document.contact)
    if has_header:
        header.y += 2.0
        composer.emit_rule(header, offset=0.0, width=0.6, color=style.colors.secondary)
        header.y += style.layout.section_spacing
        if style.features.header_band and header.page == 0:
            composer.pages[0].insert(
                0,
                FilledRect(0.0, 0.0, composer.page_size.width, header.y, style.colors.header_background, "header"),
            )

    if document.unplaced is not None:
        full = composer.cursor("full", page=header.page, y=header.y)
        _emit_section(composer, full, document.unplaced)
        header = full

    content_width = composer.content_width
    left_width = content_width * style.layout.left_column_ratio
    right_width = max(content_width - left_width - style.layout.column_gap, 1.0)
    spill = style.layout.overflow == "spill"

    primary = composer.cursor("primary", x=composer.left, width=left_width, page=header.page, y=header.y, spill=spill)
    secondary = composer.cursor(
        "secondary",
        x=composer.left + left_width + style.layout.column_gap,
        width=right_width,
        page=header.page,
        y=header.y,
        spill=spill,
    )
    _emit_column(composer, primary, document.primary_column)
    _emit_column(composer, secondary, document.secondary_column)


# =============================================================================
# LETTERS
# =============================================================================


def _layout_letter(composer: _Composer, document: CoverLetterDocument) -> None:
    style = composer.style
    fonts, colors = style.fonts, style.colors
    gap = style.layout.paragraph_spacing
    cursor = composer.cursor("letter")
    header, recipient, body = document.header, document.recipient, document.body

    if header.name:
        composer.emit_line(cursor, header.name, fonts.title_size + 3, colors.primary, bold=True)
    for line in header.address:
        composer.emit_line(cursor, line, fonts.contact_size, colors.muted)
    if header.contact:
        composer.emit_line(cursor, " | ".join(header.contact), fonts.contact_size, colors.muted)
    if header.name or header.address or header.contact:
        cursor.y += 2.0
        composer.emit_rule(cursor, offset=0.0, width=0.5, color=colors.secondary)
        cursor.y += gap * 2

    if header.date:
        composer.emit_line(cursor, header.date, fonts.body_size, colors.text)
        cursor.y += gap

    recipient_lines = [recipient.name, recipient.title, recipient.company, *recipient.address]
    for line in filter(None, recipient_lines):
        composer.emit_line(cursor, line, fonts.body_size, colors.text)
    if any(recipient_lines):
        cursor.y += gap

    if header.subject:
        composer.emit_line(cursor, header.subject, fonts.body_size, colors.text, bold=True)
        cursor.y += gap

    if body.salutation:
        composer.emit_line(cursor, body.salutation, fonts.body_size, colors.text)
        cursor.y += gap

    for paragraph in body.paragraphs:
        composer.emit_line(cursor, paragraph, fonts.body_size, colors.text, highlight=True)
        cursor.y += gap

    if body.closing:
        composer.emit_line(cursor, body.closing, fonts.body_size, colors.text)
        # Room for a handwritten signature
        cursor.y += composer.line_height(fonts.body_size)
    if body.signature:
        composer.emit_line(cursor, body.signature, fonts.body_size, colors.text, bold=True)
    if body.postscript:
        cursor.y += gap
        for line in body.postscript:
            composer.emit_line(cursor, line, fonts.body_size, colors.muted)


# =============================================================================
# PUBLIC API
# =============================================================================


def _resolve(style: Optional[StyleProfile], measurer: Optional[TextMeasurer], warnings: List[str]) -> Tuple[StyleProfile, TextMeasurer]:
    style = style or resolve_style()
    if measurer is None:
        try:
            measurer = make_measurer(style.fonts.family, style.fonts.font_path)
        except (OSError, RuntimeError, ValueError, FPDFException) as e:
            message = f"Font '{style.fonts.font_path}' could not be loaded, using helvetica: {e}"
            warnings.append(message)
            log_degradation(message)
            measurer = FpdfMeasurer()
    return style, measurer


def paginate(
    document: Union[ResumeDocument, CoverLetterDocument],
    page_size: PageSize = A4,
    margins: Optional[Margins] = None,
    style: Optional[StyleProfile] = None,
    measurer: Optional[TextMeasurer] = None,
) -> PaginationResult:
    """
    Lay a structured document out on fixed-size pages.

    Args:
        document: ResumeDocument or CoverLetterDocument
        page_size: Page geometry in mm (default A4)
        margins: Page margins (default: style.layout.margin on every side)
        style: StyleProfile (default: resolve_style())
        measurer: TextMeasurer (default: fpdf2 metrics for the style's font)

    Returns:
        PaginationResult with at least one page

    Raises:
        InvalidConfigError: Only if the default style cannot be loaded

    Example:
        >>> result = paginate(parse_document(RawDocument.create("")))
        >>> result.page_count
        1
    """
    setup_warnings: List[str] = []
    style, measurer = _resolve(style, measurer, setup_warnings)
    margins = margins or Margins.uniform(style.layout.margin)
    composer = _Composer(page_size, margins, style, measurer)
    composer.warnings.extend(setup_warnings)

    try:
        if document.is_empty:
            composer.emit_placeholder()
        elif isinstance(document, ResumeDocument):
            _layout_resume(composer, document)
        else:
            _layout_letter(composer, document)
    except InvalidConfigError:
        raise
    except Exception as e:
        log_pagination_failure(document.kind.value, e)
        composer = _Composer(page_size, margins, style, FixedWidthMeasurer())
        composer.warnings.append(f"Layout failed ({type(e).__name__}: {e}); placeholder page emitted")
        composer.emit_placeholder()

    result = composer.result()
    log_pagination_result(document.kind.value, result)
    return result


def _plain_line_format(text: str, language: str) -> Tuple[float, bool, bool]:
    """(font size, bold, is header) for one line of the plain layout."""
    if is_all_caps_label(text) or is_section_label(text, get_locale_cues(language)):
        return PLAIN_HEADER_SIZE, True, True
    if looks_like_contact(text):
        return PLAIN_BODY_SIZE, False, False
    if len(text) > 10 and POSITION_PATTERN.search(text):
        return PLAIN_POSITION_SIZE, True, False
    return PLAIN_BODY_SIZE, False, False


def paginate_plain(
    raw: Union[RawDocument, str],
    page_size: PageSize = A4,
    style: Optional[StyleProfile] = None,
    measurer: Optional[TextMeasurer] = None,
) -> PaginationResult:
    """
    Linear layout of the raw text with no structural parsing.

    Every non-blank line is wrapped at full width with a fixed 6 mm line
    height; blank lines add half a line; header-shaped lines are bold and
    larger. Always spills onto new pages.

    Args:
        raw: RawDocument or plain text
        page_size: Page geometry (default A4)
        style: StyleProfile for colors and font (default: resolve_style())
        measurer: TextMeasurer (default: fpdf2 metrics)

    Returns:
        PaginationResult with at least one page
    """
    if not isinstance(raw, RawDocument):
        raw = RawDocument.create(raw or "", kind=DocumentKind.RESUME)

    setup_warnings: List[str] = []
    style, measurer = _resolve(style, measurer, setup_warnings)
    margins = Margins.uniform(PLAIN_MARGIN)
    composer = _Composer(page_size, margins, style, measurer)
    composer.warnings.extend(setup_warnings)

    try:
        if raw.is_empty:
            composer.emit_placeholder()
        else:
            cursor = composer.cursor("plain")
            for index, source_line in enumerate(raw.text.splitlines()):
                text = normalize(source_line)
                if not text:
                    cursor.y += PLAIN_LINE_HEIGHT * 0.5
                    continue
                font_size, bold, is_header = _plain_line_format(text, raw.language)
                if is_header:
                    cursor.y += PLAIN_LINE_HEIGHT
                _emit_plain_line(composer, cursor, text, font_size, bold, index)
    except InvalidConfigError:
        raise
    except Exception as e:
        log_pagination_failure("plain", e)
        composer = _Composer(page_size, margins, style, FixedWidthMeasurer())
        composer.warnings.append(f"Plain layout failed ({type(e).__name__}: {e}); placeholder page emitted")
        composer.emit_placeholder()

    result = composer.result()
    log_pagination_result("plain", result)
    return result


def _emit_plain_line(composer: _Composer, cursor: _Cursor, text: str, font_size: float, bold: bool, index: int) -> None:
    """Emit one plain-layout line with the fixed line height."""
    try:
        wrapped = composer.wrap_plain(text, cursor.width, font_size, bold, composer.measurer)
    except MeasurementError as e:
        composer.warn(f"Measurement failed, approximate wrapping used: {e.message}")
        wrapped = composer.wrap_plain(text, cursor.width, font_size, bold, composer.fallback_measurer)

    for fragments_line in wrapped:
        composer.ensure_room(cursor, PLAIN_LINE_HEIGHT)
        cursor.y += PLAIN_LINE_HEIGHT
        composer.emit(
            cursor.page,
            TextRun(
                x=cursor.x,
                y=round(cursor.y, 3),
                text="".join(part for part, _ in fragments_line),
                font_size=font_size,
                bold=bold,
                color=composer.style.colors.text,
                region=cursor.region,
                source_index=index,
            ),
        )
