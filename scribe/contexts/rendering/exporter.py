"""
Export orchestration: structured or raw text in, downloadable bytes out.

export_pdf runs the styled two-column layout and the fpdf2 writer. When the
styled path fails for any reason other than a broken deployment config, it
falls back to the linear plain layout with a core font and records a
warning. Only when both paths fail does it raise ExportError.

export_text packages the unparsed text for a .txt download.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import List, Optional, Sequence, Union

from scribe.contexts.intake.document import RawDocument
from scribe.contexts.rendering.exceptions import ExportError
from scribe.contexts.rendering.filename import derive_filename, derive_raw_filename
from scribe.contexts.rendering.layout import A4, PageSize, paginate, paginate_plain
from scribe.contexts.rendering.logger import _log_warning, log_export_result
from scribe.contexts.rendering.measure import TextMeasurer
from scribe.contexts.rendering.pdf_writer import write_pdf
from scribe.contexts.rendering.styles import DEFAULT_STYLE, StyleProfile, resolve_style
from scribe.contexts.structuring.assembler import parse_document
from scribe.contexts.structuring.document_structures import CoverLetterDocument, ResumeDocument
from scribe.utils.config_loader import InvalidConfigError

ExportSource = Union[str, RawDocument, ResumeDocument, CoverLetterDocument]


@dataclass
class ExportResult:
    """
    A finished PDF export.

    Attributes:
        data: PDF bytes
        filename: Derived download name
        page_count: Pages written
        warnings: Every degradation on the way (layout, style, fallback)
        plain: True if the linear plain layout produced the bytes
        truncated_lines: Lines dropped by the truncate overflow policy
    """

    data: bytes
    filename: str
    page_count: int
    warnings: List[str] = field(default_factory=list)
    plain: bool = False
    truncated_lines: int = 0


@dataclass
class TextExport:
    """A raw text download: UTF-8 bytes and a .txt filename."""

    data: bytes
    filename: str
    mime_type: str = "text/plain;charset=utf-8"


def _resolve_source(source: ExportSource):
    """(RawDocument or None, structured document) for any accepted input."""
    if isinstance(source, (ResumeDocument, CoverLetterDocument)):
        return source.raw, source
    raw = source if isinstance(source, RawDocument) else RawDocument.create(source)
    return raw, parse_document(raw)


def _resolve_export_style(
    style: Union[StyleProfile, str, None],
    overrides: Optional[Sequence[str]],
    warnings: List[str],
) -> StyleProfile:
    """Style with overrides; a bad override or unknown preset degrades to a warning."""
    if isinstance(style, StyleProfile):
        if not overrides:
            return style
        name = style.name
    else:
        name = style or DEFAULT_STYLE

    if overrides:
        try:
            return resolve_style(name, overrides)
        except InvalidConfigError as e:
            message = f"Style overrides ignored: {e}"
            warnings.append(message)
            _log_warning(message)
    if isinstance(style, StyleProfile):
        return style

    try:
        return resolve_style(name)
    except InvalidConfigError as e:
        if name == DEFAULT_STYLE:
            raise
        message = f"Style '{name}' unavailable, using '{DEFAULT_STYLE}': {e}"
        warnings.append(message)
        _log_warning(message)
        return resolve_style(DEFAULT_STYLE)


def _core_font_style(style: StyleProfile) -> StyleProfile:
    """Same style drawn with built-in helvetica."""
    return replace(style, fonts=replace(style.fonts, family="helvetica", font_path=""))


def export_pdf(
    source: ExportSource,
    style: Union[StyleProfile, str, None] = None,
    overrides: Optional[Sequence[str]] = None,
    plain: bool = False,
    on_date: Optional[date] = None,
    page_size: PageSize = A4,
    measurer: Optional[TextMeasurer] = None,
) -> ExportResult:
    """
    Render a document to PDF bytes with a derived filename.

    Args:
        source: Generated text, RawDocument, or an already structured document
        style: Preset name or StyleProfile (default: SCRIBE_DEFAULT_STYLE)
        overrides: Dotlist style overrides, e.g. ["layout.overflow=truncate"]
        plain: Use the linear plain layout instead of the styled one
        on_date: Date stamp for the filename (default: today)
        page_size: Page geometry (default A4)
        measurer: TextMeasurer override (default: fpdf2 metrics)

    Returns:
        ExportResult

    Raises:
        ExportError: Both the styled writer and the plain fallback failed
        InvalidConfigError: The default style configuration is broken

    Example:
        >>> result = export_pdf(text, style="modern", on_date=date(2024, 1, 31))
        >>> result.filename
        'jane_doe_engineer_resume_2024-01-31.pdf'
    """
    warnings: List[str] = []
    raw, document = _resolve_source(source)
    profile = _resolve_export_style(style, overrides, warnings)
    filename = derive_filename(document, on_date=on_date)
    title = document.name or filename.rsplit(".", 1)[0]
    author = document.name or None

    styled_error = None
    if not plain:
        try:
            result = paginate(document, page_size=page_size, style=profile, measurer=measurer)
            data = write_pdf(result, profile, title=title, author=author)
        except InvalidConfigError:
            raise
        except Exception as e:
            styled_error = e
            message = f"Styled PDF failed ({type(e).__name__}: {e}); plain layout used"
            warnings.append(message)
            _log_warning(message)
        else:
            export = ExportResult(
                data=data,
                filename=filename,
                page_count=result.page_count,
                warnings=warnings + list(result.warnings),
                truncated_lines=result.truncated_lines,
            )
            log_export_result(filename, export)
            return export

    if raw is None:
        raw = RawDocument.create("\n".join(document.text_lines()), kind=document.kind)
    plain_style = profile if styled_error is None else _core_font_style(profile)
    try:
        result = paginate_plain(raw, page_size=page_size, style=plain_style, measurer=measurer)
        data = write_pdf(result, plain_style, title=title, author=author)
    except InvalidConfigError:
        raise
    except Exception as e:
        raise ExportError("Could not produce a PDF", styled_error=styled_error, plain_error=e) from e

    export = ExportResult(
        data=data,
        filename=filename,
        page_count=result.page_count,
        warnings=warnings + list(result.warnings),
        plain=True,
    )
    log_export_result(filename, export)
    return export


def export_text(source: Union[str, RawDocument], on_date: Optional[date] = None) -> TextExport:
    """
    Package unparsed text as a UTF-8 .txt download.

    Args:
        source: Generated text or RawDocument
        on_date: Date stamp for the filename (default: today)

    Returns:
        TextExport with the text exactly as given
    """
    raw = source if isinstance(source, RawDocument) else RawDocument.create(source)
    return TextExport(data=raw.text.encode("utf-8"), filename=derive_raw_filename(raw, on_date=on_date))
