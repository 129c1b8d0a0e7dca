"""
Screen view of a structured document.

render_view builds a small tree of ViewNodes: a header block, a contact row,
and a two-column grid for resumes, or one linear flow for letters. Inline
text is split into InlineSpans that carry a keyword CSS class or a link
target. There is no pagination; the host scrolls.

view_to_html turns the tree into a standalone HTML page through the Jinja2
template in templates/view.html.jinja. The role-to-class table below is the
stable contract with any stylesheet.
"""

from dataclasses import dataclass, fields
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from scribe.contexts.intake.classifier import has_phone_number
from scribe.contexts.intake.document import Line, LineRole
from scribe.contexts.intake.patterns import ContactPatterns, TokenPatterns
from scribe.contexts.rendering.keywords import KeywordCategory, classify_keywords, merge_spans
from scribe.contexts.rendering.layout import PLACEHOLDER_TEXT
from scribe.contexts.rendering.styles import StyleProfile, resolve_style
from scribe.contexts.rendering.template_registry import TemplateRegistry
from scribe.contexts.structuring.document_structures import CoverLetterDocument, ResumeDocument, Section

StructuredDocument = Union[ResumeDocument, CoverLetterDocument]

ROLE_CSS_CLASSES = {
    "document": "scribe-document",
    "header": "scribe-header",
    "name": "scribe-name",
    "title": "scribe-title",
    "contact_row": "scribe-contact-row",
    "contact_item": "scribe-contact-item",
    "columns": "scribe-columns",
    "column": "scribe-column",
    "section": "scribe-section",
    "section_header": "scribe-section-header",
    "subsection_header": "scribe-subsection-header",
    "bullet": "scribe-bullet",
    "plain_text": "scribe-text",
    "date_stamp": "scribe-date",
    "address": "scribe-address",
    "recipient": "scribe-recipient",
    "subject": "scribe-subject",
    "salutation": "scribe-salutation",
    "paragraph": "scribe-paragraph",
    "closing": "scribe-closing",
    "signature": "scribe-signature",
    "postscript": "scribe-postscript",
    "placeholder": "scribe-placeholder",
}

ROLE_TAGS = {
    "document": "article",
    "header": "header",
    "name": "h1",
    "title": "h2",
    "contact_item": "span",
    "section": "section",
    "section_header": "h3",
    "subsection_header": "h4",
    "bullet": "p",
    "plain_text": "p",
    "paragraph": "p",
}

KEYWORD_CSS_CLASSES = {
    KeywordCategory.TECHNICAL: "kw-technical",
    KeywordCategory.PROFESSIONAL: "kw-professional",
    KeywordCategory.METRIC: "kw-metric",
}

LINK_CSS_CLASS = "scribe-link"

# Roles whose text gets keyword emphasis
_HIGHLIGHT_ROLES = ("bullet", "plain_text", "paragraph", "postscript")


@dataclass(frozen=True)
class InlineSpan:
    """A run of text inside a node; css_class and href are empty when unstyled."""

    text: str
    css_class: str = ""
    href: str = ""


@dataclass(frozen=True)
class ViewNode:
    """
    One element of the screen view.

    Attributes:
        role: Key into ROLE_CSS_CLASSES
        spans: Inline text of this node
        children: Child nodes in display order
        attrs: Extra (key, value) pairs, rendered as data-* attributes
    """

    role: str
    spans: Tuple[InlineSpan, ...] = ()
    children: Tuple["ViewNode", ...] = ()
    attrs: Tuple[Tuple[str, str], ...] = ()

    @property
    def css_class(self) -> str:
        return ROLE_CSS_CLASSES[self.role]

    @property
    def tag(self) -> str:
        return ROLE_TAGS.get(self.role, "div")

    @property
    def text(self) -> str:
        """Inline text of this node only."""
        return "".join(span.text for span in self.spans)

    def walk(self) -> Iterator["ViewNode"]:
        """This node and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, role: str) -> List["ViewNode"]:
        """All nodes with the given role, in document order."""
        return [node for node in self.walk() if node.role == role]


# =============================================================================
# INLINE SPANS
# =============================================================================


def _phone_href(run: str) -> str:
    digits = "".join(ch for ch in run if ch.isdigit())
    return f"tel:+{digits}" if run.startswith("+") else f"tel:{digits}"


def _link_matches(text: str) -> List[Tuple[int, int, str]]:
    """Non-overlapping (start, end, href) link targets, left to right."""
    tokens = TokenPatterns()
    candidates = []
    for match in tokens.EMAIL.finditer(text):
        candidates.append((match.start(), match.end(), f"mailto:{match.group(0)}"))
    for pattern in (tokens.URL, tokens.DOMAIN_PATH):
        for match in pattern.finditer(text):
            url = match.group(0).rstrip(".,;")
            href = url if url.lower().startswith("http") else f"https://{url}"
            candidates.append((match.start(), match.start() + len(url), href))
    if has_phone_number(text):
        for match in ContactPatterns().PHONE_RUN.finditer(text):
            if sum(ch.isdigit() for ch in match.group(0)) >= 10:
                candidates.append((match.start(), match.end(), _phone_href(match.group(0))))

    links = []
    end = 0
    for start, stop, href in sorted(candidates, key=lambda item: (item[0], -item[1])):
        if start >= end:
            links.append((start, stop, href))
            end = stop
    return links


def _keyword_spans(text: str) -> List[InlineSpan]:
    spans = []
    for span in merge_spans(classify_keywords(text)):
        spans.append(InlineSpan(span.text, KEYWORD_CSS_CLASSES.get(span.category, "")))
    return spans


def linkify(text: str, highlight: bool = False) -> Tuple[InlineSpan, ...]:
    """
    Split text into inline spans, turning emails, URLs and phone numbers into links.

    Args:
        text: Display text of one line
        highlight: Also tag keyword spans outside the links

    Returns:
        Spans whose text joins back to the input

    Example:
        >>> [span.href for span in linkify("jane@example.com | +1 555 123 4567") if span.href]
        ['mailto:jane@example.com', 'tel:+15551234567']
    """
    spans: List[InlineSpan] = []

    def plain(segment: str) -> None:
        if not segment:
            return
        if highlight:
            spans.extend(_keyword_spans(segment))
        else:
            spans.append(InlineSpan(segment))

    position = 0
    for start, stop, href in _link_matches(text):
        plain(text[position:start])
        spans.append(InlineSpan(text[start:stop], LINK_CSS_CLASS, href))
        position = stop
    plain(text[position:])
    return tuple(spans)


def _leaf(role: str, text: str) -> ViewNode:
    return ViewNode(role, linkify(text, highlight=role in _HIGHLIGHT_ROLES))


# =============================================================================
# TREE BUILDERS
# =============================================================================


def _line_node(line: Line) -> ViewNode:
    role = line.role.value
    if line.role not in (LineRole.SUBSECTION_HEADER, LineRole.BULLET, LineRole.CONTACT_ITEM):
        role = "plain_text"
    return _leaf(role, line.content)


def _section_node(section: Section) -> ViewNode:
    children = []
    if section.header_lines:
        children.append(ViewNode("section_header", (InlineSpan(section.display_label),)))
    children.extend(_line_node(line) for line in section.lines)
    return ViewNode("section", children=tuple(children), attrs=(("section", section.name),))


def _column_node(name: str, sections: Sequence[Section]) -> ViewNode:
    return ViewNode("column", children=tuple(_section_node(s) for s in sections), attrs=(("column", name),))


def _resume_view(document: ResumeDocument) -> ViewNode:
    header = []
    if document.name_line is not None:
        header.append(ViewNode("name", (InlineSpan(document.name),)))
    if document.title_line is not None:
        header.append(ViewNode("title", (InlineSpan(document.title),)))
    if document.contact:
        header.append(ViewNode("contact_row", children=tuple(_leaf("contact_item", line.text) for line in document.contact)))

    children = []
    if header:
        children.append(ViewNode("header", children=tuple(header)))
    if document.unplaced is not None:
        children.append(_section_node(document.unplaced))
    children.append(
        ViewNode(
            "columns",
            children=(
                _column_node("primary", document.primary_column),
                _column_node("secondary", document.secondary_column),
            ),
        )
    )
    return ViewNode("document", children=tuple(children), attrs=(("kind", document.kind.value),))


def _letter_view(document: CoverLetterDocument) -> ViewNode:
    header, recipient, body = document.header, document.recipient, document.body

    sender = []
    if header.name:
        sender.append(ViewNode("name", (InlineSpan(header.name),)))
    sender.extend(_leaf("address", text) for text in header.address)
    if header.contact:
        sender.append(ViewNode("contact_row", children=tuple(_leaf("contact_item", text) for text in header.contact)))

    addressee = [_leaf("plain_text", text) for text in (recipient.name, recipient.title, recipient.company) if text]
    addressee.extend(_leaf("address", text) for text in recipient.address)

    children = []
    if sender:
        children.append(ViewNode("header", children=tuple(sender)))
    if header.date:
        children.append(_leaf("date_stamp", header.date))
    if addressee:
        children.append(ViewNode("recipient", children=tuple(addressee)))
    if header.subject:
        children.append(_leaf("subject", header.subject))
    if body.salutation:
        children.append(_leaf("salutation", body.salutation))
    children.extend(_leaf("paragraph", text) for text in body.paragraphs)
    if body.closing:
        children.append(_leaf("closing", body.closing))
    if body.signature:
        children.append(_leaf("signature", body.signature))
    children.extend(_leaf("postscript", text) for text in body.postscript)
    return ViewNode("document", children=tuple(children), attrs=(("kind", document.kind.value),))


def render_view(document: StructuredDocument) -> ViewNode:
    """
    Build the screen view of a structured document.

    Never raises: an empty document renders a single placeholder node.

    Args:
        document: ResumeDocument or CoverLetterDocument

    Returns:
        Root ViewNode with role "document"
    """
    if document.is_empty:
        placeholder = ViewNode("placeholder", (InlineSpan(PLACEHOLDER_TEXT),))
        return ViewNode("document", children=(placeholder,), attrs=(("kind", document.kind.value),))
    if isinstance(document, ResumeDocument):
        return _resume_view(document)
    return _letter_view(document)


# =============================================================================
# HTML
# =============================================================================

_registry: Optional[TemplateRegistry] = None


def get_template_registry() -> TemplateRegistry:
    global _registry
    if _registry is None:
        _registry = TemplateRegistry()
    return _registry


def view_to_html(view: ViewNode, style: Optional[StyleProfile] = None, title: Optional[str] = None, language: str = "en") -> str:
    """
    Render a view tree as a standalone HTML page.

    Args:
        view: Root node from render_view
        style: Style profile for colors and sizes (default: resolve_style())
        title: Page title (default: the name node's text, else "Document")
        language: html lang attribute

    Returns:
        HTML text; all document text is escaped
    """
    style = style or resolve_style()
    if title is None:
        names = view.find("name")
        title = names[0].text if names else "Document"

    template = get_template_registry().get_template("view")
    return template.render(
        view=view,
        title=title,
        language=language,
        colors=[(f.name, getattr(style.colors, f.name)) for f in fields(style.colors)],
        fonts=style.fonts,
        margin=style.layout.margin,
        line_spacing=style.layout.line_spacing,
        left_ratio=style.layout.left_column_ratio,
        right_ratio=round(1 - style.layout.left_column_ratio, 4),
        column_gap=style.layout.column_gap,
        paragraph_spacing=style.layout.paragraph_spacing,
        bullet_indent=style.layout.bullet_indent,
        highlight=style.features.highlight_keywords,
        keyword_weight="bold" if style.features.bold_keywords else "normal",
    )
