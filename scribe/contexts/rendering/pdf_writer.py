"""
PDF writer: paints a PaginationResult with fpdf2.

The writer makes no layout decisions. Every coordinate, font size and color
comes from the draw commands; this module only maps them onto FPDF calls.
"""

from typing import Optional

from fpdf import FPDF

from scribe.contexts.rendering.layout import (
    DrawCommand,
    FilledCircle,
    FilledRect,
    PaginationResult,
    RuleLine,
    TextRun,
)
from scribe.contexts.rendering.measure import CORE_FONTS, load_font, to_core_font_text
from scribe.contexts.rendering.styles import StyleProfile


class DocumentPDF(FPDF):
    """FPDF configured for absolute positioning: no auto page breaks, no margins."""

    def __init__(self, width: float, height: float, style: StyleProfile):
        super().__init__(unit="mm", format=(width, height))
        self.set_auto_page_break(auto=False)
        self.set_margins(left=0, top=0, right=0)
        self.set_creator("SCRIBE")

        if style.fonts.font_path:
            self.font_family_name = load_font(self, style.fonts.font_path)
            self.uses_core_font = False
        else:
            family = style.fonts.family.lower()
            self.font_family_name = family if family in CORE_FONTS else "helvetica"
            self.uses_core_font = True

    def drawable(self, text: str) -> str:
        return to_core_font_text(text) if self.uses_core_font else text

    def draw(self, command: DrawCommand) -> None:
        if isinstance(command, TextRun):
            if not command.text.strip():
                return
            self.set_font(self.font_family_name, "B" if command.bold else "", command.font_size)
            self.set_text_color(*command.color)
            self.text(command.x, command.y, self.drawable(command.text))
        elif isinstance(command, RuleLine):
            self.set_draw_color(*command.color)
            self.set_line_width(command.width)
            self.line(command.x1, command.y1, command.x2, command.y2)
        elif isinstance(command, FilledRect):
            self.set_fill_color(*command.color)
            self.rect(command.x, command.y, command.width, command.height, style="F")
        elif isinstance(command, FilledCircle):
            self.set_fill_color(*command.color)
            diameter = command.radius * 2
            self.ellipse(command.x - command.radius, command.y - command.radius, diameter, diameter, style="F")


def write_pdf(result: PaginationResult, style: StyleProfile, title: Optional[str] = None, author: Optional[str] = None) -> bytes:
    """
    Paint pages of draw commands into PDF bytes.

    Args:
        result: Output of paginate or paginate_plain
        style: Style the result was laid out with (font family / font file)
        title: PDF metadata title
        author: PDF metadata author

    Returns:
        PDF document as bytes

    Raises:
        Any fpdf2 error; the exporter decides how to fall back
    """
    pdf = DocumentPDF(result.page_size.width, result.page_size.height, style)
    if title:
        pdf.set_title(pdf.drawable(title))
    if author:
        pdf.set_author(pdf.drawable(author))

    for page in result.pages:
        pdf.add_page()
        for command in page.commands:
            pdf.draw(command)

    return bytes(pdf.output())
