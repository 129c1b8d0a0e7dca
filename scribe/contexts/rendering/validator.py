"""
Read-back validation of exported PDFs.

Opens the bytes the writer produced and checks that they are a readable
PDF whose text still holds the document's name and every section header.
Core-font exports draw Latin-1 only, so expected strings are compared the
way the writer drew them; labels with nothing drawable are not checked.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from scribe.contexts.rendering.logger import log_validation_result
from scribe.contexts.rendering.measure import to_core_font_text
from scribe.contexts.structuring.document_structures import CoverLetterDocument, ResumeDocument
from scribe.utils.pdf_processing import extract_text, normalize_for_matching, page_count


@dataclass
class ValidationResult:
    """
    Result of PDF read-back validation.

    Attributes:
        is_valid: Whether every check passed
        page_count: Pages in the PDF (0 if unreadable)
        issues: One message per failed check
    """

    is_valid: bool
    page_count: int = 0
    issues: List[str] = field(default_factory=list)


def expected_strings(document: Union[ResumeDocument, CoverLetterDocument]) -> List[str]:
    """Name and section header labels that must appear in the rendered text."""
    expected = []
    if document.name:
        expected.append(document.name)
    if isinstance(document, ResumeDocument):
        sections = ((document.unplaced,) if document.unplaced else ()) + document.sections
        expected.extend(section.display_label for section in sections if section.header_lines)
    return expected


def validate_pdf(
    data: bytes,
    document: Union[ResumeDocument, CoverLetterDocument],
    expected_pages: Optional[int] = None,
) -> ValidationResult:
    """
    Validate exported PDF bytes against the document they were rendered from.

    Args:
        data: PDF bytes
        document: Structured document that was rendered
        expected_pages: Page count the layout produced, if known

    Returns:
        ValidationResult; unreadable input is reported as an issue, never raised

    Example:
        >>> result = validate_pdf(export.data, document, expected_pages=export.page_count)
        >>> result.is_valid
        True
    """
    issues: List[str] = []
    pages = page_count(data)

    if not pages:
        issues.append("PDF could not be read or has no pages")
        result = ValidationResult(is_valid=False, page_count=0, issues=issues)
        log_validation_result(result)
        return result

    if expected_pages is not None and pages != expected_pages:
        issues.append(f"Expected {expected_pages} page(s), found {pages}")

    try:
        text = normalize_for_matching(extract_text(data))
    except Exception as e:
        issues.append(f"Text could not be extracted: {type(e).__name__}: {e}")
        text = None

    if text is not None:
        for expected in expected_strings(document):
            key = normalize_for_matching(to_core_font_text(expected))
            if key and key not in text:
                issues.append(f"Missing from PDF text: '{expected}'")

    result = ValidationResult(is_valid=not issues, page_count=pages, issues=issues)
    log_validation_result(result)
    return result
