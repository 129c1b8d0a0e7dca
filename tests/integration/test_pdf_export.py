"""
Integration tests for PDF export.
Tests: generated text → structured document → fpdf2 bytes → read back with pdfplumber/PyPDF2.
"""

from datetime import date

import pytest

from scribe.contexts.intake.document import RawDocument
from scribe.contexts.rendering.exceptions import ExportError
from scribe.contexts.rendering.exporter import export_pdf, export_text
from scribe.contexts.rendering.validator import expected_strings, validate_pdf
from scribe.contexts.structuring.assembler import parse_document
from scribe.utils.pdf_processing import extract_lines, extract_text, normalize_for_matching, page_count

ON = date(2024, 1, 31)

RESUME = """JANE DOE
Senior Software Engineer
jane@doe.dev | Phone: +1 555 123 4567 | github.com/janedoe
PROFESSIONAL SUMMARY
Backend engineer with 8 years of experience building distributed systems.
WORK EXPERIENCE
Staff Engineer | Acme Corp | 2019 - Present
• Increased throughput by 35% using AWS and Kubernetes
• Led a team of 6 engineers delivering a Python data platform
SKILLS
• Python, Go, PostgreSQL, Docker
EDUCATION
State University | BS Computer Science | 2015"""

LETTER = """Jane Doe
jane@doe.dev
March 3, 2024
Acme Technologies
Dear Hiring Manager,
I am excited to apply for the Staff Engineer role at Acme Technologies.
My background in distributed systems matches your needs.
Sincerely,
Jane Doe"""


def _long_resume(count=150):
    bullets = "\n".join(f"• Delivered project number {i} on time" for i in range(count))
    return f"JANE DOE\nEXPERIENCE\n{bullets}"


@pytest.mark.integration
def test_export_resume_round_trip():
    """Test a styled resume PDF is readable and holds the name and every section header."""
    result = export_pdf(RESUME, style="professional", on_date=ON)

    assert result.data.startswith(b"%PDF")
    assert result.filename == "jane_doe_engineer_resume_2024-01-31.pdf"
    assert result.page_count == 1
    assert not result.plain
    assert page_count(result.data) == 1

    document = parse_document(RawDocument.create(RESUME))
    check = validate_pdf(result.data, document, expected_pages=result.page_count)
    assert check.is_valid, check.issues

    text = normalize_for_matching(extract_text(result.data))
    for expected in ("janedoe", "workexperience", "skills", "education", "35"):
        assert expected in text


@pytest.mark.integration
@pytest.mark.parametrize("style", ["professional", "modern", "clean", "deedy", "ats", "simple"])
def test_every_preset_exports(style):
    """Test every style preset produces a valid PDF."""
    result = export_pdf(RESUME, style=style, on_date=ON)
    document = parse_document(RawDocument.create(RESUME))

    assert validate_pdf(result.data, document, expected_pages=result.page_count).is_valid
    assert not result.warnings


@pytest.mark.integration
def test_export_letter():
    """Test a cover letter exports with a letter filename and readable text."""
    result = export_pdf(LETTER, on_date=ON)

    assert result.filename == "jane_doe_cover_letter_2024-01-31.pdf"
    lines = [normalize_for_matching(line) for line in extract_lines(result.data, page=1)]
    assert any("janedoe" in line for line in lines)
    assert any("dearhiringmanager" in line for line in lines)


@pytest.mark.integration
def test_export_empty_document():
    """Test empty input produces one mostly blank page."""
    result = export_pdf("", on_date=ON)

    assert result.page_count == 1
    assert page_count(result.data) == 1
    assert "nocontentavailable" in normalize_for_matching(extract_text(result.data))


@pytest.mark.integration
def test_spill_and_truncate():
    """Test long resumes spill by default and stay on one page when truncating."""
    spilled = export_pdf(_long_resume(), on_date=ON)
    assert spilled.page_count > 1
    assert page_count(spilled.data) == spilled.page_count
    assert spilled.truncated_lines == 0

    truncated = export_pdf(_long_resume(), overrides=["layout.overflow=truncate"], on_date=ON)
    assert truncated.page_count == 1
    assert truncated.truncated_lines > 0
    assert any("truncated" in warning for warning in truncated.warnings)


@pytest.mark.integration
def test_plain_export():
    """Test the plain layout on request."""
    result = export_pdf(RESUME, plain=True, on_date=ON)

    assert result.plain
    assert "janedoe" in normalize_for_matching(extract_text(result.data))


@pytest.mark.integration
def test_styled_failure_falls_back_to_plain(monkeypatch):
    """Test a failing styled layout falls back to the plain layout with a warning."""

    def broken(*args, **kwargs):
        raise RuntimeError("layout exploded")

    monkeypatch.setattr("scribe.contexts.rendering.exporter.paginate", broken)
    result = export_pdf(RESUME, on_date=ON)

    assert result.plain
    assert result.data.startswith(b"%PDF")
    assert any("plain layout used" in warning for warning in result.warnings)


@pytest.mark.integration
def test_both_paths_failing_raise(monkeypatch):
    """Test ExportError carries both failures when no PDF can be made."""

    def broken(*args, **kwargs):
        raise RuntimeError("layout exploded")

    monkeypatch.setattr("scribe.contexts.rendering.exporter.paginate", broken)
    monkeypatch.setattr("scribe.contexts.rendering.exporter.paginate_plain", broken)

    with pytest.raises(ExportError) as excinfo:
        export_pdf(RESUME, on_date=ON)
    assert isinstance(excinfo.value.styled_error, RuntimeError)
    assert isinstance(excinfo.value.plain_error, RuntimeError)


@pytest.mark.integration
def test_bad_style_input_degrades_to_warning():
    """Test bad overrides and unknown presets still export with warnings."""
    overridden = export_pdf(RESUME, overrides=["layout.overflow=sideways"], on_date=ON)
    assert overridden.data.startswith(b"%PDF")
    assert any("overrides ignored" in warning for warning in overridden.warnings)

    unknown = export_pdf(RESUME, style="neon", on_date=ON)
    assert unknown.data.startswith(b"%PDF")
    assert any("unavailable" in warning for warning in unknown.warnings)


@pytest.mark.integration
def test_non_latin_text_exports():
    """Test text outside Latin-1 does not break the core-font export."""
    text = "山田太郎\nソフトウェアエンジニア\n職歴\n• Pythonで開発\nSKILLS\n• Go • Rust"
    result = export_pdf(text, on_date=ON)
    document = parse_document(RawDocument.create(text))

    assert result.data.startswith(b"%PDF")
    assert validate_pdf(result.data, document, expected_pages=result.page_count).is_valid


@pytest.mark.integration
def test_validation_reports_problems():
    """Test validation flags unreadable bytes, page mismatches and missing text."""
    document = parse_document(RawDocument.create(RESUME))

    unreadable = validate_pdf(b"not a pdf", document)
    assert not unreadable.is_valid
    assert unreadable.page_count == 0

    other = export_pdf("JOHN SMITH\nEXPERIENCE\n• Built X", on_date=ON)
    mismatch = validate_pdf(other.data, document, expected_pages=3)
    assert not mismatch.is_valid
    assert any("Expected 3 page(s)" in issue for issue in mismatch.issues)
    assert any("JANE DOE" in issue for issue in mismatch.issues)


@pytest.mark.integration
def test_expected_strings():
    """Test the strings validation looks for."""
    document = parse_document(RawDocument.create(RESUME))
    assert expected_strings(document) == ["JANE DOE", "SKILLS", "EDUCATION", "PROFESSIONAL SUMMARY", "WORK EXPERIENCE"]


@pytest.mark.integration
def test_export_text():
    """Test the raw text download keeps the text byte for byte."""
    export = export_text(RESUME, on_date=ON)

    assert export.data == RESUME.encode("utf-8")
    assert export.filename == "jane_doe_engineer_resume_2024-01-31.txt"
    assert export.mime_type.startswith("text/plain")
