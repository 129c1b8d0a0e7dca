"""Unit tests for RawDocument construction and kind/language detection."""

import pytest

from scribe.contexts.intake.document import DocumentKind, RawDocument, detect_kind, detect_language


@pytest.mark.unit
def test_create_detects_resume_by_default():
    """Test text without letter cues is a resume."""
    raw = RawDocument.create("JOHN SMITH\nSenior Engineer\nEXPERIENCE")
    assert raw.kind == DocumentKind.RESUME
    assert raw.language == "en"
    assert raw.country == "International"


@pytest.mark.unit
def test_create_detects_cover_letter_and_email():
    """Test salutation cues mean a cover letter and a Subject line means an email."""
    assert RawDocument.create("Dear Hiring Manager,\nI am writing to apply.").kind == DocumentKind.COVER_LETTER
    assert RawDocument.create("Jane\nThanks for your time.\nSincerely,\nJane").kind == DocumentKind.COVER_LETTER
    assert RawDocument.create("Subject: Backend role\nHi Sam,").kind == DocumentKind.EMAIL


@pytest.mark.unit
def test_explicit_kind_wins():
    """Test an explicit kind skips detection and accepts several spellings."""
    assert RawDocument.create("Dear team,", kind="resume").kind == DocumentKind.RESUME
    assert RawDocument.create("x", kind="cover_letter").kind == DocumentKind.COVER_LETTER
    assert RawDocument.create("x", kind=DocumentKind.EMAIL).kind == DocumentKind.EMAIL


@pytest.mark.unit
def test_unknown_kind_raises():
    """Test an unknown kind value is rejected."""
    with pytest.raises(ValueError):
        DocumentKind.parse("memo")


@pytest.mark.unit
@pytest.mark.parametrize(
    "text,language",
    [
        ("山田太郎\n職歴\n株式会社ABC", "ja"),
        ("EXPERIENCIA LABORAL\nIdiomas: español, inglés", "es"),
        ("Berufserfahrung bei Siemens und SAP", "de"),
        ("Expérience professionnelle\nCompétences: Python", "fr"),
        ("Work Experience\nSkills: Python", "en"),
    ],
)
def test_detect_language(text, language):
    """Test script and common-word language detection."""
    assert detect_language(text) == language


@pytest.mark.unit
def test_none_text_is_empty_document():
    """Test None text becomes an empty resume."""
    raw = RawDocument.create(None)
    assert raw.text == ""
    assert raw.is_empty
    assert raw.lines == ()
    assert detect_kind("") == DocumentKind.RESUME


@pytest.mark.unit
def test_lines_drop_blanks_and_trim():
    """Test lines are trimmed and blank lines removed."""
    raw = RawDocument.create("  A  \r\n\r\n B\rC\n")
    assert raw.lines == ("A", "B", "C")


@pytest.mark.unit
def test_raw_document_is_immutable():
    """Test RawDocument fields cannot be reassigned."""
    raw = RawDocument.create("JOHN SMITH")
    with pytest.raises(AttributeError):
        raw.text = "other"
