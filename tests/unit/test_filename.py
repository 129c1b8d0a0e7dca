"""Unit tests for output filename derivation."""

from datetime import date

import pytest

from scribe.contexts.intake.document import RawDocument
from scribe.contexts.rendering.filename import (
    country_code,
    derive_filename,
    derive_raw_filename,
    detect_role,
    name_part,
)
from scribe.contexts.structuring.assembler import parse_document

ON = date(2024, 1, 31)


def _doc(text, **kwargs):
    return parse_document(RawDocument.create(text, **kwargs))


@pytest.mark.unit
def test_resume_filename():
    """Test name, role, country, type and date parts of a resume filename."""
    doc = _doc("John Smith\nSenior Engineer", country="Germany")
    assert derive_filename(doc, on_date=ON) == "john_smith_engineer_germany_resume_2024-01-31.pdf"


@pytest.mark.unit
def test_international_country_is_dropped():
    """Test the default country leaves no empty segment."""
    doc = _doc("John Smith\nSenior Engineer")
    assert derive_filename(doc, on_date=ON) == "john_smith_engineer_resume_2024-01-31.pdf"


@pytest.mark.unit
def test_country_override_and_extension():
    """Test an explicit country and extension."""
    doc = _doc("John Smith\nSenior Engineer")
    assert derive_filename(doc, on_date=ON, extension="html", country="United States") == (
        "john_smith_engineer_unitedstates_resume_2024-01-31.html"
    )
    assert derive_filename(doc, on_date=ON, extension="").endswith("_resume_2024-01-31")


@pytest.mark.unit
def test_letter_and_email_filenames_omit_role():
    """Test letters use the signature name and carry no role part."""
    letter = _doc("Jan 1, 2024\nDear Hiring Manager,\nI am writing...\nSincerely,\nJohn Smith")
    assert derive_filename(letter, on_date=ON) == "john_smith_cover_letter_2024-01-31.pdf"

    email = _doc("Subject: Backend role\nHi Sam,\nI'd love to chat.\nBest,\nJane Doe")
    assert derive_filename(email, on_date=ON) == "jane_doe_email_template_2024-01-31.pdf"


@pytest.mark.unit
def test_empty_document_filename_is_never_empty():
    """Test an empty document still yields a usable filename."""
    assert derive_filename(_doc(""), on_date=ON) == "professional_resume_2024-01-31.pdf"


@pytest.mark.unit
def test_raw_filename():
    """Test filenames for unparsed downloads."""
    raw = RawDocument.create("Jane Doe\nBackend Developer\njane@doe.dev")
    assert derive_raw_filename(raw, on_date=ON) == "jane_doe_developer_resume_2024-01-31.txt"


@pytest.mark.unit
@pytest.mark.parametrize(
    "name,expected",
    [
        ("**Dr. Jane** Q. Doe", "dr_jane"),
        ("JOHN SMITH", "john_smith"),
        ("Cher", "cher"),
        ("", ""),
        ("123 456", ""),
    ],
)
def test_name_part(name, expected):
    """Test name reduction to at most two lowercase words."""
    assert name_part(name) == expected


@pytest.mark.unit
def test_country_code():
    """Test country names become lowercase letters only."""
    assert country_code("United States") == "unitedstates"
    assert country_code("International") == ""
    assert country_code(None) == ""


@pytest.mark.unit
def test_detect_role_uses_vocabulary_order():
    """Test the first role keyword in vocabulary order wins."""
    assert detect_role("Senior Software Engineer") == "engineer"
    assert detect_role("Machine Learning researcher") == "machine_learning"
    assert detect_role("Chef") == "professional"
