"""Unit tests for section assembly of resumes, letters and emails."""

import pytest

from scribe.contexts.intake.document import DocumentKind, LineRole, RawDocument
from scribe.contexts.structuring.assembler import assemble, empty_document, parse_document
from scribe.contexts.structuring.document_structures import Column, CoverLetterDocument, ResumeDocument
from scribe.contexts.structuring.section_table import get_section_table

DETAILED_LETTER = """Jane Doe
123 Main Street, Springfield 12345
jane@doe.dev | +1 555 123 4567
March 3, 2024
Mr. John Lee
Hiring Manager
Acme Technologies
Dear Mr. Lee,
I am excited to apply for the Senior Engineer role at Acme Technologies.
I led a team of 5 engineers.
Best regards,
Jane Doe
P.S. Portfolio at jane.dev/work"""


def _nonblank(text):
    return [line for line in text.splitlines() if line.strip()]


# =============================================================================
# RESUMES
# =============================================================================


@pytest.mark.unit
def test_basic_resume():
    """Test name, title, contact and a single bullet section."""
    raw = RawDocument.create("JOHN SMITH\nSenior Engineer\njohn@x.com\nEXPERIENCE\n• Built system X")
    doc = parse_document(raw)

    assert isinstance(doc, ResumeDocument)
    assert doc.name == "JOHN SMITH"
    assert doc.title == "Senior Engineer"
    assert [line.text for line in doc.contact] == ["john@x.com"]
    assert doc.primary_column == ()
    assert len(doc.secondary_column) == 1

    section = doc.secondary_column[0]
    assert section.name == "experience"
    assert section.column == Column.SECONDARY
    assert [(line.role, line.content) for line in section.lines] == [(LineRole.BULLET, "Built system X")]
    assert doc.unplaced is None


@pytest.mark.unit
def test_repeated_header_merges_in_order():
    """Test a repeated header reopens the same section and keeps line order."""
    text = "JANE DOE\nEXPERIENCE\n• Built A\nSKILLS\n• Python\nEXPERIENCE\n• Built B"
    doc = parse_document(RawDocument.create(text))

    experience = doc.section("experience")
    assert [line.content for line in experience.lines] == ["Built A", "Built B"]
    assert len(experience.header_lines) == 2
    assert [s.name for s in doc.sections] == ["skills", "experience"]
    assert doc.section("skills").column == Column.PRIMARY


@pytest.mark.unit
def test_aliases_map_to_canonical_names():
    """Test header variants share one canonical section."""
    text = "JANE DOE\nWORK EXPERIENCE\n• Built A\nProfessional Experience:\n• Built B"
    doc = parse_document(RawDocument.create(text))

    assert [s.name for s in doc.sections] == ["experience"]
    assert doc.section("experience").label == "WORK EXPERIENCE"
    assert len(doc.section("experience").lines) == 2


@pytest.mark.unit
def test_unknown_header_uses_default_column():
    """Test an unrecognized all-caps header becomes its own section in the default column."""
    doc = parse_document(RawDocument.create("JANE DOE\nHOBBIES\n• Chess"))

    section = doc.section("hobbies")
    assert section is not None
    assert section.column == get_section_table().default_column
    assert section.display_label == "HOBBIES"


@pytest.mark.unit
def test_header_area_leftovers_are_unplaced():
    """Test header-area lines with no slot are kept in the unplaced section."""
    text = "JANE DOE\nSenior Engineer\njane@x.com\nPassionate about distributed systems\nEXPERIENCE\n• Built A"
    doc = parse_document(RawDocument.create(text))

    assert doc.unplaced is not None
    assert doc.unplaced.column == Column.UNPLACED
    assert [line.text for line in doc.unplaced.lines] == ["Passionate about distributed systems"]
    assert doc.to_dict()["unplaced"] == ["Passionate about distributed systems"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    [
        "JOHN SMITH\nSenior Engineer\njohn@x.com\nEXPERIENCE\n• Built system X",
        "JANE DOE\nEXPERIENCE\n• Built A\nSKILLS\n• Python\nEXPERIENCE\n• Built B",
        "Jane\nnotes\nmore notes\nEDUCATION\nState University | BS | 2019\n• Dean's list\nHOBBIES",
        "just some text\nwith no structure at all",
    ],
)
def test_every_resume_line_is_accounted_for(text):
    """Test the model holds exactly as many lines as the input has non-blank lines."""
    doc = parse_document(RawDocument.create(text))
    assert doc.line_count == len(_nonblank(text))


@pytest.mark.unit
def test_parse_is_deterministic():
    """Test the same input always yields an equal model."""
    text = "JANE DOE\nSenior Engineer\nEXPERIENCE\n• Built A\nSKILLS\n• Python"
    assert parse_document(RawDocument.create(text)) == parse_document(RawDocument.create(text))


# =============================================================================
# LETTERS
# =============================================================================


@pytest.mark.unit
def test_simple_cover_letter():
    """Test date, salutation, paragraph, closing and signature of a short letter."""
    raw = RawDocument.create("Jan 1, 2024\nDear Hiring Manager,\nI am writing...\nSincerely,\nJohn Smith")
    doc = parse_document(raw)

    assert isinstance(doc, CoverLetterDocument)
    assert doc.kind == DocumentKind.COVER_LETTER
    assert doc.header.date == "Jan 1, 2024"
    assert doc.body.salutation == "Dear Hiring Manager,"
    assert doc.body.paragraphs == ("I am writing...",)
    assert doc.body.closing == "Sincerely,"
    assert doc.body.signature == "John Smith"
    assert doc.name == "John Smith"


@pytest.mark.unit
def test_letter_header_and_recipient_blocks():
    """Test sender address, contact, recipient fields and postscript."""
    doc = parse_document(RawDocument.create(DETAILED_LETTER))

    assert doc.header.name == "Jane Doe"
    assert doc.header.address == ("123 Main Street, Springfield 12345",)
    assert doc.header.contact == ("jane@doe.dev | +1 555 123 4567",)
    assert doc.header.date == "March 3, 2024"
    assert doc.recipient.name == "Mr. John Lee"
    assert doc.recipient.title == "Hiring Manager"
    assert doc.recipient.company == "Acme Technologies"
    assert doc.body.salutation == "Dear Mr. Lee,"
    assert len(doc.body.paragraphs) == 2
    assert doc.body.closing == "Best regards,"
    assert doc.body.signature == "Jane Doe"
    assert doc.body.postscript == ("P.S. Portfolio at jane.dev/work",)


@pytest.mark.unit
def test_every_letter_line_is_accounted_for():
    """Test every input line lands in exactly one letter field."""
    doc = parse_document(RawDocument.create(DETAILED_LETTER))
    assert len(doc.text_lines()) == len(_nonblank(DETAILED_LETTER))


@pytest.mark.unit
def test_email_subject():
    """Test an email keeps its subject line and body fields."""
    text = "Subject: Backend role\nHi Sam,\nI'd love to chat.\nBest,\nJane"
    doc = parse_document(RawDocument.create(text))

    assert doc.kind == DocumentKind.EMAIL
    assert doc.header.subject == "Subject: Backend role"
    assert doc.body.salutation == "Hi Sam,"
    assert doc.body.paragraphs == ("I'd love to chat.",)
    assert doc.body.closing == "Best,"
    assert doc.body.signature == "Jane"


@pytest.mark.unit
def test_letter_without_salutation_starts_body_at_prose():
    """Test the first prose line opens the body when there is no salutation."""
    text = (
        "Jane Doe\njane@doe.dev\n"
        "I am writing to express my strong interest in the platform engineering role.\n"
        "Sincerely,\nJane Doe"
    )
    doc = parse_document(RawDocument.create(text))

    assert doc.body.salutation == ""
    assert doc.body.paragraphs == ("I am writing to express my strong interest in the platform engineering role.",)
    assert doc.body.signature == "Jane Doe"


# =============================================================================
# EMPTY INPUT AND FAILURES
# =============================================================================


@pytest.mark.unit
def test_empty_input():
    """Test empty text gives an empty model of the right kind."""
    doc = parse_document(RawDocument.create(""))
    assert isinstance(doc, ResumeDocument)
    assert doc.is_empty
    assert doc.sections == ()
    assert doc.to_dict()["primary_column"] == []

    letter = parse_document(RawDocument.create("", kind="cover-letter"))
    assert isinstance(letter, CoverLetterDocument)
    assert letter.is_empty


@pytest.mark.unit
def test_empty_document_kinds():
    """Test empty_document returns a letter model for letters and emails."""
    assert isinstance(empty_document(DocumentKind.RESUME), ResumeDocument)
    assert empty_document(DocumentKind.EMAIL).kind == DocumentKind.EMAIL


@pytest.mark.unit
def test_assembly_failure_returns_empty_model(monkeypatch):
    """Test an unexpected internal error degrades to an empty model."""

    def broken_table():
        raise RuntimeError("boom")

    monkeypatch.setattr("scribe.contexts.structuring.assembler.get_section_table", broken_table)
    doc = parse_document(RawDocument.create("JANE DOE\nEXPERIENCE\n• Built A"))

    assert isinstance(doc, ResumeDocument)
    assert doc.is_empty


@pytest.mark.unit
def test_assemble_accepts_kind_value():
    """Test assemble takes the kind as a plain string."""
    assert isinstance(assemble([], "email"), CoverLetterDocument)
