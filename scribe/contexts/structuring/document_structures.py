"""
Structured Document Models

Read-only value objects built once from a RawDocument by the assembler.
Rendering consumes these; nothing updates them in place. A regenerated
text produces a new RawDocument and therefore a new model.

Line accounting:
    For resumes every classified line is held by exactly one of
    name_line, title_line, contact, or one Section (its header_lines or
    lines). For letters every line lands in exactly one header, recipient
    or body field.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from scribe.contexts.intake.document import DocumentKind, Line, RawDocument


class Column(str, Enum):
    """Placement slot of a section in the two-column resume layout."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    UNPLACED = "unplaced"


@dataclass(frozen=True)
class Section:
    """
    A named run of lines.

    Attributes:
        name: Canonical section name ("experience", "skills", ...)
        column: Column the section is placed in
        label: Header text as it first appeared ("WORK EXPERIENCE")
        header_lines: Every SectionHeader line that opened or continued it
        lines: Content lines in original order
    """

    name: str
    column: Column
    label: str = ""
    header_lines: Tuple[Line, ...] = ()
    lines: Tuple[Line, ...] = ()

    @property
    def display_label(self) -> str:
        return self.label or self.name.title()

    @property
    def line_count(self) -> int:
        return len(self.header_lines) + len(self.lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "column": self.column.value,
            "label": self.label,
            "lines": [{"role": line.role.value, "text": line.content} for line in self.lines],
        }


@dataclass(frozen=True)
class ResumeDocument:
    """
    Structured resume.

    Attributes:
        name_line / title_line: The lines that filled name and title
        contact: ContactItem lines seen before the first section
        primary_column / secondary_column: Sections in first-seen order
        unplaced: Header-area lines that fit no header slot (None if none)
        raw: Source RawDocument, when known
    """

    name_line: Optional[Line] = None
    title_line: Optional[Line] = None
    contact: Tuple[Line, ...] = ()
    primary_column: Tuple[Section, ...] = ()
    secondary_column: Tuple[Section, ...] = ()
    unplaced: Optional[Section] = None
    raw: Optional[RawDocument] = field(default=None, compare=False, repr=False)

    @property
    def kind(self) -> DocumentKind:
        return DocumentKind.RESUME

    @property
    def name(self) -> str:
        return self.name_line.text if self.name_line else ""

    @property
    def title(self) -> str:
        return self.title_line.text if self.title_line else ""

    @property
    def sections(self) -> Tuple[Section, ...]:
        """Placed sections, primary column first."""
        return self.primary_column + self.secondary_column

    @property
    def is_empty(self) -> bool:
        return self.line_count == 0

    @property
    def line_count(self) -> int:
        """Number of classified lines held by this document."""
        count = int(self.name_line is not None) + int(self.title_line is not None) + len(self.contact)
        count += sum(section.line_count for section in self.sections)
        if self.unplaced is not None:
            count += self.unplaced.line_count
        return count

    def text_lines(self) -> Tuple[str, ...]:
        """Display text of every line in reading order (header, unplaced, columns)."""
        lines = [line.text for line in (self.name_line, self.title_line) if line is not None]
        lines.extend(line.text for line in self.contact)
        sections = ((self.unplaced,) if self.unplaced else ()) + self.sections
        for section in sections:
            if section.header_lines:
                lines.append(section.label)
            lines.extend(line.content for line in section.lines)
        return tuple(lines)

    def section(self, name: str) -> Optional[Section]:
        """Section by canonical name, or None."""
        for section in self.sections:
            if section.name == name:
                return section
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "title": self.title,
            "contact": [line.text for line in self.contact],
            "primary_column": [section.to_dict() for section in self.primary_column],
            "secondary_column": [section.to_dict() for section in self.secondary_column],
            "unplaced": [line.text for line in self.unplaced.lines] if self.unplaced else [],
        }


@dataclass(frozen=True)
class LetterHeader:
    """Sender block of a letter."""

    name: str = ""
    address: Tuple[str, ...] = ()
    contact: Tuple[str, ...] = ()
    date: str = ""
    subject: str = ""


@dataclass(frozen=True)
class Recipient:
    """Addressee block of a letter."""

    name: str = ""
    title: str = ""
    company: str = ""
    address: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LetterBody:
    """Salutation through signature, plus anything after the signature."""

    salutation: str = ""
    paragraphs: Tuple[str, ...] = ()
    closing: str = ""
    signature: str = ""
    postscript: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CoverLetterDocument:
    """Structured cover letter or email."""

    kind: DocumentKind = DocumentKind.COVER_LETTER
    header: LetterHeader = field(default_factory=LetterHeader)
    recipient: Recipient = field(default_factory=Recipient)
    body: LetterBody = field(default_factory=LetterBody)
    raw: Optional[RawDocument] = field(default=None, compare=False, repr=False)

    @property
    def name(self) -> str:
        """Sender name, falling back to the signature."""
        return self.header.name or self.body.signature

    @property
    def is_empty(self) -> bool:
        header, recipient, body = self.header, self.recipient, self.body
        return not any(
            (
                header.name, header.address, header.contact, header.date, header.subject,
                recipient.name, recipient.title, recipient.company, recipient.address,
                body.salutation, body.paragraphs, body.closing, body.signature, body.postscript,
            )
        )

    def text_lines(self) -> Tuple[str, ...]:
        """Display text of every field in reading order."""
        header, recipient, body = self.header, self.recipient, self.body
        ordered = [header.name, *header.address, *header.contact, header.date]
        ordered += [recipient.name, recipient.title, recipient.company, *recipient.address]
        ordered += [header.subject, body.salutation, *body.paragraphs, body.closing, body.signature]
        ordered += list(body.postscript)
        return tuple(text for text in ordered if text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "header": {
                "name": self.header.name,
                "address": list(self.header.address),
                "contact": list(self.header.contact),
                "date": self.header.date,
                "subject": self.header.subject,
            },
            "recipient": {
                "name": self.recipient.name,
                "title": self.recipient.title,
                "company": self.recipient.company,
                "address": list(self.recipient.address),
            },
            "body": {
                "salutation": self.body.salutation,
                "paragraphs": list(self.body.paragraphs),
                "closing": self.body.closing,
                "signature": self.body.signature,
                "postscript": list(self.body.postscript),
            },
        }
