"""
Section assembler for the Structuring context.

Consumes the classified line stream in one left-to-right pass and builds a
ResumeDocument or CoverLetterDocument. Deterministic: the same lines always
yield an equal model. No line is dropped.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from scribe.contexts.intake.classifier import classify_lines, contains_title_keyword, is_prose
from scribe.contexts.intake.document import DocumentKind, Line, LineRole, RawDocument
from scribe.contexts.intake.patterns import StructurePatterns
from scribe.contexts.intake.vocabulary import get_locale_cues
from scribe.contexts.structuring.document_structures import (
    Column,
    CoverLetterDocument,
    LetterBody,
    LetterHeader,
    Recipient,
    ResumeDocument,
    Section,
)
from scribe.contexts.structuring.logger import log_assembly_failure, log_assembly_result
from scribe.contexts.structuring.section_table import SectionTable, get_section_table
from scribe.utils.config_loader import InvalidConfigError

StructuredDocument = Union[ResumeDocument, CoverLetterDocument]


# =============================================================================
# RESUMES
# =============================================================================


@dataclass
class _SectionBuilder:
    name: str
    column: Column
    label: str = ""
    header_lines: List[Line] = field(default_factory=list)
    lines: List[Line] = field(default_factory=list)

    def build(self) -> Section:
        return Section(
            name=self.name,
            column=self.column,
            label=self.label,
            header_lines=tuple(self.header_lines),
            lines=tuple(self.lines),
        )


def _assemble_resume(lines: Sequence[Line], table: SectionTable, raw: Optional[RawDocument]) -> ResumeDocument:
    name_line: Optional[Line] = None
    title_line: Optional[Line] = None
    contact: List[Line] = []
    unplaced = _SectionBuilder(name="", column=Column.UNPLACED)

    # Insertion order of the dict is first-seen order of each canonical name
    sections: Dict[str, _SectionBuilder] = {}
    current: Optional[_SectionBuilder] = None

    for line in lines:
        if line.role == LineRole.SECTION_HEADER:
            name = table.canonical_name(line.text)
            current = sections.get(name)
            if current is None:
                current = _SectionBuilder(
                    name=name, column=table.column_for(name), label=line.text.rstrip(":： ")
                )
                sections[name] = current
            current.header_lines.append(line)
        elif current is not None:
            current.lines.append(line)
        elif line.role == LineRole.NAME and name_line is None:
            name_line = line
        elif line.role == LineRole.TITLE and title_line is None:
            title_line = line
        elif line.role == LineRole.CONTACT_ITEM:
            contact.append(line)
        else:
            unplaced.lines.append(line)

    built = [builder.build() for builder in sections.values()]
    return ResumeDocument(
        name_line=name_line,
        title_line=title_line,
        contact=tuple(contact),
        primary_column=tuple(s for s in built if s.column == Column.PRIMARY),
        secondary_column=tuple(s for s in built if s.column == Column.SECONDARY),
        unplaced=unplaced.build() if unplaced.lines else None,
        raw=raw,
    )


# =============================================================================
# LETTERS
# =============================================================================


class _LetterState:
    HEADER = "header"
    BODY = "body"
    AFTER_CLOSING = "after_closing"
    AFTER_SIGNATURE = "after_signature"


@dataclass
class _LetterBuilder:
    """Mutable accumulator; frozen into the document at the end."""

    title_keywords: tuple
    state: str = _LetterState.HEADER
    recipient_started: bool = False
    header: Dict[str, object] = field(
        default_factory=lambda: {"name": "", "address": [], "contact": [], "date": "", "subject": ""}
    )
    recipient: Dict[str, object] = field(
        default_factory=lambda: {"name": "", "title": "", "company": "", "address": []}
    )
    body: Dict[str, object] = field(
        default_factory=lambda: {
            "salutation": "",
            "paragraphs": [],
            "closing": "",
            "signature": "",
            "postscript": [],
        }
    )

    def add_header_line(self, line: Line) -> None:
        text = line.text
        patterns = StructurePatterns()

        if line.role == LineRole.NAME and not self.header["name"]:
            self.header["name"] = text
        elif line.role == LineRole.CONTACT_ITEM:
            self.header["contact"].append(text)
        elif patterns.EMAIL_SUBJECT.match(text) and not self.header["subject"]:
            self.header["subject"] = text
        elif line.role == LineRole.DATE_STAMP and not self.header["date"]:
            self.header["date"] = text
            # Recipient block follows the date in a standard letter
            self.recipient_started = True
        elif patterns.COMPANY.match(text) and not self.recipient["company"]:
            self.recipient["company"] = text
            self.recipient_started = True
        elif patterns.ADDRESS.search(text):
            target = self.recipient if self.recipient_started else self.header
            target["address"].append(text)
        elif not self.recipient_started and not self.header["contact"] and not self.header["date"]:
            # Sender lines right under the name (city, state)
            self.header["address"].append(text)
        else:
            self._add_recipient_line(text)

    def _add_recipient_line(self, text: str) -> None:
        self.recipient_started = True
        if not self.recipient["name"] and not contains_title_keyword(text, self.title_keywords):
            self.recipient["name"] = text
        elif not self.recipient["title"]:
            self.recipient["title"] = text
        elif not self.recipient["company"]:
            self.recipient["company"] = text
        else:
            self.recipient["address"].append(text)

    def add(self, line: Line) -> None:
        if self.state == _LetterState.HEADER:
            if line.role == LineRole.SALUTATION:
                self.body["salutation"] = line.text
                self.state = _LetterState.BODY
            elif line.role == LineRole.CLOSING:
                self.body["closing"] = line.text
                self.state = _LetterState.AFTER_CLOSING
            elif line.role == LineRole.PLAIN_TEXT and is_prose(line.text):
                # No salutation: the first prose line opens the body
                self.body["paragraphs"].append(line.text)
                self.state = _LetterState.BODY
            else:
                self.add_header_line(line)
        elif self.state == _LetterState.BODY:
            if line.role == LineRole.CLOSING:
                self.body["closing"] = line.text
                self.state = _LetterState.AFTER_CLOSING
            else:
                self.body["paragraphs"].append(line.text)
        elif self.state == _LetterState.AFTER_CLOSING and line.role == LineRole.SIGNATURE:
            self.body["signature"] = line.text
            self.state = _LetterState.AFTER_SIGNATURE
        else:
            self.body["postscript"].append(line.text)

    def build(self, kind: DocumentKind, raw: Optional[RawDocument]) -> CoverLetterDocument:
        return CoverLetterDocument(
            kind=kind,
            header=LetterHeader(
                name=self.header["name"],
                address=tuple(self.header["address"]),
                contact=tuple(self.header["contact"]),
                date=self.header["date"],
                subject=self.header["subject"],
            ),
            recipient=Recipient(
                name=self.recipient["name"],
                title=self.recipient["title"],
                company=self.recipient["company"],
                address=tuple(self.recipient["address"]),
            ),
            body=LetterBody(
                salutation=self.body["salutation"],
                paragraphs=tuple(self.body["paragraphs"]),
                closing=self.body["closing"],
                signature=self.body["signature"],
                postscript=tuple(self.body["postscript"]),
            ),
            raw=raw,
        )


def _assemble_letter(
    lines: Sequence[Line], kind: DocumentKind, raw: Optional[RawDocument]
) -> CoverLetterDocument:
    language = raw.language if raw is not None else "en"
    builder = _LetterBuilder(title_keywords=get_locale_cues(language).title_keywords)
    for line in lines:
        builder.add(line)
    return builder.build(kind, raw)


# =============================================================================
# PUBLIC API
# =============================================================================


def empty_document(kind: DocumentKind, raw: Optional[RawDocument] = None) -> StructuredDocument:
    """Model with every field empty, for empty input or a failed assembly."""
    if kind == DocumentKind.RESUME:
        return ResumeDocument(raw=raw)
    return CoverLetterDocument(kind=kind, raw=raw)


def assemble(lines: Sequence[Line], kind, raw: Optional[RawDocument] = None) -> StructuredDocument:
    """
    Group classified lines into a structured document.

    Resumes: a SectionHeader opens (or re-opens) the section named by its
    canonical name; later lines append to the open section. Lines before the
    first header fill name, title and contact by role; the rest go to the
    unplaced section.

    Letters and emails: header lines (name, contact, address, date, subject,
    recipient) until the salutation or the first prose line, then body
    paragraphs until the closing, then the signature and any postscript.

    Args:
        lines: Output of classify_lines, in order
        kind: DocumentKind (or its value)
        raw: Source document, kept on the model for filename derivation

    Returns:
        ResumeDocument or CoverLetterDocument

    Raises:
        InvalidConfigError: Only if the section table itself cannot be loaded
    """
    kind = DocumentKind.parse(kind)
    if kind == DocumentKind.RESUME:
        document = _assemble_resume(lines, get_section_table(), raw)
    else:
        document = _assemble_letter(lines, kind, raw)
    log_assembly_result(document)
    return document


def parse_document(raw: RawDocument) -> StructuredDocument:
    """
    Classify and assemble a raw document.

    Never raises for any text. An unexpected internal failure is logged and
    an empty model of the right kind is returned instead.

    Example:
        >>> doc = parse_document(RawDocument.create("JOHN SMITH\\nEXPERIENCE\\n• Built X"))
        >>> doc.section("experience").lines[0].content
        'Built X'
    """
    try:
        return assemble(classify_lines(raw), raw.kind, raw)
    except InvalidConfigError:
        raise
    except Exception as e:
        log_assembly_failure(raw.kind.value, e)
        return empty_document(raw.kind, raw)
