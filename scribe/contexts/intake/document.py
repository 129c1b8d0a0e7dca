"""
Raw document and line records for the Intake context.

A RawDocument is the untouched text an assistant produced plus what is known
about it (kind, language, target country). It never changes after creation;
every later stage derives new values from it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from scribe.contexts.intake.logger import log_document_received
from scribe.contexts.intake.patterns import ScriptPatterns, StructurePatterns
from scribe.contexts.intake.vocabulary import DEFAULT_LANGUAGE, get_locale_cues
from scribe.utils.text_processing import split_nonblank_lines


class DocumentKind(str, Enum):
    """What a raw document is meant to be."""

    RESUME = "resume"
    COVER_LETTER = "cover-letter"
    EMAIL = "email"

    @classmethod
    def parse(cls, value) -> "DocumentKind":
        """Accept enum members, values ("cover-letter") or names ("COVER_LETTER")."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower().replace("_", "-")
        if text in ("cover", "letter", "coverletter"):
            return cls.COVER_LETTER
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unknown document kind: {value!r}")


class LineRole(str, Enum):
    """Structural role of one non-blank line."""

    NAME = "name"
    TITLE = "title"
    CONTACT_ITEM = "contact_item"
    SECTION_HEADER = "section_header"
    SUBSECTION_HEADER = "subsection_header"
    BULLET = "bullet"
    SALUTATION = "salutation"
    CLOSING = "closing"
    SIGNATURE = "signature"
    DATE_STAMP = "date_stamp"
    PLAIN_TEXT = "plain_text"


@dataclass(frozen=True)
class Line:
    """
    One classified line.

    Attributes:
        raw: Line exactly as it appeared (trimmed)
        text: Normalized line
        index: Position among non-blank lines
        role: Assigned LineRole
        content: Display text (text with any bullet glyph removed)
    """

    raw: str
    text: str
    index: int
    role: LineRole
    content: str


@dataclass(frozen=True)
class RawDocument:
    """
    Unstructured AI-generated text plus metadata.

    Attributes:
        text: The generated text, untouched
        kind: DocumentKind
        language: Language tag, used to select locale cues
        country: Free-form target country ("International" when unspecified)
    """

    text: str
    kind: DocumentKind = DocumentKind.RESUME
    language: str = DEFAULT_LANGUAGE
    country: str = "International"

    @classmethod
    def create(
        cls,
        text: Optional[str],
        kind=None,
        language: Optional[str] = None,
        country: Optional[str] = "International",
    ) -> "RawDocument":
        """
        Build a RawDocument, detecting kind and language when not given.

        Args:
            text: Generated text (None is treated as empty)
            kind: DocumentKind or its value; detected from the text if None
            language: Language tag; detected from the text if None
            country: Target country

        Returns:
            RawDocument

        Example:
            >>> doc = RawDocument.create("Dear Hiring Manager,\\nI am writing...")
            >>> doc.kind
            <DocumentKind.COVER_LETTER: 'cover-letter'>
        """
        text = text or ""
        language = language or detect_language(text)
        resolved_kind = DocumentKind.parse(kind) if kind is not None else detect_kind(text, language)
        document = cls(text=text, kind=resolved_kind, language=language, country=(country or "").strip())
        log_document_received(resolved_kind.value, language, len(document.lines))
        return document

    @property
    def lines(self) -> Tuple[str, ...]:
        """Non-blank, trimmed lines in order."""
        return tuple(split_nonblank_lines(self.text))

    @property
    def is_empty(self) -> bool:
        return not self.lines


def detect_language(text: str) -> str:
    """
    Guess the language of a document from its script and common words.

    Only distinguishes the languages with locale cue tables; anything else
    is reported as English so the English cues still apply.
    """
    patterns = ScriptPatterns()
    if patterns.JAPANESE.search(text):
        return "ja"
    scores = {
        "de": len(patterns.GERMAN.findall(text)),
        "es": len(patterns.SPANISH.findall(text)),
        "fr": len(patterns.FRENCH.findall(text)),
    }
    best, score = max(scores.items(), key=lambda item: item[1])
    return best if score >= 2 else DEFAULT_LANGUAGE


def detect_kind(text: str, language: str = DEFAULT_LANGUAGE) -> DocumentKind:
    """
    Guess the document kind from its opening and closing lines.

    A "Subject:" first line means an email; a salutation or closing cue at
    the start of any line means a cover letter; anything else is a resume.
    """
    lines = split_nonblank_lines(text)
    if not lines:
        return DocumentKind.RESUME

    if StructurePatterns().EMAIL_SUBJECT.match(lines[0]):
        return DocumentKind.EMAIL

    cues = get_locale_cues(language)
    for line in lines:
        lowered = line.lower()
        if any(lowered.startswith(cue) for cue in cues.salutations):
            return DocumentKind.COVER_LETTER
        if len(line) <= 40 and any(lowered.startswith(cue) for cue in cues.closings):
            return DocumentKind.COVER_LETTER
    return DocumentKind.RESUME
