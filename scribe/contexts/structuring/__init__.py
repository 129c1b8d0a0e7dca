"""
Structuring Context

Responsibilities:
- Groups classified lines into named sections in one left-to-right pass
- Places each section in a column via the section-to-column table
- Builds the read-only ResumeDocument / CoverLetterDocument models

Owns: Document models, section identity and column placement
Never: Measures text, styles output or touches the filesystem
"""

from scribe.contexts.structuring.assembler import assemble, parse_document
from scribe.contexts.structuring.document_structures import (
    Column,
    CoverLetterDocument,
    LetterBody,
    LetterHeader,
    Recipient,
    ResumeDocument,
    Section,
)

__all__ = [
    "Column",
    "CoverLetterDocument",
    "LetterBody",
    "LetterHeader",
    "Recipient",
    "ResumeDocument",
    "Section",
    "assemble",
    "parse_document",
]
