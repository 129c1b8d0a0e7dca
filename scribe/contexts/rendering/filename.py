"""
Output filename derivation.

    {name}_{role}_{country}_resume_{date}.pdf
    {name}_{country}_cover_letter_{date}.pdf
    {name}_{country}_email_template_{date}.pdf

Empty parts are dropped, and the document-type suffix is always present,
so the result is never empty.
"""

import re
from datetime import date
from typing import Optional, Union

from scribe.contexts.intake.contact import extract_contact_info
from scribe.contexts.intake.document import DocumentKind, RawDocument
from scribe.contexts.intake.normalizer import normalize
from scribe.contexts.intake.vocabulary import get_vocabularies
from scribe.contexts.structuring.document_structures import CoverLetterDocument, ResumeDocument
from scribe.utils.timestamp import today

DEFAULT_ROLE = "professional"

KIND_SUFFIXES = {
    DocumentKind.RESUME: "resume",
    DocumentKind.COVER_LETTER: "cover_letter",
    DocumentKind.EMAIL: "email_template",
}

NAME_WORDS = 2


def name_part(name: str) -> str:
    """
    First one or two words of a name, letters only, lowercased, joined by "_".

    Example:
        >>> name_part("**Dr. Jane** Q. Doe")
        'dr_jane'
    """
    words = []
    for word in normalize(name or "").split():
        letters = "".join(ch for ch in word if ch.isalpha()).lower()
        if letters:
            words.append(letters)
        if len(words) == NAME_WORDS:
            break
    return "_".join(words)


def country_code(country: Optional[str]) -> str:
    """
    Lowercase ASCII letters of the country name; "international" is suppressed.

    Example:
        >>> country_code("United States")
        'unitedstates'
        >>> country_code("International")
        ''
    """
    letters = re.sub(r"[^a-z]", "", (country or "").lower())
    return letters.replace("international", "")


def detect_role(text: str) -> str:
    """First role keyword (in vocabulary order) found in the text, else "professional"."""
    lowered = (text or "").lower()
    for keyword in get_vocabularies().role_keywords:
        if re.search(rf"\b{re.escape(keyword)}\b", lowered):
            return keyword.replace(" ", "_")
    return DEFAULT_ROLE


def _document_text(document: Union[ResumeDocument, CoverLetterDocument]) -> str:
    if document.raw is not None:
        return document.raw.text
    return "\n".join(document.text_lines())


def derive_filename(
    document: Union[ResumeDocument, CoverLetterDocument],
    on_date: Optional[date] = None,
    extension: str = "pdf",
    country: Optional[str] = None,
) -> str:
    """
    Derive a deterministic output file name.

    Args:
        document: Structured document
        on_date: Date stamp (default: today)
        extension: File extension without the dot
        country: Target country (default: the source RawDocument's country)

    Returns:
        File name, never empty

    Example:
        >>> doc = parse_document(RawDocument.create("John Smith\\nSenior Engineer", country="Germany"))
        >>> derive_filename(doc, on_date=date(2024, 1, 31))
        'john_smith_engineer_germany_resume_2024-01-31.pdf'
    """
    text = _document_text(document)
    name = document.name
    if country is None and document.raw is not None:
        country = document.raw.country

    parts = [name_part(name)]
    if document.kind == DocumentKind.RESUME:
        parts.append(detect_role(text))
    parts.append(country_code(country))
    parts.append(KIND_SUFFIXES[document.kind])
    parts.append(today(on_date))

    stem = "_".join(part for part in parts if part)
    return f"{stem}.{extension}" if extension else stem


def derive_raw_filename(raw: RawDocument, on_date: Optional[date] = None, extension: str = "txt") -> str:
    """Filename for an unparsed download, using the contact name found in the text."""
    name = extract_contact_info(raw.text).name or ""
    parts = [name_part(name)]
    if raw.kind == DocumentKind.RESUME:
        parts.append(detect_role(raw.text))
    parts += [country_code(raw.country), KIND_SUFFIXES[raw.kind], today(on_date)]
    stem = "_".join(part for part in parts if part)
    return f"{stem}.{extension}" if extension else stem
