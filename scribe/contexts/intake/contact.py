"""
Contact field extraction for the Intake context.

One pure function that pulls name, email, phone, LinkedIn, GitHub and
location out of free text. The first occurrence of each field wins.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Optional

from scribe.contexts.intake.classifier import has_phone_number
from scribe.contexts.intake.normalizer import normalize, strip_bullet
from scribe.contexts.intake.patterns import ContactPatterns
from scribe.utils.text_processing import split_nonblank_lines


@dataclass(frozen=True)
class ContactInfo:
    """Contact fields found in a document; None when absent."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    location: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)

    @property
    def is_empty(self) -> bool:
        return not any(asdict(self).values())


def _extract_phone(line: str) -> Optional[str]:
    if not has_phone_number(line):
        return None
    for match in ContactPatterns().PHONE_RUN.finditer(line):
        run = match.group(0).strip()
        if sum(ch.isdigit() for ch in run) >= 10:
            return run
    return None


def _extract_name(first_line: str) -> Optional[str]:
    name = strip_bullet(normalize(first_line)).strip()
    if not name or "@" in name or "+" in name or "http" in name.lower():
        return None
    return name


def extract_contact_info(text: str) -> ContactInfo:
    """
    Extract contact fields from document text.

    Args:
        text: Raw or normalized document text

    Returns:
        ContactInfo with every field that could be found

    Example:
        >>> info = extract_contact_info("Jane Doe\\njane@doe.dev | Phone: +1 555 123 4567")
        >>> info.email, info.phone
        ('jane@doe.dev', '+1 555 123 4567')
    """
    lines = split_nonblank_lines(text or "")
    if not lines:
        return ContactInfo()

    patterns = ContactPatterns()
    fields: Dict[str, Optional[str]] = {"name": _extract_name(lines[0])}

    for line in lines:
        if not fields.get("email"):
            match = patterns.EMAIL.search(line)
            if match:
                fields["email"] = match.group(1)
        if not fields.get("phone"):
            fields["phone"] = _extract_phone(line)
        if not fields.get("linkedin"):
            match = patterns.LINKEDIN.search(line)
            if match:
                fields["linkedin"] = match.group(1)
        if not fields.get("github"):
            match = patterns.GITHUB.search(line)
            if match:
                fields["github"] = match.group(1)
        if not fields.get("location"):
            match = patterns.LOCATION.search(line)
            if match:
                fields["location"] = match.group(1).strip(" ,;") or None

    return ContactInfo(**fields)
