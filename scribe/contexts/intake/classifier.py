"""
Line classifier for the Intake context.

Assigns each non-blank line exactly one LineRole by walking an ordered rule
table; the first matching rule wins. Classification of a line depends only
on the line, its index, the role of the previous line, the document kind,
whether the header block has ended, and the locale cues.

Rule order:
    1. Name             first line, short, no "@", no leading digit, not a URL
    2. ContactItem      "@", phone number with a cue, or "label: value"
    3. SectionHeader    ALL CAPS label, or a recognized section label
    4. SubsectionHeader "Title Case | Title Case"
    5. Bullet           leading canonical bullet glyph
    6. Salutation       letters only, before the body
    7. Closing          letters only, short
       Signature        letters only, right after a closing
       DateStamp        letters only, before the body
       (letter body)    letters only, any other body line is PlainText
    8. Title            second line containing a title keyword
    9. PlainText        everything else
"""

from collections import Counter
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from scribe.contexts.intake.document import DocumentKind, Line, LineRole, RawDocument
from scribe.contexts.intake.logger import log_classification_summary
from scribe.contexts.intake.normalizer import is_bullet, normalize, strip_bullet
from scribe.contexts.intake.patterns import ContactPatterns, StructurePatterns, TokenPatterns
from scribe.contexts.intake.vocabulary import (
    DEFAULT_LANGUAGE,
    LocaleCues,
    get_locale_cues,
    known_section_keys,
    section_key,
)

NAME_MAX_LENGTH = 50
SECTION_LABEL_MAX_LENGTH = 40
CLOSING_MAX_LENGTH = 40
SIGNATURE_MAX_LENGTH = 50
MIN_PHONE_DIGITS = 10

# A header-area plain line this long (or a full sentence) starts the letter body
PROSE_MIN_LENGTH = 80
PROSE_MIN_WORDS = 8


@dataclass(frozen=True)
class LineContext:
    """Everything a rule may look at when classifying one line."""

    text: str
    index: int
    prior_role: Optional[LineRole]
    kind: DocumentKind
    header_ended: bool
    cues: LocaleCues

    @property
    def lowered(self) -> str:
        return self.text.lower()

    @property
    def is_letter(self) -> bool:
        return self.kind != DocumentKind.RESUME

    @property
    def in_letter_body(self) -> bool:
        return self.is_letter and self.header_ended


@dataclass(frozen=True)
class ClassificationRule:
    """One entry of the ordered rule table."""

    name: str
    role: LineRole
    predicate: Callable[[LineContext], bool]


# =============================================================================
# PREDICATES
# =============================================================================


def is_date_line(text: str) -> bool:
    """True if the whole line is a date stamp ("March 3, 2024", "2024-03-03", ...)."""
    return bool(StructurePatterns().DATE_LINE.match(text.strip()))


def has_phone_number(text: str) -> bool:
    """
    True if the line holds a 10+ digit phone number with a phone cue or "+".

    A bare digit run without a cue ("(555) 123-4567" alone) is not enough.
    """
    patterns = ContactPatterns()
    for match in patterns.PHONE_RUN.finditer(text):
        run = match.group(0)
        if sum(ch.isdigit() for ch in run) < MIN_PHONE_DIGITS:
            continue
        if run.startswith("+") or patterns.PHONE_CUE.search(text):
            return True
    return False


def looks_like_contact(text: str) -> bool:
    patterns = ContactPatterns()
    return (
        "@" in text
        or has_phone_number(text)
        or bool(patterns.LABELED.search(text))
        or bool(patterns.PROFILE_URL.search(text))
        or bool(patterns.LEADING_URL.match(text))
    )


def is_all_caps_label(text: str) -> bool:
    """Only uppercase letters, spaces and "&", longer than 3 characters."""
    if len(text) <= 3 or not any(ch.isalpha() for ch in text):
        return False
    return all((ch.isalpha() and ch.isupper()) or ch in " &" for ch in text)


def is_section_label(text: str, cues: LocaleCues) -> bool:
    """A short line naming a known section in English or the document locale."""
    if len(text) > SECTION_LABEL_MAX_LENGTH or is_bullet(text):
        return False
    key = section_key(text.rstrip(":："))
    return bool(key) and (key in cues.section_labels or key in known_section_keys())


def is_prose(text: str) -> bool:
    """A line that reads like a paragraph sentence rather than a header field."""
    words = text.split()
    return len(text) >= PROSE_MIN_LENGTH or (len(words) >= PROSE_MIN_WORDS and text.rstrip()[-1:] in ".!?")


def starts_with_cue(lowered: str, cues: Tuple[str, ...]) -> bool:
    return any(lowered.startswith(cue) for cue in cues)


def contains_title_keyword(text: str, keywords: Tuple[str, ...]) -> bool:
    lowered = text.lower()
    for keyword in keywords:
        position = lowered.find(keyword)
        while position != -1:
            before = lowered[position - 1] if position > 0 else " "
            after_index = position + len(keyword)
            after = lowered[after_index] if after_index < len(lowered) else " "
            # Word boundary for Latin scripts; CJK keywords match anywhere
            if not keyword.isascii() or (not before.isalnum() and not after.isalnum()):
                return True
            position = lowered.find(keyword, position + 1)
    return False


def _starts_with_capital(text: str) -> bool:
    first = text[:1]
    return first.isalpha() and not first.islower()


def _name_rule(ctx: LineContext) -> bool:
    text = ctx.text
    return (
        ctx.index == 0
        and len(text) < NAME_MAX_LENGTH
        and "@" not in text
        and not text[:1].isdigit()
        and not TokenPatterns().URL.search(text)
        and not (ctx.is_letter and is_date_line(text))
        and not (ctx.is_letter and StructurePatterns().EMAIL_SUBJECT.match(text))
    )


def _signature_rule(ctx: LineContext) -> bool:
    return (
        ctx.prior_role == LineRole.CLOSING
        and len(ctx.text) < SIGNATURE_MAX_LENGTH
        and _starts_with_capital(ctx.text)
    )


def _structural(predicate: Callable[[LineContext], bool]) -> Callable[[LineContext], bool]:
    """Structural rules never fire inside a letter body."""
    return lambda ctx: not ctx.in_letter_body and predicate(ctx)


def _letter_only(predicate: Callable[[LineContext], bool]) -> Callable[[LineContext], bool]:
    return lambda ctx: ctx.is_letter and predicate(ctx)


CLASSIFICATION_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("name", LineRole.NAME, _structural(_name_rule)),
    ClassificationRule("contact", LineRole.CONTACT_ITEM, _structural(lambda ctx: looks_like_contact(ctx.text))),
    ClassificationRule(
        "section_header",
        LineRole.SECTION_HEADER,
        _structural(lambda ctx: is_all_caps_label(ctx.text) or is_section_label(ctx.text, ctx.cues)),
    ),
    ClassificationRule(
        "subsection_header",
        LineRole.SUBSECTION_HEADER,
        _structural(lambda ctx: bool(StructurePatterns().SUBSECTION.match(ctx.text))),
    ),
    ClassificationRule("bullet", LineRole.BULLET, _structural(lambda ctx: is_bullet(ctx.text))),
    ClassificationRule(
        "salutation",
        LineRole.SALUTATION,
        _letter_only(lambda ctx: not ctx.header_ended and starts_with_cue(ctx.lowered, ctx.cues.salutations)),
    ),
    ClassificationRule(
        "closing",
        LineRole.CLOSING,
        _letter_only(
            lambda ctx: len(ctx.text) <= CLOSING_MAX_LENGTH and starts_with_cue(ctx.lowered, ctx.cues.closings)
        ),
    ),
    ClassificationRule("signature", LineRole.SIGNATURE, _letter_only(_signature_rule)),
    ClassificationRule(
        "date_stamp",
        LineRole.DATE_STAMP,
        _letter_only(lambda ctx: not ctx.header_ended and is_date_line(ctx.text)),
    ),
    ClassificationRule("letter_body", LineRole.PLAIN_TEXT, lambda ctx: ctx.in_letter_body),
    ClassificationRule(
        "title",
        LineRole.TITLE,
        _structural(lambda ctx: ctx.index == 1 and contains_title_keyword(ctx.text, ctx.cues.title_keywords)),
    ),
)


# =============================================================================
# PUBLIC API
# =============================================================================


def classify(
    text: str,
    index: int,
    prior_role: Optional[LineRole],
    kind: DocumentKind,
    header_ended: bool = False,
    locale: str = DEFAULT_LANGUAGE,
) -> LineRole:
    """
    Classify one normalized line.

    Args:
        text: Normalized line text
        index: Position among non-blank lines
        prior_role: Role of the previous line (None for the first line)
        kind: Document kind
        header_ended: Whether a salutation (letters) or section header
            (resumes) has already been seen
        locale: Language tag selecting extra cue words

    Returns:
        The role of the first matching rule, PlainText if none match

    Example:
        >>> classify("EXPERIENCE", 4, LineRole.CONTACT_ITEM, DocumentKind.RESUME)
        <LineRole.SECTION_HEADER: 'section_header'>
    """
    ctx = LineContext(
        text=text,
        index=index,
        prior_role=prior_role,
        kind=kind,
        header_ended=header_ended,
        cues=get_locale_cues(locale),
    )
    for rule in CLASSIFICATION_RULES:
        if rule.predicate(ctx):
            return rule.role
    return LineRole.PLAIN_TEXT


def ends_header_block(role: LineRole, text: str, kind: DocumentKind) -> bool:
    """
    Whether a line with this role closes the header block.

    Resumes: the first section header. Letters: the salutation, or the first
    prose line when the letter has no salutation.
    """
    if kind == DocumentKind.RESUME:
        return role == LineRole.SECTION_HEADER
    return role == LineRole.SALUTATION or (role == LineRole.PLAIN_TEXT and is_prose(text))


def classify_lines(raw: RawDocument) -> List[Line]:
    """
    Normalize and classify every non-blank line of a raw document.

    Never raises for any text; an empty document yields an empty list.

    Args:
        raw: RawDocument to classify

    Returns:
        Lines in original order, one per non-blank line
    """
    lines: List[Line] = []
    prior_role: Optional[LineRole] = None
    header_ended = False

    for raw_line in raw.lines:
        text = normalize(raw_line)
        if not text:
            continue
        index = len(lines)
        role = classify(text, index, prior_role, raw.kind, header_ended, raw.language)
        content = strip_bullet(text) if role == LineRole.BULLET else text
        lines.append(Line(raw=raw_line, text=text, index=index, role=role, content=content))

        header_ended = header_ended or ends_header_block(role, text, raw.kind)
        prior_role = role

    log_classification_summary(raw.kind.value, Counter(line.role.value for line in lines))
    return lines
