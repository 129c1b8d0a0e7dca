"""
Line normalizer for the Intake context.

Strips the markup artifacts an assistant leaves in generated text (HTML tags,
markdown emphasis, heading hashes, code spans) and canonicalizes bullet and
dash glyphs. Email addresses and URLs are never altered, so "first_last@x.io"
keeps its underscores.

normalize(normalize(s)) == normalize(s) for every s.
"""

import re
import unicodedata
from typing import List

from scribe.contexts.intake.patterns import (
    BULLET_GLYPHS,
    CANONICAL_BULLET,
    CANONICAL_DASH,
    DASH_GLYPHS,
    LEADING_BULLET_MARKERS,
    MarkupPatterns,
    TokenPatterns,
)

# Unicode replacements: problematic char → plain equivalent
UNICODE_REPLACEMENTS = {
    # Spaces
    "\u00a0": " ",  # non-breaking space
    "\u202f": " ",  # narrow no-break space
    "\t": " ",
    # Zero-width characters → remove
    "\u200b": "",  # zero-width space
    "\u200c": "",  # zero-width non-joiner
    "\u200d": "",  # zero-width joiner
    "\u2060": "",  # word joiner
    "\ufeff": "",  # BOM
    # Quotes
    "\u2018": "'",  # left single quote
    "\u2019": "'",  # right single quote
    "\u201c": '"',  # left double quote
    "\u201d": '"',  # right double quote
}

_LEADING_MARKER = re.compile(r"^[" + re.escape(LEADING_BULLET_MARKERS) + r"]\s+")
_BULLET_GLYPH = re.compile(r"[" + re.escape(BULLET_GLYPHS) + r"]")
_DASH_GLYPH = re.compile(r"[" + re.escape(DASH_GLYPHS) + r"]")


def normalize_unicode(text: str) -> str:
    """
    Apply NFC normalization and replace invisible or typographic characters.

    NFC (not NFKC) keeps full-width CJK punctuation intact.
    """
    text = unicodedata.normalize("NFC", text)
    for char, replacement in UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text


def _split_protected(text: str) -> List[tuple]:
    """
    Split text into (segment, is_protected) pairs.

    Protected segments are emails and URLs; they pass through untouched.
    """
    segments = []
    position = 0
    for match in TokenPatterns().PROTECTED.finditer(text):
        if match.start() > position:
            segments.append((text[position : match.start()], False))
        segments.append((match.group(0), True))
        position = match.end()
    if position < len(text):
        segments.append((text[position:], False))
    return segments


def _strip_emphasis(segment: str) -> str:
    patterns = MarkupPatterns()
    segment = patterns.CODE_SPAN.sub(r"\1", segment)
    segment = patterns.BOLD_STARS.sub(r"\1", segment)
    segment = patterns.BOLD_UNDERSCORES.sub(r"\1", segment)
    segment = patterns.ITALIC_STAR.sub(r"\1", segment)
    segment = patterns.ITALIC_UNDERSCORE.sub(r"\1", segment)
    segment = patterns.STRAY_DELIMITERS.sub("", segment)
    segment = _BULLET_GLYPH.sub(CANONICAL_BULLET, segment)
    return _DASH_GLYPH.sub(CANONICAL_DASH, segment)


def _normalize_once(line: str) -> str:
    patterns = MarkupPatterns()

    line = normalize_unicode(line)
    line = patterns.HTML_TAG.sub(" ", line)
    line = patterns.WHITESPACE.sub(" ", line).strip()
    line = patterns.MARKDOWN_HEADING.sub("", line)

    # Leading "* ", "- ", "· " markers become the canonical bullet
    line = _LEADING_MARKER.sub(CANONICAL_BULLET + " ", line)

    # Links keep their label; the target URL is dropped
    line = patterns.MARKDOWN_LINK.sub(r"\1", line)

    line = "".join(
        segment if protected else _strip_emphasis(segment)
        for segment, protected in _split_protected(line)
    )
    return patterns.WHITESPACE.sub(" ", line).strip()


def normalize(line: str) -> str:
    """
    Normalize a single line of generated text.

    Every rewrite either shortens the line or replaces a glyph with its
    canonical form, so repeating the pass reaches a fixed point; the loop
    makes the result idempotent even when removing one delimiter pair
    exposes another.

    Args:
        line: One line of raw text

    Returns:
        Normalized line ("" for None or whitespace-only input)

    Example:
        >>> normalize("**Senior Engineer** – <b>ACME</b>")
        'Senior Engineer - ACME'
        >>> normalize("* Reach me at john_doe@mail.com")
        '• Reach me at john_doe@mail.com'
    """
    if not line:
        return ""
    current = line
    # Each changing pass shrinks the line or reduces non-canonical glyphs
    for _ in range(len(line) + 1):
        updated = _normalize_once(current)
        if updated == current:
            break
        current = updated
    return current


def strip_bullet(text: str) -> str:
    """Remove a leading canonical bullet glyph and the whitespace after it."""
    if text.startswith(CANONICAL_BULLET):
        return text[len(CANONICAL_BULLET) :].lstrip()
    return text


def is_bullet(text: str) -> bool:
    return text.startswith(CANONICAL_BULLET)
