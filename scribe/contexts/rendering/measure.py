"""
Text measurement and line wrapping.

A TextMeasurer answers "how wide is this text in mm at this size and
weight". The layout engine only ever talks to that interface, so unit tests
inject FixedWidthMeasurer for exact arithmetic while real exports use
FpdfMeasurer backed by fpdf2's font metrics.

Wrapping is greedy by word and measures each word once; a word wider than
the line is broken per character. Work is linear in the text length, so a
single 100,000 character line wraps instead of hanging.
"""

from typing import Callable, Dict, List, Sequence, Tuple

from fpdf import FPDF
from typing_extensions import Protocol

from scribe.contexts.rendering.exceptions import MeasurementError

# Points to millimeters
PT_TO_MM = 25.4 / 72

# Characters the built-in PDF fonts cannot draw, mapped to drawable ones
CORE_FONT_REPLACEMENTS = {
    "•": "·",
    "…": "...",
    "€": "EUR",
    "™": "(TM)",
}

CORE_FONTS = ("helvetica", "times", "courier")


class TextMeasurer(Protocol):
    def width(self, text: str, font_size: float, bold: bool = False) -> float:
        """Width of text in mm."""
        ...


def to_core_font_text(text: str) -> str:
    """Text as the built-in (Latin-1) fonts will draw it."""
    for char, replacement in CORE_FONT_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", "replace").decode("latin-1")


class FixedWidthMeasurer:
    """
    Every character is the same width: char_width_ratio of the font size.

    Used in tests and as the approximate fallback when real measurement fails.
    Bold text is bold_factor wider.
    """

    def __init__(self, char_width_ratio: float = 0.5, bold_factor: float = 1.0):
        self.char_width_ratio = char_width_ratio
        self.bold_factor = bold_factor

    def width(self, text: str, font_size: float, bold: bool = False) -> float:
        per_char = font_size * PT_TO_MM * self.char_width_ratio
        return len(text) * per_char * (self.bold_factor if bold else 1.0)


class FpdfMeasurer:
    """
    Measures with fpdf2 font metrics.

    With a TTF font_path every script is measured with that font; otherwise
    text is mapped to Latin-1 first, exactly as the writer will draw it.
    """

    def __init__(self, family: str = "helvetica", font_path: str = ""):
        self._pdf = FPDF(unit="mm", format="A4")
        self.family = family
        self.uses_core_font = not font_path
        if font_path:
            self.family = load_font(self._pdf, font_path)

    def width(self, text: str, font_size: float, bold: bool = False) -> float:
        drawable = to_core_font_text(text) if self.uses_core_font else text
        try:
            self._pdf.set_font(self.family, "B" if bold else "", font_size)
            return self._pdf.get_string_width(drawable)
        except Exception as e:
            raise MeasurementError("Could not measure text", text=text, original_error=e) from e


def load_font(pdf: FPDF, font_path: str, family: str = "scribe") -> str:
    """Register a TTF file as regular and bold styles; returns the family name."""
    pdf.add_font(family, "", font_path)
    pdf.add_font(family, "B", font_path)
    return family


def make_measurer(family: str = "helvetica", font_path: str = "") -> TextMeasurer:
    """Measurer for a style's typography; unknown core families fall back to helvetica."""
    if font_path:
        return FpdfMeasurer(font_path=font_path)
    family = family.lower()
    return FpdfMeasurer(family=family if family in CORE_FONTS else "helvetica")


# =============================================================================
# WRAPPING
# =============================================================================


class WidthCache:
    """
    Memoized widths for one font size, keyed by (text, bold).

    Any failure of the underlying measurer surfaces as MeasurementError, so
    callers handle one exception type whatever measurer was injected.

    Args:
        measurer: Underlying measurer
        font_size: Font size in points
    """

    def __init__(self, measurer: TextMeasurer, font_size: float):
        self.measurer = measurer
        self.font_size = font_size
        self._cache: Dict[Tuple[str, bool], float] = {}

    def __call__(self, text: str, bold: bool = False) -> float:
        key = (text, bold)
        if key not in self._cache:
            try:
                self._cache[key] = self.measurer.width(text, self.font_size, bold)
            except MeasurementError:
                raise
            except Exception as e:
                raise MeasurementError("Measurer failed", text=text, original_error=e) from e
        return self._cache[key]


# A fragment is (text, tag); tag is opaque to wrapping and decides weight
Fragment = Tuple[str, object]
Word = List[Fragment]


def split_words(fragments: Sequence[Fragment]) -> List[Word]:
    """
    Regroup styled fragments into whitespace-separated words.

    Whitespace is dropped; each word keeps its fragments and their tags.
    """
    words: List[Word] = []
    current: Word = []
    for text, tag in fragments:
        parts = text.split(" ") if text.strip() else ["", ""]
        for position, part in enumerate(parts):
            if position > 0 and current:
                words.append(current)
                current = []
            if part.strip():
                current.append((part, tag))
    if current:
        words.append(current)
    return words


def _break_word(word: Word, max_width: float, measure: Callable[[str, object], float]) -> List[Word]:
    """Split a word wider than max_width into per-character pieces."""
    pieces: List[Word] = []
    current: Word = []
    current_width = 0.0
    for text, tag in word:
        for char in text:
            char_width = measure(char, tag)
            if current and current_width + char_width > max_width:
                pieces.append(current)
                current, current_width = [], 0.0
            if current and current[-1][1] == tag:
                current[-1] = (current[-1][0] + char, tag)
            else:
                current.append((char, tag))
            current_width += char_width
    if current:
        pieces.append(current)
    return pieces


def wrap_fragments(
    fragments: Sequence[Fragment],
    max_width: float,
    measure: Callable[[str, object], float],
) -> List[List[Fragment]]:
    """
    Greedy word wrap of styled fragments.

    Args:
        fragments: (text, tag) pairs making up one logical line
        max_width: Available width in mm
        measure: measure(text, tag) -> width in mm

    Returns:
        Wrapped lines; each is a list of fragments with single spaces
        restored between words. Empty input gives [].
    """
    lines: List[List[Fragment]] = []
    current: List[Word] = []
    current_width = 0.0

    def flush():
        if current:
            lines.append(_join_words(current))

    for word in split_words(fragments):
        word_width = sum(measure(text, tag) for text, tag in word)
        if word_width > max_width:
            flush()
            pieces = _break_word(word, max_width, measure)
            for piece in pieces[:-1]:
                lines.append(piece)
            current = [pieces[-1]]
            current_width = sum(measure(text, tag) for text, tag in pieces[-1])
            continue

        space_width = measure(" ", word[0][1]) if current else 0.0
        if current and current_width + space_width + word_width > max_width:
            flush()
            current, current_width = [word], word_width
        else:
            current.append(word)
            current_width += space_width + word_width

    flush()
    return lines


def _join_words(words: Sequence[Word]) -> List[Fragment]:
    """Join words with single spaces, merging neighbours that share a tag."""
    joined: List[Fragment] = []
    for position, word in enumerate(words):
        for index, (text, tag) in enumerate(word):
            if position > 0 and index == 0:
                text = " " + text
            if joined and joined[-1][1] == tag:
                joined[-1] = (joined[-1][0] + text, tag)
            else:
                joined.append((text, tag))
    return joined


def wrap_text(text: str, max_width: float, measurer: TextMeasurer, font_size: float, bold: bool = False) -> List[str]:
    """
    Wrap plain text to max_width.

    Example:
        >>> wrap_text("aaaa bbbb", 10, FixedWidthMeasurer(), 10)
        ['aaaa', 'bbbb']
    """
    cache = WidthCache(measurer, font_size)
    wrapped = wrap_fragments([(text, None)], max_width, lambda t, _tag: cache(t, bold))
    return ["".join(part for part, _ in line) for line in wrapped]
