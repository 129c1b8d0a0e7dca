"""
Keyword classifier for rendering emphasis.

Splits text on whitespace and a fixed punctuation set, then tags each token
as technical, professional, metric or none. Spans cover the whole input in
order, so joining their text gives the input back. Multi-word vocabulary
entries ("spring boot", "machine learning") are matched greedily, longest
first, and become one span.

Tags are advisory: they only pick colors and weights downstream.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from scribe.contexts.intake.vocabulary import Vocabularies, get_vocabularies
from scribe.utils.text_processing import alnum_only

TOKEN_SPLIT = re.compile(r"(\s+|[,;|().])")
METRIC_PATTERN = re.compile(r"\d+(\.\d+)?(%|\+|k|K|M|years?|months?|\$)")


class KeywordCategory(str, Enum):
    """Emphasis category, in priority order."""

    TECHNICAL = "technical"
    PROFESSIONAL = "professional"
    METRIC = "metric"
    NONE = "none"


@dataclass(frozen=True)
class KeywordSpan:
    """A contiguous run of text and its emphasis category."""

    text: str
    category: KeywordCategory
    start: int
    end: int

    @property
    def is_emphasized(self) -> bool:
        return self.category != KeywordCategory.NONE


@dataclass(frozen=True)
class _Lexicon:
    technical: FrozenSet[str]
    professional: FrozenSet[str]
    # Multi-word phrases as tuples of token keys, keyed by word count
    phrases: Dict[int, Dict[Tuple[str, ...], KeywordCategory]]
    max_phrase_words: int


def token_key(token: str) -> str:
    """Lowercased alphanumeric core of a token ("Node.js," -> "nodejs")."""
    return alnum_only(token).lower()


@lru_cache(maxsize=4)
def _lexicon(vocabularies: Vocabularies) -> _Lexicon:
    technical, professional = set(), set()
    phrases: Dict[int, Dict[Tuple[str, ...], KeywordCategory]] = {}

    # Professional first so technical wins when a term is in both lists
    for terms, category, singles in (
        (vocabularies.professional, KeywordCategory.PROFESSIONAL, professional),
        (vocabularies.technical, KeywordCategory.TECHNICAL, technical),
    ):
        for term in terms:
            words = tuple(token_key(word) for word in term.split() if token_key(word))
            if len(words) == 1:
                singles.add(words[0])
            elif len(words) > 1:
                phrases.setdefault(len(words), {})[words] = category

    return _Lexicon(
        technical=frozenset(technical),
        professional=frozenset(professional),
        phrases=phrases,
        max_phrase_words=max(phrases.keys(), default=1),
    )


def classify_token(token: str, vocabularies: Optional[Vocabularies] = None) -> KeywordCategory:
    """
    Category of a single token; technical > professional > metric > none.

    Example:
        >>> classify_token("AWS")
        <KeywordCategory.TECHNICAL: 'technical'>
        >>> classify_token("35%")
        <KeywordCategory.METRIC: 'metric'>
    """
    lexicon = _lexicon(vocabularies or get_vocabularies())
    key = token_key(token)
    if not key:
        return KeywordCategory.NONE
    if key in lexicon.technical:
        return KeywordCategory.TECHNICAL
    if key in lexicon.professional:
        return KeywordCategory.PROFESSIONAL
    if METRIC_PATTERN.search(token):
        return KeywordCategory.METRIC
    return KeywordCategory.NONE


def _match_phrase(pieces: Sequence[str], start: int, lexicon: _Lexicon) -> Optional[Tuple[int, KeywordCategory]]:
    """
    Longest vocabulary phrase starting at pieces[start].

    Phrase words may only be separated by whitespace pieces.

    Returns:
        (index of the last piece in the phrase, category), or None
    """
    words: List[str] = []
    ends: List[int] = []
    index = start
    while index < len(pieces) and len(words) < lexicon.max_phrase_words:
        piece = pieces[index]
        if not piece.strip():
            index += 1
            continue
        if TOKEN_SPLIT.fullmatch(piece):
            break
        words.append(token_key(piece))
        ends.append(index)
        index += 1

    for count in range(len(words), 1, -1):
        category = lexicon.phrases.get(count, {}).get(tuple(words[:count]))
        if category is not None:
            return ends[count - 1], category
    return None


def classify_keywords(text: str, vocabularies: Optional[Vocabularies] = None) -> List[KeywordSpan]:
    """
    Tag every token of a line for emphasis.

    Args:
        text: Display text of one line
        vocabularies: Override vocabularies (default: shared tables)

    Returns:
        Spans in order, covering the whole text (separators tagged none)

    Example:
        >>> spans = classify_keywords("Increased throughput by 35% using AWS")
        >>> [(s.text, s.category.value) for s in spans if s.is_emphasized]
        [('Increased', 'professional'), ('35%', 'metric'), ('AWS', 'technical')]
    """
    if not text:
        return []
    vocabularies = vocabularies or get_vocabularies()
    lexicon = _lexicon(vocabularies)

    pieces = [piece for piece in TOKEN_SPLIT.split(text) if piece]
    spans: List[KeywordSpan] = []
    offset = 0
    index = 0
    while index < len(pieces):
        piece = pieces[index]
        if TOKEN_SPLIT.fullmatch(piece):
            spans.append(KeywordSpan(piece, KeywordCategory.NONE, offset, offset + len(piece)))
            offset += len(piece)
            index += 1
            continue

        phrase = _match_phrase(pieces, index, lexicon) if lexicon.phrases else None
        if phrase is not None:
            last, category = phrase
            phrase_text = "".join(pieces[index : last + 1])
            spans.append(KeywordSpan(phrase_text, category, offset, offset + len(phrase_text)))
            offset += len(phrase_text)
            index = last + 1
            continue

        category = classify_token(piece, vocabularies)
        spans.append(KeywordSpan(piece, category, offset, offset + len(piece)))
        offset += len(piece)
        index += 1
    return spans


def merge_spans(spans: Sequence[KeywordSpan]) -> List[KeywordSpan]:
    """Collapse adjacent spans of the same category (used for display runs)."""
    merged: List[KeywordSpan] = []
    for span in spans:
        if merged and merged[-1].category == span.category and span.category == KeywordCategory.NONE:
            last = merged[-1]
            merged[-1] = KeywordSpan(last.text + span.text, last.category, last.start, span.end)
        else:
            merged.append(span)
    return merged
