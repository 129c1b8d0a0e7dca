"""Unit tests for keyword emphasis classification."""

import pytest

from scribe.contexts.intake.vocabulary import Vocabularies
from scribe.contexts.rendering.keywords import (
    KeywordCategory,
    classify_keywords,
    classify_token,
    merge_spans,
    token_key,
)


def _emphasized(text, vocabularies=None):
    return [(s.text, s.category.value) for s in classify_keywords(text, vocabularies) if s.is_emphasized]


@pytest.mark.unit
def test_tags_each_token_independently():
    """Test the canonical metric, technical and professional example."""
    assert _emphasized("Increased throughput by 35% using AWS") == [
        ("Increased", "professional"),
        ("35%", "metric"),
        ("AWS", "technical"),
    ]


@pytest.mark.unit
@pytest.mark.parametrize(
    "token,category",
    [
        ("Python", KeywordCategory.TECHNICAL),
        ("Kubernetes,", KeywordCategory.TECHNICAL),
        ("delivered", KeywordCategory.PROFESSIONAL),
        ("10+", KeywordCategory.METRIC),
        ("5M", KeywordCategory.METRIC),
        ("3years", KeywordCategory.METRIC),
        ("throughput", KeywordCategory.NONE),
        ("", KeywordCategory.NONE),
        ("---", KeywordCategory.NONE),
    ],
)
def test_classify_token(token, category):
    """Test single-token categories."""
    assert classify_token(token) == category


@pytest.mark.unit
def test_technical_beats_professional():
    """Test a term listed in both vocabularies is technical."""
    vocab = Vocabularies(
        version=1,
        technical=("architecture",),
        professional=("architecture", "led"),
        role_keywords=(),
        title_keywords=(),
    )
    assert classify_token("Architecture", vocab) == KeywordCategory.TECHNICAL
    assert classify_token("led", vocab) == KeywordCategory.PROFESSIONAL


@pytest.mark.unit
def test_multi_word_phrases_become_one_span():
    """Test vocabulary phrases are matched as a single span."""
    assert _emphasized("Applied machine learning with Spring Boot") == [
        ("machine learning", "technical"),
        ("Spring Boot", "technical"),
    ]


@pytest.mark.unit
def test_phrase_does_not_cross_punctuation():
    """Test phrase words separated by a comma are classified one by one."""
    vocab = Vocabularies(
        version=1,
        technical=("spring boot", "spring"),
        professional=(),
        role_keywords=(),
        title_keywords=(),
    )
    assert _emphasized("spring, boot", vocab) == [("spring", "technical")]


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    [
        "Increased throughput by 35% using AWS",
        "  leading and trailing  ",
        "Skills: Python; Docker | Kubernetes (EKS).",
        "東京 Python 開発",
    ],
)
def test_spans_cover_text(text):
    """Test spans are contiguous and rebuild the input exactly."""
    spans = classify_keywords(text)

    assert "".join(span.text for span in spans) == text
    assert spans[0].start == 0
    assert spans[-1].end == len(text)
    for previous, current in zip(spans, spans[1:]):
        assert previous.end == current.start


@pytest.mark.unit
def test_empty_text():
    """Test empty text has no spans."""
    assert classify_keywords("") == []


@pytest.mark.unit
def test_merge_spans_collapses_plain_runs_only():
    """Test adjacent untagged spans merge while keywords stay separate."""
    merged = merge_spans(classify_keywords("using the AWS Docker stack"))

    assert [(s.text, s.category) for s in merged] == [
        ("using the ", KeywordCategory.NONE),
        ("AWS", KeywordCategory.TECHNICAL),
        (" ", KeywordCategory.NONE),
        ("Docker", KeywordCategory.TECHNICAL),
        (" stack", KeywordCategory.NONE),
    ]


@pytest.mark.unit
def test_token_key():
    """Test token keys keep only lowercased letters and digits."""
    assert token_key("Node.js,") == "nodejs"
    assert token_key("(AWS)") == "aws"
