"""
Reusable regex patterns and glyph constants for raw document intake.

Pattern classes follow the frozen-dataclass convention:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions elsewhere use these patterns
"""

import re
from dataclasses import dataclass

# =============================================================================
# GLYPHS
# =============================================================================

CANONICAL_BULLET = "•"
CANONICAL_DASH = "-"

# Glyphs that are bullets wherever they appear
BULLET_GLYPHS = "•●◦○⚬▪■‣⁃∙"

# Glyphs that are bullets only as a leading marker followed by whitespace
LEADING_BULLET_MARKERS = "*-·–—+>"

DASH_GLYPHS = "‐‑‒–—―−"


# =============================================================================
# MARKUP PATTERNS
# =============================================================================


@dataclass(frozen=True)
class MarkupPatterns:
    """
    Regex patterns for markup artifacts left in AI-drafted text.

    Emphasis patterns require non-space content next to the delimiters so
    arithmetic ("2 * 3 * 4") and snake_case identifiers survive.
    """

    HTML_TAG: re.Pattern = re.compile(r"</?[A-Za-z][^<>]*>")
    MARKDOWN_LINK: re.Pattern = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")
    MARKDOWN_HEADING: re.Pattern = re.compile(r"^#{1,6}\s+")
    CODE_SPAN: re.Pattern = re.compile(r"`([^`]*)`")
    BOLD_STARS: re.Pattern = re.compile(r"\*\*(?!\s)(.+?)(?<!\s)\*\*")
    BOLD_UNDERSCORES: re.Pattern = re.compile(r"(?<!\w)__(?!\s)(.+?)(?<!\s)__(?!\w)")
    ITALIC_STAR: re.Pattern = re.compile(r"(?<![\w*])\*(?![\s*])(.+?)(?<![\s*])\*(?![\w*])")
    ITALIC_UNDERSCORE: re.Pattern = re.compile(r"(?<![\w_])_(?![\s_])(.+?)(?<![\s_])_(?![\w_])")
    STRAY_DELIMITERS: re.Pattern = re.compile(r"\*\*+|(?<!\w)__+|__+(?!\w)")
    WHITESPACE: re.Pattern = re.compile(r"\s+")


# =============================================================================
# PROTECTED TOKENS
# =============================================================================


@dataclass(frozen=True)
class TokenPatterns:
    """Tokens the normalizer must leave byte-for-byte intact."""

    EMAIL: re.Pattern = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
    URL: re.Pattern = re.compile(r"(?:https?://|www\.)[^\s<>()\[\]]+", re.IGNORECASE)
    DOMAIN_PATH: re.Pattern = re.compile(r"\b[\w-]+(?:\.[\w-]+)*\.[a-z]{2,}/[^\s<>()\[\]]*", re.IGNORECASE)

    # Combined, used to split a line into protected / unprotected segments
    PROTECTED: re.Pattern = re.compile(
        r"(?:https?://|www\.)[^\s<>()\[\]]+"
        r"|[\w.+-]+@[\w-]+(?:\.[\w-]+)+"
        r"|\b[\w-]+(?:\.[\w-]+)*\.[a-z]{2,}/[^\s<>()\[\]]*",
        re.IGNORECASE,
    )


# =============================================================================
# CONTACT PATTERNS
# =============================================================================


@dataclass(frozen=True)
class ContactPatterns:
    """
    Regex patterns for contact lines and contact field extraction.
    """

    # A run of digits and phone separators; digit count is checked separately
    PHONE_RUN: re.Pattern = re.compile(r"\+?\(?\d[\d\s().-]{8,}\d")
    PHONE_CUE: re.Pattern = re.compile(r"phone|mobile|\btel\b|\bcell\b|☎|📱|📞", re.IGNORECASE)

    # "Label: value" for recognized labels
    LABELED: re.Pattern = re.compile(
        r"\b(?:linkedin|github|phone|e-?mail|location|tel|mobile|portfolio|website|address)\s*:\s*\S",
        re.IGNORECASE,
    )
    PROFILE_URL: re.Pattern = re.compile(r"\b(?:linkedin|github)\.com/\S+", re.IGNORECASE)
    LEADING_URL: re.Pattern = re.compile(r"^(?:https?://|www\.)\S+", re.IGNORECASE)

    EMAIL: re.Pattern = re.compile(r"([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")
    LINKEDIN: re.Pattern = re.compile(r"(linkedin\.com/in/[\w-]+)", re.IGNORECASE)
    GITHUB: re.Pattern = re.compile(r"(github\.com/[\w-]+)", re.IGNORECASE)
    LOCATION: re.Pattern = re.compile(r"(?:location\s*:?\s*|📍\s*|🌍\s*)([^\W\d_][^|•@\d]*)", re.IGNORECASE)


# =============================================================================
# STRUCTURE PATTERNS
# =============================================================================


@dataclass(frozen=True)
class StructurePatterns:
    """
    Regex patterns for structural line shapes.
    """

    # "Title Case Phrase | Title Case Phrase" (job title | company | dates)
    SUBSECTION: re.Pattern = re.compile(r"^[A-Z][\w\s&.,'()/-]*?\s*\|\s*[A-Z]")

    # Numeric, ISO, month-name and Japanese date stamps occupying a whole line
    DATE_LINE: re.Pattern = re.compile(
        r"^(?:date\s*:\s*)?(?:"
        r"\d{1,2}[/.]\d{1,2}[/.]\d{2,4}"
        r"|\d{4}-\d{2}-\d{2}"
        r"|(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4}"
        r"|\d{1,2}(?:st|nd|rd|th)?\s+(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?,?\s+\d{4}"
        r"|(?:january|february|march|april|may|june|july|august|september|october|november|december)\s+\d{4}"
        r"|\d{4}年\d{1,2}月\d{1,2}日"
        r")\.?$",
        re.IGNORECASE,
    )

    # Street / city / zip shaped lines in a letter header
    ADDRESS: re.Pattern = re.compile(
        r"^\d+\s+\w|\b(?:street|avenue|road|drive|lane|blvd|boulevard|ave|suite|st\.)\b|\b\d{5}(?:-\d{4})?\b",
        re.IGNORECASE,
    )

    # Company names ending in a recognizable organization suffix
    COMPANY: re.Pattern = re.compile(
        r"^[A-Z][\w\s&.,'-]*\b(?:Inc|LLC|Corp|Corporation|Ltd|Limited|Co|Company|Technologies|Tech"
        r"|Systems|Solutions|Group|Enterprises|Partners|University|College|Institute|GmbH|S\.A\.|AG)\.?$"
    )

    EMAIL_SUBJECT: re.Pattern = re.compile(r"^subject\s*:", re.IGNORECASE)


# =============================================================================
# SCRIPT DETECTION
# =============================================================================


@dataclass(frozen=True)
class ScriptPatterns:
    """Character classes used to guess the document language."""

    JAPANESE: re.Pattern = re.compile(r"[぀-ゟ゠-ヿ一-龯]")
    GERMAN: re.Pattern = re.compile(r"[ß]|\b(?:und|mit|für|bei)\b", re.IGNORECASE)
    SPANISH: re.Pattern = re.compile(r"[ñ¿¡]|\b(?:experiencia|formación|idiomas|estimad[oa]s?)\b", re.IGNORECASE)
    FRENCH: re.Pattern = re.compile(r"[çœ]|\b(?:expérience|compétences|formation|madame|monsieur)\b", re.IGNORECASE)
