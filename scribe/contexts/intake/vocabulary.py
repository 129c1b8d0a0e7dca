"""
Vocabulary and locale cue tables for the Intake context.

Loads the keyword vocabularies (vocabularies.yaml), localized cue words
(locales.yaml) and section names (sections.yaml) into immutable records.
Tables are read once per process and shared; every lookup is pure.
"""

import re
import unicodedata
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple

from scribe.utils.config_loader import load_config

DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class Vocabularies:
    """Versioned keyword vocabularies used by classification and highlighting."""

    version: int
    technical: Tuple[str, ...]
    professional: Tuple[str, ...]
    role_keywords: Tuple[str, ...]
    title_keywords: Tuple[str, ...]


@dataclass(frozen=True)
class LocaleCues:
    """
    Cue words for one language, already merged with the English defaults.

    section_labels maps a section key (see section_key) to a canonical
    section name, e.g. "experiencialaboral" -> "experience".
    """

    language: str
    salutations: Tuple[str, ...]
    closings: Tuple[str, ...]
    title_keywords: Tuple[str, ...]
    section_labels: Mapping[str, str]


def section_key(text: str) -> str:
    """
    Reduce a header label to its lookup key.

    Accents are stripped, then only letters are kept, lowercased.

    Example:
        >>> section_key("Work Experience:")
        'workexperience'
        >>> section_key("FORMACIÓN")
        'formacion'
    """
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return "".join(ch for ch in stripped if ch.isalpha()).lower()


def base_language(language: str) -> str:
    """Primary subtag of a language tag ("es-MX" -> "es")."""
    if not language:
        return DEFAULT_LANGUAGE
    return re.split(r"[-_]", language.strip())[0].lower() or DEFAULT_LANGUAGE


def _as_tuple(values) -> Tuple[str, ...]:
    return tuple(str(v).lower() for v in (values or []))


@lru_cache(maxsize=1)
def get_vocabularies() -> Vocabularies:
    """
    Load keyword vocabularies.

    Raises:
        InvalidConfigError: If vocabularies.yaml is missing or incomplete
    """
    data = load_config(
        "vocabularies",
        required_keys=("version", "technical", "professional", "role_keywords", "title_keywords"),
    )
    return Vocabularies(
        version=int(data["version"]),
        technical=_as_tuple(data["technical"]),
        professional=_as_tuple(data["professional"]),
        role_keywords=_as_tuple(data["role_keywords"]),
        title_keywords=_as_tuple(data["title_keywords"]),
    )


def _locale_tables() -> dict:
    data = load_config("locales", required_keys=(DEFAULT_LANGUAGE,))
    return {lang: table for lang, table in data.items() if isinstance(table, dict)}


@lru_cache(maxsize=None)
def get_locale_cues(language: str = DEFAULT_LANGUAGE) -> LocaleCues:
    """
    Cue words for a language merged with the English defaults.

    Unknown languages get the English cues alone.

    Args:
        language: Language tag ("en", "es", "de-AT", ...)

    Returns:
        LocaleCues for the base language
    """
    language = base_language(language)
    locales = _locale_tables()

    tables = [locales[DEFAULT_LANGUAGE]]
    if language != DEFAULT_LANGUAGE and language in locales:
        tables.append(locales[language])

    def collect(field: str) -> Tuple[str, ...]:
        merged = []
        for table in tables:
            for cue in _as_tuple(table.get(field)):
                if cue not in merged:
                    merged.append(cue)
        return tuple(merged)

    labels = {}
    for table in tables:
        for label, canonical in (table.get("section_headers") or {}).items():
            labels[section_key(str(label))] = str(canonical)

    vocab_titles = get_vocabularies().title_keywords
    return LocaleCues(
        language=language if language in locales else DEFAULT_LANGUAGE,
        salutations=collect("salutations"),
        closings=collect("closings"),
        title_keywords=tuple(dict.fromkeys(vocab_titles + collect("title_keywords"))),
        section_labels=MappingProxyType(labels),
    )


@lru_cache(maxsize=1)
def section_aliases() -> Mapping[str, str]:
    """Section key -> canonical name, from sections.yaml plus every locale."""
    data = load_config("sections", required_keys=("columns", "aliases"))
    aliases = {}
    for column in data["columns"].values():
        for name in column:
            aliases[section_key(name)] = str(name)
    for label, canonical in data["aliases"].items():
        aliases[section_key(str(label))] = str(canonical)

    locales = _locale_tables()
    for table in locales.values():
        for label, canonical in (table.get("section_headers") or {}).items():
            aliases.setdefault(section_key(str(label)), str(canonical))
    return MappingProxyType(aliases)


def known_section_keys() -> FrozenSet[str]:
    """Every section key that names a recognized section in any language."""
    return frozenset(section_aliases().keys())
