"""
Section-name to column lookup table.

Built from sections.yaml (canonical names per column, aliases, default
column) plus the localized labels in locales.yaml, so placement does not
depend on the document language.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, Mapping

from scribe.contexts.intake.vocabulary import section_aliases, section_key
from scribe.contexts.structuring.document_structures import Column
from scribe.utils.config_loader import InvalidConfigError, load_config

FALLBACK_SECTION_NAME = "section"


@dataclass(frozen=True)
class SectionTable:
    """
    Canonical section names and their columns.

    Example:
        >>> table = get_section_table()
        >>> table.canonical_name("WORK EXPERIENCE:")
        'experience'
        >>> table.column_for("experience")
        <Column.SECONDARY: 'secondary'>
    """

    primary: FrozenSet[str]
    secondary: FrozenSet[str]
    default_column: Column
    aliases: Mapping[str, str]

    def canonical_name(self, header_text: str) -> str:
        """Header text -> canonical section name; unknown headers keep their key."""
        key = section_key(header_text)
        if not key:
            return FALLBACK_SECTION_NAME
        return self.aliases.get(key, key)

    def column_for(self, name: str) -> Column:
        if name in self.primary:
            return Column.PRIMARY
        if name in self.secondary:
            return Column.SECONDARY
        return self.default_column


@lru_cache(maxsize=1)
def get_section_table() -> SectionTable:
    """
    Load the shared section table.

    Raises:
        InvalidConfigError: If sections.yaml is malformed
    """
    data = load_config("sections", required_keys=("columns", "aliases"))
    columns = data["columns"]
    try:
        default_column = Column(data.get("default_column", Column.SECONDARY.value))
    except ValueError as e:
        raise InvalidConfigError(f"sections.yaml: invalid default_column: {e}") from e
    if default_column == Column.UNPLACED:
        raise InvalidConfigError("sections.yaml: default_column must be primary or secondary")

    return SectionTable(
        primary=frozenset(str(name) for name in columns.get("primary", [])),
        secondary=frozenset(str(name) for name in columns.get("secondary", [])),
        default_column=default_column,
        aliases=section_aliases(),
    )
