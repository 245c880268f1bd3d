"""Read-only vocabulary table used for synonym and category expansion."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, Mapping, Optional


def _normalize_terms(terms: Optional[Iterable[str]]) -> FrozenSet[str]:
    return frozenset(t.strip().lower() for t in terms or () if t and t.strip())


@dataclass(frozen=True)
class VocabularyEntry:
    """Expansion sets registered for one base term.

    Attributes:
        synonyms: Terms treated as equivalent to the base term (moderate tier)
        broad_category_terms: Loosely related terms (loose tier only)
    """

    synonyms: FrozenSet[str] = field(default_factory=frozenset)
    broad_category_terms: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def of(
        cls,
        synonyms: Optional[Iterable[str]] = None,
        categories: Optional[Iterable[str]] = None,
    ) -> "VocabularyEntry":
        return cls(
            synonyms=_normalize_terms(synonyms),
            broad_category_terms=_normalize_terms(categories),
        )

    def merged_with(self, other: "VocabularyEntry") -> "VocabularyEntry":
        return VocabularyEntry(
            synonyms=self.synonyms | other.synonyms,
            broad_category_terms=self.broad_category_terms | other.broad_category_terms,
        )


EMPTY_ENTRY = VocabularyEntry()


class VocabularyTable(Mapping[str, VocabularyEntry]):
    """Immutable mapping of lower-cased base term to VocabularyEntry.

    Built once at startup and shared by every matcher and scorer; there is
    no API to modify a table after construction.
    """

    def __init__(self, entries: Optional[Mapping[str, VocabularyEntry]] = None):
        normalized: Dict[str, VocabularyEntry] = {}
        for term, entry in (entries or {}).items():
            key = term.strip().lower()
            if not key:
                continue
            if key in normalized:
                entry = normalized[key].merged_with(entry)
            normalized[key] = entry
        self._entries = MappingProxyType(normalized)

    def __getitem__(self, term: str) -> VocabularyEntry:
        return self._entries[term.strip().lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, term: object) -> bool:
        return isinstance(term, str) and term.strip().lower() in self._entries

    def lookup(self, term: str) -> VocabularyEntry:
        """Entry for term, or an empty entry when the term is not registered."""
        return self._entries.get(term.strip().lower(), EMPTY_ENTRY)

    def layered(self, overrides: Mapping[str, VocabularyEntry]) -> "VocabularyTable":
        """New table with overrides merged on top of this one."""
        combined: Dict[str, VocabularyEntry] = dict(self._entries)
        for term, entry in overrides.items():
            key = term.strip().lower()
            combined[key] = combined[key].merged_with(entry) if key in combined else entry
        return VocabularyTable(combined)

    def __repr__(self) -> str:
        return f"<VocabularyTable terms={len(self)}>"
