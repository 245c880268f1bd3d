"""Synonym and broad-category expansion of single keyword words."""

from typing import FrozenSet, Optional, Tuple

from .defaults import DEFAULT_VOCABULARY
from .models import VocabularyTable


class VocabularyExpander:
    """Looks up expansion sets for a word in a VocabularyTable.

    Lookups are exact and case-insensitive. An unregistered word expands to
    empty sets; that is a normal outcome, not an error.
    """

    def __init__(self, vocabulary: Optional[VocabularyTable] = None):
        self.vocabulary = vocabulary if vocabulary is not None else DEFAULT_VOCABULARY

    def expand(self, word: str) -> Tuple[FrozenSet[str], FrozenSet[str]]:
        """Return (synonyms, broad_category_terms) for word."""
        entry = self.vocabulary.lookup(word)
        return entry.synonyms, entry.broad_category_terms

    @staticmethod
    def first_present(terms: FrozenSet[str], corpus: str) -> Optional[str]:
        """First term (in sorted order) that occurs as a substring of corpus.

        Sorting keeps the reported hit deterministic across runs.
        """
        for term in sorted(terms):
            if term in corpus:
                return term
        return None
