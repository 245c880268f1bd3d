"""Three-tier keyword matching.

Every mode works from the same per-keyword evidence (``KeywordAnalysis``):
- strict: the exact lower-cased phrase is a substring of the corpus
- moderate: every qualifying word is present verbatim or via a synonym
- loose: any qualifying word is present verbatim, via a synonym, or via a
  broad-category term

A keyword with no qualifying words (every word two characters or shorter)
falls back to the strict phrase test in every mode.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from jobhonter.domain.models import SearchMode
from jobhonter.logging import get_logger
from jobhonter.normalization.text import normalize_keyword, qualifying_words
from jobhonter.vocabulary.expander import VocabularyExpander
from jobhonter.vocabulary.models import VocabularyTable

from .models import KeywordAnalysis, KeywordMatch

logger = get_logger(__name__, component="matching")


def _strict(analysis: KeywordAnalysis) -> bool:
    return analysis.exact_phrase


def _moderate(analysis: KeywordAnalysis) -> bool:
    if not analysis.has_qualifying_words:
        return analysis.exact_phrase
    satisfied = analysis.satisfied_words
    return all(word in satisfied for word in analysis.qualifying_words)


def _loose(analysis: KeywordAnalysis) -> bool:
    if not analysis.has_qualifying_words:
        return analysis.exact_phrase
    return any(
        word in analysis.direct_words
        or word in analysis.synonym_hits
        or word in analysis.category_hits
        for word in analysis.qualifying_words
    )


_STRATEGIES: Dict[SearchMode, Callable[[KeywordAnalysis], bool]] = {
    SearchMode.STRICT: _strict,
    SearchMode.MODERATE: _moderate,
    SearchMode.LOOSE: _loose,
}

_missing_modes = set(SearchMode) - set(_STRATEGIES)
if _missing_modes:
    raise RuntimeError(f"No matching strategy for modes: {sorted(m.value for m in _missing_modes)}")


class ModeMatcher:
    """Decides per keyword whether a corpus matches under a search mode.

    The matcher is stateless apart from its read-only vocabulary, so one
    instance is safely shared across threads and requests.
    """

    def __init__(
        self,
        vocabulary: Optional[VocabularyTable] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize ModeMatcher.

        Args:
            vocabulary: Table used for synonym/category expansion
                (defaults to the built-in table)
            logger_instance: Optional logger (defaults to module logger)
        """
        self.expander = VocabularyExpander(vocabulary)
        self.logger = logger_instance or logger

    def analyze(self, corpus: str, keyword: str) -> KeywordAnalysis:
        """Collect direct, synonym and category evidence for a keyword.

        Args:
            corpus: Lower-cased search corpus (see build_corpus)
            keyword: Keyword phrase in any case

        Returns:
            KeywordAnalysis for the keyword
        """
        phrase = normalize_keyword(keyword)
        words = qualifying_words(phrase)

        direct = set()
        synonym_hits: Dict[str, str] = {}
        category_hits: Dict[str, str] = {}

        for word in words:
            if word in corpus:
                direct.add(word)
            synonyms, categories = self.expander.expand(word)
            synonym = self.expander.first_present(synonyms, corpus)
            if synonym is not None:
                synonym_hits[word] = synonym
            category = self.expander.first_present(categories, corpus)
            if category is not None:
                category_hits[word] = category

        return KeywordAnalysis(
            keyword=phrase,
            exact_phrase=bool(phrase) and phrase in corpus,
            qualifying_words=words,
            direct_words=frozenset(direct),
            synonym_hits=synonym_hits,
            category_hits=category_hits,
        )

    def decide(self, analysis: KeywordAnalysis, mode: SearchMode) -> KeywordMatch:
        """Apply the strategy for mode to previously collected evidence."""
        mode = SearchMode(mode)
        return KeywordMatch(analysis=analysis, mode=mode, matched=_STRATEGIES[mode](analysis))

    def evaluate(self, corpus: str, keyword: str, mode: SearchMode) -> KeywordMatch:
        """Analyze a keyword and decide it under mode."""
        return self.decide(self.analyze(corpus, keyword), mode)

    def matches(self, corpus: str, keyword: str, mode: SearchMode) -> bool:
        """Boolean shortcut for evaluate()."""
        return self.evaluate(corpus, keyword, mode).matched

    def evaluate_all(
        self, corpus: str, keywords: Iterable[str], mode: SearchMode
    ) -> List[KeywordMatch]:
        """Evaluate every keyword, preserving keyword order."""
        results = [self.evaluate(corpus, keyword, mode) for keyword in keywords]

        self.logger.debug(
            "Keywords evaluated",
            extra={
                "event": "matching.keywords.evaluated",
                "mode": SearchMode(mode).value,
                "keyword_count": len(results),
                "matched_count": sum(1 for r in results if r.matched),
            },
        )
        return results
