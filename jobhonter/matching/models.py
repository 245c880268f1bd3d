"""Data models for keyword matching and relevance scoring."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, Optional, Tuple

from jobhonter.domain.models import SearchMode


@dataclass(frozen=True)
class KeywordAnalysis:
    """Mode-independent evidence for one keyword against one corpus.

    Attributes:
        keyword: Lower-cased keyword phrase
        exact_phrase: True if the whole phrase is a substring of the corpus
        qualifying_words: Words longer than two characters, in keyword order
        direct_words: Qualifying words found verbatim in the corpus
        synonym_hits: Word -> first registered synonym found in the corpus
        category_hits: Word -> first broad-category term found in the corpus
    """

    keyword: str
    exact_phrase: bool
    qualifying_words: Tuple[str, ...]
    direct_words: FrozenSet[str] = field(default_factory=frozenset)
    synonym_hits: Dict[str, str] = field(default_factory=dict)
    category_hits: Dict[str, str] = field(default_factory=dict)

    @property
    def has_qualifying_words(self) -> bool:
        return bool(self.qualifying_words)

    @property
    def satisfied_words(self) -> FrozenSet[str]:
        """Words satisfied directly or through a synonym."""
        return self.direct_words | frozenset(self.synonym_hits)

    @property
    def coverage(self) -> float:
        """Fraction of qualifying words satisfied directly or by synonym.

        A keyword without qualifying words is all-or-nothing on its phrase.
        """
        if not self.qualifying_words:
            return 1.0 if self.exact_phrase else 0.0
        satisfied = self.satisfied_words
        hits = sum(1 for word in self.qualifying_words if word in satisfied)
        return hits / len(self.qualifying_words)


@dataclass(frozen=True)
class KeywordMatch:
    """Boolean verdict of one matching mode for one keyword."""

    analysis: KeywordAnalysis
    mode: SearchMode
    matched: bool

    @property
    def keyword(self) -> str:
        return self.analysis.keyword


@dataclass(frozen=True)
class ScoringSignals:
    """Auxiliary, keyword-independent inputs to the relevance score.

    Attributes:
        remote_requested: The request asked for remote work
        is_remote: The item carries a remote signal
        has_compensation: A compensation figure was found in the text
        created_at: When the item was created (None if unknown)
        reference_time: Point in time the item's age is measured against
    """

    remote_requested: bool = False
    is_remote: bool = False
    has_compensation: bool = False
    created_at: Optional[datetime] = None
    reference_time: Optional[datetime] = None


@dataclass(frozen=True)
class RelevanceBreakdown:
    """Contributions that make up a relevance score.

    ``total`` is the clamped sum and is the value compared against mode
    thresholds; the parts are kept for logging and debugging.
    """

    coverage: float
    coverage_score: float
    phrase_bonus: float = 0.0
    remote_bonus: float = 0.0
    salary_bonus: float = 0.0
    freshness_bonus: float = 0.0

    @property
    def total(self) -> float:
        raw = (
            self.coverage_score
            + self.phrase_bonus
            + self.remote_bonus
            + self.salary_bonus
            + self.freshness_bonus
        )
        return round(min(1.0, max(0.0, raw)), 6)

    def as_dict(self) -> Dict[str, float]:
        return {
            "coverage": round(self.coverage, 4),
            "coverage_score": round(self.coverage_score, 4),
            "phrase_bonus": self.phrase_bonus,
            "remote_bonus": self.remote_bonus,
            "salary_bonus": self.salary_bonus,
            "freshness_bonus": self.freshness_bonus,
            "total": self.total,
        }
