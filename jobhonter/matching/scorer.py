"""Relevance scoring for candidate items.

The score is a weighted sum clamped to [0, 1]:
1. Coverage of the best-covered keyword (dominant share)
2. Exact-phrase bonus when any keyword phrase appears verbatim
3. Flat bonuses for remote (when requested), compensation and freshness

Scoring never reads the clock; freshness is measured against the reference
time carried in ScoringSignals, so identical inputs give identical scores.
"""

from typing import Iterable, Optional, Sequence, Tuple

from jobhonter.config.models import ScoringWeights
from jobhonter.utils.timestamps import age_in_hours

from .engine import ModeMatcher
from .models import KeywordAnalysis, RelevanceBreakdown, ScoringSignals


class RelevanceScorer:
    """Turns keyword evidence and auxiliary signals into a score.

    Monotonic in keyword coverage: adding text that satisfies another
    qualifying word can only raise or hold the coverage term, and no
    component is ever subtracted.
    """

    def __init__(
        self,
        matcher: Optional[ModeMatcher] = None,
        weights: Optional[ScoringWeights] = None,
    ):
        """Initialize RelevanceScorer.

        Args:
            matcher: ModeMatcher used to analyze keywords (defaults to one
                over the built-in vocabulary)
            weights: Score contributions (defaults to ScoringWeights())
        """
        self.matcher = matcher or ModeMatcher()
        self.weights = weights or ScoringWeights()
        self._freshness_window_hours = self.weights.freshness_window_hours

    def score(
        self,
        corpus: str,
        keywords: Iterable[str],
        signals: Optional[ScoringSignals] = None,
    ) -> RelevanceBreakdown:
        """Analyze keywords against corpus and score the result."""
        analyses = [self.matcher.analyze(corpus, keyword) for keyword in keywords]
        return self.score_analyses(analyses, signals)

    def score_analyses(
        self,
        analyses: Sequence[KeywordAnalysis],
        signals: Optional[ScoringSignals] = None,
    ) -> RelevanceBreakdown:
        """Score previously collected keyword evidence.

        Args:
            analyses: One KeywordAnalysis per request keyword
            signals: Auxiliary signals (defaults to none present)

        Returns:
            RelevanceBreakdown whose ``total`` is in [0, 1]
        """
        signals = signals or ScoringSignals()
        weights = self.weights

        coverage = max((analysis.coverage for analysis in analyses), default=0.0)
        phrase_present = any(analysis.exact_phrase for analysis in analyses)

        breakdown = RelevanceBreakdown(
            coverage=coverage,
            coverage_score=weights.coverage_weight * coverage,
            phrase_bonus=weights.phrase_bonus if phrase_present else 0.0,
            remote_bonus=(
                weights.remote_bonus if signals.remote_requested and signals.is_remote else 0.0
            ),
            salary_bonus=weights.salary_bonus if signals.has_compensation else 0.0,
            freshness_bonus=weights.freshness_bonus if self._is_fresh(signals) else 0.0,
        )
        return breakdown

    def _is_fresh(self, signals: ScoringSignals) -> bool:
        if signals.reference_time is None:
            return False
        age = age_in_hours(signals.created_at, signals.reference_time)
        if age is None:
            return False
        # Small negative ages come from clock skew between source and host.
        return age < self._freshness_window_hours

    def matched_keywords(
        self, keywords: Sequence[str], analyses: Sequence[KeywordAnalysis], mode
    ) -> Tuple[str, ...]:
        """Keywords, as given, whose mode verdict is true, in request order."""
        return tuple(
            keyword
            for keyword, analysis in zip(keywords, analyses)
            if self.matcher.decide(analysis, mode).matched
        )
