"""Mode threshold policy."""

from typing import Optional

from jobhonter.config.models import ModeThresholds
from jobhonter.domain.models import SearchMode


class ThresholdPolicy:
    """Maps a search mode to its minimum acceptance score.

    Acceptance needs both a score at or above the mode threshold and a
    positive mode verdict for at least one keyword. A high score built from
    auxiliary bonuses alone never admits a keyword-irrelevant item.
    """

    def __init__(self, thresholds: Optional[ModeThresholds] = None):
        self.thresholds = thresholds or ModeThresholds()

    def threshold(self, mode: SearchMode) -> float:
        return self.thresholds.for_mode(mode)

    def accepts(self, score: float, mode: SearchMode, keyword_matched: bool) -> bool:
        """Return True iff keyword_matched and score >= threshold(mode)."""
        if not keyword_matched:
            return False
        return score >= self.threshold(mode)

    def __repr__(self) -> str:
        t = self.thresholds
        return f"<ThresholdPolicy strict={t.strict} moderate={t.moderate} loose={t.loose}>"
