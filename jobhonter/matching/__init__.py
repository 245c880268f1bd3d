"""Keyword matching, relevance scoring and acceptance policy."""

from .engine import ModeMatcher
from .models import KeywordAnalysis, KeywordMatch, RelevanceBreakdown, ScoringSignals
from .policy import ThresholdPolicy
from .scorer import RelevanceScorer

__all__ = [
    "ModeMatcher",
    "KeywordAnalysis",
    "KeywordMatch",
    "RelevanceBreakdown",
    "ScoringSignals",
    "RelevanceScorer",
    "ThresholdPolicy",
]
