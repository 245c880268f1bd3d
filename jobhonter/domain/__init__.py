"""Domain models for discovery requests and results."""

from .exceptions import InvalidRequestError
from .models import CandidateItem, ScoredItem, SearchMode, SearchRequest

__all__ = ["CandidateItem", "ScoredItem", "SearchMode", "SearchRequest", "InvalidRequestError"]
