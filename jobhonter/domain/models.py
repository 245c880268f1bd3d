"""Core domain models for search requests, candidates and scored results.

This module defines the data structures shared by every stage of discovery:
- SearchMode: precision/recall tier selected by the user
- SearchRequest: one user query, read-only while it executes
- CandidateItem: a raw posting as returned by a source fetcher
- ScoredItem: the engine's verdict on an accepted candidate

All models are frozen; the engine derives new objects instead of mutating.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from jobhonter.utils.timestamps import ensure_utc

from .exceptions import InvalidRequestError


class SearchMode(str, Enum):
    """Matching permissiveness, from most precise to highest recall."""

    STRICT = "strict"
    MODERATE = "moderate"
    LOOSE = "loose"


def _collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


class SearchRequest(BaseModel):
    """A single user query.

    Keywords keep their insertion order and original casing for reporting;
    matching always works on the lower-cased phrase. Duplicate keywords
    (case-insensitive) are dropped, first occurrence wins.
    """

    keywords: Tuple[str, ...] = Field(..., min_length=1, description="Keyword phrases")
    mode: SearchMode = Field(SearchMode.MODERATE, description="Matching tier")
    location: Optional[str] = Field(None, description="Requested location, if any")
    remote_only: bool = Field(False, description="Reject items without a remote signal")
    max_age_days: int = Field(7, gt=0, description="Maximum candidate age in days")
    limit: int = Field(50, gt=0, description="Maximum number of items returned")

    model_config = {"frozen": True}

    @field_validator("keywords", mode="before")
    @classmethod
    def normalize_keywords(cls, v: Any) -> Tuple[str, ...]:
        """Strip, collapse whitespace, drop blanks and case-insensitive duplicates."""
        if isinstance(v, str):
            v = [v]
        cleaned: List[str] = []
        seen = set()
        for keyword in v or []:
            if not isinstance(keyword, str):
                raise ValueError(f"Keyword must be a string, got {type(keyword).__name__}")
            phrase = _collapse_whitespace(keyword)
            if not phrase or phrase.lower() in seen:
                continue
            seen.add(phrase.lower())
            cleaned.append(phrase)
        return tuple(cleaned)

    @field_validator("location")
    @classmethod
    def strip_location(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = _collapse_whitespace(v)
        return stripped or None

    @classmethod
    def build(
        cls,
        keywords: Iterable[str],
        mode: Any = SearchMode.MODERATE,
        location: Optional[str] = None,
        remote_only: bool = False,
        max_age_days: int = 7,
        limit: int = 50,
    ) -> "SearchRequest":
        """Build a validated request.

        Raises:
            InvalidRequestError: On an empty keyword set, a non-positive limit
                or max_age_days, or an unknown mode
        """
        try:
            return cls(
                keywords=tuple(keywords) if not isinstance(keywords, str) else (keywords,),
                mode=mode,
                location=location,
                remote_only=remote_only,
                max_age_days=max_age_days,
                limit=limit,
            )
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field_path = ".".join(str(loc) for loc in error["loc"]) or "request"
                errors.append(f"{field_path}: {error['msg']}")
            raise InvalidRequestError("Invalid search request", errors=errors) from e


class CandidateItem(BaseModel):
    """A raw posting from one source, before relevance evaluation.

    ``id`` is unique within ``source_name``. When ``stable_id`` is True the
    source guarantees the id refers to the same posting across queries, so
    it can be used for cross-query deduplication.
    """

    id: str = Field(..., min_length=1, description="Source-scoped identifier")
    title: str = Field("", description="Posting title")
    body: str = Field("", description="Free-text body")
    source_name: str = Field(..., min_length=1, description="Name of the producing source")
    created_at: Optional[datetime] = Field(None, description="When the posting was created (UTC)")
    upvote_count: Optional[int] = Field(None, description="Community upvotes, if any")
    comment_count: Optional[int] = Field(None, description="Number of comments, if any")
    source_url: str = Field("", description="Link back to the posting")
    stable_id: bool = Field(True, description="Whether the id is stable across queries")

    model_config = {"frozen": True}

    @field_validator("id", "source_name", mode="before")
    @classmethod
    def strip_identifiers(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("title", "body", "source_url", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Missing text fields become empty strings instead of failing."""
        if v is None:
            return ""
        return str(v)

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @property
    def dedup_id(self) -> str:
        """Globally unique id, ``source_name:id``."""
        return f"{self.source_name}:{self.id}"


class ScoredItem(BaseModel):
    """An accepted candidate with its relevance verdict."""

    candidate: CandidateItem
    relevance_score: float = Field(..., ge=0.0, le=1.0)
    matched_mode: SearchMode
    is_remote: bool
    location_match: Optional[bool] = Field(
        None, description="None when no location was requested or the item is remote"
    )
    accepted_at: datetime
    matched_keywords: Tuple[str, ...] = Field(default_factory=tuple)
    salary: Optional[str] = None
    job_type: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("accepted_at")
    @classmethod
    def accepted_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def sort_key(self) -> Tuple[float, float, str]:
        """Ordering key: score desc, created_at desc, then dedup id for stability."""
        created = self.candidate.created_at
        created_ts = created.timestamp() if created else float("-inf")
        return (-self.relevance_score, -created_ts, self.candidate.dedup_id)
