"""Data models for discovery execution tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from jobhonter.domain.models import ScoredItem


class DiscoveryState(str, Enum):
    """Stages of one discovery request, in execution order.

    DONE and PARTIAL_FAILURE are terminal. A request where every source
    failed still ends in DONE, with empty items and the error summary.
    """

    PENDING = "pending"
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    SCORING = "scoring"
    FILTERING = "filtering"
    DEDUPING = "deduping"
    DONE = "done"
    PARTIAL_FAILURE = "partial_failure"

    @property
    def is_terminal(self) -> bool:
        return self in (DiscoveryState.DONE, DiscoveryState.PARTIAL_FAILURE)


class SourceStatus(str, Enum):
    """Outcome of one source's fetch."""

    PENDING = "pending"
    OK = "ok"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


@dataclass
class SourceRunStats:
    """
    Statistics for a single source within a discovery request.

    Attributes:
        source_name: Name of the source
        status: Fetch outcome
        fetched_count: Candidates returned by the fetcher
        kept_count: Candidates left after the age filter
        accepted_count: Candidates accepted before deduplication
        duration_seconds: Time spent in the fetch (0 if never started)
        error_message: Error recorded for the source, if any
    """

    source_name: str
    status: SourceStatus = SourceStatus.PENDING
    fetched_count: int = 0
    kept_count: int = 0
    accepted_count: int = 0
    duration_seconds: float = 0.0
    error_message: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status in (SourceStatus.FAILED, SourceStatus.TIMED_OUT, SourceStatus.CANCELLED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_name": self.source_name,
            "status": self.status.value,
            "fetched_count": self.fetched_count,
            "kept_count": self.kept_count,
            "accepted_count": self.accepted_count,
            "duration_seconds": round(self.duration_seconds, 3),
            "error_message": self.error_message,
        }


@dataclass(frozen=True)
class DiscoveryResult:
    """
    Outcome of one discovery request.

    Attributes:
        items: Accepted items, score desc then created_at desc, at most limit
        total_candidates_seen: Candidates returned by all sources combined
        per_source_errors: Source name -> error message, failed sources only
        state: Terminal state of the request
        source_stats: Per-source statistics in source priority order
        cancelled: Whether cancellation was requested during the run
        request_id: Identifier attached to every log line of the request
        started_at: Reference time of the request (UTC)
        transitions: Every state the request passed through, in order
    """

    items: List[ScoredItem] = field(default_factory=list)
    total_candidates_seen: int = 0
    per_source_errors: Dict[str, str] = field(default_factory=dict)
    state: DiscoveryState = DiscoveryState.DONE
    source_stats: List[SourceRunStats] = field(default_factory=list)
    cancelled: bool = False
    request_id: str = ""
    started_at: Optional[datetime] = None
    transitions: Tuple[DiscoveryState, ...] = ()

    @property
    def all_sources_failed(self) -> bool:
        """True when there were sources and none of them succeeded."""
        return bool(self.source_stats) and all(s.failed for s in self.source_stats)

    @property
    def had_errors(self) -> bool:
        return bool(self.per_source_errors)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation used by the CLI."""
        return {
            "request_id": self.request_id,
            "state": self.state.value,
            "cancelled": self.cancelled,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "total_candidates_seen": self.total_candidates_seen,
            "per_source_errors": dict(self.per_source_errors),
            "source_stats": [s.to_dict() for s in self.source_stats],
            "items": [item.model_dump(mode="json") for item in self.items],
        }
