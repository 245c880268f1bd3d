"""Discovery orchestration across job sources."""

from jobhonter.domain.exceptions import InvalidRequestError
from jobhonter.utils.cancellation import CancellationToken

from .models import DiscoveryResult, DiscoveryState, SourceRunStats, SourceStatus
from .orchestrator import CANCELLED_BEFORE_FETCH, DiscoveryOrchestrator

__all__ = [
    "DiscoveryOrchestrator",
    "DiscoveryResult",
    "DiscoveryState",
    "SourceRunStats",
    "SourceStatus",
    "CancellationToken",
    "InvalidRequestError",
    "CANCELLED_BEFORE_FETCH",
]
