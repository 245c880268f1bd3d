"""Discovery orchestration: fetch, normalize, score, filter and deduplicate.

One call to ``DiscoveryOrchestrator.discover`` runs the whole request:

    PENDING -> FETCHING -> NORMALIZING -> SCORING -> FILTERING -> DEDUPING
            -> DONE | PARTIAL_FAILURE

Sources are fetched concurrently, each bounded by its own timeout, and
their results are merged in the order the sources were given so that
deduplication and ordering never depend on which source answered first.
"""

import inspect
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple
from uuid import uuid4

from jobhonter.classification.compensation import detect_job_type, extract_salary
from jobhonter.classification.location import LocationClassifier
from jobhonter.config.models import AppConfig
from jobhonter.dedup.deduplicator import Deduplicator
from jobhonter.domain.exceptions import InvalidRequestError
from jobhonter.domain.models import CandidateItem, ScoredItem, SearchRequest
from jobhonter.logging import get_logger
from jobhonter.logging.context import bind_context, log_context
from jobhonter.matching.engine import ModeMatcher
from jobhonter.matching.models import RelevanceBreakdown, ScoringSignals
from jobhonter.matching.policy import ThresholdPolicy
from jobhonter.matching.scorer import RelevanceScorer
from jobhonter.normalization.text import build_corpus
from jobhonter.sources.base import SourceFetcher
from jobhonter.sources.exceptions import SourceFetchError, SourceTimeoutError
from jobhonter.utils.cancellation import CancellationToken
from jobhonter.utils.timestamps import age_in_hours, utc_now
from jobhonter.vocabulary.loader import load_vocabulary
from jobhonter.vocabulary.models import VocabularyTable

from .models import DiscoveryResult, DiscoveryState, SourceRunStats, SourceStatus

logger = get_logger(__name__, component="discovery")

DEFAULT_SOURCE_TIMEOUT = 20.0
CANCELLED_BEFORE_FETCH = "cancelled before fetch"

# Keywords passed to fetch only when its signature accepts them.
OPTIONAL_FETCH_ARGS = ("mode", "cancellation")


@dataclass
class _Evaluation:
    """Intermediate per-candidate state between scoring and filtering."""

    candidate: CandidateItem
    corpus: str
    is_remote: bool
    breakdown: RelevanceBreakdown
    matched_keywords: Tuple[str, ...]
    salary: Optional[str]
    job_type: Optional[str]


class _StateTracker:
    """Records and logs the state sequence of one request."""

    def __init__(self) -> None:
        self.state = DiscoveryState.PENDING
        self.history: List[DiscoveryState] = [DiscoveryState.PENDING]

    def advance(self, new_state: DiscoveryState) -> None:
        previous = self.state
        self.state = new_state
        self.history.append(new_state)
        logger.debug(
            f"Discovery state {previous.value} -> {new_state.value}",
            extra={
                "event": "discovery.state.changed",
                "from_state": previous.value,
                "to_state": new_state.value,
            },
        )


def _source_name(source: SourceFetcher) -> str:
    return str(getattr(source, "name", None) or type(source).__name__)


def _optional_fetch_args(source: SourceFetcher) -> FrozenSet[str]:
    """Names from OPTIONAL_FETCH_ARGS that source.fetch can be called with."""
    try:
        parameters = inspect.signature(source.fetch).parameters.values()
    except (TypeError, ValueError):
        return frozenset()
    if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in parameters):
        return frozenset(OPTIONAL_FETCH_ARGS)
    keyword_kinds = (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
    named = {p.name for p in parameters if p.kind in keyword_kinds}
    return frozenset(name for name in OPTIONAL_FETCH_ARGS if name in named)


class DiscoveryOrchestrator:
    """
    Runs discovery requests against a set of source fetchers.

    The orchestrator holds only read-only collaborators (matcher, scorer,
    policy, classifier), so one instance can serve many requests,
    including concurrently.
    """

    def __init__(
        self,
        matcher: Optional[ModeMatcher] = None,
        scorer: Optional[RelevanceScorer] = None,
        policy: Optional[ThresholdPolicy] = None,
        classifier: Optional[LocationClassifier] = None,
        deduplicator: Optional[Deduplicator] = None,
        max_workers: int = 4,
        default_source_timeout: float = DEFAULT_SOURCE_TIMEOUT,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the orchestrator.

        Args:
            matcher: Mode matcher (defaults to built-in vocabulary)
            scorer: Relevance scorer (defaults to one sharing matcher)
            policy: Threshold policy (defaults to standard thresholds)
            classifier: Remote/location classifier (defaults to built-in terms)
            deduplicator: Deduplicator (defaults to cross-source titles)
            max_workers: Maximum concurrent source fetches
            default_source_timeout: Timeout for sources without fetch_timeout
            clock: Returns the request reference time (UTC)
        """
        self.matcher = matcher or ModeMatcher()
        self.scorer = scorer or RelevanceScorer(self.matcher)
        self.policy = policy or ThresholdPolicy()
        self.classifier = classifier or LocationClassifier()
        self.deduplicator = deduplicator or Deduplicator()
        self.max_workers = max(1, max_workers)
        self.default_source_timeout = default_source_timeout
        self.clock = clock

    @classmethod
    def from_config(
        cls, app_config: AppConfig, vocabulary: Optional[VocabularyTable] = None
    ) -> "DiscoveryOrchestrator":
        """Build an orchestrator from application configuration.

        Raises:
            ConfigurationError: If the configured vocabulary file is invalid
        """
        if vocabulary is None:
            vocabulary = load_vocabulary(app_config.vocabulary_path)
        matcher = ModeMatcher(vocabulary)
        return cls(
            matcher=matcher,
            scorer=RelevanceScorer(matcher, app_config.scoring),
            policy=ThresholdPolicy(app_config.thresholds),
            classifier=LocationClassifier(app_config.remote_terms, app_config.location_aliases),
            max_workers=app_config.advanced.max_workers,
        )

    def discover(
        self,
        request: SearchRequest,
        sources: Sequence[SourceFetcher],
        cancellation: Optional[CancellationToken] = None,
    ) -> DiscoveryResult:
        """
        Execute one discovery request.

        Args:
            request: Validated search request
            sources: Fetchers in priority order; each has ``name`` and ``fetch``
            cancellation: Optional token; once cancelled no further fetches start

        Returns:
            DiscoveryResult. Source failures are reported in
            ``per_source_errors`` and never raised.

        Raises:
            InvalidRequestError: If request is not a SearchRequest or source
                names are not unique. Raised before any fetch.
        """
        self._validate(request, sources)

        request_id = uuid4().hex[:12]
        reference_time = self.clock()
        tracker = _StateTracker()

        with log_context(request_id=request_id, mode=request.mode.value):
            logger.info(
                "Discovery request started",
                extra={
                    "event": "discovery.request.started",
                    "keywords": list(request.keywords),
                    "source_count": len(sources),
                    "remote_only": request.remote_only,
                    "location": request.location,
                    "limit": request.limit,
                },
            )

            tracker.advance(DiscoveryState.FETCHING)
            fetched, stats = self._fetch_all(request, sources, cancellation)
            errors = {s.source_name: s.error_message for s in stats if s.failed and s.error_message}
            total_seen = sum(s.fetched_count for s in stats)

            tracker.advance(DiscoveryState.NORMALIZING)
            stats_by_name = {s.source_name: s for s in stats}
            normalized = self._normalize(request, fetched, stats_by_name, reference_time)

            tracker.advance(DiscoveryState.SCORING)
            evaluations = self._score(request, normalized, reference_time)

            tracker.advance(DiscoveryState.FILTERING)
            accepted = self._filter(request, evaluations, stats_by_name, reference_time)

            tracker.advance(DiscoveryState.DEDUPING)
            unique = self.deduplicator.deduplicate(accepted)
            items = sorted(unique, key=ScoredItem.sort_key)[: request.limit]

            failed_count = sum(1 for s in stats if s.failed)
            if 0 < failed_count < len(stats):
                tracker.advance(DiscoveryState.PARTIAL_FAILURE)
            else:
                tracker.advance(DiscoveryState.DONE)

            result = DiscoveryResult(
                items=items,
                total_candidates_seen=total_seen,
                per_source_errors=errors,
                state=tracker.state,
                source_stats=stats,
                cancelled=cancellation is not None and cancellation.is_cancelled,
                request_id=request_id,
                started_at=reference_time,
                transitions=tuple(tracker.history),
            )

            logger.info(
                "Discovery request completed",
                extra={
                    "event": "discovery.request.completed",
                    "state": result.state.value,
                    "total_candidates_seen": total_seen,
                    "accepted": len(accepted),
                    "returned": len(items),
                    "failed_sources": sorted(errors),
                    "cancelled": result.cancelled,
                },
            )
            return result

    def _validate(self, request: SearchRequest, sources: Sequence[SourceFetcher]) -> None:
        if not isinstance(request, SearchRequest):
            raise InvalidRequestError(
                f"Expected SearchRequest, got {type(request).__name__}",
                errors=["Build requests with SearchRequest.build(...)"],
            )
        names = [_source_name(source) for source in sources]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise InvalidRequestError("Source names must be unique", errors=[f"duplicate: {n}" for n in duplicates])

    def _fetch_one(
        self,
        source: SourceFetcher,
        request: SearchRequest,
        cancellation: Optional[CancellationToken],
        stats: SourceRunStats,
    ) -> List[CandidateItem]:
        """Run one fetcher inside a worker thread."""
        with log_context(source_name=stats.source_name):
            if cancellation is not None and cancellation.is_cancelled:
                raise SourceFetchError(CANCELLED_BEFORE_FETCH, source_name=stats.source_name)

            started = time.monotonic()
            try:
                optional: Dict[str, Any] = {"mode": request.mode, "cancellation": cancellation}
                accepted = _optional_fetch_args(source)
                items = source.fetch(
                    keywords=request.keywords,
                    location=request.location,
                    max_age_days=request.max_age_days,
                    **{name: value for name, value in optional.items() if name in accepted},
                )
            finally:
                stats.duration_seconds = time.monotonic() - started

            if items is None:
                return []
            return list(items)

    def _fetch_all(
        self,
        request: SearchRequest,
        sources: Sequence[SourceFetcher],
        cancellation: Optional[CancellationToken],
    ) -> Tuple[Dict[str, List[CandidateItem]], List[SourceRunStats]]:
        """Fetch every source concurrently and join in priority order.

        A source's timeout runs from its submission. Timed-out fetches are
        left running in their worker; the executor is shut down without
        waiting for them.
        """
        stats = [SourceRunStats(source_name=_source_name(source)) for source in sources]
        fetched: Dict[str, List[CandidateItem]] = {}
        if not sources:
            return fetched, stats

        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(sources)),
            thread_name_prefix="jobhonter-fetch",
        )
        submitted: List[Tuple[SourceFetcher, SourceRunStats, Optional[Future], float]] = []
        try:
            for source, source_stats in zip(sources, stats):
                if cancellation is not None and cancellation.is_cancelled:
                    submitted.append((source, source_stats, None, 0.0))
                    continue
                future = executor.submit(
                    bind_context(self._fetch_one), source, request, cancellation, source_stats
                )
                submitted.append((source, source_stats, future, time.monotonic()))

            for source, source_stats, future, submitted_at in submitted:
                name = source_stats.source_name
                with log_context(source_name=name):
                    if future is None:
                        self._record_failure(source_stats, SourceStatus.CANCELLED, CANCELLED_BEFORE_FETCH)
                        continue

                    timeout = getattr(source, "fetch_timeout", None) or self.default_source_timeout
                    remaining = max(0.0, timeout - (time.monotonic() - submitted_at))
                    try:
                        items = future.result(timeout=remaining)
                    except FutureTimeoutError:
                        future.cancel()
                        error = SourceTimeoutError(f"Fetch timed out after {timeout:g} seconds", source_name=name)
                        self._record_failure(source_stats, SourceStatus.TIMED_OUT, str(error))
                        continue
                    except SourceFetchError as e:
                        status = SourceStatus.CANCELLED if str(e) == CANCELLED_BEFORE_FETCH else SourceStatus.FAILED
                        self._record_failure(source_stats, status, str(e), exc=e)
                        continue
                    except Exception as e:
                        error = SourceFetchError(f"Unexpected {type(e).__name__}: {e}", source_name=name)
                        self._record_failure(source_stats, SourceStatus.FAILED, str(error), exc=e)
                        continue

                    source_stats.status = SourceStatus.OK
                    source_stats.fetched_count = len(items)
                    fetched[name] = items
                    logger.info(
                        f"Fetched {len(items)} candidates from {name}",
                        extra={
                            "event": "source.fetch.succeeded",
                            "count": len(items),
                            "duration_seconds": round(source_stats.duration_seconds, 3),
                        },
                    )
        finally:
            executor.shutdown(wait=False)

        return fetched, stats

    def _record_failure(
        self,
        stats: SourceRunStats,
        status: SourceStatus,
        message: str,
        exc: Optional[BaseException] = None,
    ) -> None:
        stats.status = status
        stats.error_message = message
        logger.error(
            f"Source {stats.source_name} failed: {message}",
            extra={
                "event": "source.fetch.failed",
                "status": status.value,
                "error_type": type(exc).__name__ if exc else status.value,
                "error": message,
            },
            exc_info=exc if exc is not None and status == SourceStatus.FAILED else None,
        )

    def _normalize(
        self,
        request: SearchRequest,
        fetched: Dict[str, List[CandidateItem]],
        stats_by_name: Dict[str, SourceRunStats],
        reference_time: datetime,
    ) -> List[Tuple[str, CandidateItem, str]]:
        """Build corpora in source order, dropping candidates past max_age_days."""
        max_age_hours = request.max_age_days * 24
        normalized: List[Tuple[str, CandidateItem, str]] = []

        for source_name, items in fetched.items():
            kept = 0
            for candidate in items:
                if not isinstance(candidate, CandidateItem):
                    logger.warning(
                        "Skipping non-candidate item from source",
                        extra={"source_name": source_name, "item_type": type(candidate).__name__},
                    )
                    continue
                age = age_in_hours(candidate.created_at, reference_time)
                if age is not None and age > max_age_hours:
                    continue
                normalized.append((source_name, candidate, build_corpus(candidate.title, candidate.body)))
                kept += 1
            stats_by_name[source_name].kept_count = kept

        return normalized

    def _score(
        self,
        request: SearchRequest,
        normalized: List[Tuple[str, CandidateItem, str]],
        reference_time: datetime,
    ) -> List[Tuple[str, _Evaluation]]:
        remote_requested = self.classifier.remote_requested(request.remote_only, request.location)
        evaluations: List[Tuple[str, _Evaluation]] = []

        for source_name, candidate, corpus in normalized:
            try:
                is_remote = self.classifier.is_remote(corpus)
                if request.remote_only and not is_remote:
                    continue

                analyses = [self.matcher.analyze(corpus, keyword) for keyword in request.keywords]
                matched = self.scorer.matched_keywords(request.keywords, analyses, request.mode)
                raw_text = f"{candidate.title} {candidate.body}"
                salary = extract_salary(raw_text)
                signals = ScoringSignals(
                    remote_requested=remote_requested,
                    is_remote=is_remote,
                    has_compensation=salary is not None,
                    created_at=candidate.created_at,
                    reference_time=reference_time,
                )
                evaluations.append(
                    (
                        source_name,
                        _Evaluation(
                            candidate=candidate,
                            corpus=corpus,
                            is_remote=is_remote,
                            breakdown=self.scorer.score_analyses(analyses, signals),
                            matched_keywords=matched,
                            salary=salary,
                            job_type=detect_job_type(raw_text),
                        ),
                    )
                )
            except Exception as e:
                logger.error(
                    f"Error scoring candidate {candidate.dedup_id}: {e}",
                    extra={"event": "discovery.candidate.failed", "candidate_id": candidate.dedup_id},
                    exc_info=True,
                )
                continue

        return evaluations

    def _filter(
        self,
        request: SearchRequest,
        evaluations: List[Tuple[str, _Evaluation]],
        stats_by_name: Dict[str, SourceRunStats],
        reference_time: datetime,
    ) -> List[ScoredItem]:
        accepted: List[ScoredItem] = []

        for source_name, evaluation in evaluations:
            location_match = self.classifier.location_match(
                evaluation.corpus, request.location, evaluation.is_remote
            )
            if location_match is False:
                continue

            score = evaluation.breakdown.total
            if not self.policy.accepts(score, request.mode, bool(evaluation.matched_keywords)):
                continue

            logger.debug(
                "Candidate accepted",
                extra={
                    "event": "discovery.candidate.accepted",
                    "candidate_id": evaluation.candidate.dedup_id,
                    "score": score,
                    "breakdown": evaluation.breakdown.as_dict(),
                },
            )
            accepted.append(
                ScoredItem(
                    candidate=evaluation.candidate,
                    relevance_score=score,
                    matched_mode=request.mode,
                    is_remote=evaluation.is_remote,
                    location_match=location_match,
                    accepted_at=reference_time,
                    matched_keywords=evaluation.matched_keywords,
                    salary=evaluation.salary,
                    job_type=evaluation.job_type,
                )
            )
            stats_by_name[source_name].accepted_count += 1

        return accepted
