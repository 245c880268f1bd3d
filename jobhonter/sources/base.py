"""Base fetcher class with shared functionality for all job sources.

This module provides the abstract base class every source fetcher
implements, along with shared utilities for throttled HTTP requests, HTML
cleaning and result truncation.
"""

import html
import logging
import re
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, TypeVar

import requests

from jobhonter.domain.models import CandidateItem, SearchMode
from jobhonter.logging import get_logger
from jobhonter.utils.cancellation import CancellationToken

from .exceptions import (
    SourceConfigurationError,
    SourceHTTPError,
    SourceResponseError,
    SourceTimeoutError,
)

logger = get_logger(__name__, component="source")

T = TypeVar("T")


class SourceFetcher(Protocol):
    """What the orchestrator requires of a source.

    Only the three-argument ``fetch`` is required. Fetchers that also accept
    ``mode`` or ``cancellation`` keywords, like BaseSourceFetcher, receive
    them; an optional ``name`` and ``fetch_timeout`` are read when present.
    """

    def fetch(
        self,
        keywords: Sequence[str],
        location: Optional[str] = None,
        max_age_days: int = 7,
    ) -> Sequence[CandidateItem]:
        ...

DEFAULT_USER_AGENT = "JobHonter/1.0 (job search research)"


class BaseSourceFetcher(ABC):
    """Base class for all source fetchers.

    Provides a shared ``requests.Session`` with a User-Agent header, HTTP
    error translation into the SourceFetchError hierarchy, and a minimum
    delay between consecutive requests of one fetcher.

    Attributes:
        name: Source name reported on candidates and in per-source errors
        timeout: Per HTTP request timeout in seconds
        fetch_timeout: Bound on a whole fetch(), enforced by the orchestrator
        min_request_delay: Minimum seconds between two requests
        max_items: Maximum candidates returned per fetch (0 = unlimited)
    """

    SOURCE_TYPE = "base"

    def __init__(
        self,
        name: str,
        timeout: int = 15,
        fetch_timeout: Optional[float] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        min_request_delay: float = 1.5,
        max_items: int = 200,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize fetcher with configuration.

        Args:
            name: Source name
            timeout: HTTP request timeout in seconds (range 1-300)
            fetch_timeout: Whole-fetch bound in seconds (None = orchestrator default)
            user_agent: User-Agent header for requests
            min_request_delay: Minimum seconds between requests (>= 0)
            max_items: Maximum candidates per fetch (0 = unlimited)
            session: Optional pre-built session (tests)
            sleep: Sleep function used for throttling (tests)
            clock: Monotonic clock used for throttling (tests)

        Raises:
            SourceConfigurationError: If a setting is out of range
        """
        if not name or not name.strip():
            raise SourceConfigurationError("Source name cannot be empty")
        if not 1 <= timeout <= 300:
            raise SourceConfigurationError(
                f"Timeout must be between 1 and 300 seconds, got: {timeout}", source_name=name
            )
        if not user_agent or not user_agent.strip():
            raise SourceConfigurationError("user_agent cannot be empty", source_name=name)
        if min_request_delay < 0:
            raise SourceConfigurationError(
                f"min_request_delay cannot be negative, got: {min_request_delay}", source_name=name
            )

        self.name = name.strip()
        self.timeout = timeout
        self.fetch_timeout = fetch_timeout
        self.user_agent = user_agent.strip()
        self.min_request_delay = min_request_delay
        self.max_items = max_items

        self._sleep = sleep
        self._clock = clock
        self._throttle_lock = threading.Lock()
        self._last_request_at: Optional[float] = None

        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    @abstractmethod
    def fetch(
        self,
        keywords: Sequence[str],
        location: Optional[str] = None,
        max_age_days: int = 7,
        mode: SearchMode = SearchMode.MODERATE,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[CandidateItem]:
        """Fetch candidate postings for keywords.

        Implementations should:
        1. Issue request(s) to the source, checking ``cancellation`` before each
        2. Transform source-specific records into CandidateItem models
        3. Skip individual malformed records with a warning
        4. Raise SourceFetchError only when the source produced nothing usable

        Args:
            keywords: Keyword phrases from the search request
            location: Requested location, if any (a hint; may be ignored)
            max_age_days: Requested maximum age (a hint; not trusted downstream)
            mode: Search mode, used to shape search queries
            cancellation: Token checked before issuing each request

        Returns:
            List of CandidateItem, in the order the source returned them

        Raises:
            SourceFetchError: Or one of its subclasses on failure
        """
        pass

    def close(self) -> None:
        self._session.close()

    def _throttle(self) -> None:
        """Sleep until min_request_delay has passed since the previous request."""
        with self._throttle_lock:
            if self._last_request_at is not None and self.min_request_delay > 0:
                elapsed = self._clock() - self._last_request_at
                remaining = self.min_request_delay - elapsed
                if remaining > 0:
                    self._sleep(remaining)
            self._last_request_at = self._clock()

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make a throttled HTTP request and return its parsed JSON body.

        Args:
            url: URL to request
            method: HTTP method (default "GET")
            headers: Additional headers to include (merged with defaults)
            params: Query parameters

        Returns:
            Parsed JSON response (dict or list)

        Raises:
            SourceHTTPError: On 4xx/5xx status or connection failure
            SourceTimeoutError: On request timeout
            SourceResponseError: On invalid JSON
        """
        request_headers = self._session.headers.copy()
        if headers:
            request_headers.update(headers)

        self._throttle()

        try:
            logger.debug(
                f"HTTP {method} request to {url}",
                extra={
                    "event": "source.fetch.request",
                    "source_name": self.name,
                    "method": method,
                    "url": url,
                    "timeout": self.timeout,
                },
            )

            response = self._session.request(
                method=method,
                url=url,
                headers=request_headers,
                params=params,
                timeout=self.timeout,
            )

            if response.status_code >= 400:
                is_retryable = response.status_code >= 500 or response.status_code == 429
                event_name = "source.fetch.retryable_error" if is_retryable else "source.fetch.error"
                log_level = logging.WARNING if is_retryable else logging.ERROR

                logger.log(
                    log_level,
                    f"HTTP {response.status_code} error from {url}",
                    extra={
                        "event": event_name,
                        "source_name": self.name,
                        "status_code": response.status_code,
                        "url": url,
                    },
                )

                raise SourceHTTPError(
                    f"HTTP {response.status_code}: {response.reason}",
                    status_code=response.status_code,
                    url=url,
                    source_name=self.name,
                )

            try:
                return response.json()
            except ValueError as e:
                logger.error(
                    f"Failed to parse JSON response from {url}",
                    extra={
                        "event": "source.fetch.error",
                        "source_name": self.name,
                        "error_type": "JSONDecodeError",
                        "url": url,
                    },
                )
                raise SourceResponseError(
                    f"Failed to parse JSON response from {url}: {e}", source_name=self.name
                ) from e

        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "source.fetch.retryable_error",
                    "source_name": self.name,
                    "error_type": "Timeout",
                    "url": url,
                },
            )
            raise SourceTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
                source_name=self.name,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "source.fetch.error",
                    "source_name": self.name,
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise SourceHTTPError(
                f"Request to {url} failed: {e}",
                status_code=0,
                url=url,
                source_name=self.name,
            ) from e

    def _clean_html(self, html_text: Optional[str]) -> str:
        """Strip HTML tags and entities, keeping paragraph breaks.

        Args:
            html_text: Text containing HTML formatting

        Returns:
            Plain text with whitespace normalized
        """
        if not html_text:
            return ""

        text = html.unescape(html_text)
        text = re.sub(r"<br\s*/?>", "\n", text, flags=re.IGNORECASE)
        text = re.sub(r"</p>", "\n\n", text, flags=re.IGNORECASE)
        text = re.sub(r"<[^>]+>", " ", text)
        text = re.sub(r"[ \t]+", " ", text)
        text = re.sub(r" *\n *", "\n", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()

    def _truncate_items(self, items: List[T]) -> List[T]:
        """Truncate to max_items if configured (0 = unlimited)."""
        if self.max_items > 0 and len(items) > self.max_items:
            logger.info(
                "Truncating candidates to max_items limit",
                extra={
                    "event": "source.fetch.truncated",
                    "source_name": self.name,
                    "total": len(items),
                    "max": self.max_items,
                },
            )
            return items[: self.max_items]
        return items

    @staticmethod
    def _is_cancelled(cancellation: Optional[CancellationToken]) -> bool:
        return cancellation is not None and cancellation.is_cancelled

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
