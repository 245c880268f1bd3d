"""Custom exceptions for source fetchers."""

from typing import Optional


class SourceFetchError(Exception):
    """Base exception for all source fetch errors.

    Raised by a fetcher when its source cannot produce candidates. The
    orchestrator catches it per source, records it in the result's
    per-source errors and carries on with the other sources.
    """

    def __init__(self, message: str, source_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.source_name = source_name


class SourceHTTPError(SourceFetchError):
    """HTTP request failed with a 4xx/5xx status or at the connection level.

    ``status_code`` is 0 when no response was received.
    """

    def __init__(self, message: str, status_code: int, url: str, source_name: Optional[str] = None) -> None:
        """Initialize HTTP error with status code and URL.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (e.g., 404, 500), 0 for connection errors
            url: URL that failed
            source_name: Source the request was made for
        """
        super().__init__(message, source_name=source_name)
        self.status_code = status_code
        self.url = url


class SourceTimeoutError(SourceFetchError):
    """A request, or the whole fetch for a source, did not finish in time."""

    def __init__(self, message: str, url: Optional[str] = None, source_name: Optional[str] = None) -> None:
        super().__init__(message, source_name=source_name)
        self.url = url


class SourceResponseError(SourceFetchError):
    """Response received but could not be parsed or had an unexpected shape."""

    pass


class SourceConfigurationError(SourceFetchError):
    """Invalid fetcher configuration (unknown source type, bad limits)."""

    pass
