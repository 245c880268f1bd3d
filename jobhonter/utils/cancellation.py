"""Cooperative cancellation shared between a caller and worker threads."""

import threading
from typing import Optional


class CancellationToken:
    """Thread-safe, one-way cancellation flag.

    Workers poll ``is_cancelled`` between units of work; nothing is ever
    interrupted mid-request.

    Example:
        >>> token = CancellationToken()
        >>> token.cancel("user aborted")
        >>> token.is_cancelled, token.reason
        (True, 'user aborted')
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or timeout elapses. Returns is_cancelled."""
        return self._event.wait(timeout)

    def __repr__(self) -> str:
        return f"<CancellationToken cancelled={self.is_cancelled}>"
