"""Request-level exceptions."""

from typing import List, Optional


class InvalidRequestError(ValueError):
    """Raised when a search request cannot be executed.

    This is the only failure that surfaces from a discovery call as an
    exception. It is raised before any source is contacted.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.errors:
            return self.message
        details = "; ".join(self.errors)
        return f"{self.message}: {details}"
