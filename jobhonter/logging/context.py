"""Scoped logging context for discovery requests.

Fields pushed here (request_id, source_name, mode, ...) are attached to every
log record emitted inside the scope by ``ContextualFilter``. The store is a
``ContextVar``, so worker threads only see it when the submitting code runs
them inside a copied context (see ``bind_context``).
"""

from contextvars import ContextVar, Token, copy_context
from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("jobhonter_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active logging context."""
    return LogContextVar.get().copy()


def push_log_context(**fields: Any) -> Token:
    """Merge fields into the active context.

    Returns:
        Token to hand back to pop_log_context()
    """
    merged = {**LogContextVar.get(), **fields}
    return LogContextVar.set(merged)


def pop_log_context(token: Token) -> None:
    """Restore the context that was active before the matching push."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Used by tests."""
    LogContextVar.set({})


def bind_context(fn: Callable[..., T]) -> Callable[..., T]:
    """Wrap fn so it runs inside a snapshot of the caller's context.

    ThreadPoolExecutor workers start with an empty context; submitting
    ``bind_context(fn)`` keeps request_id and friends on their log lines.
    """
    ctx = copy_context()

    def runner(*args: Any, **kwargs: Any) -> T:
        return ctx.run(fn, *args, **kwargs)

    return runner


class log_context:
    """Context manager that pushes fields on entry and restores on exit.

    Example:
        >>> with log_context(request_id="abc123", source_name="reddit"):
        ...     logger.info("Fetching")  # carries request_id and source_name
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
