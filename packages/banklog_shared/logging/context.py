"""Context propagation helpers for structured logging.

The logging context lives in a ``contextvars`` variable so fields bound inside
one asyncio task never leak into a concurrently running task.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import Mapping

_LOG_CONTEXT: ContextVar[dict[str, str]] = ContextVar("banklog_log_context", default={})


def get_context() -> dict[str, str]:
    """Return a shallow copy of current logging context."""
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> None:
    """Bind non-empty values into the current logging context.

    Values are stringified to maintain a stable structured log shape.
    ``None`` values are ignored.
    """
    if not values:
        return
    current = _LOG_CONTEXT.get().copy()
    for key, value in values.items():
        if value is None:
            continue
        current[str(key)] = str(value)
    _LOG_CONTEXT.set(current)


def clear_context(*keys: str) -> None:
    """Clear selected keys or the entire logging context."""
    if not keys:
        _LOG_CONTEXT.set({})
        return
    current = _LOG_CONTEXT.get().copy()
    for key in keys:
        current.pop(key, None)
    _LOG_CONTEXT.set(current)


class _LogContextScope:
    """Context manager restoring the previous logging context on exit.

    Exceptions pass through untouched; frozen error types cannot have their
    ``__traceback__`` reassigned the way generator-based managers do.
    """

    def __init__(self, values: Mapping[str, object]) -> None:
        self._values = dict(values)
        self._token: Token[dict[str, str]] | None = None

    def __enter__(self) -> None:
        self._token = _LOG_CONTEXT.set(_LOG_CONTEXT.get().copy())
        bind_context(**self._values)

    def __exit__(self, *exc_info: object) -> None:
        if self._token is not None:
            _LOG_CONTEXT.reset(self._token)
            self._token = None


def log_context(values: Mapping[str, object]) -> _LogContextScope:
    """Temporarily bind logging context for the duration of a block."""
    return _LogContextScope(values)
