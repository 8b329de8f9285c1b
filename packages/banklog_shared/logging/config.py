"""Stdout logging setup for applications embedding the banklog SDK.

The SDK never installs handlers on import. An application opts in once at
startup, either with explicit arguments (``configure_logging``) or from the
``logging`` section of its loaded settings (``configure_logging_from_settings``).
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

from packages.banklog_shared.config import BankLogSettings, LoggingSettings, load_settings

from . import fields
from .context import bind_context, get_context

_CONTEXT_ATTR = "banklog_context"


class ContextFilter(logging.Filter):
    """Attach the bound logging context to each record as one mapping."""

    def filter(self, record: logging.LogRecord) -> bool:
        setattr(record, _CONTEXT_ATTR, get_context())
        return True


def _record_context(record: logging.LogRecord) -> dict[str, str]:
    context = getattr(record, _CONTEXT_ATTR, None)
    return context if isinstance(context, dict) else {}


class JsonFormatter(logging.Formatter):
    """One JSON object per line: core fields first, then bound context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.fromtimestamp(record.created, UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
        }
        for key, value in _record_context(record).items():
            payload.setdefault(key, value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Human-readable line followed by sorted ``key=value`` context pairs."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={context[key]}" for key in sorted(context))
        return f"{line} {pairs}"


def build_handler(
    *, level: str = "INFO", json_output: bool = True, stream: TextIO | None = None
) -> logging.Handler:
    """Return one stream handler wired with the context filter and a formatter."""
    handler = logging.StreamHandler(stream=sys.stdout if stream is None else stream)
    handler.setLevel(level.upper())
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if json_output else PlainFormatter())
    return handler


def configure_logging(
    *,
    level: str = "INFO",
    json_output: bool = True,
    service: str | None = None,
    environment: str | None = None,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Install a single root handler, replacing any earlier one.

    ``service`` and ``environment`` are bound into the logging context so
    every subsequent record carries them.
    """
    handler = build_handler(level=level, json_output=json_output, stream=stream)
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())
    root.addHandler(handler)
    bind_context(
        **{fields.SERVICE: service or None, fields.ENVIRONMENT: environment or None}
    )
    return handler


def configure_logging_from_settings(
    settings: BankLogSettings | LoggingSettings | None = None,
    *,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Configure root logging from the ``logging`` settings section.

    Settings are loaded with the standard precedence cascade when omitted.
    """
    resolved = load_settings() if settings is None else settings
    section = resolved.logging if isinstance(resolved, BankLogSettings) else resolved
    return configure_logging(
        level=section.level,
        json_output=section.json_output,
        service=section.service,
        environment=section.environment,
        stream=stream,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger from Python's standard logging hierarchy."""
    return logging.getLogger(name)
