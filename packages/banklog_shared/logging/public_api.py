"""Composable instrumentation helpers for public SDK operations.

``public_api_instrumented`` wraps coroutine functions, async generator
functions and plain functions with the same invocation/completion hooks so
every public operation emits one structured event when it starts and one
when it finishes.
"""

from __future__ import annotations

import inspect
from contextlib import aclosing
from dataclasses import dataclass
from functools import wraps
from time import perf_counter
from typing import Any, AsyncIterator, Callable, Mapping, Protocol, Sequence

from . import fields
from .context import log_context


@dataclass(frozen=True)
class InvocationContext:
    """Structured metadata describing one public API invocation."""

    component_id: str
    api_name: str
    principal: str | None
    references: Mapping[str, str]


@dataclass(frozen=True)
class CompletionContext:
    """Structured metadata describing one completed public API invocation."""

    invocation: InvocationContext
    success: bool
    duration_ms: float
    errors: list[str]
    item_count: int | None = None


class PublicApiInstrumentationConcern(Protocol):
    """Hook contract for one public API instrumentation concern."""

    def on_invocation(self, context: InvocationContext) -> None:
        """Handle invocation-start event for one call."""

    def on_completion(self, context: CompletionContext) -> None:
        """Handle completion event for one call."""


class PublicApiLoggingConcern:
    """Logging concern implementation for invocation/completion events."""

    def __init__(self, *, logger: Any) -> None:
        self._logger = logger

    def on_invocation(self, context: InvocationContext) -> None:
        """Emit standardized structured invocation-start log."""
        with log_context(_invocation_log_context(context)):
            self._logger.debug("Public API invocation")

    def on_completion(self, context: CompletionContext) -> None:
        """Emit standardized structured completion log."""
        payload = _invocation_log_context(context.invocation)
        payload.update(
            {
                fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
                fields.SUCCESS: context.success,
                fields.DURATION_MS: context.duration_ms,
                fields.ERRORS: context.errors,
                fields.ITEM_COUNT: context.item_count,
            }
        )
        with log_context(payload):
            if context.success:
                self._logger.info("Public API completion")
            else:
                self._logger.warning("Public API completion")


def public_api_instrumented(
    *,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
    concerns: Sequence[PublicApiInstrumentationConcern] | None = None,
    logger: Any | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one public operation with composable instrumentation concerns."""

    resolved_concerns: tuple[PublicApiInstrumentationConcern, ...] = tuple(
        concerns or ()
    )
    if logger is not None:
        resolved_concerns = (PublicApiLoggingConcern(logger=logger), *resolved_concerns)
    if len(resolved_concerns) == 0:
        raise ValueError("public_api_instrumented requires at least one concern")

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__
        signature = inspect.signature(func)

        def invocation_for(args: tuple[Any, ...], kwargs: dict[str, Any]) -> InvocationContext:
            arguments = _bound_arguments(signature, args, kwargs)
            references = {
                name: str(arguments[name])
                for name in id_fields
                if arguments.get(name) not in (None, "")
            }
            return InvocationContext(
                component_id=component_id,
                api_name=method_name,
                principal=_attr_or_none(arguments.get("user"), "id"),
                references=references,
            )

        def finish(
            invocation: InvocationContext,
            started: float,
            exc: Exception | None,
            item_count: int | None = None,
        ) -> None:
            completion = CompletionContext(
                invocation=invocation,
                success=exc is None,
                duration_ms=round((perf_counter() - started) * 1000.0, 3),
                errors=[] if exc is None else [f"{type(exc).__name__}: {exc}"],
                item_count=item_count,
            )
            _emit_completion(
                concerns=resolved_concerns,
                context=completion,
                logger=logger,
            )

        if inspect.isasyncgenfunction(func):

            @wraps(func)
            async def agen_wrapper(*args: Any, **kwargs: Any) -> AsyncIterator[Any]:
                invocation = invocation_for(args, kwargs)
                _emit_invocation(
                    concerns=resolved_concerns, context=invocation, logger=logger
                )
                started = perf_counter()
                count = 0
                try:
                    async with aclosing(func(*args, **kwargs)) as items:
                        async for item in items:
                            count += 1
                            yield item
                except GeneratorExit:
                    # Consumer stopped early; still a successful call.
                    finish(invocation, started, None, count)
                    raise
                except Exception as exc:  # noqa: BLE001
                    finish(invocation, started, exc, count)
                    raise
                finish(invocation, started, None, count)

            return agen_wrapper

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                invocation = invocation_for(args, kwargs)
                _emit_invocation(
                    concerns=resolved_concerns, context=invocation, logger=logger
                )
                started = perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:  # noqa: BLE001
                    finish(invocation, started, exc)
                    raise
                finish(invocation, started, None)
                return result

            return async_wrapper

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            invocation = invocation_for(args, kwargs)
            _emit_invocation(concerns=resolved_concerns, context=invocation, logger=logger)
            started = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:  # noqa: BLE001
                finish(invocation, started, exc)
                raise
            finish(invocation, started, None)
            return result

        return wrapper

    return decorator


def _bound_arguments(
    signature: inspect.Signature, args: tuple[Any, ...], kwargs: dict[str, Any]
) -> dict[str, Any]:
    """Map call arguments to parameter names without applying defaults."""
    try:
        return dict(signature.bind_partial(*args, **kwargs).arguments)
    except TypeError:
        return dict(kwargs)


def _attr_or_none(obj: object | None, name: str) -> str | None:
    """Return string attribute value from object when present."""
    if obj is None:
        return None
    value = getattr(obj, name, None)
    if value in (None, ""):
        return None
    return str(value)


def _invocation_log_context(context: InvocationContext) -> dict[str, object]:
    """Build common structured fields for one invocation event."""
    return {
        fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT,
        fields.COMPONENT_ID: context.component_id,
        fields.API_NAME: context.api_name,
        fields.PRINCIPAL: context.principal,
        **context.references,
    }


def _emit_invocation(
    *,
    concerns: Sequence[PublicApiInstrumentationConcern],
    context: InvocationContext,
    logger: Any | None,
) -> None:
    """Dispatch invocation event to concerns with failure isolation."""
    for concern in concerns:
        try:
            concern.on_invocation(context)
        except Exception as exc:  # noqa: BLE001
            _log_concern_failure(
                logger=logger,
                stage="invocation",
                concern=type(concern).__name__,
                exc=exc,
                invocation=context,
            )


def _emit_completion(
    *,
    concerns: Sequence[PublicApiInstrumentationConcern],
    context: CompletionContext,
    logger: Any | None,
) -> None:
    """Dispatch completion event to concerns with failure isolation."""
    for concern in concerns:
        try:
            concern.on_completion(context)
        except Exception as exc:  # noqa: BLE001
            _log_concern_failure(
                logger=logger,
                stage="completion",
                concern=type(concern).__name__,
                exc=exc,
                invocation=context.invocation,
            )


def _log_concern_failure(
    *,
    logger: Any | None,
    stage: str,
    concern: str,
    exc: Exception,
    invocation: InvocationContext,
) -> None:
    """Warn about one failing concern hook; the wrapped call is unaffected."""
    if logger is None:
        return
    with log_context(
        {
            fields.EVENT: fields.PUBLIC_API_INSTRUMENTATION_FAILURE_EVENT,
            fields.COMPONENT_ID: invocation.component_id,
            fields.API_NAME: invocation.api_name,
            fields.STAGE: stage,
            fields.CONCERN: concern,
            fields.ERRORS: [f"{type(exc).__name__}: {exc}"],
        }
    ):
        logger.warning("Public API instrumentation concern failed")
