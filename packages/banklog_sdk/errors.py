"""Error models and HTTP failure mapping for banklog SDK calls."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Mapping

from packages.banklog_shared.http import (
    HttpClientError,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)


@dataclass(frozen=True, slots=True)
class SdkErrorDetail:
    """One normalized error entry returned in an API error body."""

    code: str
    message: str
    metadata: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class BankLogSdkError(Exception):
    """Base error type for banklog SDK failures."""

    message: str

    def __str__(self) -> str:
        """Return human-readable error message."""
        return self.message


@dataclass(frozen=True)
class BankLogTransportError(BankLogSdkError):
    """Network failure, server-side failure or unreadable response."""

    operation: str
    status_code: int | None = None
    retryable: bool = False


@dataclass(frozen=True)
class BankLogApiError(BankLogSdkError):
    """Failure classified from an API response or from local input checks."""

    operation: str
    status_code: int | None = None
    details: tuple[SdkErrorDetail, ...] = ()
    retryable: bool = False


@dataclass(frozen=True)
class BankLogValidationError(BankLogApiError):
    """Malformed input: timestamps, filter values, ids or rejected requests."""


@dataclass(frozen=True)
class BankLogAuthError(BankLogApiError):
    """Missing or rejected credentials."""


@dataclass(frozen=True)
class BankLogNotFoundError(BankLogApiError):
    """Unknown entity id."""


@dataclass(frozen=True)
class BankLogRateLimitError(BankLogApiError):
    """API quota exceeded; surfaced to the caller, never retried here."""


def validation_error(operation: str, message: str) -> BankLogValidationError:
    """Build one locally raised validation error."""
    return BankLogValidationError(
        message=f"{operation} validation failure: {message}",
        operation=operation,
        details=(SdkErrorDetail(code="invalidArgument", message=message),),
    )


def map_http_error(*, operation: str, error: HttpClientError) -> BankLogSdkError:
    """Map one shared HTTP client error into a typed SDK error."""
    if isinstance(error, HttpRequestError):
        return BankLogTransportError(
            message=f"{operation} transport failure: {error.message}",
            operation=operation,
            retryable=True,
        )

    if isinstance(error, HttpJsonDecodeError):
        return BankLogTransportError(
            message=f"{operation} returned an unreadable response body",
            operation=operation,
            status_code=error.status_code,
        )

    if isinstance(error, HttpStatusError):
        return _map_status_error(operation=operation, error=error)

    return BankLogTransportError(
        message=f"{operation} transport failure: {error.message}",
        operation=operation,
        retryable=error.retryable,
    )


def _map_status_error(*, operation: str, error: HttpStatusError) -> BankLogSdkError:
    """Classify one non-success HTTP status."""
    status = error.status_code
    if status >= 500:
        return BankLogTransportError(
            message=f"{operation} server failure (HTTP {status})",
            operation=operation,
            status_code=status,
            retryable=True,
        )

    details = _details_from_body(error.response_body)
    summary = "; ".join(item.message for item in details if item.message != "")
    suffix = f": {summary}" if summary != "" else ""
    error_type = _STATUS_TO_ERROR.get(status, BankLogApiError)
    return error_type(
        message=f"{operation} failed (HTTP {status}){suffix}",
        operation=operation,
        status_code=status,
        details=details,
        retryable=status == 429,
    )


def _details_from_body(body: str) -> tuple[SdkErrorDetail, ...]:
    """Parse ``{"errors": [{"code": .., "message": ..}]}`` bodies leniently."""
    if body.strip() == "":
        return ()
    try:
        payload = json.loads(body)
    except ValueError:
        return (SdkErrorDetail(code="unknownError", message=body.strip()),)

    errors = payload.get("errors") if isinstance(payload, dict) else None
    if not isinstance(errors, list):
        return ()

    details: list[SdkErrorDetail] = []
    for item in errors:
        if not isinstance(item, dict):
            continue
        details.append(
            SdkErrorDetail(
                code=str(item.get("code", "")),
                message=str(item.get("message", "")),
                metadata={
                    str(key): str(value)
                    for key, value in item.items()
                    if key not in ("code", "message")
                },
            )
        )
    return tuple(details)


_STATUS_TO_ERROR: dict[int, type[BankLogApiError]] = {
    400: BankLogValidationError,
    401: BankLogAuthError,
    403: BankLogAuthError,
    404: BankLogNotFoundError,
    422: BankLogValidationError,
    429: BankLogRateLimitError,
}
