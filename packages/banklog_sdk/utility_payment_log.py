"""Utility payment logs.

Each UtilityPayment update (``created``, ``processing``, ``success``,
``failed``...) produces one log carrying the payment snapshot.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import aclosing
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from packages.banklog_sdk.auth import AuthContext
from packages.banklog_sdk.checks import parse_datetime, require_text
from packages.banklog_sdk.client import LogResourceClient, gateway_scope
from packages.banklog_sdk.filters import LogFilter, LogPage
from packages.banklog_sdk.gateway import ResourceGateway
from packages.banklog_sdk.resource import LogResource


@dataclass(frozen=True, slots=True)
class UtilityPaymentLog:
    """One UtilityPayment state transition."""

    id: str
    created: datetime
    type: str
    errors: tuple[str, ...] = ()
    payment: Mapping[str, Any] | None = field(default=None, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "created", parse_datetime(self.created))
        object.__setattr__(self, "errors", tuple(self.errors))

    @classmethod
    def from_api_json(cls, data: Mapping[str, Any]) -> UtilityPaymentLog:
        return cls(
            id=require_text(data, "id"),
            created=data.get("created"),
            type=require_text(data, "type"),
            errors=tuple(data.get("errors") or ()),
            payment=data.get("payment"),
        )


RESOURCE: LogResource[UtilityPaymentLog] = LogResource(
    name="UtilityPaymentLog",
    factory=UtilityPaymentLog.from_api_json,
    parent_filter="paymentIds",
)


def client(
    gateway: ResourceGateway, *, user: AuthContext | None = None
) -> LogResourceClient[UtilityPaymentLog]:
    return LogResourceClient(resource=RESOURCE, gateway=gateway, user=user)


async def get(
    id: str,
    *,
    user: AuthContext | None = None,
    gateway: ResourceGateway | None = None,
) -> UtilityPaymentLog:
    """Retrieve one UtilityPayment Log by id."""
    async with gateway_scope(gateway) as resolved:
        return await client(resolved).get(id, user=user)


async def query(
    *,
    limit: int | None = None,
    after: object = None,
    before: object = None,
    types: object = None,
    payment_ids: object = None,
    user: AuthContext | None = None,
    gateway: ResourceGateway | None = None,
) -> AsyncIterator[UtilityPaymentLog]:
    """Yield UtilityPayment Logs, walking pages on demand."""
    filters = LogFilter.build(
        limit=limit,
        after=after,
        before=before,
        types=types,
        parent_ids=payment_ids,
    )
    async with gateway_scope(gateway) as resolved:
        async with aclosing(client(resolved).query(filters, user=user)) as logs:
            async for log in logs:
                yield log


async def page(
    *,
    cursor: str | None = None,
    limit: int | None = None,
    after: object = None,
    before: object = None,
    types: object = None,
    payment_ids: object = None,
    user: AuthContext | None = None,
    gateway: ResourceGateway | None = None,
) -> LogPage[UtilityPaymentLog]:
    """Retrieve up to 100 UtilityPayment Logs and the cursor to the next page."""
    filters = LogFilter.build(
        limit=limit,
        after=after,
        before=before,
        types=types,
        parent_ids=payment_ids,
    )
    async with gateway_scope(gateway) as resolved:
        return await client(resolved).page(filters, cursor=cursor, user=user)
