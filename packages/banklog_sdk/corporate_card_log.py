"""Corporate card logs."""

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
class CorporateCardLog:
    """One CorporateCard state transition (``blocked``, ``canceled``...)."""

    id: str
    created: datetime
    type: str
    card: Mapping[str, Any] | None = field(default=None, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "created", parse_datetime(self.created))

    @classmethod
    def from_api_json(cls, data: Mapping[str, Any]) -> CorporateCardLog:
        return cls(
            id=require_text(data, "id"),
            created=data.get("created"),
            type=require_text(data, "type"),
            card=data.get("card"),
        )


RESOURCE: LogResource[CorporateCardLog] = LogResource(
    name="CorporateCardLog",
    factory=CorporateCardLog.from_api_json,
    parent_filter="cardIds",
    supports_ids_filter=True,
)


def client(
    gateway: ResourceGateway, *, user: AuthContext | None = None
) -> LogResourceClient[CorporateCardLog]:
    """Return a CorporateCard Log client bound to one gateway."""
    return LogResourceClient(resource=RESOURCE, gateway=gateway, user=user)


async def get(
    id: str,
    *,
    user: AuthContext | None = None,
    gateway: ResourceGateway | None = None,
) -> CorporateCardLog:
    """Retrieve one CorporateCard Log by id."""
    async with gateway_scope(gateway) as resolved:
        return await client(resolved).get(id, user=user)


async def query(
    *,
    limit: int | None = None,
    after: object = None,
    before: object = None,
    types: object = None,
    card_ids: object = None,
    ids: object = None,
    user: AuthContext | None = None,
    gateway: ResourceGateway | None = None,
) -> AsyncIterator[CorporateCardLog]:
    """Yield CorporateCard Logs, walking pages on demand."""
    filters = LogFilter.build(
        limit=limit,
        after=after,
        before=before,
        types=types,
        parent_ids=card_ids,
        ids=ids,
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
    card_ids: object = None,
    ids: object = None,
    user: AuthContext | None = None,
    gateway: ResourceGateway | None = None,
) -> LogPage[CorporateCardLog]:
    """Retrieve up to 100 CorporateCard Logs and the cursor to the next page."""
    filters = LogFilter.build(
        limit=limit,
        after=after,
        before=before,
        types=types,
        parent_ids=card_ids,
        ids=ids,
    )
    async with gateway_scope(gateway) as resolved:
        return await client(resolved).page(filters, cursor=cursor, user=user)
