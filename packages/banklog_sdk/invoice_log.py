"""Invoice logs.

Every time an Invoice changes state the API records an Invoice Log. Logs are
never created by callers; they are retrieved to inspect the history of an
Invoice (``registered``, ``paid``, ``overdue``, ``canceled``...).
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import aclosing
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from packages.banklog_sdk.auth import AuthContext
from packages.banklog_sdk.checks import parse_datetime, require_text
from packages.banklog_sdk.client import PdfLogResourceClient, gateway_scope
from packages.banklog_sdk.filters import LogFilter, LogPage
from packages.banklog_sdk.gateway import ResourceGateway
from packages.banklog_sdk.resource import LogResource


@dataclass(frozen=True, slots=True)
class InvoiceLog:
    """One Invoice state transition.

    ``invoice`` is the Invoice as delivered by the API at the time of the
    event; ``errors`` lists problems attached to the event, if any.
    """

    id: str
    created: datetime
    type: str
    errors: tuple[str, ...] = ()
    invoice: Mapping[str, Any] | None = field(default=None, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "created", parse_datetime(self.created))
        object.__setattr__(self, "errors", tuple(self.errors))

    @classmethod
    def from_api_json(cls, data: Mapping[str, Any]) -> InvoiceLog:
        """Build one log from its API representation."""
        return cls(
            id=require_text(data, "id"),
            created=data.get("created"),
            type=require_text(data, "type"),
            errors=tuple(data.get("errors") or ()),
            invoice=data.get("invoice"),
        )


RESOURCE: LogResource[InvoiceLog] = LogResource(
    name="InvoiceLog",
    factory=InvoiceLog.from_api_json,
    parent_filter="invoiceIds",
    supports_pdf=True,
)


def client(
    gateway: ResourceGateway, *, user: AuthContext | None = None
) -> PdfLogResourceClient[InvoiceLog]:
    """Return an Invoice Log client bound to one gateway."""
    return PdfLogResourceClient(resource=RESOURCE, gateway=gateway, user=user)


async def get(
    id: str,
    *,
    user: AuthContext | None = None,
    gateway: ResourceGateway | None = None,
) -> InvoiceLog:
    """Retrieve one Invoice Log by id."""
    async with gateway_scope(gateway) as resolved:
        return await client(resolved).get(id, user=user)


async def query(
    *,
    limit: int | None = None,
    after: object = None,
    before: object = None,
    types: object = None,
    invoice_ids: object = None,
    user: AuthContext | None = None,
    gateway: ResourceGateway | None = None,
) -> AsyncIterator[InvoiceLog]:
    """Yield Invoice Logs, newest first, walking pages on demand.

    ``limit`` caps the number of logs (unlimited when ``None``); ``after`` and
    ``before`` are inclusive creation dates; ``types`` and ``invoice_ids``
    restrict by event type and parent Invoice.
    """
    filters = LogFilter.build(
        limit=limit,
        after=after,
        before=before,
        types=types,
        parent_ids=invoice_ids,
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
    invoice_ids: object = None,
    user: AuthContext | None = None,
    gateway: ResourceGateway | None = None,
) -> LogPage[InvoiceLog]:
    """Retrieve up to 100 Invoice Logs and the cursor to the next page."""
    filters = LogFilter.build(
        limit=limit,
        after=after,
        before=before,
        types=types,
        parent_ids=invoice_ids,
    )
    async with gateway_scope(gateway) as resolved:
        return await client(resolved).page(filters, cursor=cursor, user=user)


async def pdf(
    id: str,
    *,
    user: AuthContext | None = None,
    gateway: ResourceGateway | None = None,
) -> bytes:
    """Retrieve the pdf rendered for one Invoice Log."""
    async with gateway_scope(gateway) as resolved:
        return await client(resolved).pdf(id, user=user)
