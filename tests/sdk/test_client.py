"""Unit tests for the generic log resource client."""

from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from packages.banklog_sdk import invoice_log
from packages.banklog_sdk.client import LogResourceClient, PdfLogResourceClient
from packages.banklog_sdk.corporate_card_log import RESOURCE as CARD_RESOURCE
from packages.banklog_sdk.errors import BankLogNotFoundError, BankLogValidationError
from packages.banklog_sdk.filters import LogFilter
from packages.banklog_sdk.invoice_log import RESOURCE as INVOICE_RESOURCE
from packages.banklog_sdk.invoice_log import InvoiceLog


async def _collect(iterator) -> list:
    return [item async for item in iterator]


def test_get_returns_typed_log(gateway_factory, records_factory, user) -> None:
    """get should map the gateway record into the resource entity."""
    gateway = gateway_factory(records_factory(3))
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway)

    log = asyncio.run(client.get("999", user=user))

    assert isinstance(log, InvoiceLog)
    assert log.id == "999"
    assert log.created == datetime(2020, 3, 11, 10, 30)
    assert gateway.calls == [("get", {"id": "999", "user": user})]


def test_get_unknown_id_raises_not_found(gateway_factory, user) -> None:
    """An unknown id must surface NotFound, never a silent None."""
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway_factory([]))

    with pytest.raises(BankLogNotFoundError) as exc_info:
        asyncio.run(client.get("nonexistent-id", user=user))

    assert exc_info.value.status_code == 404


@pytest.mark.parametrize("bad_id", ["", "   ", None, 123])
def test_get_rejects_blank_id_before_calling_gateway(gateway_factory, bad_id) -> None:
    """Blank or non-string ids fail locally."""
    gateway = gateway_factory([])
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway)

    with pytest.raises(BankLogValidationError):
        asyncio.run(client.get(bad_id))

    assert gateway.calls == []


def test_query_limit_caps_results_across_pages(gateway_factory, records_factory) -> None:
    """query(limit=5) yields at most five logs even when pages are tiny."""
    gateway = gateway_factory(records_factory(12), page_size=2)
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway)

    logs = asyncio.run(_collect(client.query(LogFilter(limit=5))))

    assert [log.id for log in logs] == ["1000", "999", "998", "997", "996"]
    assert len(gateway.calls) == 3


def test_query_without_limit_walks_every_page_in_server_order(
    gateway_factory, records_factory
) -> None:
    """Unlimited queries exhaust the cursor and keep the received order."""
    records = records_factory(7)
    gateway = gateway_factory(records, page_size=3)
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway)

    logs = asyncio.run(_collect(client.query()))

    assert [log.id for log in logs] == [record["id"] for record in records]


def test_query_is_lazy_until_iterated(gateway_factory, records_factory) -> None:
    """Building the iterator issues no calls; pulling one item fetches one page."""
    gateway = gateway_factory(records_factory(6), page_size=2)
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway)

    async def _run() -> str:
        iterator = client.query()
        assert gateway.calls == []
        first = await iterator.__anext__()
        assert len(gateway.calls) == 1
        await iterator.aclose()
        return first.id

    assert asyncio.run(_run()) == "1000"


def test_query_limit_zero_yields_nothing(gateway_factory, records_factory) -> None:
    """A zero limit never touches the gateway."""
    gateway = gateway_factory(records_factory(3))
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway)

    assert asyncio.run(_collect(client.query(LogFilter(limit=0)))) == []
    assert gateway.calls == []


def test_query_types_filter_returns_only_matching_logs(gateway_factory) -> None:
    """Filtering by types={'paid'} keeps only paid logs."""
    gateway = gateway_factory(
        [
            {"id": "1", "type": "paid", "created": "2020-03-10 10:30:00.000"},
            {"id": "2", "type": "registered", "created": "2020-03-11 10:30:00.000"},
        ]
    )
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway)

    logs = asyncio.run(_collect(client.query(LogFilter.build(types=["paid"]))))

    assert [(log.id, log.type) for log in logs] == [("1", "paid")]
    assert logs[0].created == datetime(2020, 3, 10, 10, 30)
    assert gateway.calls[0][1]["types"] == "paid"


def test_query_stops_at_limit_even_if_gateway_overdelivers(records_factory) -> None:
    """The client enforces the limit on whatever the gateway yields."""

    class _Greedy:
        async def fetch_list(self, resource, params, user):
            for record in records_factory(10):
                yield record

    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=_Greedy())

    logs = asyncio.run(_collect(client.query(LogFilter(limit=4))))

    assert len(logs) == 4


def test_page_returns_disjoint_pages_until_cursor_exhausted(
    gateway_factory, records_factory
) -> None:
    """Consecutive pages do not overlap and the last cursor is None."""
    gateway = gateway_factory(records_factory(5))
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway)
    filters = LogFilter(limit=2)

    async def _run() -> list[list[str]]:
        pages: list[list[str]] = []
        cursor = None
        while True:
            page = await client.page(filters, cursor=cursor)
            pages.append([log.id for log in page.items])
            cursor = page.cursor
            if cursor is None:
                return pages

    pages = asyncio.run(_run())

    assert pages == [["1000", "999"], ["998", "997"], ["996"]]
    flattened = [log_id for page in pages for log_id in page]
    assert len(flattened) == len(set(flattened))


def test_page_repeated_with_same_cursor_is_idempotent(
    gateway_factory, records_factory
) -> None:
    """The same cursor and filters return the same page."""
    gateway = gateway_factory(records_factory(5))
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway)

    first = asyncio.run(client.page(LogFilter(limit=2), cursor="2"))
    second = asyncio.run(client.page(LogFilter(limit=2), cursor="2"))

    assert first == second


def test_page_caps_limit_at_one_hundred(gateway_factory) -> None:
    """page never asks for more than 100 entities."""
    gateway = gateway_factory([])
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway)

    items, cursor = asyncio.run(client.page(LogFilter(limit=500)))

    assert items == []
    assert cursor is None
    assert gateway.calls == [("page", {"limit": 100})]


def test_client_default_user_is_used_when_call_passes_none(
    gateway_factory, records_factory, user
) -> None:
    """A user bound to the client is forwarded when the call omits one."""
    gateway = gateway_factory(records_factory(1))
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway, user=user)

    asyncio.run(client.get("1000"))

    assert gateway.calls[0][1]["user"] is user


def test_ids_filter_rejected_for_resources_without_it(gateway_factory) -> None:
    """Only corporate card logs accept the ids filter."""
    client = LogResourceClient(resource=INVOICE_RESOURCE, gateway=gateway_factory([]))

    with pytest.raises(BankLogValidationError):
        asyncio.run(client.page(LogFilter.build(ids=["1"])))


def test_ids_filter_forwarded_for_corporate_card_logs(gateway_factory) -> None:
    """Corporate card logs encode ids alongside cardIds."""
    gateway = gateway_factory([])
    client = LogResourceClient(resource=CARD_RESOURCE, gateway=gateway)

    asyncio.run(client.page(LogFilter.build(ids=["b", "a"], parent_ids="card-1")))

    assert gateway.calls == [("page", {"ids": "a,b", "cardIds": "card-1"})]


def test_pdf_client_returns_gateway_bytes(gateway_factory) -> None:
    """pdf delegates to the gateway binary fetch."""
    gateway = gateway_factory([])
    gateway.binaries["1000"] = b"%PDF-1.4"
    client = invoice_log.client(gateway)

    assert asyncio.run(client.pdf("1000")) == b"%PDF-1.4"
    assert gateway.calls == [("pdf", {"id": "1000"})]


def test_pdf_client_requires_pdf_capable_resource(gateway_factory) -> None:
    """Kinds without documents cannot build a pdf client."""
    with pytest.raises(ValueError):
        PdfLogResourceClient(resource=CARD_RESOURCE, gateway=gateway_factory([]))
