"""Shared fixtures for banklog SDK tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Mapping
from typing import Any

import pytest

from packages.banklog_sdk.auth import AuthContext
from packages.banklog_sdk.errors import BankLogNotFoundError
from packages.banklog_sdk.resource import LogResource


class FakeGateway:
    """In-memory gateway serving raw records the way the remote API pages them."""

    def __init__(self, records: list[dict[str, Any]], *, page_size: int = 100) -> None:
        self.records = records
        self.page_size = page_size
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.binaries: dict[str, bytes] = {}

    async def fetch_by_id(
        self, resource: LogResource, id: str, user: AuthContext | None
    ) -> Mapping[str, Any]:
        self.calls.append(("get", {"id": id, "user": user}))
        for record in self.records:
            if record["id"] == id:
                return record
        raise BankLogNotFoundError(
            message=f"{resource.name}.get failed (HTTP 404)",
            operation=f"{resource.name}.get",
            status_code=404,
        )

    async def fetch_page(
        self, resource: LogResource, params: dict[str, Any], user: AuthContext | None
    ) -> tuple[list[Mapping[str, Any]], str | None]:
        self.calls.append(("page", dict(params)))
        matching = [record for record in self.records if _matches(record, params, resource)]
        start = int(params.get("cursor", 0))
        size = min(int(params.get("limit", self.page_size)), self.page_size)
        chunk = matching[start : start + size]
        end = start + len(chunk)
        return chunk, (str(end) if end < len(matching) else None)

    async def fetch_list(
        self, resource: LogResource, params: dict[str, Any], user: AuthContext | None
    ) -> AsyncGenerator[Mapping[str, Any], None]:
        remaining = params.get("limit")
        cursor: str | None = None
        while remaining is None or remaining > 0:
            request = {key: value for key, value in params.items() if key != "limit"}
            if remaining is not None:
                request["limit"] = remaining
            if cursor is not None:
                request["cursor"] = cursor
            records, cursor = await self.fetch_page(resource, request, user)
            for record in records:
                if remaining is not None:
                    remaining -= 1
                yield record
            if cursor is None:
                return

    async def fetch_binary(
        self,
        resource: LogResource,
        id: str,
        user: AuthContext | None,
        *,
        sub_resource: str = "pdf",
    ) -> bytes:
        self.calls.append((sub_resource, {"id": id}))
        try:
            return self.binaries[id]
        except KeyError:
            raise BankLogNotFoundError(
                message=f"{resource.name}.{sub_resource} failed (HTTP 404)",
                operation=f"{resource.name}.{sub_resource}",
                status_code=404,
            ) from None


def _matches(record: Mapping[str, Any], params: Mapping[str, Any], resource: LogResource) -> bool:
    """Apply the server-side filters the fake understands."""
    types = params.get("types")
    if types is not None and record["type"] not in str(types).split(","):
        return False
    parent_ids = params.get(resource.parent_filter)
    if parent_ids is not None:
        if _parent(record).get("id") not in str(parent_ids).split(","):
            return False
    ids = params.get("ids")
    if ids is not None and record["id"] not in str(ids).split(","):
        return False
    return True


def _parent(record: Mapping[str, Any]) -> Mapping[str, Any]:
    for key in ("invoice", "card", "payment"):
        value = record.get(key)
        if isinstance(value, Mapping):
            return value
    return {}


def make_records(count: int, *, type_cycle: tuple[str, ...] = ("paid",)) -> list[dict[str, Any]]:
    """Return ``count`` invoice-log records, newest first."""
    return [
        {
            "id": str(1000 - index),
            "created": f"2020-03-{10 + index % 15:02d} 10:30:00.000",
            "type": type_cycle[index % len(type_cycle)],
            "errors": [],
            "invoice": {"id": f"inv-{index % 3}", "amount": 100 + index},
        }
        for index in range(count)
    ]


@pytest.fixture
def user() -> AuthContext:
    return AuthContext(id="project-1", access_token="token-1", environment="sandbox")


@pytest.fixture
def gateway_factory() -> type[FakeGateway]:
    return FakeGateway


@pytest.fixture
def records_factory():
    return make_records
