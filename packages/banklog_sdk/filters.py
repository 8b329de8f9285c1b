"""Query filter and page value types for log retrieval."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date
from typing import Generic, TypeVar

from packages.banklog_sdk.checks import (
    check_date,
    check_limit,
    check_string_set,
)
from packages.banklog_sdk.errors import validation_error
from packages.banklog_sdk.resource import LogResource

T = TypeVar("T")

QueryParams = dict[str, str | int]


@dataclass(frozen=True, slots=True)
class LogFilter:
    """Normalized log query filters; ``None`` means unfiltered."""

    limit: int | None = None
    after: date | None = None
    before: date | None = None
    types: frozenset[str] | None = None
    parent_ids: frozenset[str] | None = None
    ids: frozenset[str] | None = None

    @classmethod
    def build(
        cls,
        *,
        limit: object = None,
        after: object = None,
        before: object = None,
        types: object = None,
        parent_ids: object = None,
        ids: object = None,
    ) -> LogFilter:
        """Validate raw caller values into one filter."""
        return cls(
            limit=check_limit(limit),
            after=check_date(after, field_name="after"),
            before=check_date(before, field_name="before"),
            types=check_string_set(types, field_name="types"),
            parent_ids=check_string_set(parent_ids, field_name="parent_ids"),
            ids=check_string_set(ids, field_name="ids"),
        )

    def to_params(self, resource: LogResource, *, cursor: str | None = None) -> QueryParams:
        """Encode filters as API query parameters for one resource."""
        if self.ids is not None and not resource.supports_ids_filter:
            raise validation_error(
                "filter", f"{resource.name} does not support filtering by ids"
            )
        params: QueryParams = {}
        if self.limit is not None:
            params["limit"] = self.limit
        if self.after is not None:
            params["after"] = self.after.isoformat()
        if self.before is not None:
            params["before"] = self.before.isoformat()
        if self.types is not None:
            params["types"] = _join(self.types)
        if self.parent_ids is not None:
            params[resource.parent_filter] = _join(self.parent_ids)
        if self.ids is not None:
            params["ids"] = _join(self.ids)
        if cursor:
            params["cursor"] = cursor
        return params


@dataclass(frozen=True, slots=True)
class LogPage(Generic[T]):
    """One page of entities plus the cursor to the next page."""

    items: list[T] = field(default_factory=list)
    cursor: str | None = None

    def __iter__(self) -> Iterator[object]:
        """Unpack as ``items, cursor``."""
        return iter((self.items, self.cursor))


def _join(values: Iterable[str]) -> str:
    return ",".join(sorted(values))
