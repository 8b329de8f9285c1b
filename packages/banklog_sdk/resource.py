"""Resource descriptors binding one log kind to its API namespace."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, Protocol, TypeVar, runtime_checkable


@runtime_checkable
class Identifiable(Protocol):
    """Capability shared by every remotely identified entity."""

    id: str


TLog = TypeVar("TLog", bound=Identifiable)


@dataclass(frozen=True)
class LogResource(Generic[TLog]):
    """Explicit description of one log sub-resource.

    ``name`` is the API resource name (``InvoiceLog``); ``factory`` turns one
    raw record into the entity; ``parent_filter`` is the camelCase query key
    restricting logs by parent ids.
    """

    name: str
    factory: Callable[[Mapping[str, Any]], TLog]
    parent_filter: str
    supports_ids_filter: bool = False
    supports_pdf: bool = False

    @property
    def endpoint(self) -> str:
        """Return the URL path segment (``corporate-card/log``)."""
        return api_endpoint(self.name)

    @property
    def singular_key(self) -> str:
        """Return the response key wrapping one entity (``log``)."""
        return last_name(self.name)

    @property
    def plural_key(self) -> str:
        """Return the response key wrapping entity lists (``logs``)."""
        return f"{last_name(self.name)}s"

    def build(self, data: Mapping[str, Any]) -> TLog:
        """Deserialize one raw record."""
        return self.factory(data)


def camel_to_kebab(name: str) -> str:
    """Convert ``CorporateCardLog`` or ``corporateCardLog`` to kebab-case."""
    return re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()


def api_endpoint(name: str) -> str:
    """Map a resource name to its endpoint; a trailing ``-log`` nests under the parent."""
    kebab = camel_to_kebab(name)
    if kebab.endswith("-log"):
        return f"{kebab[: -len('-log')]}/log"
    return kebab


def last_name(name: str) -> str:
    """Return the final kebab segment of a resource name."""
    return camel_to_kebab(name).split("-")[-1]
