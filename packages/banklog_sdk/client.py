"""Generic typed client over one log sub-resource."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Generic

from packages.banklog_sdk.auth import AuthContext
from packages.banklog_sdk.checks import check_id
from packages.banklog_sdk.config import MAX_PAGE_SIZE
from packages.banklog_sdk.errors import validation_error
from packages.banklog_sdk.filters import LogFilter, LogPage
from packages.banklog_sdk.gateway import ResourceGateway, RestGateway
from packages.banklog_sdk.resource import LogResource, TLog
from packages.banklog_shared.logging import get_logger, public_api_instrumented

_LOGGER = get_logger(__name__)
_COMPONENT_ID = "banklog_sdk"


class LogResourceClient(Generic[TLog]):
    """Read-only accessors for one log kind.

    Every call is independent: the client keeps no state besides its
    resource descriptor, gateway and optional default user.
    """

    def __init__(
        self,
        *,
        resource: LogResource[TLog],
        gateway: ResourceGateway,
        user: AuthContext | None = None,
    ) -> None:
        self._resource = resource
        self._gateway = gateway
        self._user = user

    @property
    def resource(self) -> LogResource[TLog]:
        """Return the descriptor this client is bound to."""
        return self._resource

    @public_api_instrumented(logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("id",))
    async def get(self, id: str, *, user: AuthContext | None = None) -> TLog:
        """Return one log by id."""
        log_id = check_id(id, operation=f"{self._resource.name}.get")
        record = await self._gateway.fetch_by_id(
            self._resource, log_id, self._user_for(user)
        )
        return self._resource.build(record)

    @public_api_instrumented(logger=_LOGGER, component_id=_COMPONENT_ID)
    async def query(
        self,
        filters: LogFilter | None = None,
        *,
        user: AuthContext | None = None,
    ) -> AsyncIterator[TLog]:
        """Yield logs lazily, walking pages as the caller consumes them."""
        resolved = LogFilter() if filters is None else filters
        if resolved.limit == 0:
            return
        params = resolved.to_params(self._resource)
        yielded = 0
        records = self._gateway.fetch_list(self._resource, params, self._user_for(user))
        async with aclosing(records):
            async for record in records:
                yield self._resource.build(record)
                yielded += 1
                if resolved.limit is not None and yielded >= resolved.limit:
                    return

    @public_api_instrumented(logger=_LOGGER, component_id=_COMPONENT_ID)
    async def page(
        self,
        filters: LogFilter | None = None,
        *,
        cursor: str | None = None,
        user: AuthContext | None = None,
    ) -> LogPage[TLog]:
        """Return one page of at most 100 logs and the next cursor."""
        resolved = LogFilter() if filters is None else filters
        if cursor is not None and not isinstance(cursor, str):
            raise validation_error(
                f"{self._resource.name}.page", f"cursor must be a string, got {cursor!r}"
            )
        params = resolved.to_params(self._resource, cursor=cursor)
        if resolved.limit == 0:
            return LogPage()
        if resolved.limit is not None:
            params["limit"] = min(resolved.limit, MAX_PAGE_SIZE)
        records, next_cursor = await self._gateway.fetch_page(
            self._resource, params, self._user_for(user)
        )
        return LogPage(
            items=[self._resource.build(record) for record in records],
            cursor=next_cursor,
        )

    def _user_for(self, user: AuthContext | None) -> AuthContext | None:
        """Prefer the call-site user over the client default."""
        return user if user is not None else self._user


class PdfLogResourceClient(LogResourceClient[TLog]):
    """Log client for kinds exposing a rendered pdf per log."""

    def __init__(
        self,
        *,
        resource: LogResource[TLog],
        gateway: ResourceGateway,
        user: AuthContext | None = None,
    ) -> None:
        if not resource.supports_pdf:
            raise ValueError(f"{resource.name} does not expose pdf documents")
        super().__init__(resource=resource, gateway=gateway, user=user)

    @public_api_instrumented(logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("id",))
    async def pdf(self, id: str, *, user: AuthContext | None = None) -> bytes:
        """Return the raw pdf bytes rendered for one log."""
        log_id = check_id(id, operation=f"{self._resource.name}.pdf")
        return await self._gateway.fetch_binary(
            self._resource, log_id, self._user_for(user), sub_resource="pdf"
        )


class _GatewayScope:
    """Async context manager lending a gateway for one module-level call.

    Implemented as a plain class so SDK errors leave the block unmodified.
    """

    def __init__(self, gateway: ResourceGateway | None) -> None:
        self._gateway = gateway
        self._owned: RestGateway | None = None

    async def __aenter__(self) -> ResourceGateway:
        if self._gateway is not None:
            return self._gateway
        self._owned = RestGateway.from_settings()
        return self._owned

    async def __aexit__(self, *exc_info: object) -> None:
        if self._owned is not None:
            owned, self._owned = self._owned, None
            await owned.aclose()


def gateway_scope(gateway: ResourceGateway | None = None) -> _GatewayScope:
    """Yield the injected gateway, or a settings-built one closed on exit."""
    return _GatewayScope(gateway)
