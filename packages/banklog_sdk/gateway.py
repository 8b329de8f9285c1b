"""Resource gateway contract and its REST implementation.

The gateway owns everything that touches the network: URL layout, credential
headers, pagination walking and HTTP failure classification. It performs no
retries and no request signing.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Mapping
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from packages.banklog_sdk.auth import AuthContext, resolve_user
from packages.banklog_sdk.config import MAX_PAGE_SIZE, BankLogSdkConfig
from packages.banklog_sdk.errors import BankLogTransportError, map_http_error
from packages.banklog_sdk.filters import QueryParams
from packages.banklog_sdk.resource import LogResource
from packages.banklog_shared.config import API_HOSTS
from packages.banklog_shared.http import AsyncHttpClient, HttpClientError
from packages.banklog_shared.logging import get_logger, log_context
from packages.banklog_shared.logging import fields

_LOGGER = get_logger(__name__)

RawRecord = Mapping[str, Any]


class ResourceGateway(Protocol):
    """Network boundary consumed by ``LogResourceClient``."""

    async def fetch_by_id(
        self, resource: LogResource, id: str, user: AuthContext | None
    ) -> RawRecord:
        """Return one raw record by id."""

    def fetch_list(
        self, resource: LogResource, params: QueryParams, user: AuthContext | None
    ) -> AsyncGenerator[RawRecord, None]:
        """Yield raw records across pages until ``limit`` or exhaustion."""

    async def fetch_page(
        self, resource: LogResource, params: QueryParams, user: AuthContext | None
    ) -> tuple[list[RawRecord], str | None]:
        """Return one page of raw records and the next cursor."""

    async def fetch_binary(
        self,
        resource: LogResource,
        id: str,
        user: AuthContext | None,
        *,
        sub_resource: str = "pdf",
    ) -> bytes:
        """Return raw bytes of one entity sub-resource."""


class RestGateway:
    """``ResourceGateway`` over the shared asynchronous HTTP client."""

    def __init__(
        self,
        *,
        config: BankLogSdkConfig | None = None,
        http: AsyncHttpClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create one gateway with an injected or config-built HTTP client."""
        self._config = BankLogSdkConfig() if config is None else config
        self._http = (
            AsyncHttpClient(
                timeout_seconds=self._config.timeout_seconds,
                transport=transport,
            )
            if http is None
            else http
        )

    @classmethod
    def from_settings(cls, **kwargs: Any) -> RestGateway:
        """Create one gateway configured from loaded runtime settings."""
        return cls(config=BankLogSdkConfig.from_settings(), **kwargs)

    @property
    def default_user(self) -> AuthContext | None:
        """Return credentials used when a call passes no ``user``."""
        return self._config.default_user

    async def aclose(self) -> None:
        """Close HTTP resources owned by this gateway."""
        await self._http.aclose()

    async def __aenter__(self) -> RestGateway:
        """Enter async context manager scope."""
        return self

    async def __aexit__(self, *_: object) -> None:
        """Exit async context manager scope and close HTTP resources."""
        await self.aclose()

    async def fetch_by_id(
        self, resource: LogResource, id: str, user: AuthContext | None
    ) -> RawRecord:
        """GET ``/{version}/{endpoint}/{id}`` and unwrap the entity."""
        operation = f"{resource.name}.get"
        payload = await self._get_json(
            operation=operation,
            resource=resource,
            path=f"{resource.endpoint}/{quote(id, safe='')}",
            user=user,
        )
        return _unwrap_record(operation, payload, resource.singular_key)

    async def fetch_page(
        self, resource: LogResource, params: QueryParams, user: AuthContext | None
    ) -> tuple[list[RawRecord], str | None]:
        """GET one page of ``/{version}/{endpoint}`` and unwrap entities."""
        operation = f"{resource.name}.page"
        payload = await self._get_json(
            operation=operation,
            resource=resource,
            path=resource.endpoint,
            user=user,
            params=params,
        )
        return _unwrap_page(operation, payload, resource.plural_key)

    async def fetch_list(
        self, resource: LogResource, params: QueryParams, user: AuthContext | None
    ) -> AsyncGenerator[RawRecord, None]:
        """Walk pages lazily, fetching the next page only when needed."""
        remaining = params.get("limit")
        page_params: QueryParams = {
            key: value for key, value in params.items() if key not in ("limit", "cursor")
        }
        cursor: str | None = None

        while remaining is None or remaining > 0:
            request_params = dict(page_params)
            request_params["limit"] = (
                self._config.page_size
                if remaining is None
                else min(int(remaining), self._config.page_size, MAX_PAGE_SIZE)
            )
            if cursor is not None:
                request_params["cursor"] = cursor

            records, cursor = await self.fetch_page(resource, request_params, user)
            for record in records:
                if remaining is not None:
                    if remaining <= 0:
                        return
                    remaining = int(remaining) - 1
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
        """GET ``/{version}/{endpoint}/{id}/{sub_resource}`` as raw bytes."""
        operation = f"{resource.name}.{sub_resource}"
        path = f"{resource.endpoint}/{quote(id, safe='')}/{sub_resource}"
        resolved = resolve_user(user, self.default_user, operation=operation)
        url = self._url(resolved, path)
        with log_context({fields.HTTP_METHOD: "GET", fields.HTTP_PATH: path}):
            _LOGGER.debug("Fetching binary resource")
            try:
                return await self._http.get_bytes(url, headers=self._headers(resolved))
            except HttpClientError as exc:
                raise map_http_error(operation=operation, error=exc) from exc

    async def _get_json(
        self,
        *,
        operation: str,
        resource: LogResource,
        path: str,
        user: AuthContext | None,
        params: QueryParams | None = None,
    ) -> Any:
        """Issue one authenticated GET and map failures to SDK errors."""
        resolved = resolve_user(user, self.default_user, operation=operation)
        url = self._url(resolved, path)
        with log_context({fields.HTTP_METHOD: "GET", fields.HTTP_PATH: path}):
            _LOGGER.debug("Requesting %s", resource.name)
            try:
                return await self._http.get_json(
                    url,
                    params=dict(params or {}),
                    headers=self._headers(resolved),
                )
            except HttpClientError as exc:
                mapped = map_http_error(operation=operation, error=exc)
                _LOGGER.debug("Request failed: %s", mapped)
                raise mapped from exc

    def _url(self, user: AuthContext, path: str) -> str:
        """Build one absolute API URL for a resource path."""
        host = self._config.base_url or API_HOSTS[user.environment]
        return f"{host.rstrip('/')}/{self._config.version}/{path}"

    def _headers(self, user: AuthContext) -> dict[str, str]:
        """Build request headers for one call."""
        return {
            **user.credential_headers(),
            "User-Agent": self._config.user_agent,
            "Accept-Language": self._config.language,
            "Content-Type": "application/json",
        }


def _unwrap_record(operation: str, payload: Any, key: str) -> RawRecord:
    """Return ``payload[key]`` when it is a JSON object."""
    record = payload.get(key) if isinstance(payload, Mapping) else None
    if not isinstance(record, Mapping):
        raise BankLogTransportError(
            message=f"{operation} response is missing the {key!r} object",
            operation=operation,
        )
    return record


def _unwrap_page(
    operation: str, payload: Any, key: str
) -> tuple[list[RawRecord], str | None]:
    """Return ``payload[key]`` records and a normalized cursor."""
    if not isinstance(payload, Mapping):
        raise BankLogTransportError(
            message=f"{operation} response must be an object",
            operation=operation,
        )
    records = payload.get(key)
    if not isinstance(records, list) or not all(
        isinstance(item, Mapping) for item in records
    ):
        raise BankLogTransportError(
            message=f"{operation} response is missing the {key!r} array",
            operation=operation,
        )
    cursor = payload.get("cursor")
    if cursor is not None and not isinstance(cursor, str):
        raise BankLogTransportError(
            message=f"{operation} response cursor must be a string",
            operation=operation,
        )
    return list(records), cursor or None
