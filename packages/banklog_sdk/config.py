"""Runtime configuration primitives for banklog SDK gateways."""

from __future__ import annotations

from dataclasses import dataclass

from packages.banklog_sdk.auth import AuthContext
from packages.banklog_shared.config import BankLogSettings, load_settings

SDK_VERSION = "0.1.0"
MAX_PAGE_SIZE = 100


@dataclass(frozen=True, slots=True)
class BankLogSdkConfig:
    """Connection defaults for one banklog gateway."""

    base_url: str = ""
    version: str = "v2"
    language: str = "en-US"
    timeout_seconds: float = 15.0
    page_size: int = MAX_PAGE_SIZE
    default_user: AuthContext | None = None

    @property
    def user_agent(self) -> str:
        """Return the ``User-Agent`` header value."""
        return f"banklog-sdk/{SDK_VERSION}"

    @classmethod
    def from_settings(cls, settings: BankLogSettings | None = None) -> BankLogSdkConfig:
        """Build one gateway config from loaded runtime settings."""
        resolved = load_settings() if settings is None else settings
        api = resolved.api
        return cls(
            base_url=api.base_url,
            version=api.version,
            language=api.language,
            timeout_seconds=api.timeout_seconds,
            page_size=min(api.page_size, MAX_PAGE_SIZE),
            default_user=_settings_user(resolved),
        )


def _settings_user(settings: BankLogSettings) -> AuthContext | None:
    """Return credentials configured in settings, when complete."""
    api = settings.api
    token = api.access_token.get_secret_value()
    if api.user_id == "" or token == "":
        return None
    return AuthContext(
        id=api.user_id,
        access_token=token,
        environment=api.environment,
        workspace_id=api.workspace_id or None,
    )
