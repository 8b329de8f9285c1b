"""Settings loading with deterministic precedence.

The cascade is always:
1) CLI params
2) Environment variables
3) ~/.config/banklog/banklog.yaml (or an explicit ``config_path``)
4) Model defaults

Environment variable format:
- Prefix: ``BANKLOG_``
- Nested keys: ``__`` separator
- Example: ``BANKLOG_API__ENVIRONMENT=production`` -> ``api.environment``
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from pydantic_settings import SettingsConfigDict

from .models import BankLogSettings


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> BankLogSettings:
    """Load settings by applying the standard precedence cascade."""
    settings_cls = _settings_class(config_path)
    return settings_cls(**dict(cli_params or {}))


def _settings_class(config_path: str | Path | None) -> type[BankLogSettings]:
    """Return the settings class bound to one YAML file location."""
    if config_path is None:
        return BankLogSettings

    resolved = Path(config_path)
    if resolved.exists() and not resolved.is_file():
        raise ValueError(f"Config path must be a file: {resolved}")

    class _FileBankLogSettings(BankLogSettings):
        model_config = SettingsConfigDict(yaml_file=resolved)

    return _FileBankLogSettings
