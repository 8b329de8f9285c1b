"""Public API for shared banklog configuration utilities."""

from .loader import load_settings
from .models import (
    API_HOSTS,
    DEFAULT_CONFIG_PATH,
    ENV_PREFIX,
    ApiSettings,
    BankLogSettings,
    LoggingSettings,
)

__all__ = [
    "API_HOSTS",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "ApiSettings",
    "BankLogSettings",
    "LoggingSettings",
    "load_settings",
]
