"""Public banklog SDK interface: typed async readers over banking API logs."""

from packages.banklog_sdk import corporate_card_log, invoice_log, utility_payment_log
from packages.banklog_sdk.auth import AuthContext
from packages.banklog_sdk.client import (
    LogResourceClient,
    PdfLogResourceClient,
    gateway_scope,
)
from packages.banklog_sdk.config import SDK_VERSION, BankLogSdkConfig
from packages.banklog_sdk.corporate_card_log import CorporateCardLog
from packages.banklog_sdk.errors import (
    BankLogApiError,
    BankLogAuthError,
    BankLogNotFoundError,
    BankLogRateLimitError,
    BankLogSdkError,
    BankLogTransportError,
    BankLogValidationError,
    SdkErrorDetail,
)
from packages.banklog_sdk.filters import LogFilter, LogPage
from packages.banklog_sdk.gateway import ResourceGateway, RestGateway
from packages.banklog_sdk.invoice_log import InvoiceLog
from packages.banklog_sdk.resource import Identifiable, LogResource
from packages.banklog_sdk.utility_payment_log import UtilityPaymentLog

AuthError = BankLogAuthError
NotFound = BankLogNotFoundError
RateLimitError = BankLogRateLimitError
TransportError = BankLogTransportError
ValidationError = BankLogValidationError

__version__ = SDK_VERSION

__all__ = [
    "AuthContext",
    "AuthError",
    "BankLogApiError",
    "BankLogAuthError",
    "BankLogNotFoundError",
    "BankLogRateLimitError",
    "BankLogSdkConfig",
    "BankLogSdkError",
    "BankLogTransportError",
    "BankLogValidationError",
    "CorporateCardLog",
    "Identifiable",
    "InvoiceLog",
    "LogFilter",
    "LogPage",
    "LogResource",
    "LogResourceClient",
    "NotFound",
    "PdfLogResourceClient",
    "RateLimitError",
    "ResourceGateway",
    "RestGateway",
    "SdkErrorDetail",
    "TransportError",
    "UtilityPaymentLog",
    "ValidationError",
    "corporate_card_log",
    "gateway_scope",
    "invoice_log",
    "utility_payment_log",
]
