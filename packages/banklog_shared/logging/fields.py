"""Canonical logging field names for structured SDK logs."""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Caller identity.
PRINCIPAL = "principal"

# Public API invocation fields.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
PUBLIC_API_INSTRUMENTATION_FAILURE_EVENT = "public_api_instrumentation_failure"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
ITEM_COUNT = "item_count"
STAGE = "stage"
CONCERN = "concern"

# Outbound HTTP fields.
HTTP_METHOD = "http_method"
HTTP_PATH = "http_path"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
