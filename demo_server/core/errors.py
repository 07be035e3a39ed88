"""Error Hierarchy — typed, categorized exceptions for all server failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Request errors are recoverable (error response); startup/transport errors are fatal
    - to_response() produces the error Response; jsonrpc_code_for() maps its code to JSON-RPC
    - No internal details leaked in client-facing messages

Design Decisions:
    - Single hierarchy with DemoServerError base: dispatcher catches all in one place
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone

from demo_server.core.domain_types import ContentType, RequestId
from demo_server.schemas.capability import Response, TextContent


# JSON-RPC error codes (JSON-RPC 2.0 + MCP resource-not-found)
JSONRPC_INVALID_PARAMS = -32602
JSONRPC_INTERNAL_ERROR = -32603
MCP_RESOURCE_NOT_FOUND = -32002

_JSONRPC_CODES = {
    "UNKNOWN_CAPABILITY": MCP_RESOURCE_NOT_FOUND,
    "VALIDATION_ERROR": JSONRPC_INVALID_PARAMS,
}


def jsonrpc_code_for(error_code: str | None) -> int:
    """JSON-RPC error code for an error Response's error_code."""
    return _JSONRPC_CODES.get(error_code or "", JSONRPC_INTERNAL_ERROR)


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    TRANSPORT = "transport"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    capability: str | None = None
    request_id: RequestId | None = None
    uri: str | None = None


class DemoServerError(Exception):
    """Base exception for all demo server errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    @property
    def recoverable(self) -> bool:
        return self.severity != ErrorSeverity.CRITICAL

    def to_response(self) -> Response:
        """Convert to an error Response: one text item carrying the message."""
        return Response(
            content=[TextContent(type=ContentType.TEXT, text=self.message)],
            is_error=True,
            error_code=self.code,
        )

    def to_log_extra(self) -> dict:
        """Fields surfaced by the JSON log formatter."""
        return {
            "error_code": self.code,
            "capability": self.context.capability,
            "request_id": self.context.request_id,
            "uri": self.context.uri,
        }


# ─── Request Errors (recovered per request) ─────────────────────

class UnknownCapabilityError(DemoServerError):
    """No capability registered under the requested name or URI."""

    def __init__(self, name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Capability '{name}' does not exist.",
            "UNKNOWN_CAPABILITY", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )
        self.name = name


class ShapeValidationError(DemoServerError):
    """Request parameters do not satisfy the declared input shape."""

    def __init__(
        self,
        capability: str,
        details: list[dict[str, str]],
        context: ErrorContext | None = None,
    ):
        fields = ", ".join(
            f"{d['field']}: {d['message']}" for d in details
        ) or "invalid parameters"
        super().__init__(
            f"Invalid parameters for '{capability}' ({fields})",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.details = details

    @property
    def fields(self) -> list[str]:
        return [d["field"] for d in self.details]


class HandlerExecutionError(DemoServerError):
    """Handler raised an unexpected exception."""

    def __init__(self, capability: str, context: ErrorContext | None = None):
        super().__init__(
            f"Capability '{capability}' failed with an unexpected error.",
            "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.ERROR, context,
        )


# ─── Fatal Errors (startup / transport) ─────────────────────────

class DuplicateCapabilityError(DemoServerError):
    """A capability with the same name is already registered."""

    def __init__(self, name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Capability '{name}' is already registered.",
            "DUPLICATE_CAPABILITY", ErrorCategory.CONFLICT,
            ErrorSeverity.CRITICAL, context,
        )
        self.name = name


class TransportConnectError(DemoServerError):
    """The stdio transport could not be established."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Error connecting server: {message}",
            "TRANSPORT_CONNECT_ERROR", ErrorCategory.TRANSPORT,
            ErrorSeverity.CRITICAL, context,
        )
