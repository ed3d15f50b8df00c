"""Error Hierarchy — typed, categorized exceptions for all Cooler Admin failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_response() produces the dashboard envelope: {success: false, error, details}
    - Upstream failures keep the upstream HTTP status; unexpected failures are 500
    - `details` is omitted from the envelope when there is nothing to add

Design Decisions:
    - Single hierarchy with CoolerAdminError base: one FastAPI handler renders all of them
    - `action` phrases ("fetch API requests") build the user-facing message so every
      route reports failures the same way
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Extra observability context attached to an error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    path: str | None = None
    user_id: str | None = None
    debug_info: dict[str, Any] | None = None


class CoolerAdminError(Exception):
    """Base exception for all Cooler Admin errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        details: Any = None,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.details = details
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the {success, error, details} envelope."""
        body: dict[str, Any] = {"success": False, "error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


# ─── Request Errors (400-level) ─────────────────────────────────

class UnauthorizedError(CoolerAdminError):
    """Admin password or bearer token missing or wrong."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Unauthorized", "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, None, context, 401,
        )


class RequestValidationFailed(CoolerAdminError):
    """Request body or parameters rejected."""
    def __init__(
        self, message: str, details: Any = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, details, context, 400,
        )


# ─── Infrastructure Errors ──────────────────────────────────────

class UpstreamAPIError(CoolerAdminError):
    """Cooler API answered with a non-2xx status."""
    def __init__(
        self,
        action: str,
        status_code: int,
        body: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Failed to {action}: {status_code}",
            "UPSTREAM_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, body, context, status_code,
        )
        self.action = action
        self.status_code = status_code


class UpstreamUnavailableError(CoolerAdminError):
    """Cooler API unreachable, timed out, or returned an unreadable body."""
    def __init__(
        self, action: str, reason: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Failed to {action}",
            "UPSTREAM_UNAVAILABLE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, reason, context, 500,
        )
        self.action = action


class UpstreamRejectedError(CoolerAdminError):
    """Cooler API answered 2xx but reported success: false."""
    def __init__(
        self, action: str, reason: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Failed to {action}",
            "UPSTREAM_REJECTED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, reason, context, 502,
        )
        self.action = action


class DatabaseError(CoolerAdminError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, message, context, 500,
        )
        self.operation = operation
