"""Error Hierarchy — typed, categorized exceptions for all snapshot API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; upstream errors (500-level) are critical
    - to_response() produces the REST envelope {"error": message}
    - Upstream error text is embedded in the message; no retries anywhere

Design Decisions:
    - Single hierarchy with SnapshotApiError base: FastAPI global handler catches all
    - Flat {"error": "..."} envelope: the web client reads response.data.error
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


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
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    CANCELLED = "cancelled"
    INTERNAL = "internal"


class UpstreamStage(str, Enum):
    """Which Azure call failed; each maps to a distinct message prefix."""
    CLIENT_INIT = "Failed to create snapshots client"
    CREATE_SUBMIT = "Failed to initiate snapshot creation"
    CREATE_POLL = "Failed to create snapshot"
    DELETE_SUBMIT = "Failed to initiate snapshot deletion"
    DELETE_POLL = "Failed to delete snapshot"
    LIST_PAGE = "Failed to list snapshots"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource_group: str | None = None
    snapshot_name: str | None = None


class SnapshotApiError(Exception):
    """Base exception for all snapshot API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {"error": self.message}

    def log_extra(self) -> dict:
        """Fields surfaced by the JSON log formatter."""
        return {
            "error_code": self.code,
            "resource_group": self.context.resource_group,
            "snapshot_name": self.context.snapshot_name,
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class NotLoggedInError(SnapshotApiError):
    """An operation needing Azure access ran before a successful login."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Not logged in to Azure",
            "NOT_LOGGED_IN", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class SnapshotNotFoundError(SnapshotApiError):
    """Snapshot lookup failed (missing snapshot or lookup error alike)."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"Snapshot not found: {detail}",
            "SNAPSHOT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class RequestCancelledError(SnapshotApiError):
    """Client disconnected while a long-running operation was pending."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Client disconnected before {operation} completed",
            "REQUEST_CANCELLED", ErrorCategory.CANCELLED,
            ErrorSeverity.WARNING, context, 499,
        )
        self.operation = operation


# ─── Upstream Errors (500-level) ────────────────────────────────

class AzureLoginError(SnapshotApiError):
    """Device-code login against Azure AD failed."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to login to Azure: {detail}",
            "AZURE_LOGIN_FAILED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


class AzureUpstreamError(SnapshotApiError):
    """An Azure Compute call failed at a given stage."""
    def __init__(
        self,
        stage: UpstreamStage,
        detail: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{stage.value}: {detail}",
            "AZURE_UPSTREAM_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.stage = stage

    def log_extra(self) -> dict:
        return {**super().log_extra(), "stage": self.stage.name.lower()}


# ─── Process-level ──────────────────────────────────────────────

class ServerStartupError(Exception):
    """Listener thread stopped before it was bound (e.g. port in use)."""
