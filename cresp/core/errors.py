"""Error Hierarchy — typed, categorized exceptions for all Cresp failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by every error reply
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CrespError base: FastAPI global handler catches all (uniform error shape)
    - Duplicates map to 400, not 409: clients already branch on 400 for signup/report forms
    - ErrorContext as dataclass: observability fields without coupling to logging framework
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
    PERMISSION = "permission"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    STORAGE = "storage"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    resource_type: str | None = None
    resource_id: str | None = None
    details: dict[str, Any] | None = None


class CrespError(Exception):
    """Base exception for all Cresp errors."""

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
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        if self.context.details:
            body["details"] = self.context.details
        return {"error": body}


# ─── Domain Errors (400-level) ──────────────────────────────────

class InputValidationError(CrespError):
    """Request data failed a business validation rule."""
    def __init__(self, message: str, field: str | None = None, context: ErrorContext | None = None):
        if field:
            context = context or ErrorContext()
            context.details = {**(context.details or {}), "field": field}
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class DuplicateResourceError(CrespError):
    """Resource already exists (duplicate signup, report, waitlist entry)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "DUPLICATE_RESOURCE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )


class InvalidTokenError(CrespError):
    """Verification or reset token is unknown, expired, or consumed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_TOKEN", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class AuthenticationError(CrespError):
    """Caller is not authenticated or credentials are wrong."""
    def __init__(self, message: str = "Unauthorized", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class EmailNotVerifiedError(CrespError):
    """Login attempted before the email address was verified."""
    def __init__(self, verification_token: str | None = None, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.details = {"needs_verification": True}
        if verification_token:
            ctx.details["verification_token"] = verification_token
        super().__init__(
            "Please verify your email before logging in",
            "EMAIL_NOT_VERIFIED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, ctx, 403,
        )


class PermissionDeniedError(CrespError):
    """Authenticated caller lacks permission for the operation."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "PERMISSION_DENIED", ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(CrespError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_type = resource_type
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class StorageUnavailableError(CrespError):
    """Storage operation not offered by the configured provider."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "STORAGE_UNAVAILABLE", ErrorCategory.STORAGE,
            ErrorSeverity.WARNING, context, 403,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageError(CrespError):
    """Storage backend failed to read or write an object."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class DatabaseError(CrespError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class EmailDeliveryError(CrespError):
    """Email provider rejected or failed to deliver a message."""
    def __init__(self, provider: str, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Email provider {provider} error: {message}",
            "EMAIL_DELIVERY_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
        self.provider = provider


class ReferralCodeExhaustedError(CrespError):
    """No unique referral code could be generated within the attempt budget."""
    def __init__(self, attempts: int, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to generate unique referral code after {attempts} attempts",
            "REFERRAL_CODE_EXHAUSTED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
