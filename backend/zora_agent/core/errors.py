"""Error Hierarchy — typed, categorized exceptions for all Zora Agent failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; provider errors (502) are critical
    - to_response() produces the REST envelope used by the global error handlers
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ZoraAgentError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
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
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    RATE_LIMIT = "rate_limit"
    EXTERNAL_API = "external_api"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    path: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_seconds: int | None = None


class ZoraAgentError(Exception):
    """Base exception for all Zora Agent errors."""

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
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }
        if self.context.retry_after_seconds is not None:
            body["retryAfter"] = self.context.retry_after_seconds
        return body


# ─── Client Errors (400-level) ──────────────────────────────────

class SearchQueryRequiredError(ZoraAgentError):
    """Search endpoint called without a usable query."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Search query required", "SEARCH_QUERY_REQUIRED",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context, 400,
        )


class InvalidComparisonError(ZoraAgentError):
    """Comparison requested with too few, too many or duplicate cards."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_COMPARISON", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class WebhookVerificationError(ZoraAgentError):
    """Payment webhook payload or signature rejected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "WEBHOOK_VERIFICATION_FAILED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidDevUserError(ZoraAgentError):
    """Dev user switcher asked for a profile that does not exist."""
    def __init__(self, profile_id: str, context: ErrorContext | None = None):
        super().__init__(
            "Invalid user ID", "INVALID_USER_ID", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.profile_id = profile_id


class AuthenticationRequiredError(ZoraAgentError):
    """Operation needs a logged-in user."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Not authenticated", "AUTHENTICATION_REQUIRED",
            ErrorCategory.AUTHENTICATION, ErrorSeverity.WARNING, context, 401,
        )


class ProSubscriptionRequiredError(ZoraAgentError):
    """Pro-gated feature requested without pro status."""
    def __init__(self, feature: str, context: ErrorContext | None = None):
        super().__init__(
            f"Pro subscription required for {feature}",
            "PRO_SUBSCRIPTION_REQUIRED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.feature = feature


class ResourceNotFoundError(ZoraAgentError):
    """Requested resource does not exist (or is not visible to the caller)."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class RateLimitExceededError(ZoraAgentError):
    """Client exceeded the request budget of the current window."""
    def __init__(self, retry_after_seconds: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.retry_after_seconds = retry_after_seconds
        super().__init__(
            "Too many requests", "RATE_LIMIT_EXCEEDED",
            ErrorCategory.RATE_LIMIT, ErrorSeverity.WARNING, ctx, 429,
        )


# ─── Provider Errors (502) ──────────────────────────────────────

class PaymentProviderError(ZoraAgentError):
    """Payment provider call failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Payment provider error: {message}", "PAYMENT_PROVIDER_ERROR",
            ErrorCategory.EXTERNAL_API, ErrorSeverity.CRITICAL, context, 502,
        )


class IdentityProviderError(ZoraAgentError):
    """OAuth identity provider call failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Identity provider error: {message}", "IDENTITY_PROVIDER_ERROR",
            ErrorCategory.EXTERNAL_API, ErrorSeverity.CRITICAL, context, 502,
        )


class MarketDataError(ZoraAgentError):
    """Market-data provider call failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Market data error: {message}", "MARKET_DATA_ERROR",
            ErrorCategory.EXTERNAL_API, ErrorSeverity.CRITICAL, context, 502,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageError(ZoraAgentError):
    """A data file exists but cannot be read or decoded."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}", "STORAGE_ERROR",
            ErrorCategory.STORAGE, ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
