"""Error Hierarchy — typed, categorized exceptions for all InviteGate failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; upstream errors (502) are critical
    - to_response() produces the single REST error envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with InviteGateError base: one FastAPI handler catches all
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
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    GONE = "gone"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    identity: str | None = None
    invite_code: str | None = None
    category: str | None = None
    upstream_status: int | None = None
    debug_info: dict[str, Any] | None = None


class InviteGateError(Exception):
    """Base exception for all InviteGate errors."""

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
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "identity": self.context.identity,
                    "invite_code": self.context.invite_code,
                    "category": self.context.category,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class NotConnectedError(InviteGateError):
    """No identity could be resolved from the session."""
    def __init__(self, message: str = "Not connected", context: ErrorContext | None = None):
        super().__init__(
            message, "NOT_CONNECTED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class OAuthStateError(InviteGateError):
    """OAuth callback arrived without a matching pending state."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "OAUTH_STATE_INVALID", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 400,
        )


class NotEligibleError(InviteGateError):
    """Identity has no stored record or failed the eligibility snapshot."""
    def __init__(self, identity: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.identity = identity
        super().__init__(
            "User not eligible", "NOT_ELIGIBLE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, ctx, 403,
        )


class AlreadyClaimedError(InviteGateError):
    """Identity already holds a claim record."""
    def __init__(self, identity: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.identity = identity
        super().__init__(
            "Already claimed", "ALREADY_CLAIMED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )


class InvalidCategoryError(InviteGateError):
    """Invite category is neither restricted nor open."""
    def __init__(self, category: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.category = category
        super().__init__(
            f"Unknown invite category '{category}'", "INVALID_CATEGORY",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, ctx, 400,
        )
        self.invalid_category = category


class CodeNotFoundError(InviteGateError):
    """No bundle holds the presented code."""
    def __init__(self, code: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.invite_code = code
        super().__init__(
            "Invite code not found", "CODE_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.WARNING, ctx, 404,
        )


class CodeExpiredError(InviteGateError):
    """Code exists but its expiry has passed."""
    def __init__(self, code: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.invite_code = code
        super().__init__(
            "Invite expired", "CODE_EXPIRED", ErrorCategory.GONE,
            ErrorSeverity.WARNING, ctx, 410,
        )


class CodeExhaustedError(InviteGateError):
    """Code exists but every allowed use is spent."""
    def __init__(self, code: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.invite_code = code
        super().__init__(
            "Invite exhausted", "CODE_EXHAUSTED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class ConfigurationError(InviteGateError):
    """A required setting is missing."""
    def __init__(self, setting: str, context: ErrorContext | None = None):
        super().__init__(
            f"Missing {setting} in configuration", "CONFIGURATION_ERROR",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL, context, 500,
        )
        self.setting = setting


class UpstreamTransportError(InviteGateError):
    """Network failure or non-2xx response from OAuth or GraphQL upstream."""
    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.upstream_status = status_code
        prefix = f"HTTP {status_code}: " if status_code is not None else ""
        super().__init__(
            f"{service} request failed: {prefix}{message}",
            "UPSTREAM_TRANSPORT_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 502,
        )
        self.service = service
        self.status_code = status_code


class UpstreamProtocolError(InviteGateError):
    """Upstream answered 2xx but reported errors or an unusable payload."""
    def __init__(self, service: str, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"{service} error: {message}",
            "UPSTREAM_PROTOCOL_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.service = service
