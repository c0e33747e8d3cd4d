"""Error conventions for registry operations.

Every failing registry operation raises one of the exceptions below. Each
exception carries a machine-readable ``ErrorCode`` and an ``ErrorCategory``
and can render itself as a tagged outcome dict for the host dispatch layer.

Usage:
    from nft_registry.ledger.errors import InvalidTokenId, ErrorCode

    try:
        registry.owner_of(99)
    except InvalidTokenId as e:
        e.code           # ErrorCode.INVALID_TOKEN_ID
        e.to_dict()      # {"success": False, "error": ..., "code": ...}

Two families exist:
- LedgerError: failures of the ledger state machine (transfer, approve, burn)
- ConstrainedError: failures of the public self-mint path
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - VALIDATION: Caller provided bad input
    - PERMISSION: Caller not authorized
    - RESOURCE: Token not found
    - TEMPORAL: Outside an allowed time window
    - SYSTEM: Registry misconfiguration
    """

    VALIDATION = "validation"
    PERMISSION = "permission"
    RESOURCE = "resource"
    TEMPORAL = "temporal"
    SYSTEM = "system"


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Ledger errors
    UNAUTHORIZED = "unauthorized"
    INVALID_TOKEN_ID = "invalid_token_id"
    ZERO_ADDRESS = "zero_address"
    OWNERSHIP_MISMATCH = "ownership_mismatch"

    # Public mint errors
    TIME_ERROR = "time_error"

    # Initialization errors
    INVALID_DATE = "invalid_date"


@dataclass
class ErrorResponse:
    """Standardized error response.

    All error responses include:
    - success: Always False
    - error: Human-readable message
    - code: Machine-readable error code
    - category: Error category (validation, permission, etc.)
    - retriable: Whether the operation should be retried
    - details: Optional additional context
    """

    success: bool = False  # Always False for errors
    error: str = ""
    code: str = ""
    category: str = ""
    retriable: bool = False
    details: dict[str, object] | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


class RegistryError(Exception):
    """Base class for all registry failures."""

    code: ErrorCode = ErrorCode.UNAUTHORIZED
    category: ErrorCategory = ErrorCategory.PERMISSION

    def __init__(self, message: str, **details: object) -> None:
        self.message = message
        self.details: dict[str, object] = dict(details)
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error=self.message,
            code=self.code.value,
            category=self.category.value,
            retriable=False,
            details=self.details or None,
        )

    def to_dict(self) -> dict[str, object]:
        """Render as a tagged outcome dict."""
        return self.to_response().to_dict()


# Ledger errors


class LedgerError(RegistryError):
    """A ledger state-machine operation was rejected."""


class Unauthorized(LedgerError):
    """Caller failed the authorization check for the operation."""

    code = ErrorCode.UNAUTHORIZED
    category = ErrorCategory.PERMISSION


class InvalidTokenId(LedgerError):
    """Token id is outside ``0..total_supply``."""

    code = ErrorCode.INVALID_TOKEN_ID
    category = ErrorCategory.RESOURCE

    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(f"Invalid token id: {token_id}", token_id=token_id)


class ZeroAddress(LedgerError):
    """Transfer target is the burn sentinel."""

    code = ErrorCode.ZERO_ADDRESS
    category = ErrorCategory.VALIDATION


class OwnershipMismatch(LedgerError):
    """Caller-supplied ``from`` is not the token's real owner."""

    code = ErrorCode.OWNERSHIP_MISMATCH
    category = ErrorCategory.VALIDATION


# Public mint errors


class ConstrainedError(RegistryError):
    """The public self-mint path was rejected."""


class MintUnauthorized(ConstrainedError):
    """Bad URI or recipient not whitelisted.

    Both reasons share one code; ``details["reason"]`` tells them apart
    (``"invalid_uri"`` or ``"not_whitelisted"``).
    """

    code = ErrorCode.UNAUTHORIZED
    category = ErrorCategory.PERMISSION

    def __init__(self, message: str, reason: str, **details: object) -> None:
        self.reason = reason
        super().__init__(message, reason=reason, **details)


class TimeError(ConstrainedError):
    """Current time is outside the public mint window."""

    code = ErrorCode.TIME_ERROR
    category = ErrorCategory.TEMPORAL


# Initialization errors


class InitError(RegistryError):
    """Registry could not be initialized (fatal)."""

    code = ErrorCode.INVALID_DATE
    category = ErrorCategory.SYSTEM
