"""
Base exception classes for application-wide error handling.

Every domain error raised by the finance apps derives from
BaseApplicationError so callers get a uniform shape: a human-readable
message, a machine-readable error code and a details dict.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input or business rule validation failures
    ├── NotFoundError - Resource not found
    └── ConflictError - State conflicts (duplicates, concurrent modifications)

Usage:
    from core.exceptions import NotFoundError, ValidationError

    raise ValidationError("Amount must be positive", error_code="INVALID_AMOUNT")

    raise NotFoundError(
        f"Account {account_id} not found",
        error_code="ACCOUNT_NOT_FOUND",
        details={"account_id": str(account_id)},
    )

    try:
        ...
    except BaseApplicationError as e:
        payload = e.to_dict()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (amounts, identifiers, etc.)

    Example:
        try:
            ledger.append(params)
        except BaseApplicationError as e:
            logger.warning("Ledger append rejected: %s", e.error_code)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to a serializable dictionary.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Account not found",
                "error_code": "ACCOUNT_NOT_FOUND",
                "details": {"account_id": "..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input or business rule validation fails.

    Use for:
    - Invalid amounts or currencies
    - Business rule violations (insufficient balance, etc.)
    - Missing required fields

    Example:
        raise ValidationError(
            "Validation failed",
            error_code="VALIDATION_ERROR",
            details={"amount": ["Must be greater than zero"]},
        )
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Use NotFoundError for single-resource lookups where existence is
    expected. List queries should return empty results instead.
    """

    default_error_code: str = "NOT_FOUND"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Duplicate entries
    - Concurrent modification conflicts (optimistic locking)
    - Invalid state transitions

    Example:
        if document.status != "draft":
            raise ConflictError(
                f"Cannot issue document in {document.status} status",
                error_code="INVALID_STATE_TRANSITION",
                details={"current_status": document.status, "action": "issue"},
            )

    Note:
        HTTP 409 Conflict is the appropriate status for these errors.
    """

    default_error_code: str = "CONFLICT"
