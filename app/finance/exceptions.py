"""
Finance-specific exceptions for document operations.

Ledger errors (balances, currencies, reversals) live in
finance.ledger.exceptions; this module covers the document workflow and
concurrency control shared by both.

Exception Hierarchy:
    FinanceError (base for the document domain)
    ├── DocumentNotFoundError - Document lookup failures
    ├── DocumentValidationError - Invalid document input
    └── DocumentLockedError - Edits to cancelled or deleted documents

    StaleRecordError - Optimistic locking conflict (inherits ConflictError)
    InvalidStateTransitionError - FSM transition not allowed (inherits ConflictError)

Usage:
    from finance.exceptions import StaleRecordError, InvalidStateTransitionError

    if rows_updated == 0:
        raise StaleRecordError(
            f"Account {pk} was modified by another process",
            details={"pk": str(pk), "expected_version": 3, "current_version": 5}
        )

    raise InvalidStateTransitionError(
        "Cannot mark_paid document in 'draft' state",
        details={"current_state": "draft", "action": "mark_paid"}
    )
"""

from __future__ import annotations

from core.exceptions import BaseApplicationError, ConflictError


# =============================================================================
# Document Domain Exceptions
# =============================================================================


class FinanceError(BaseApplicationError):
    """
    Base exception for finance document operations.

    Example:
        try:
            DocumentService.update_document(document, amount=Decimal("50.00"))
        except FinanceError as e:
            logger.warning("Document update rejected: %s", e.error_code)
    """

    default_error_code: str = "FINANCE_ERROR"


class DocumentNotFoundError(FinanceError):
    """Raised when a document cannot be found (or has been deleted)."""

    default_error_code: str = "DOCUMENT_NOT_FOUND"


class DocumentValidationError(FinanceError):
    """
    Raised when document input is invalid.

    Use for:
    - Non-positive amounts or negative fees
    - Unsupported currencies
    - Fields that do not apply to the document type

    Example:
        raise DocumentValidationError(
            "Document amount must be positive",
            details={"amount": str(amount)},
        )
    """

    default_error_code: str = "DOCUMENT_VALIDATION_ERROR"


class DocumentLockedError(FinanceError):
    """Raised when editing a document that is cancelled or deleted."""

    default_error_code: str = "DOCUMENT_LOCKED"


# =============================================================================
# Concurrency Control Exceptions
# =============================================================================


class StaleRecordError(ConflictError):
    """
    Raised when optimistic locking detects concurrent modification.

    The record was modified by another process between read and update.
    The caller should retry the operation with fresh data or abort.

    Attributes:
        details: Contains pk, expected_version, and current_version

    Note:
        Inherits from ConflictError (HTTP 409) because it represents a
        state conflict that prevents the operation.
    """

    default_error_code: str = "CONCURRENT_MODIFICATION"


class InvalidStateTransitionError(ConflictError):
    """
    Raised when a django-fsm transition is not allowed from the current state.

    Wraps django_fsm.TransitionNotAllowed with the document's current status
    and the attempted action.
    """

    default_error_code: str = "INVALID_STATE_TRANSITION"
