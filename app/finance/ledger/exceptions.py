"""
Ledger-specific exceptions for balance operations.

This module provides a hierarchy of exceptions for ledger operations,
inheriting from the core exception base class for consistent error
payloads.

Exception Hierarchy:
    LedgerError (base)
    ├── AccountNotFound - Account missing or soft-deleted
    ├── AccountInactive - Operations on deactivated accounts
    ├── CurrencyMismatch - Document currency differs from account currency
    ├── InsufficientBalance - Decrease would overdraw the account
    ├── InvalidLedgerAmount - Zero or negative entry amount
    ├── DuplicateEffect - Document already has an active entry
    └── ReversalTargetMissing - Nothing to reverse for a document

Usage:
    from finance.ledger.exceptions import CurrencyMismatch, InsufficientBalance

    raise InsufficientBalance(
        account.id,
        required=Decimal("500.00"),
        available=Decimal("0.00"),
        currency="MYR",
    )
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    import uuid
    from typing import Any


class LedgerError(BaseApplicationError):
    """
    Base exception for all ledger operations.

    Ledger errors are business-rule rejections: they are never retried and
    leave both the account and the document unchanged.
    """

    default_error_code: str = "LEDGER_ERROR"


class AccountNotFound(LedgerError):
    """Raised when an account does not exist or has been soft-deleted."""

    default_error_code: str = "ACCOUNT_NOT_FOUND"


class AccountInactive(LedgerError):
    """
    Raised when attempting to post to an inactive account.

    Accounts can be deactivated but their history is preserved.
    """

    default_error_code: str = "ACCOUNT_INACTIVE"


class InvalidLedgerAmount(LedgerError):
    """Raised when an entry amount is zero or negative."""

    default_error_code: str = "INVALID_LEDGER_AMOUNT"


class CurrencyMismatch(LedgerError):
    """
    Raised when a document's currency differs from its account's currency.

    Attributes:
        document_currency: Currency on the document
        account_currency: Currency of the account
    """

    default_error_code: str = "CURRENCY_MISMATCH"

    def __init__(
        self,
        account_id: uuid.UUID,
        document_currency: str,
        account_currency: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.account_id = account_id
        self.document_currency = document_currency
        self.account_currency = account_currency

        full_details = {
            "account_id": str(account_id),
            "document_currency": document_currency,
            "account_currency": account_currency,
        }
        if details:
            full_details.update(details)

        super().__init__(
            message=(
                f"Currency mismatch: document is {document_currency} "
                f"but account is {account_currency}"
            ),
            error_code=error_code,
            details=full_details,
        )


class InsufficientBalance(LedgerError):
    """
    Raised when a decrease would take an account below zero.

    Attributes:
        account_id: The UUID of the account with insufficient funds
        required: The amount the operation needs
        available: The account's current balance
        shortfall: How much is missing (required - available)
    """

    default_error_code: str = "INSUFFICIENT_BALANCE"

    def __init__(
        self,
        account_id: uuid.UUID,
        required: Decimal,
        available: Decimal,
        currency: str = "",
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.account_id = account_id
        self.required = required
        self.available = available
        self.shortfall = required - available
        self.currency = currency

        prefix = f"{currency} " if currency else ""
        message = (
            f"Insufficient balance: account has {prefix}{available:,.2f} "
            f"but operation requires {prefix}{required:,.2f}"
        )

        full_details = {
            "account_id": str(account_id),
            "currency": currency,
            "required": str(required),
            "available": str(available),
            "shortfall": str(self.shortfall),
        }
        if details:
            full_details.update(details)

        super().__init__(
            message=message,
            error_code=error_code,
            details=full_details,
        )


class DuplicateEffect(LedgerError):
    """
    Raised when a document that already has an active entry gets another.

    This indicates a caller bug (an effect applied twice) rather than a
    user error, and is logged at ERROR level by the engine.
    """

    default_error_code: str = "DUPLICATE_EFFECT"


class ReversalTargetMissing(LedgerError):
    """
    Raised when a reversal is required but the document has no active entry.

    The engine treats a missing target as a no-op; this exception is for
    callers that need to insist an effect exists (see ReversalEngine.reverse
    with ``required=True``).
    """

    default_error_code: str = "REVERSAL_TARGET_MISSING"
