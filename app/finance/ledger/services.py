"""
Transaction ledger service.

TransactionLedger is the only code path that changes an account balance.
Each append locks the account row, validates the movement, writes the new
balance with a version compare-and-swap and records the entry with its
before/after snapshot, all inside one database transaction.

Usage:
    from finance.ledger.services import TransactionLedger, ledger
    from finance.ledger.types import AppendEntryParams

    account = ledger.open_account(
        company,
        name="Maybank Current",
        account_type=AccountType.MAIN_BANK,
        currency=Currency.MYR,
        bank_name="Maybank",
        initial_balance=Decimal("1000.00"),
    )

    entry = ledger.append(AppendEntryParams(
        account_id=account.id,
        document_id=receipt.id,
        direction=Direction.INCREASE,
        amount=Decimal("200.00"),
        currency="MYR",
        description="Payment received - WIF-RCP-20251113-001",
    ))

    ledger.get_balance(account.id)  # Money(MYR 1,200.00)
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.exceptions import ValidationError
from finance.exceptions import StaleRecordError

from .exceptions import (
    AccountInactive,
    AccountNotFound,
    DuplicateEffect,
    InvalidLedgerAmount,
)
from .models import ZERO, Account, AccountType, Direction, LedgerEntry
from .types import AppendEntryParams, Money, to_decimal
from .validators import BalanceValidator

if TYPE_CHECKING:
    from finance.models import Company

logger = logging.getLogger(__name__)


class TransactionLedger:
    """
    Service class for ledger writes and balance queries.

    Key features:
    - Row lock on the account for read → validate → write
    - Optimistic version check on every balance write
    - Immutable entries with balance snapshots
    - Defensive duplicate check: one active entry per document

    All methods are static - no instance state is maintained.
    """

    # ==========================================================================
    # Accounts
    # ==========================================================================

    @staticmethod
    def open_account(
        company: Company,
        name: str,
        account_type: AccountType | str,
        currency: str,
        initial_balance: Decimal = ZERO,
        bank_name: str | None = None,
        account_number: str | None = None,
        custodian: str | None = None,
    ) -> Account:
        """
        Create an account with its opening balance.

        The opening balance seeds both initial_balance and current_balance;
        from then on only append() moves current_balance.

        Raises:
            ValidationError: If type-specific details are missing
        """
        errors: dict[str, list[str]] = {}
        if account_type == AccountType.MAIN_BANK and not bank_name:
            errors["bank_name"] = ["Bank accounts must have a bank name."]
        if account_type == AccountType.PETTY_CASH and not custodian:
            errors["custodian"] = ["Petty cash accounts must have a custodian."]
        if errors:
            raise ValidationError(
                "Invalid account configuration",
                error_code="INVALID_ACCOUNT",
                details=errors,
            )

        opening = to_decimal(initial_balance)
        account = Account.objects.create(
            company=company,
            name=name,
            type=account_type,
            currency=currency,
            bank_name=bank_name,
            account_number=account_number,
            custodian=custodian,
            initial_balance=opening,
            current_balance=opening,
        )
        logger.info(
            "Opened account %s",
            account.id,
            extra={
                "account_id": str(account.id),
                "company_id": str(company.id),
                "currency": currency,
                "initial_balance": str(opening),
            },
        )
        return account

    @staticmethod
    def get_account(account_id: uuid.UUID) -> Account:
        """
        Get a live (not soft-deleted) account by ID.

        Raises:
            AccountNotFound: If account doesn't exist or is soft-deleted
        """
        try:
            return Account.objects.get(id=account_id)
        except Account.DoesNotExist:
            raise AccountNotFound(
                f"Account {account_id} not found",
                details={"account_id": str(account_id)},
            )

    @staticmethod
    def deactivate_account(account_id: uuid.UUID) -> Account:
        """
        Mark an account inactive.

        Inactive accounts accept no new entries but keep their history.
        """
        account = TransactionLedger.get_account(account_id)
        account.is_active = False
        account.save(update_fields=["is_active", "updated_at"])
        return account

    @staticmethod
    def reactivate_account(account_id: uuid.UUID) -> Account:
        account = TransactionLedger.get_account(account_id)
        account.is_active = True
        account.save(update_fields=["is_active", "updated_at"])
        return account

    @staticmethod
    def retire_account(account_id: uuid.UUID) -> Account:
        """Soft-delete an account. Its entries and balance are preserved."""
        account = TransactionLedger.get_account(account_id)
        account.soft_delete()
        return account

    # ==========================================================================
    # Writes
    # ==========================================================================

    @staticmethod
    def append(params: AppendEntryParams) -> LedgerEntry:
        """
        Append an entry and move the account balance by its amount.

        Reversal entries skip the balance validator: they undo a movement
        that was validated when it was applied.

        Args:
            params: Entry parameters

        Returns:
            The created LedgerEntry

        Raises:
            InvalidLedgerAmount: If amount is not positive
            AccountNotFound: If the account is missing or soft-deleted
            AccountInactive: If the account is inactive
            StaleRecordError: If the account version moved underneath us
            DuplicateEffect: If the document already has an active entry
            CurrencyMismatch: If the document currency differs from the account
            InsufficientBalance: If a decrease would overdraw the account
        """
        amount = to_decimal(params.amount)
        if amount <= 0:
            raise InvalidLedgerAmount(
                f"Ledger amount must be positive, got {amount}",
                details={"amount": str(amount), "document_id": str(params.document_id)},
            )

        with transaction.atomic():
            account = (
                Account.all_objects.select_for_update()
                .filter(pk=params.account_id)
                .first()
            )
            if account is None or account.is_deleted:
                raise AccountNotFound(
                    f"Account {params.account_id} not found",
                    details={"account_id": str(params.account_id)},
                )
            if not account.is_active:
                raise AccountInactive(
                    f"Account {account.id} is inactive",
                    details={"account_id": str(account.id)},
                )
            if (
                params.expected_version is not None
                and account.version != params.expected_version
            ):
                raise StaleRecordError(
                    f"Account {account.id} has been modified "
                    f"(expected version {params.expected_version}, "
                    f"current {account.version})",
                    details={
                        "pk": str(account.id),
                        "expected_version": params.expected_version,
                        "current_version": account.version,
                    },
                )

            if not params.is_reversal:
                if LedgerEntry.objects.for_document(params.document_id).active().exists():
                    raise DuplicateEffect(
                        f"Document {params.document_id} already has an active ledger entry",
                        details={"document_id": str(params.document_id)},
                    )
                BalanceValidator.validate(
                    account, params.direction, amount, params.currency
                )

            balance_before = account.current_balance
            if params.direction == Direction.INCREASE:
                balance_after = balance_before + amount
            else:
                balance_after = balance_before - amount

            # Compare-and-swap on version
            updated = Account.all_objects.filter(
                pk=account.pk, version=account.version
            ).update(
                current_balance=balance_after,
                version=F("version") + 1,
                updated_at=timezone.now(),
            )
            if updated == 0:
                raise StaleRecordError(
                    f"Account {account.id} was modified by another process",
                    details={
                        "pk": str(account.id),
                        "expected_version": account.version,
                    },
                )

            entry = LedgerEntry.objects.create(
                account=account,
                document_id=params.document_id,
                direction=params.direction,
                amount=amount,
                balance_before=balance_before,
                balance_after=balance_after,
                description=params.description,
                is_reversal=params.is_reversal,
                reverses_id=params.reverses_id,
                metadata=params.metadata or {},
                created_by=params.created_by,
            )

        logger.info(
            "Ledger entry %s: %s %s on account %s",
            entry.id,
            params.direction,
            amount,
            account.id,
            extra={
                "entry_id": str(entry.id),
                "account_id": str(account.id),
                "document_id": str(params.document_id),
                "direction": params.direction,
                "amount": str(amount),
                "balance_before": str(balance_before),
                "balance_after": str(balance_after),
                "is_reversal": params.is_reversal,
            },
        )
        return entry

    # ==========================================================================
    # Queries
    # ==========================================================================

    @staticmethod
    def get_balance(account_id: uuid.UUID) -> Money:
        """Return the account's stored balance as Money."""
        account = TransactionLedger.get_account(account_id)
        return Money(account.current_balance, account.currency)

    @staticmethod
    def compute_ledger_balance(account_id: uuid.UUID) -> Money:
        """Return the balance re-derived from the opening balance and entries."""
        try:
            account = Account.all_objects.get(id=account_id)
        except Account.DoesNotExist:
            raise AccountNotFound(
                f"Account {account_id} not found",
                details={"account_id": str(account_id)},
            )
        return Money(account.get_ledger_balance(), account.currency)

    @staticmethod
    def get_active_entry(document_id: uuid.UUID) -> LedgerEntry | None:
        """Return the document's non-reversed, non-reversal entry, if any."""
        return (
            LedgerEntry.objects.for_document(document_id)
            .active()
            .order_by("-created_at")
            .first()
        )

    @staticmethod
    def get_entries_for_document(document_id: uuid.UUID) -> list[LedgerEntry]:
        """All entries for a document, oldest first."""
        return list(
            LedgerEntry.objects.for_document(document_id).order_by("created_at")
        )

    @staticmethod
    def get_entries_for_account(
        account_id: uuid.UUID,
        limit: int = 100,
        offset: int = 0,
    ) -> list[LedgerEntry]:
        """Entries posted to an account, newest first."""
        return list(
            LedgerEntry.objects.filter(account_id=account_id).order_by("-created_at")[
                offset : offset + limit
            ]
        )


# Singleton instance for convenience
# Usage: from finance.ledger.services import ledger
ledger = TransactionLedger()
