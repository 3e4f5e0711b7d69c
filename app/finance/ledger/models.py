"""
Ledger models for account balances.

This module defines the models behind the account ledger:
- Account: A cash position (bank account or petty cash) with a stored balance
- LedgerEntry: An immutable record of one balance movement

Every change to Account.current_balance is accompanied by exactly one
LedgerEntry carrying the before/after snapshot, so the stored balance can
always be re-derived:

    current_balance == initial_balance + Σ increases - Σ decreases

Usage:
    from finance.ledger.models import Account, AccountType, Currency

    account = Account.objects.create(
        company=company,
        name="Maybank Current",
        type=AccountType.MAIN_BANK,
        bank_name="Maybank",
        currency=Currency.MYR,
        initial_balance=Decimal("1000.00"),
        current_balance=Decimal("1000.00"),
    )

    account.get_ledger_balance()  # Decimal("1000.00")
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models
from django.db.models import F, Q, Sum, Value
from django.db.models.functions import Coalesce

from core.managers import SoftDeleteManager
from core.model_mixins import SoftDeleteMixin, UUIDPrimaryKeyMixin
from core.models import BaseModel

ZERO = Decimal("0.00")

# Columns written only by the ledger (see TransactionLedger.append)
LEDGER_MANAGED_FIELDS = ("initial_balance", "current_balance")


class Currency(models.TextChoices):
    """Currencies the business operates in."""

    MYR = "MYR", "Malaysian Ringgit"
    JPY = "JPY", "Japanese Yen"


class AccountType(models.TextChoices):
    """
    Types of cash accounts.

    Values:
        MAIN_BANK: Bank account (requires bank_name)
        PETTY_CASH: Cash float held by a custodian (requires custodian)
    """

    MAIN_BANK = "main_bank", "Main Bank"
    PETTY_CASH = "petty_cash", "Petty Cash"


class Direction(models.TextChoices):
    """Direction of a balance movement."""

    INCREASE = "increase", "Increase"
    DECREASE = "decrease", "Decrease"


def opposite_direction(direction: str) -> Direction:
    """Return the direction that undoes ``direction``."""
    if direction == Direction.INCREASE:
        return Direction.DECREASE
    return Direction.INCREASE


class Account(UUIDPrimaryKeyMixin, SoftDeleteMixin, BaseModel):
    """
    A cash account whose balance is maintained by the ledger.

    Fields:
        id: UUID primary key (from UUIDPrimaryKeyMixin)
        company: Owning company (its allow_negative_balance applies here)
        name: Display name
        type: main_bank or petty_cash
        currency: MYR or JPY
        initial_balance: Opening balance, fixed at creation
        current_balance: Authoritative cash position
        is_active: Inactive accounts accept no new entries
        version: Optimistic locking version, bumped on every write

    Note:
        initial_balance and current_balance are never written by save() on an
        existing row. The ledger updates current_balance with a
        compare-and-swap on version; everything else goes through save().
    """

    objects = SoftDeleteManager()
    all_objects = models.Manager()

    company = models.ForeignKey(
        "finance.Company",
        on_delete=models.PROTECT,
        related_name="accounts",
    )
    name = models.CharField(max_length=200)
    type = models.CharField(
        max_length=20,
        choices=AccountType.choices,
        help_text="Category of this account",
    )
    currency = models.CharField(
        max_length=3,
        choices=Currency.choices,
        default=Currency.MYR,
    )

    # Bank account details
    bank_name = models.CharField(max_length=200, null=True, blank=True)
    account_number = models.CharField(max_length=100, null=True, blank=True)

    # Petty cash details
    custodian = models.CharField(max_length=200, null=True, blank=True)

    initial_balance = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=ZERO,
        help_text="Opening balance when the account was created",
    )
    current_balance = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=ZERO,
        help_text="Current balance, maintained by the ledger",
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Whether this account accepts new ledger entries",
    )
    version = models.PositiveIntegerField(
        default=1,
        help_text="Version for optimistic locking - incremented on each write",
    )

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["company", "is_active"], name="account_company_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(type="main_bank") | Q(bank_name__isnull=False),
                name="bank_account_requires_bank_name",
            ),
            models.CheckConstraint(
                condition=~Q(type="petty_cash") | Q(custodian__isnull=False),
                name="petty_cash_requires_custodian",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.currency})"

    def clean(self) -> None:
        errors = {}
        if self.type == AccountType.MAIN_BANK and not self.bank_name:
            errors["bank_name"] = "Bank accounts must have a bank name."
        if self.type == AccountType.PETTY_CASH and not self.custodian:
            errors["custodian"] = "Petty cash accounts must have a custodian."
        if errors:
            raise DjangoValidationError(errors)

    def save(self, *args, **kwargs):
        """
        Save with version auto-increment for optimistic locking.

        Updates skip the ledger-managed balance columns so a stale instance
        can never overwrite a balance written by the ledger.
        """
        is_update = not self._state.adding and not kwargs.get("force_insert", False)
        if is_update:
            self.version = F("version") + 1
            update_fields = kwargs.get("update_fields")
            if update_fields is None:
                update_fields = [
                    field.name
                    for field in self._meta.concrete_fields
                    if not field.primary_key and field.name not in LEDGER_MANAGED_FIELDS
                ]
            else:
                update_fields = [
                    name for name in update_fields if name not in LEDGER_MANAGED_FIELDS
                ]
                if "version" not in update_fields:
                    update_fields.append("version")
            kwargs["update_fields"] = update_fields
        super().save(*args, **kwargs)
        if is_update:
            self.refresh_from_db(fields=["version"])

    def get_ledger_balance(self) -> Decimal:
        """
        Re-derive the balance from the opening balance and ledger entries.

        Returns:
            initial_balance plus all increases minus all decreases

        Note:
            This performs a database query. current_balance is the value to
            use in normal operation; this is for reconciliation.
        """
        decimal_field = models.DecimalField(max_digits=15, decimal_places=2)
        totals = self.ledger_entries.aggregate(
            increases=Coalesce(
                Sum("amount", filter=Q(direction=Direction.INCREASE)),
                Value(ZERO),
                output_field=decimal_field,
            ),
            decreases=Coalesce(
                Sum("amount", filter=Q(direction=Direction.DECREASE)),
                Value(ZERO),
                output_field=decimal_field,
            ),
        )
        return self.initial_balance + totals["increases"] - totals["decreases"]


class LedgerEntryQuerySet(models.QuerySet):
    """QuerySet helpers for ledger entries."""

    def active(self) -> LedgerEntryQuerySet:
        """Entries that are neither reversals nor already reversed."""
        return self.filter(is_reversal=False, reversal__isnull=True)

    def for_document(self, document_id) -> LedgerEntryQuerySet:
        return self.filter(document_id=document_id)


class LedgerEntry(UUIDPrimaryKeyMixin, models.Model):
    """
    An immutable record of one balance movement on one account.

    Entries are never updated or deleted. A wrong or obsolete entry is
    neutralised by a reversal entry pointing at it through ``reverses``.

    Fields:
        id: UUID primary key (from UUIDPrimaryKeyMixin)
        account: Account whose balance moved
        document: Document that caused the movement
        direction: increase or decrease
        amount: Positive amount moved
        balance_before: Account balance immediately before this entry
        balance_after: Account balance immediately after this entry
        description: e.g. "Payment received - WIF-RCP-20251113-001"
        is_reversal: Whether this entry undoes another
        reverses: The entry undone by this one (reversals only)
        metadata: Arbitrary JSON data (reversal reason, backfill flags)
        created_by: Identifier of the user/process that caused the entry

    Constraints:
        - amount must be positive
        - an entry can be reversed at most once (reverses is one-to-one)
    """

    objects = LedgerEntryQuerySet.as_manager()

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Timestamp when this entry was recorded",
    )

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )
    document = models.ForeignKey(
        "finance.Document",
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )
    direction = models.CharField(
        max_length=10,
        choices=Direction.choices,
    )
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        help_text="Amount moved (always positive)",
    )
    balance_before = models.DecimalField(max_digits=15, decimal_places=2)
    balance_after = models.DecimalField(max_digits=15, decimal_places=2)

    description = models.TextField(blank=True, default="")
    is_reversal = models.BooleanField(default=False, db_index=True)
    reverses = models.OneToOneField(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="reversal",
        help_text="Entry neutralised by this reversal",
    )
    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Arbitrary JSON data for extensibility",
    )
    created_by = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Identifier of service/user that created this entry",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "Ledger entries"
        indexes = [
            models.Index(fields=["document", "is_reversal"], name="ledger_entry_document_idx"),
            models.Index(fields=["account", "created_at"], name="ledger_entry_account_time_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="ledger_entry_amount_positive",
            ),
            models.CheckConstraint(
                condition=Q(is_reversal=False, reverses__isnull=True)
                | Q(is_reversal=True, reverses__isnull=False),
                name="ledger_entry_reversal_has_target",
            ),
        ]

    def __str__(self) -> str:
        sign = "+" if self.direction == Direction.INCREASE else "-"
        return f"{sign}{self.amount} {self.account.currency}: {self.description}"

    @property
    def signed_amount(self) -> Decimal:
        if self.direction == Direction.INCREASE:
            return self.amount
        return -self.amount
