"""
Data types for ledger operations.

This module defines dataclasses used throughout the ledger for type-safe
data transfer between the document service, the engine and the ledger.

Types:
    Money: A Decimal amount with its currency
    BalanceEffect: What a document does to its account's balance
    AppendEntryParams: Parameters for appending a ledger entry
    DocumentSnapshot: Frozen copy of the balance-relevant document fields
    DocumentDeleted: Event raised when a document is soft-deleted

Usage:
    from finance.ledger.types import AppendEntryParams, BalanceEffect, Money

    effect = BalanceEffect.increase(Decimal("200.00"))
    params = AppendEntryParams(
        account_id=account.id,
        document_id=document.id,
        direction=effect.direction,
        amount=effect.amount,
        description="Payment received - WIF-RCP-20251113-001",
    )
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar

from finance.ledger.models import Direction

TWO_PLACES = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce an amount to a 2-place Decimal without going through float."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWO_PLACES)


@dataclass(frozen=True)
class Money:
    """
    Represents a monetary amount.

    Amounts are Decimals with two places, matching the NUMERIC(15,2)
    columns they are stored in.

    Example:
        balance = Money(Decimal("1000.00"), "MYR")
        print(balance)  # "MYR 1,000.00"
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:,.2f}"

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot add Money with different currencies: "
                f"{self.currency} and {other.currency}"
            )
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot subtract Money with different currencies: "
                f"{self.currency} and {other.currency}"
            )
        return Money(self.amount - other.amount, self.currency)


@dataclass(frozen=True)
class BalanceEffect:
    """
    The change a document applies to its account balance.

    Either no effect (direction is None) or an increase/decrease of a
    positive amount.
    """

    direction: str | None = None
    amount: Decimal = Decimal("0.00")

    NONE: ClassVar[BalanceEffect]

    @classmethod
    def increase(cls, amount: Any) -> BalanceEffect:
        return cls(Direction.INCREASE, to_decimal(amount))

    @classmethod
    def decrease(cls, amount: Any) -> BalanceEffect:
        return cls(Direction.DECREASE, to_decimal(amount))

    @property
    def is_none(self) -> bool:
        return self.direction is None

    @property
    def signed_amount(self) -> Decimal:
        """Positive for increases, negative for decreases, zero for none."""
        if self.direction == Direction.INCREASE:
            return self.amount
        if self.direction == Direction.DECREASE:
            return -self.amount
        return Decimal("0.00")


BalanceEffect.NONE = BalanceEffect()


@dataclass
class AppendEntryParams:
    """
    Parameters for appending a ledger entry.

    Required Attributes:
        account_id: UUID of the account whose balance moves
        document_id: UUID of the document causing the movement
        direction: Direction.INCREASE or Direction.DECREASE
        amount: Positive amount

    Optional Attributes:
        currency: Document currency, checked against the account's currency
        description: Human-readable description
        is_reversal: Whether this entry undoes ``reverses_id``
        reverses_id: UUID of the entry being reversed
        expected_version: Account version the caller read; mismatch is a
            StaleRecordError
        metadata: Arbitrary JSON-serializable data
        created_by: Identifier of the user/process creating the entry
    """

    # Required fields
    account_id: uuid.UUID
    document_id: uuid.UUID
    direction: str
    amount: Decimal

    # Optional fields
    currency: str | None = None
    description: str = ""
    is_reversal: bool = False
    reverses_id: uuid.UUID | None = None
    expected_version: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_by: str | None = None


@dataclass(frozen=True)
class DocumentSnapshot:
    """
    Frozen copy of the fields that decide a document's balance effect.

    Taken before a document is changed so the engine can reverse what was
    applied even after the row itself has moved on.
    """

    id: uuid.UUID
    document_type: str
    document_number: str
    status: str
    amount: Decimal
    currency: str
    account_id: uuid.UUID | None = None
    transaction_fee: Decimal | None = None
    total_deducted: Decimal | None = None
    deleted_at: datetime | None = None

    @classmethod
    def from_document(cls, document) -> DocumentSnapshot:
        return cls(
            id=document.id,
            document_type=document.document_type,
            document_number=document.document_number,
            status=document.status,
            amount=document.amount,
            currency=document.currency,
            account_id=document.account_id,
            transaction_fee=document.transaction_fee,
            total_deducted=document.total_deducted,
            deleted_at=document.deleted_at,
        )


@dataclass(frozen=True)
class DocumentDeleted:
    """
    Event raised when a document is soft-deleted.

    Attributes:
        previous: Document state before the deletion (including its prior
            tombstone, None for a live document)
        deleted_at: The tombstone that was just written
        deleted_by: Identifier of the user/process deleting the document
    """

    previous: DocumentSnapshot
    deleted_at: datetime
    deleted_by: str | None = None

    @property
    def document_id(self) -> uuid.UUID:
        return self.previous.id

    @property
    def is_first_deletion(self) -> bool:
        """True only for a NULL to non-NULL tombstone transition."""
        return self.previous.deleted_at is None and self.deleted_at is not None
