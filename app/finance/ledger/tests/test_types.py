"""Tests for ledger data types."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from finance.ledger.types import BalanceEffect, DocumentDeleted, DocumentSnapshot, Money


def _snapshot(deleted_at=None):
    return DocumentSnapshot(
        id=uuid.uuid4(),
        document_type="receipt",
        document_number="WIF-RCP-20251113-001",
        status="completed",
        amount=Decimal("100.00"),
        currency="MYR",
        deleted_at=deleted_at,
    )


class TestMoney:
    def test_str_formats_with_currency_and_separators(self):
        assert str(Money(Decimal("1000"), "MYR")) == "MYR 1,000.00"

    def test_amount_is_quantized_to_two_places(self):
        assert Money("12.5", "MYR").amount == Decimal("12.50")
        assert Money(Decimal("5"), "JPY").amount == Decimal("5.00")

    def test_add_same_currency(self):
        total = Money(Decimal("10.00"), "MYR") + Money(Decimal("2.50"), "MYR")

        assert total == Money(Decimal("12.50"), "MYR")

    def test_add_different_currency_raises(self):
        with pytest.raises(ValueError, match="different currencies"):
            Money(Decimal("10.00"), "MYR") + Money(Decimal("10.00"), "JPY")

    def test_subtract_can_go_negative(self):
        result = Money(Decimal("10.00"), "MYR") - Money(Decimal("25.00"), "MYR")

        assert result.amount == Decimal("-15.00")


class TestBalanceEffect:
    def test_none_has_no_direction(self):
        assert BalanceEffect.NONE.is_none
        assert BalanceEffect.NONE.signed_amount == Decimal("0.00")

    def test_signed_amount(self):
        assert BalanceEffect.increase(Decimal("5")).signed_amount == Decimal("5.00")
        assert BalanceEffect.decrease(Decimal("5")).signed_amount == Decimal("-5.00")


class TestDocumentDeleted:
    def test_first_deletion(self):
        event = DocumentDeleted(previous=_snapshot(), deleted_at=datetime.now(timezone.utc))

        assert event.is_first_deletion
        assert event.document_id == event.previous.id

    def test_redeletion_is_not_first(self):
        earlier = datetime(2025, 11, 13, tzinfo=timezone.utc)
        event = DocumentDeleted(
            previous=_snapshot(deleted_at=earlier),
            deleted_at=datetime.now(timezone.utc),
        )

        assert not event.is_first_deletion
