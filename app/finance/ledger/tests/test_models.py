"""
Tests for ledger models.

This module tests Account and LedgerEntry behaviour, including the
database constraints that back the ledger's invariants.
"""

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from finance.ledger.models import (
    Account,
    AccountType,
    Direction,
    LedgerEntry,
    opposite_direction,
)
from finance.ledger.tests.factories import AccountFactory, LedgerEntryFactory


class TestDirection:
    def test_opposite_direction(self):
        assert opposite_direction(Direction.INCREASE) == Direction.DECREASE
        assert opposite_direction(Direction.DECREASE) == Direction.INCREASE
        assert opposite_direction("increase") == Direction.DECREASE


class TestAccount:
    """Tests for the Account model."""

    def test_str(self, funded_account):
        assert str(funded_account) == f"{funded_account.name} (MYR)"

    def test_clean_requires_bank_name_for_bank_accounts(self, company):
        account = Account(company=company, name="Bank", type=AccountType.MAIN_BANK)

        with pytest.raises(DjangoValidationError) as exc_info:
            account.clean()

        assert "bank_name" in exc_info.value.message_dict

    def test_clean_requires_custodian_for_petty_cash(self, company):
        account = Account(company=company, name="Float", type=AccountType.PETTY_CASH)

        with pytest.raises(DjangoValidationError) as exc_info:
            account.clean()

        assert "custodian" in exc_info.value.message_dict

    def test_database_rejects_bank_account_without_bank_name(self, company):
        with pytest.raises(IntegrityError), transaction.atomic():
            AccountFactory(company=company, bank_name=None)

    def test_save_increments_version(self, funded_account):
        assert funded_account.version == 1

        funded_account.name = "Renamed"
        funded_account.save()

        assert funded_account.version == 2

    def test_save_never_writes_balances_on_update(self, funded_account):
        funded_account.current_balance = Decimal("5.00")
        funded_account.initial_balance = Decimal("5.00")
        funded_account.save()

        funded_account.refresh_from_db()
        assert funded_account.current_balance == Decimal("1000.00")
        assert funded_account.initial_balance == Decimal("1000.00")

    def test_ledger_balance_sums_entries(self, funded_account):
        LedgerEntryFactory(account=funded_account, amount=Decimal("300.00"))
        LedgerEntryFactory(
            account=funded_account,
            direction=Direction.DECREASE,
            amount=Decimal("120.50"),
        )

        assert funded_account.get_ledger_balance() == Decimal("1179.50")

    def test_ledger_balance_without_entries_is_initial_balance(self, funded_account):
        assert funded_account.get_ledger_balance() == Decimal("1000.00")

    def test_soft_deleted_account_hidden_from_default_manager(self, funded_account):
        funded_account.soft_delete()

        assert not Account.objects.filter(pk=funded_account.pk).exists()
        assert Account.all_objects.filter(pk=funded_account.pk).exists()


class TestLedgerEntry:
    """Tests for the LedgerEntry model."""

    def test_signed_amount(self, funded_account):
        increase = LedgerEntryFactory(account=funded_account, amount=Decimal("10.00"))
        decrease = LedgerEntryFactory(
            account=funded_account, direction=Direction.DECREASE, amount=Decimal("4.00")
        )

        assert increase.signed_amount == Decimal("10.00")
        assert decrease.signed_amount == Decimal("-4.00")

    def test_str(self, funded_account):
        entry = LedgerEntryFactory(
            account=funded_account, amount=Decimal("10.00"), description="Payment received"
        )

        assert str(entry) == "+10.00 MYR: Payment received"

    def test_active_excludes_reversals_and_reversed(self, funded_account):
        original = LedgerEntryFactory(account=funded_account)
        reversal = LedgerEntryFactory(
            account=funded_account,
            document=original.document,
            direction=Direction.DECREASE,
            is_reversal=True,
            reverses=original,
        )
        untouched = LedgerEntryFactory(account=funded_account)

        active = set(LedgerEntry.objects.active())

        assert active == {untouched}
        assert original.reversal == reversal

    def test_amount_must_be_positive(self, funded_account):
        with pytest.raises(IntegrityError), transaction.atomic():
            LedgerEntryFactory(account=funded_account, amount=Decimal("0.00"))

    def test_reversal_requires_target(self, funded_account):
        with pytest.raises(IntegrityError), transaction.atomic():
            LedgerEntryFactory(account=funded_account, is_reversal=True, reverses=None)

    def test_entry_can_only_be_reversed_once(self, funded_account):
        original = LedgerEntryFactory(account=funded_account)
        LedgerEntryFactory(
            account=funded_account,
            document=original.document,
            direction=Direction.DECREASE,
            is_reversal=True,
            reverses=original,
        )

        with pytest.raises(IntegrityError), transaction.atomic():
            LedgerEntryFactory(
                account=funded_account,
                document=original.document,
                direction=Direction.DECREASE,
                is_reversal=True,
                reverses=original,
            )
