"""
End-to-end tests for document lifecycles and account balances.

These tests drive documents through DocumentService only and check the
account balances and ledger history that result.
"""

from decimal import Decimal

import pytest

from finance.ledger.models import Currency, LedgerEntry
from finance.ledger.reconciliation import BalanceReconciler
from finance.ledger.services import TransactionLedger
from finance.services import DocumentService
from finance.state_machines import DocumentStatus, DocumentType


def _balance(account):
    account.refresh_from_db()
    return account.current_balance


def _create(account, document_type, amount, **kwargs):
    kwargs.setdefault("currency", account.currency)
    result = DocumentService.create_document(
        company=account.company,
        document_type=document_type,
        amount=Decimal(amount),
        account=account,
        **kwargs,
    )
    assert result.success, result.error
    return result.data


class TestBalanceScenarios:
    def test_payment_from_empty_account_with_overdraft(self, overdraft_account):
        sop = _create(overdraft_account, DocumentType.STATEMENT_OF_PAYMENT, "500.00")
        assert _balance(overdraft_account) == Decimal("0.00")

        result = DocumentService.complete(sop)

        assert result.success
        assert _balance(overdraft_account) == Decimal("-500.00")

    def test_payment_from_empty_account_without_overdraft(self, empty_account):
        sop = _create(empty_account, DocumentType.STATEMENT_OF_PAYMENT, "500.00")

        result = DocumentService.complete(sop)

        assert result.error_code == "INSUFFICIENT_BALANCE"
        assert _balance(empty_account) == Decimal("0.00")
        assert sop.status == DocumentStatus.DRAFT

    def test_foreign_currency_receipt_rejected(self, funded_account):
        receipt = _create(
            funded_account, DocumentType.RECEIPT, "300.00", currency=Currency.JPY
        )

        result = DocumentService.complete(receipt)

        assert result.error_code == "CURRENCY_MISMATCH"
        assert _balance(funded_account) == Decimal("1000.00")

    def test_editing_completed_receipt(self, funded_account):
        receipt = _create(funded_account, DocumentType.RECEIPT, "200.00")
        DocumentService.complete(receipt)
        assert _balance(funded_account) == Decimal("1200.00")

        DocumentService.update_document(receipt, amount=Decimal("500.00"))

        assert _balance(funded_account) == Decimal("1500.00")
        entries = TransactionLedger.get_entries_for_document(receipt.id)
        assert len(entries) == 3
        assert [e.is_reversal for e in entries] == [False, True, False]

    def test_payment_voucher_is_authorization_only(self, funded_account):
        voucher = _create(funded_account, DocumentType.PAYMENT_VOUCHER, "1000.00")

        for step in (DocumentService.issue, DocumentService.complete):
            assert step(voucher).success
            assert _balance(funded_account) == Decimal("1000.00")

        assert voucher.status == DocumentStatus.COMPLETED
        assert not LedgerEntry.objects.exists()

    def test_payment_deducts_amount_plus_fee(self, funded_account):
        sop = _create(
            funded_account,
            DocumentType.STATEMENT_OF_PAYMENT,
            "500.00",
            transaction_fee=Decimal("20.00"),
        )
        assert sop.total_deducted == Decimal("520.00")

        DocumentService.complete(sop)

        assert _balance(funded_account) == Decimal("480.00")


class TestRoundTrips:
    def test_complete_then_delete_restores_balance(self, funded_account):
        receipt = _create(funded_account, DocumentType.RECEIPT, "100.00")

        DocumentService.complete(receipt)
        DocumentService.delete_document(receipt)

        assert _balance(funded_account) == Decimal("1000.00")

    def test_complete_then_cancel_restores_balance(self, funded_account):
        sop = _create(
            funded_account,
            DocumentType.STATEMENT_OF_PAYMENT,
            "300.00",
            transaction_fee=Decimal("2.50"),
        )

        DocumentService.complete(sop)
        assert _balance(funded_account) == Decimal("697.50")
        DocumentService.cancel(sop)

        assert _balance(funded_account) == Decimal("1000.00")

    def test_edit_then_delete_restores_balance(self, funded_account):
        receipt = _create(funded_account, DocumentType.RECEIPT, "200.00")
        DocumentService.complete(receipt)
        DocumentService.update_document(receipt, amount=Decimal("350.00"))

        DocumentService.delete_document(receipt)

        assert _balance(funded_account) == Decimal("1000.00")
        assert TransactionLedger.get_active_entry(receipt.id) is None


class TestLedgerInvariants:
    @pytest.fixture
    def busy_account(self, funded_account):
        """Account after a mixed day of documents, some edited, deleted or rejected."""
        receipts = [
            _create(funded_account, DocumentType.RECEIPT, amount)
            for amount in ("150.00", "75.25", "980.00")
        ]
        payments = [
            _create(
                funded_account,
                DocumentType.STATEMENT_OF_PAYMENT,
                amount,
                transaction_fee=Decimal("1.00"),
            )
            for amount in ("400.00", "2500.00")
        ]
        for document in receipts + payments:
            DocumentService.complete(document)
        DocumentService.update_document(receipts[0], amount=Decimal("160.00"))
        DocumentService.delete_document(receipts[1])
        DocumentService.cancel(payments[0])
        return funded_account

    def test_stored_balance_matches_ledger(self, busy_account):
        assert _balance(busy_account) == busy_account.get_ledger_balance()
        assert BalanceReconciler.find_discrepancies() == []

    def test_expected_final_balance(self, busy_account):
        # 1000 + 160 + 980 (payments: 401 cancelled, 2501 rejected)
        assert _balance(busy_account) == Decimal("2140.00")

    def test_at_most_one_active_entry_per_document(self, busy_account):
        for document_id in LedgerEntry.objects.values_list("document_id", flat=True).distinct():
            assert LedgerEntry.objects.for_document(document_id).active().count() <= 1

    def test_every_entry_snapshot_chains(self, busy_account):
        entries = LedgerEntry.objects.filter(account=busy_account).order_by("created_at")
        balance = busy_account.initial_balance
        for entry in entries:
            assert entry.balance_before == balance
            assert entry.balance_after == balance + entry.signed_amount
            balance = entry.balance_after
        assert balance == _balance(busy_account)

    def test_no_completed_document_lacks_its_effect(self, busy_account):
        assert BalanceReconciler.find_missing_effects() == []
