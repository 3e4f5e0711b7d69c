"""Tests for the finance admin configuration."""

from decimal import Decimal

import pytest
from django.contrib.admin.sites import AdminSite
from django.test import RequestFactory

from finance.admin import AccountAdmin, DocumentAdmin, LedgerEntryAdmin
from finance.ledger.models import Account, AccountType, Currency, LedgerEntry
from finance.ledger.services import TransactionLedger
from finance.ledger.tests.factories import LedgerEntryFactory
from finance.models import Document
from finance.services import DocumentService
from finance.state_machines import DocumentType


@pytest.fixture
def request_obj(admin_user):
    request = RequestFactory().get("/admin/")
    request.user = admin_user
    return request


def _completed_receipt(account, amount):
    receipt = DocumentService.create_document(
        company=account.company,
        document_type=DocumentType.RECEIPT,
        amount=Decimal(amount),
        account=account,
    ).data
    assert DocumentService.complete(receipt).success
    return receipt


class TestAccountAdmin:
    def test_balances_are_read_only_on_change(self, request_obj, funded_account):
        model_admin = AccountAdmin(Account, AdminSite())

        readonly = model_admin.get_readonly_fields(request_obj, funded_account)

        assert "current_balance" in readonly
        assert "initial_balance" in readonly

    def test_initial_balance_editable_on_add(self, request_obj, db):
        model_admin = AccountAdmin(Account, AdminSite())

        readonly = model_admin.get_readonly_fields(request_obj, None)

        assert "current_balance" in readonly
        assert "initial_balance" not in readonly

    def test_new_account_starts_at_initial_balance(self, request_obj, company):
        model_admin = AccountAdmin(Account, AdminSite())
        account = Account(
            company=company,
            name="Maybank Savings",
            type=AccountType.MAIN_BANK,
            bank_name="Maybank",
            currency=Currency.MYR,
            initial_balance=Decimal("750.00"),
        )

        model_admin.save_model(request_obj, account, form=None, change=False)

        account.refresh_from_db()
        assert account.current_balance == Decimal("750.00")

    def test_ledger_balance_display(self, funded_account):
        model_admin = AccountAdmin(Account, AdminSite())

        assert model_admin.ledger_balance_display(funded_account) == "MYR 1,000.00"

    def test_lists_retired_accounts(self, request_obj, funded_account):
        funded_account.soft_delete()
        model_admin = AccountAdmin(Account, AdminSite())

        assert funded_account in model_admin.get_queryset(request_obj)


class TestDocumentAdmin:
    @pytest.fixture
    def model_admin(self):
        return DocumentAdmin(Document, AdminSite())

    def test_status_is_read_only(self, request_obj, model_admin, db):
        assert "status" in model_admin.get_readonly_fields(request_obj)

    def test_draft_money_fields_editable(
        self, request_obj, model_admin, make_document, funded_account
    ):
        draft = make_document(funded_account)

        readonly = model_admin.get_readonly_fields(request_obj, draft)

        assert "amount" not in readonly
        assert "account" not in readonly
        assert {"company", "document_type"} <= set(readonly)

    def test_completed_money_fields_frozen(self, request_obj, model_admin, completed_receipt):
        readonly = model_admin.get_readonly_fields(request_obj, completed_receipt)

        assert {
            "amount",
            "transaction_fee",
            "currency",
            "account",
            "company",
            "document_type",
        } <= set(readonly)

    def test_completed_form_has_no_money_fields(self, request_obj, model_admin, completed_receipt):
        form_class = model_admin.get_form(request_obj, completed_receipt)

        assert not {"amount", "account", "currency", "document_type", "company"} & set(
            form_class.base_fields
        )

    def test_no_add_permission(self, request_obj, model_admin, db):
        assert model_admin.has_add_permission(request_obj) is False

    def test_save_goes_through_document_service(self, request_obj, model_admin, funded_account):
        receipt = _completed_receipt(funded_account, "200.00")
        form_class = model_admin.get_form(request_obj, receipt)
        form = form_class(
            data={
                "notes": "Deposit slip 4471",
                "document_date": receipt.document_date,
                "metadata": "{}",
            },
            instance=receipt,
        )
        assert form.is_valid(), form.errors

        model_admin.save_model(request_obj, form.save(commit=False), form, change=True)

        receipt.refresh_from_db()
        assert receipt.notes == "Deposit slip 4471"
        assert receipt.amount == Decimal("200.00")
        assert TransactionLedger.get_balance(funded_account.id).amount == Decimal("1200.00")

    def test_draft_edit_recomputes_total_deducted(self, request_obj, model_admin, funded_account):
        sop = DocumentService.create_document(
            company=funded_account.company,
            document_type=DocumentType.STATEMENT_OF_PAYMENT,
            amount=Decimal("300.00"),
            account=funded_account,
            transaction_fee=Decimal("5.00"),
        ).data
        form_class = model_admin.get_form(request_obj, sop)
        form = form_class(
            data={
                "account": funded_account.pk,
                "currency": sop.currency,
                "amount": "450.00",
                "transaction_fee": "5.00",
                "document_date": sop.document_date,
                "notes": "",
                "metadata": "{}",
            },
            instance=sop,
        )
        assert form.is_valid(), form.errors

        model_admin.save_model(request_obj, form.save(commit=False), form, change=True)

        sop.refresh_from_db()
        assert sop.amount == Decimal("450.00")
        assert sop.total_deducted == Decimal("455.00")

    def test_delete_reverses_effect(self, request_obj, model_admin, funded_account):
        receipt = _completed_receipt(funded_account, "200.00")

        model_admin.delete_queryset(request_obj, Document.objects.filter(pk=receipt.pk))

        receipt.refresh_from_db()
        assert receipt.is_deleted is True
        assert TransactionLedger.get_balance(funded_account.id).amount == Decimal("1000.00")
        assert TransactionLedger.get_active_entry(receipt.id) is None


class TestLedgerEntryAdmin:
    def test_entries_are_immutable(self, request_obj, funded_account):
        entry = LedgerEntryFactory(account=funded_account)
        model_admin = LedgerEntryAdmin(LedgerEntry, AdminSite())

        assert model_admin.has_add_permission(request_obj) is False
        assert model_admin.has_change_permission(request_obj, entry) is False
        assert model_admin.has_delete_permission(request_obj, entry) is False
