"""
Pytest fixtures shared by the ledger and document tests.

Sections:
    - Company Fixtures
    - Account Fixtures: MYR accounts at 0.00 and 1000.00, a JPY account
    - Document Fixtures: Builders for documents on a given account
"""

from decimal import Decimal

import pytest

from finance.ledger.models import Currency
from finance.ledger.tests.factories import AccountFactory, CompanyFactory
from finance.state_machines import DocumentStatus, DocumentType
from finance.tests.factories import DocumentFactory

# ==========================================================================
# Company Fixtures
# ==========================================================================


@pytest.fixture
def company(db):
    """Company with negative balances disallowed (the default)."""
    return CompanyFactory()


@pytest.fixture
def overdraft_company(db):
    """Company that allows accounts to go below zero."""
    return CompanyFactory(allow_negative_balance=True)


# ==========================================================================
# Account Fixtures
# ==========================================================================


@pytest.fixture
def empty_account(company):
    """MYR bank account opened at 0.00."""
    return AccountFactory(company=company, initial_balance=Decimal("0.00"))


@pytest.fixture
def funded_account(company):
    """MYR bank account opened at 1000.00."""
    return AccountFactory(company=company, initial_balance=Decimal("1000.00"))


@pytest.fixture
def overdraft_account(overdraft_company):
    """MYR bank account at 0.00 owned by a company allowing overdrafts."""
    return AccountFactory(company=overdraft_company, initial_balance=Decimal("0.00"))


@pytest.fixture
def jpy_account(company):
    """JPY petty cash float opened at 50,000."""
    return AccountFactory(
        company=company,
        petty_cash=True,
        currency=Currency.JPY,
        initial_balance=Decimal("50000.00"),
    )


# ==========================================================================
# Document Fixtures
# ==========================================================================


@pytest.fixture
def make_document(db):
    """
    Build a document on an account, owned by the account's company.

    Example:
        receipt = make_document(account, amount=Decimal("200.00"))
        sop = make_document(
            account,
            document_type=DocumentType.STATEMENT_OF_PAYMENT,
            amount=Decimal("500.00"),
            transaction_fee=Decimal("20.00"),
            status=DocumentStatus.COMPLETED,
        )
    """

    def _make(account, **kwargs):
        kwargs.setdefault("company", account.company)
        return DocumentFactory(account=account, **kwargs)

    return _make


@pytest.fixture
def completed_receipt(make_document, funded_account):
    """Completed 200.00 receipt on the funded account (effect not applied)."""
    return make_document(
        funded_account,
        document_type=DocumentType.RECEIPT,
        amount=Decimal("200.00"),
        status=DocumentStatus.COMPLETED,
    )
