"""
Pytest fixtures for core tests.

The core mixins and managers are exercised through the finance models
that use them.
"""

from decimal import Decimal

import pytest

from finance.ledger.tests.factories import AccountFactory, CompanyFactory
from finance.tests.factories import DocumentFactory


@pytest.fixture
def company(db):
    return CompanyFactory()


@pytest.fixture
def funded_account(company):
    return AccountFactory(company=company, initial_balance=Decimal("1000.00"))


@pytest.fixture
def make_document(db):
    def _make(account, **kwargs):
        kwargs.setdefault("company", account.company)
        return DocumentFactory(account=account, **kwargs)

    return _make
