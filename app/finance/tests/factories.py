"""
Factory Boy factories for document test data.

Usage:
    from finance.tests.factories import DocumentFactory

    # Draft MYR receipt for 100.00 on a new account
    receipt = DocumentFactory()

    # Completed statement of payment with a fee (no ledger entry!)
    sop = DocumentFactory(
        statement_of_payment=True,
        account=account,
        company=account.company,
        amount=Decimal("500.00"),
        transaction_fee=Decimal("20.00"),
        status=DocumentStatus.COMPLETED,
    )

Note:
    Setting status here bypasses DocumentService, so no balance effect is
    applied. That is what reconciliation tests want; lifecycle tests should
    go through DocumentService instead.
"""

from decimal import Decimal

import factory

from finance.ledger.models import Currency
from finance.ledger.tests.factories import AccountFactory, CompanyFactory
from finance.models import Document
from finance.state_machines import DocumentStatus, DocumentType

__all__ = [
    "AccountFactory",
    "CompanyFactory",
    "DocumentFactory",
]


class DocumentFactory(factory.django.DjangoModelFactory):
    """Factory for creating Document instances (draft receipt by default)."""

    class Meta:
        model = Document
        skip_postgeneration_save = True

    class Params:
        statement_of_payment = factory.Trait(
            document_type=DocumentType.STATEMENT_OF_PAYMENT,
        )

    company = factory.SubFactory(CompanyFactory)
    account = factory.SubFactory(
        AccountFactory,
        company=factory.SelfAttribute("..company"),
    )
    document_type = DocumentType.RECEIPT
    document_number = factory.Sequence(lambda n: f"WIF-TST-20251113-{n:04d}")
    status = DocumentStatus.DRAFT
    currency = Currency.MYR
    amount = Decimal("100.00")
    transaction_fee = None
    total_deducted = factory.LazyAttribute(
        lambda o: o.amount + (o.transaction_fee or Decimal("0.00"))
        if o.document_type == DocumentType.STATEMENT_OF_PAYMENT
        else None
    )
    created_by = "test_factory"
