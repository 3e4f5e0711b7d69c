"""
Finance domain models.

This module contains all finance models:
- Company: Issuing company and its ledger settings
- Document: Invoices, receipts, payment vouchers, statements of payment
- DocumentCounter: Per-day document number sequences
- Account: Cash account with a ledger-maintained balance
- LedgerEntry: Immutable balance movement
"""

from finance.ledger.models import Account, LedgerEntry
from finance.models.company import Company
from finance.models.counter import DocumentCounter
from finance.models.document import Document

__all__ = [
    "Account",
    "Company",
    "Document",
    "DocumentCounter",
    "LedgerEntry",
]
