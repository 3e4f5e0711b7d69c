"""
Finance services.

- DocumentService: Document lifecycle wired to the ledger engine
- DocumentNumberService: Sequential document numbers
"""

from finance.services.document_service import DocumentService
from finance.services.numbering import DocumentNumberService

__all__ = [
    "DocumentNumberService",
    "DocumentService",
]
