"""Tests for DocumentNumberService."""

from datetime import date

import pytest

from finance.ledger.tests.factories import CompanyFactory
from finance.models import DocumentCounter
from finance.services import DocumentNumberService
from finance.state_machines import DocumentType


class TestFormatNumber:
    @pytest.mark.parametrize(
        "document_type,expected",
        [
            (DocumentType.INVOICE, "WIF-INV-20251113-001"),
            (DocumentType.RECEIPT, "WIF-RCP-20251113-001"),
            (DocumentType.PAYMENT_VOUCHER, "WIF-PV-20251113-001"),
            (DocumentType.STATEMENT_OF_PAYMENT, "WIF-SOP-20251113-001"),
        ],
    )
    def test_type_prefixes(self, document_type, expected):
        assert DocumentNumberService.format_number(document_type, date(2025, 11, 13), 1) == expected

    def test_uses_configured_prefix_and_padding(self, settings):
        settings.DOCUMENT_NUMBER_PREFIX = "ACME"
        settings.DOCUMENT_NUMBER_PADDING = 5

        number = DocumentNumberService.format_number(DocumentType.INVOICE, date(2025, 1, 2), 42)

        assert number == "ACME-INV-20250102-00042"

    def test_sequence_wider_than_padding_is_not_truncated(self):
        number = DocumentNumberService.format_number(
            DocumentType.RECEIPT, date(2025, 11, 13), 1234
        )

        assert number == "WIF-RCP-20251113-1234"


class TestNextNumber:
    def test_sequence_increments_per_day(self, company):
        day = date(2025, 11, 13)

        first = DocumentNumberService.next_number(company, DocumentType.INVOICE, day)
        second = DocumentNumberService.next_number(company, DocumentType.INVOICE, day)

        assert first == "WIF-INV-20251113-001"
        assert second == "WIF-INV-20251113-002"
        assert DocumentCounter.objects.get(company=company, date_key="20251113").counter == 2

    def test_sequence_restarts_each_day(self, company):
        DocumentNumberService.next_number(company, DocumentType.INVOICE, date(2025, 11, 13))

        number = DocumentNumberService.next_number(
            company, DocumentType.INVOICE, date(2025, 11, 14)
        )

        assert number == "WIF-INV-20251114-001"

    def test_sequences_are_independent_per_type_and_company(self, company):
        day = date(2025, 11, 13)
        other_company = CompanyFactory()

        DocumentNumberService.next_number(company, DocumentType.INVOICE, day)

        assert (
            DocumentNumberService.next_number(company, DocumentType.RECEIPT, day)
            == "WIF-RCP-20251113-001"
        )
        assert (
            DocumentNumberService.next_number(other_company, DocumentType.INVOICE, day)
            == "WIF-INV-20251113-001"
        )
