"""
Document number generation.

Numbers have the form ``{PREFIX}-{TYPE}-{YYYYMMDD}-{NNN}``, e.g.
``WIF-INV-20251113-001``. The sequence restarts every day and is kept per
company and document type in DocumentCounter.

The counter row is locked and incremented in the database, so concurrent
callers always receive distinct numbers.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from finance.models import DocumentCounter
from finance.state_machines import DocumentType

if TYPE_CHECKING:
    from finance.models import Company

logger = logging.getLogger(__name__)

TYPE_PREFIXES = {
    DocumentType.INVOICE: "INV",
    DocumentType.RECEIPT: "RCP",
    DocumentType.PAYMENT_VOUCHER: "PV",
    DocumentType.STATEMENT_OF_PAYMENT: "SOP",
}


class DocumentNumberService:
    """Hands out sequential document numbers."""

    @staticmethod
    def format_number(document_type: str, on_date: date, sequence: int) -> str:
        prefix = getattr(settings, "DOCUMENT_NUMBER_PREFIX", "WIF")
        padding = getattr(settings, "DOCUMENT_NUMBER_PADDING", 3)
        type_prefix = TYPE_PREFIXES[DocumentType(document_type)]
        return f"{prefix}-{type_prefix}-{on_date:%Y%m%d}-{sequence:0{padding}d}"

    @staticmethod
    def next_number(
        company: Company,
        document_type: str,
        on_date: date | None = None,
    ) -> str:
        """
        Reserve and return the next number for the given day.

        Args:
            company: Company issuing the document
            document_type: One of DocumentType
            on_date: Document date (defaults to today)

        Returns:
            The formatted document number

        Note:
            The reservation is part of the caller's transaction. If the
            caller rolls back, the number is released with it.
        """
        on_date = on_date or timezone.localdate()
        date_key = f"{on_date:%Y%m%d}"

        with transaction.atomic():
            counter, _ = DocumentCounter.objects.select_for_update().get_or_create(
                company=company,
                document_type=document_type,
                date_key=date_key,
                defaults={"counter": 0},
            )
            DocumentCounter.objects.filter(pk=counter.pk).update(
                counter=F("counter") + 1,
                updated_at=timezone.now(),
            )
            counter.refresh_from_db(fields=["counter"])

        number = DocumentNumberService.format_number(
            document_type, on_date, counter.counter
        )
        logger.debug(
            "Reserved document number %s",
            number,
            extra={"company_id": str(company.id), "document_type": document_type},
        )
        return number
