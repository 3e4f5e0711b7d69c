"""
Reversal engine.

Undoes a document's balance effect by appending an equal and opposite
entry that points at the original through ``reverses``. The original entry
is never touched; once it has a reversal it is no longer active.

Usage:
    from finance.ledger.reversal import ReversalEngine, ReversalReason

    entry = ReversalEngine.reverse(document.id, ReversalReason.DOCUMENT_DELETED)
    if entry is None:
        # Document never had an effect (draft, invoice, already reversed)
        ...
"""

from __future__ import annotations

import logging
import uuid

from django.db import models, transaction

from .exceptions import ReversalTargetMissing
from .models import LedgerEntry, opposite_direction
from .services import TransactionLedger
from .types import AppendEntryParams

logger = logging.getLogger(__name__)


class ReversalReason(models.TextChoices):
    """Why an effect was reversed. Stored in the entry metadata."""

    DOCUMENT_DELETED = "document_deleted", "deleted"
    DOCUMENT_EDITED = "document_edited", "edited"
    DOCUMENT_CANCELLED = "document_cancelled", "cancelled"


def reversal_description(reason: str, document_number: str) -> str:
    """e.g. "Reversal (deleted) - WIF-RCP-20251113-001"."""
    return f"Reversal ({ReversalReason(reason).label}) - {document_number}"


class ReversalEngine:
    """Appends reversal entries for documents whose effect must be undone."""

    @staticmethod
    def reverse(
        document_id: uuid.UUID,
        reason: str,
        document_number: str | None = None,
        created_by: str | None = None,
        required: bool = False,
    ) -> LedgerEntry | None:
        """
        Reverse the document's active entry.

        Args:
            document_id: Document whose effect is undone
            reason: One of ReversalReason
            document_number: Used in the entry description
            created_by: Identifier of the user/process reversing
            required: Raise instead of returning None when there is nothing
                to reverse

        Returns:
            The reversal entry, or None when the document has no active entry

        Raises:
            ReversalTargetMissing: If required and there is no active entry
            LedgerError / StaleRecordError: From the underlying append
        """
        with transaction.atomic():
            original = (
                LedgerEntry.objects.for_document(document_id)
                .active()
                .select_for_update(of=("self",))
                .order_by("-created_at")
                .first()
            )
            if original is None:
                if required:
                    raise ReversalTargetMissing(
                        f"Document {document_id} has no balance effect to reverse",
                        details={"document_id": str(document_id)},
                    )
                logger.debug(
                    "Nothing to reverse for document %s",
                    document_id,
                    extra={"document_id": str(document_id), "reason": reason},
                )
                return None

            number = document_number or original.document.document_number
            entry = TransactionLedger.append(
                AppendEntryParams(
                    account_id=original.account_id,
                    document_id=document_id,
                    direction=opposite_direction(original.direction),
                    amount=original.amount,
                    description=reversal_description(reason, number),
                    is_reversal=True,
                    reverses_id=original.id,
                    metadata={
                        "reversal": True,
                        "original_transaction_id": str(original.id),
                        "reason": str(reason),
                    },
                    created_by=created_by,
                )
            )

        logger.info(
            "Reversed ledger entry %s for document %s",
            original.id,
            document_id,
            extra={
                "original_entry_id": str(original.id),
                "reversal_entry_id": str(entry.id),
                "document_id": str(document_id),
                "reason": str(reason),
            },
        )
        return entry
