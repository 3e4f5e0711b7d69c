"""
Ledger engine: the document-facing entry points of the ledger.

The document service calls the engine inside its own transaction whenever a
document changes in a way that can move money:

    on_document_completed(document)        status entered "completed"
    on_document_deleted(event)             tombstone written
    on_document_amount_changed(old, new)   financial fields of a completed
                                           document changed
    reverse(document, reason)              effect withdrawn (cancellation)

Every entry point returns a ServiceResult. Business-rule rejections come
back as failures carrying the ledger error's code and details; the engine's
own savepoint is rolled back, and the caller decides whether to roll back
the surrounding document change (DocumentService always does).

Usage:
    from finance.ledger.engine import ledger_engine

    result = ledger_engine.on_document_completed(document)
    if not result:
        transaction.set_rollback(True)
        return result
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.services import BaseService, ServiceResult
from finance.exceptions import StaleRecordError

from .exceptions import DuplicateEffect, LedgerError
from .models import Direction, LedgerEntry
from .resolver import effect_for_document
from .reversal import ReversalEngine, ReversalReason
from .services import TransactionLedger
from .types import AppendEntryParams, DocumentDeleted, DocumentSnapshot

if TYPE_CHECKING:
    from typing import Any

    from finance.models import Document

# =============================================================================
# Entry descriptions
# =============================================================================

DESCRIPTION_BY_DIRECTION = {
    Direction.INCREASE: "Payment received - {number}",
    Direction.DECREASE: "Payment made - {number}",
}


def _snapshot(document: Document | DocumentSnapshot) -> DocumentSnapshot:
    if isinstance(document, DocumentSnapshot):
        return document
    return DocumentSnapshot.from_document(document)


class LedgerEngine(BaseService):
    """
    Applies and withdraws document balance effects.

    Guarantees:
    - At most one active entry per document
    - Effect and balance commit together or not at all
    - A document deleted or edited after completion leaves the balance as
      if only its current state had ever been applied
    """

    # ==========================================================================
    # Public API
    # ==========================================================================

    def on_document_completed(
        self,
        document: Document | DocumentSnapshot,
        created_by: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ServiceResult[LedgerEntry | None]:
        """
        Apply the balance effect of a newly completed document.

        Documents without an effect (invoices, payment vouchers, documents
        without an account) succeed with no entry.

        Returns:
            ServiceResult with the new entry (or None), or a failure with
            DUPLICATE_EFFECT, CURRENCY_MISMATCH, INSUFFICIENT_BALANCE,
            ACCOUNT_INACTIVE, ACCOUNT_NOT_FOUND or CONCURRENT_MODIFICATION
        """
        snapshot = _snapshot(document)
        return self._run(
            "apply",
            snapshot.id,
            lambda: self._apply(snapshot, created_by=created_by, metadata=metadata),
        )

    def on_document_deleted(
        self, event: DocumentDeleted
    ) -> ServiceResult[LedgerEntry | None]:
        """
        Withdraw the effect of a soft-deleted document.

        Only the first deletion (NULL → non-NULL tombstone) of a completed
        document reverses anything. Deleting a draft or re-deleting a
        tombstoned document succeeds with no entry.
        """
        previous = event.previous
        if not event.is_first_deletion:
            self.get_logger().debug(
                "Document %s already deleted, nothing to reverse",
                previous.id,
                extra={"document_id": str(previous.id)},
            )
            return ServiceResult.success(None)
        if effect_for_document(previous).is_none:
            return ServiceResult.success(None)

        return self._run(
            "reverse",
            previous.id,
            lambda: ReversalEngine.reverse(
                previous.id,
                ReversalReason.DOCUMENT_DELETED,
                document_number=previous.document_number,
                created_by=event.deleted_by,
            ),
        )

    def on_document_amount_changed(
        self,
        old: Document | DocumentSnapshot,
        new: Document | DocumentSnapshot,
        created_by: str | None = None,
    ) -> ServiceResult[LedgerEntry | None]:
        """
        Re-apply a completed document after its amount, fee, currency or
        account changed.

        Reverses the effect recorded for ``old`` and applies ``new`` as one
        atomic unit: if the new effect is rejected, the reversal is rolled
        back too and the balance keeps the old effect.

        Returns:
            ServiceResult with the new entry (None if the new state has no
            effect)
        """
        old_snapshot = _snapshot(old)
        new_snapshot = _snapshot(new)

        def reapply() -> LedgerEntry | None:
            ReversalEngine.reverse(
                old_snapshot.id,
                ReversalReason.DOCUMENT_EDITED,
                document_number=old_snapshot.document_number,
                created_by=created_by,
            )
            return self._apply(new_snapshot, created_by=created_by)

        return self._run("reapply", new_snapshot.id, reapply)

    def reverse(
        self,
        document: Document | DocumentSnapshot,
        reason: str = ReversalReason.DOCUMENT_CANCELLED,
        created_by: str | None = None,
    ) -> ServiceResult[LedgerEntry | None]:
        """Withdraw a document's effect, e.g. when a completed document is cancelled."""
        snapshot = _snapshot(document)
        return self._run(
            "reverse",
            snapshot.id,
            lambda: ReversalEngine.reverse(
                snapshot.id,
                reason,
                document_number=snapshot.document_number,
                created_by=created_by,
            ),
        )

    # ==========================================================================
    # Internals
    # ==========================================================================

    def _apply(
        self,
        snapshot: DocumentSnapshot,
        created_by: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> LedgerEntry | None:
        effect = effect_for_document(snapshot)
        if effect.is_none or snapshot.account_id is None:
            return None

        existing = TransactionLedger.get_active_entry(snapshot.id)
        if existing is not None:
            raise DuplicateEffect(
                f"Document {snapshot.document_number} already has an active ledger entry",
                details={
                    "document_id": str(snapshot.id),
                    "entry_id": str(existing.id),
                },
            )

        return TransactionLedger.append(
            AppendEntryParams(
                account_id=snapshot.account_id,
                document_id=snapshot.id,
                direction=effect.direction,
                amount=effect.amount,
                currency=snapshot.currency,
                description=DESCRIPTION_BY_DIRECTION[effect.direction].format(
                    number=snapshot.document_number
                ),
                metadata=metadata or {},
                created_by=created_by,
            )
        )

    def _run(self, operation: str, document_id, func) -> ServiceResult[LedgerEntry | None]:
        """Run ``func`` in a savepoint and convert ledger errors to failures."""
        context = {"operation": operation, "document_id": str(document_id)}
        try:
            with self.atomic():
                entry = func()
        except DuplicateEffect as e:
            return self.handle_exception(
                e, context=f"Duplicate balance effect for document {document_id}", extra=context
            )
        except (LedgerError, StaleRecordError) as e:
            return self.handle_exception(
                e,
                context=f"Ledger {operation} rejected for document {document_id}",
                log_level=logging.WARNING,
                extra=context,
            )
        return ServiceResult.success(entry)


# Singleton instance for convenience
# Usage: from finance.ledger.engine import ledger_engine
ledger_engine = LedgerEngine()
