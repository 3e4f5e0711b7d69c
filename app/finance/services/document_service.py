"""
Document service: the lifecycle of financial documents.

DocumentService owns every document change that can move money and runs
each one in a single database transaction together with the ledger engine
call it triggers:

    create_document   draft document with a fresh number
    complete          status → completed, balance effect applied
    cancel            status → cancelled, effect reversed if it was completed
    update_document   fields edited, effect re-applied if a completed
                      document's amount, fee, currency or account changed
    delete_document   tombstone written, effect reversed

If the ledger rejects the change (insufficient balance, currency mismatch,
inactive account, concurrent modification), the whole transaction is rolled
back: the document keeps its previous state and no balance moves.

Usage:
    from finance.services import DocumentService

    result = DocumentService.create_document(
        company=company,
        document_type=DocumentType.STATEMENT_OF_PAYMENT,
        amount=Decimal("500.00"),
        transaction_fee=Decimal("20.00"),
        currency=Currency.MYR,
        account=account,
    )
    sop = result.data

    result = DocumentService.complete(sop)
    if not result:
        print(result.error_code)  # e.g. "INSUFFICIENT_BALANCE"
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from django.db import transaction
from django_fsm import TransitionNotAllowed

from core.exceptions import BaseApplicationError
from core.services import BaseService, ServiceResult
from finance.exceptions import (
    DocumentLockedError,
    DocumentNotFoundError,
    DocumentValidationError,
    InvalidStateTransitionError,
)
from finance.ledger.engine import ledger_engine
from finance.ledger.models import Currency
from finance.ledger.reversal import ReversalReason
from finance.ledger.types import DocumentDeleted, DocumentSnapshot, to_decimal
from finance.locks import check_version
from finance.models import Document
from finance.state_machines import DocumentStatus, DocumentType

from .numbering import DocumentNumberService

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import date
    from typing import Any

    from finance.ledger.models import Account
    from finance.models import Company


# =============================================================================
# Constants
# =============================================================================

# Fields whose change alters a completed document's balance effect
FINANCIAL_FIELDS = ("amount", "total_deducted", "currency", "account_id")

EDITABLE_FIELDS = frozenset(
    {"amount", "transaction_fee", "currency", "account", "notes", "document_date", "metadata"}
)


class DocumentService(BaseService):
    """
    Service for document lifecycle operations.

    All methods are classmethods returning ServiceResult[Document]. The
    Document instance passed in is refreshed from the database before
    returning, so it always reflects what was committed.
    """

    # ==========================================================================
    # Queries
    # ==========================================================================

    @classmethod
    def get_document(cls, document_id: uuid.UUID) -> Document:
        """
        Get a live document by ID.

        Raises:
            DocumentNotFoundError: If the document doesn't exist or is deleted
        """
        try:
            return Document.objects.get(id=document_id)
        except Document.DoesNotExist:
            raise DocumentNotFoundError(
                f"Document {document_id} not found",
                details={"document_id": str(document_id)},
            )

    # ==========================================================================
    # Create
    # ==========================================================================

    @classmethod
    def create_document(
        cls,
        company: Company,
        document_type: str,
        amount: Decimal,
        currency: str = Currency.MYR,
        account: Account | None = None,
        transaction_fee: Decimal | None = None,
        document_date: date | None = None,
        notes: str = "",
        created_by: str | None = None,
    ) -> ServiceResult[Document]:
        """
        Create a draft document with the next number for its type and day.

        Draft documents have no balance effect, so no ledger call is made.
        """
        try:
            amount = to_decimal(amount)
            if transaction_fee is not None:
                transaction_fee = to_decimal(transaction_fee)
            cls._validate(document_type, amount, transaction_fee, currency)
            if account is not None and account.company_id != company.id:
                raise DocumentValidationError(
                    "Account belongs to a different company",
                    details={"account_id": str(account.id)},
                )

            with cls.atomic():
                document = Document(
                    company=company,
                    account=account,
                    document_type=document_type,
                    currency=currency,
                    amount=amount,
                    transaction_fee=transaction_fee,
                    notes=notes,
                    created_by=created_by,
                )
                if document_date is not None:
                    document.document_date = document_date
                document.document_number = DocumentNumberService.next_number(
                    company, document_type, document.document_date
                )
                document.total_deducted = document.compute_total_deducted()
                document.save()
        except DocumentValidationError as e:
            return ServiceResult.from_exception(e)

        cls.get_logger().info(
            "Created %s %s",
            document.document_type,
            document.document_number,
            extra={
                "document_id": str(document.id),
                "document_type": document.document_type,
                "amount": str(document.amount),
                "currency": document.currency,
            },
        )
        return ServiceResult.success(document)

    # ==========================================================================
    # Transitions
    # ==========================================================================

    @classmethod
    def issue(cls, document: Document) -> ServiceResult[Document]:
        return cls._transition(document, "issue")

    @classmethod
    def mark_paid(cls, document: Document) -> ServiceResult[Document]:
        return cls._transition(document, "mark_paid")

    @classmethod
    def complete(
        cls, document: Document, created_by: str | None = None
    ) -> ServiceResult[Document]:
        """Complete the document and apply its balance effect."""
        return cls._transition(
            document,
            "complete",
            ledger_call=lambda locked, previous_status: ledger_engine.on_document_completed(
                locked, created_by=created_by
            ),
        )

    @classmethod
    def cancel(
        cls, document: Document, created_by: str | None = None
    ) -> ServiceResult[Document]:
        """Cancel the document, reversing its effect if it was completed."""

        def reverse_if_completed(locked: Document, previous_status: str) -> ServiceResult:
            if previous_status != DocumentStatus.COMPLETED:
                return ServiceResult.success(None)
            return ledger_engine.reverse(
                locked, ReversalReason.DOCUMENT_CANCELLED, created_by=created_by
            )

        return cls._transition(document, "cancel", ledger_call=reverse_if_completed)

    # ==========================================================================
    # Update
    # ==========================================================================

    @classmethod
    def update_document(
        cls,
        document: Document,
        expected_version: int | None = None,
        created_by: str | None = None,
        **changes: Any,
    ) -> ServiceResult[Document]:
        """
        Edit a document.

        Re-saving a completed document without financial changes never
        touches the ledger. Changing amount, fee, currency or account of a
        completed document reverses the old effect and applies the new one.

        Args:
            document: Document to edit
            expected_version: Version the caller read; a mismatch fails with
                CONCURRENT_MODIFICATION
            created_by: Identifier recorded on any ledger entries
            **changes: Field values (see EDITABLE_FIELDS)
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            return ServiceResult.failure(
                "Fields cannot be edited",
                error_code="VALIDATION_ERROR",
                errors={name: ["This field cannot be edited."] for name in sorted(unknown)},
            )

        ledger_result: ServiceResult | None = None
        try:
            with cls.atomic():
                if expected_version is not None:
                    locked = check_version(Document, document.pk, expected_version)
                else:
                    locked = cls._lock(document.pk)
                if locked.is_deleted:
                    raise DocumentNotFoundError(
                        f"Document {locked.document_number} has been deleted",
                        details={"document_id": str(locked.id)},
                    )
                if locked.status == DocumentStatus.CANCELLED:
                    raise DocumentLockedError(
                        f"Document {locked.document_number} is cancelled",
                        details={"document_id": str(locked.id)},
                    )

                before = DocumentSnapshot.from_document(locked)
                for name, value in changes.items():
                    if name in ("amount", "transaction_fee") and value is not None:
                        value = to_decimal(value)
                    setattr(locked, name, value)
                if locked.account is not None and locked.account.company_id != locked.company_id:
                    raise DocumentValidationError(
                        "Account belongs to a different company",
                        details={"account_id": str(locked.account_id)},
                    )
                cls._validate(
                    locked.document_type,
                    locked.amount,
                    locked.transaction_fee,
                    locked.currency,
                )
                locked.total_deducted = locked.compute_total_deducted()
                locked.save()

                after = DocumentSnapshot.from_document(locked)
                financial_change = any(
                    getattr(before, name) != getattr(after, name) for name in FINANCIAL_FIELDS
                )
                if locked.status == DocumentStatus.COMPLETED and financial_change:
                    ledger_result = ledger_engine.on_document_amount_changed(
                        before, after, created_by=created_by
                    )
                    if not ledger_result.success:
                        transaction.set_rollback(True)
        except BaseApplicationError as e:
            return ServiceResult.from_exception(e)

        document.refresh_from_db()
        if ledger_result is not None and not ledger_result.success:
            return cls._rejected(document, "update", ledger_result)

        cls.get_logger().info(
            "Updated document %s",
            document.document_number,
            extra={"document_id": str(document.id), "fields": sorted(changes)},
        )
        return ServiceResult.success(document)

    # ==========================================================================
    # Delete
    # ==========================================================================

    @classmethod
    def delete_document(
        cls, document: Document, deleted_by: str | None = None
    ) -> ServiceResult[Document]:
        """
        Soft-delete a document and reverse its balance effect.

        Deleting an already deleted document is a no-op.
        """
        ledger_result: ServiceResult | None = None
        try:
            with cls.atomic():
                locked = cls._lock(document.pk)
                if locked.is_deleted:
                    cls.get_logger().debug(
                        "Document %s already deleted",
                        locked.document_number,
                        extra={"document_id": str(locked.id)},
                    )
                    return ServiceResult.success(locked)

                previous = DocumentSnapshot.from_document(locked)
                locked.soft_delete()
                ledger_result = ledger_engine.on_document_deleted(
                    DocumentDeleted(
                        previous=previous,
                        deleted_at=locked.deleted_at,
                        deleted_by=deleted_by,
                    )
                )
                if not ledger_result.success:
                    transaction.set_rollback(True)
        except BaseApplicationError as e:
            return ServiceResult.from_exception(e)

        document.refresh_from_db()
        if not ledger_result.success:
            return cls._rejected(document, "delete", ledger_result)

        cls.get_logger().info(
            "Deleted document %s",
            document.document_number,
            extra={"document_id": str(document.id), "deleted_by": deleted_by},
        )
        return ServiceResult.success(document)

    # ==========================================================================
    # Internals
    # ==========================================================================

    @classmethod
    def _lock(cls, document_id: uuid.UUID) -> Document:
        locked = Document.all_objects.select_for_update().filter(pk=document_id).first()
        if locked is None:
            raise DocumentNotFoundError(
                f"Document {document_id} not found",
                details={"document_id": str(document_id)},
            )
        return locked

    @staticmethod
    def _validate(
        document_type: str,
        amount: Decimal,
        transaction_fee: Decimal | None,
        currency: str,
    ) -> None:
        errors: dict[str, list[str]] = {}
        if document_type not in DocumentType.values:
            errors["document_type"] = [f"Unknown document type {document_type!r}."]
        if amount is None or amount <= 0:
            errors["amount"] = ["Amount must be greater than zero."]
        if currency not in Currency.values:
            errors["currency"] = [f"Unsupported currency {currency!r}."]
        if transaction_fee is not None:
            if document_type != DocumentType.STATEMENT_OF_PAYMENT:
                errors["transaction_fee"] = ["Only statements of payment carry a fee."]
            elif transaction_fee < 0:
                errors["transaction_fee"] = ["Fee cannot be negative."]
        if errors:
            raise DocumentValidationError(
                "Invalid document",
                details=errors,
            )

    @classmethod
    def _transition(
        cls,
        document: Document,
        action: str,
        ledger_call: Callable[[Document, str], ServiceResult] | None = None,
    ) -> ServiceResult[Document]:
        """
        Run a django-fsm transition and its ledger call in one transaction.

        The ledger call receives the locked document (already in its new
        state) and the status it had before the transition.
        """
        ledger_result: ServiceResult | None = None
        try:
            with cls.atomic():
                locked = cls._lock(document.pk)
                if locked.is_deleted:
                    raise DocumentNotFoundError(
                        f"Document {locked.document_number} has been deleted",
                        details={"document_id": str(locked.id)},
                    )
                previous_status = locked.status
                try:
                    getattr(locked, action)()
                except TransitionNotAllowed:
                    raise InvalidStateTransitionError(
                        f"Cannot {action} document in '{previous_status}' state",
                        details={
                            "document_id": str(locked.id),
                            "current_state": previous_status,
                            "action": action,
                        },
                    )
                locked.save()

                if ledger_call is not None:
                    ledger_result = ledger_call(locked, previous_status)
                    if not ledger_result.success:
                        transaction.set_rollback(True)
        except BaseApplicationError as e:
            cls.get_logger().warning(
                "Document %s rejected: %s",
                action,
                e.message,
                extra={"document_id": str(document.pk), "error_code": e.error_code},
            )
            return ServiceResult.from_exception(e)

        document.refresh_from_db()
        if ledger_result is not None and not ledger_result.success:
            return cls._rejected(document, action, ledger_result)

        cls.get_logger().info(
            "Document %s: %s",
            document.document_number,
            action,
            extra={"document_id": str(document.id), "status": document.status},
        )
        return ServiceResult.success(document)

    @classmethod
    def _rejected(
        cls, document: Document, action: str, ledger_result: ServiceResult
    ) -> ServiceResult[Document]:
        cls.get_logger().warning(
            "Document %s %s rolled back: %s",
            document.document_number,
            action,
            ledger_result.error,
            extra={
                "document_id": str(document.id),
                "error_code": ledger_result.error_code,
            },
        )
        return ServiceResult.failure(
            ledger_result.error or "Ledger rejected the change",
            error_code=ledger_result.error_code,
            details=ledger_result.details,
        )
