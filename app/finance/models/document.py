"""
Financial document model with state machine.

Documents move through a django-fsm managed lifecycle:

    draft → issued → paid → completed
    draft/issued → completed
    draft/issued/paid/completed → cancelled

Completing a receipt or statement of payment is what moves money; the
transition itself only records the new state. Balance effects are applied
by DocumentService through the ledger engine in the same transaction.

Usage:
    from finance.models import Document
    from finance.state_machines import DocumentStatus, DocumentType

    document = Document.objects.create(
        company=company,
        account=account,
        document_type=DocumentType.RECEIPT,
        document_number="WIF-RCP-20251113-001",
        currency="MYR",
        amount=Decimal("200.00"),
    )
    document.complete()
    document.save()
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.db.models import F
from django.utils import timezone
from django_fsm import FSMField, transition

from core.managers import SoftDeleteManager, SoftDeleteQuerySet
from core.model_mixins import SoftDeleteMixin, UUIDPrimaryKeyMixin
from core.models import BaseModel
from finance.exceptions import DocumentLockedError
from finance.ledger.models import Currency
from finance.state_machines import DocumentStatus, DocumentType


class DocumentQuerySet(SoftDeleteQuerySet):
    """
    Document queryset without bulk tombstone changes.

    Deleting a completed document must reverse its balance effect, which
    only DocumentService.delete_document does.
    """

    def delete(self):
        raise DocumentLockedError(
            "Documents must be deleted one at a time through DocumentService",
            details={"count": self.count()},
        )

    def restore(self):
        raise DocumentLockedError("Deleted documents cannot be restored")


class DocumentManager(SoftDeleteManager):
    _queryset_class = DocumentQuerySet


class Document(UUIDPrimaryKeyMixin, SoftDeleteMixin, BaseModel):
    """
    Invoice, receipt, payment voucher or statement of payment.

    Only the fields that drive balance effects are modelled here: type,
    status, amount, fee, currency and the settlement account. Deletion is a
    tombstone (deleted_at) so ledger entries keep their document reference.

    Fields:
        company: Issuing company
        account: Account the money moves through (optional until completion)
        document_type: Kind of document (see DocumentType)
        document_number: Human-readable number, unique per company
        status: FSM-managed lifecycle state
        currency: Document currency, must match the account's currency
        amount: Document amount (positive, 2 decimal places)
        transaction_fee: Bank fee on a statement of payment
        total_deducted: amount + transaction_fee for statements of payment
        version: Optimistic locking version

    Note:
        The version field is auto-incremented on save. Use
        finance.locks.check_version() when updating from a stale read.
    """

    objects = DocumentManager()
    all_objects = models.Manager()

    company = models.ForeignKey(
        "finance.Company",
        on_delete=models.PROTECT,
        related_name="documents",
    )
    account = models.ForeignKey(
        "finance.Account",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="documents",
        help_text="Account receiving or paying the money",
    )

    document_type = models.CharField(
        max_length=30,
        choices=DocumentType.choices,
        db_index=True,
    )
    document_number = models.CharField(
        max_length=50,
        help_text="Document number, e.g. WIF-RCP-20251113-001",
    )
    document_date = models.DateField(
        default=timezone.localdate,
    )

    status = FSMField(
        default=DocumentStatus.DRAFT,
        choices=DocumentStatus.choices,
        db_index=True,
        help_text="Current state of the document (managed by FSM)",
    )

    # ==========================================================================
    # Amounts
    # ==========================================================================

    currency = models.CharField(
        max_length=3,
        choices=Currency.choices,
        default=Currency.MYR,
    )
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
    )
    transaction_fee = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Bank/transfer fee (statements of payment only)",
    )
    total_deducted = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Amount plus fee actually leaving the account",
    )

    notes = models.TextField(blank=True, default="")
    metadata = models.JSONField(
        default=dict,
        blank=True,
    )
    created_by = models.CharField(
        max_length=255,
        null=True,
        blank=True,
    )

    # ==========================================================================
    # Concurrency Control
    # ==========================================================================

    version = models.PositiveIntegerField(
        default=1,
        help_text="Version for optimistic locking - incremented on each save",
    )

    # ==========================================================================
    # State Timestamps
    # ==========================================================================

    issued_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["company", "document_type", "status"],
                name="document_company_type_idx",
            ),
            models.Index(fields=["account", "status"], name="document_account_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="document_amount_positive",
            ),
            models.UniqueConstraint(
                fields=["company", "document_number"],
                name="unique_document_number_per_company",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.document_number} ({self.status}, {self.currency} {self.amount})"

    def save(self, *args, **kwargs):
        """
        Save with version auto-increment for optimistic locking.

        On update, atomically increments the version field to detect
        concurrent modifications.
        """
        is_update = not self._state.adding and not kwargs.get("force_insert", False)
        if is_update:
            self.version = F("version") + 1
            update_fields = kwargs.get("update_fields")
            if update_fields is not None and "version" not in update_fields:
                kwargs["update_fields"] = [*update_fields, "version"]
        super().save(*args, **kwargs)
        if is_update:
            self.refresh_from_db(fields=["version"])

    def restore(self) -> None:
        """Deleted documents stay deleted; their reversal entries are final."""
        if self.is_deleted:
            raise DocumentLockedError(
                f"Document {self.document_number} has been deleted",
                details={"document_id": str(self.id)},
            )

    @property
    def is_statement_of_payment(self) -> bool:
        return self.document_type == DocumentType.STATEMENT_OF_PAYMENT

    def compute_total_deducted(self) -> Decimal | None:
        """Return amount + fee for statements of payment, None otherwise."""
        if not self.is_statement_of_payment:
            return None
        return self.amount + (self.transaction_fee or Decimal("0"))

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=DocumentStatus.DRAFT,
        target=DocumentStatus.ISSUED,
    )
    def issue(self):
        """Transition: DRAFT -> ISSUED"""
        self.issued_at = timezone.now()

    @transition(
        field=status,
        source=DocumentStatus.ISSUED,
        target=DocumentStatus.PAID,
    )
    def mark_paid(self):
        """Transition: ISSUED -> PAID"""
        self.paid_at = timezone.now()

    @transition(
        field=status,
        source=[DocumentStatus.DRAFT, DocumentStatus.ISSUED, DocumentStatus.PAID],
        target=DocumentStatus.COMPLETED,
    )
    def complete(self):
        """
        Complete the document.

        Transition: DRAFT/ISSUED/PAID -> COMPLETED

        Receipts and statements of payment gain their balance effect here;
        DocumentService applies it through the ledger engine.
        """
        self.completed_at = timezone.now()

    @transition(
        field=status,
        source=[
            DocumentStatus.DRAFT,
            DocumentStatus.ISSUED,
            DocumentStatus.PAID,
            DocumentStatus.COMPLETED,
        ],
        target=DocumentStatus.CANCELLED,
    )
    def cancel(self):
        """
        Cancel the document.

        Transition: DRAFT/ISSUED/PAID/COMPLETED -> CANCELLED

        Cancelling a completed document reverses its balance effect.
        """
        self.cancelled_at = timezone.now()
