"""
Model mixins providing reusable functionality for Django models.

Available Mixins:
    UUIDPrimaryKeyMixin: Use UUID as primary key
    SoftDeleteMixin: Soft delete support (is_deleted, deleted_at)

Usage:
    from core.models import BaseModel
    from core.model_mixins import SoftDeleteMixin, UUIDPrimaryKeyMixin

    class Account(UUIDPrimaryKeyMixin, SoftDeleteMixin, BaseModel):
        name = models.CharField(max_length=100)

Note:
    - Always list mixins before BaseModel in inheritance
    - SoftDeleteMixin pairs with SoftDeleteManager (see core.managers)
"""

from __future__ import annotations

import uuid

from django.db import models
from django.utils import timezone


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of auto-increment integer.

    Ledger rows reference accounts and documents by UUID so identifiers
    can be logged and exported without revealing record counts.

    Fields:
        id: UUIDField as primary key (auto-generated)
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True


class SoftDeleteMixin(models.Model):
    """
    Soft delete support for models.

    Instead of permanently deleting records, marks them as deleted.
    Financial records are never physically removed: ledger entries keep
    foreign keys to them, and the deletion timestamp is the tombstone that
    drives balance reversal.

    Fields:
        is_deleted: Boolean flag indicating soft delete status
        deleted_at: Timestamp when the record was soft deleted

    Usage:
        from core.managers import SoftDeleteManager

        class Account(SoftDeleteMixin, BaseModel):
            objects = SoftDeleteManager()  # Excludes deleted by default
            all_objects = models.Manager()  # For admin and ledger access

        account.soft_delete()
        account.restore()

        Account.objects.deleted()  # Only deleted
        Account.all_objects.all()  # All including deleted
    """

    is_deleted = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether this record has been soft deleted",
    )
    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp when this record was soft deleted",
    )

    class Meta:
        abstract = True

    def soft_delete(self) -> None:
        """
        Mark this record as deleted.

        Sets is_deleted=True and deleted_at to current time. Calling it on an
        already deleted record keeps the original timestamp.
        """
        if self.is_deleted:
            return
        self.is_deleted = True
        self.deleted_at = timezone.now()
        self.save(update_fields=["is_deleted", "deleted_at", "updated_at"])

    def restore(self) -> None:
        """Restore a soft-deleted record."""
        if not self.is_deleted:
            return
        self.is_deleted = False
        self.deleted_at = None
        self.save(update_fields=["is_deleted", "deleted_at", "updated_at"])
