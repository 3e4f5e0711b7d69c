"""
Custom managers and querysets for soft-deletable models.

Usage:
    from core.managers import SoftDeleteManager
    from core.model_mixins import SoftDeleteMixin

    class Document(SoftDeleteMixin, BaseModel):
        objects = SoftDeleteManager()
        all_objects = models.Manager()

    Document.objects.all()           # Active documents only
    Document.objects.deleted()       # Tombstoned documents only
    Document.objects.with_deleted()  # Everything
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone


class SoftDeleteQuerySet(models.QuerySet):
    """
    QuerySet that provides soft delete operations.

    Methods:
        delete(): Soft delete (marks is_deleted=True)
        hard_delete(): Permanent delete
        restore(): Restore soft-deleted records
        deleted(): Filter to only deleted records
        active(): Filter to only active records

    Subclass and set ``_queryset_class`` on a SoftDeleteManager subclass to
    restrict these operations for a model.
    """

    def delete(self) -> tuple[int, dict[str, int]]:
        """
        Soft delete all objects in queryset.

        Returns:
            Tuple of (count, {model_name: count}) matching Django's delete()
        """
        count = self.filter(is_deleted=False).update(
            is_deleted=True, deleted_at=timezone.now()
        )
        return count, {self.model._meta.label: count}

    def hard_delete(self) -> tuple[int, dict[str, int]]:
        """
        Permanently delete all objects in queryset.

        Warning:
            Rows referenced by ledger entries are protected and raise
            ProtectedError.
        """
        return super().delete()

    def restore(self) -> int:
        """Restore all soft-deleted objects in queryset."""
        return self.filter(is_deleted=True).update(is_deleted=False, deleted_at=None)

    def deleted(self) -> SoftDeleteQuerySet:
        return self.filter(is_deleted=True)

    def active(self) -> SoftDeleteQuerySet:
        return self.filter(is_deleted=False)


class SoftDeleteManager(models.Manager):
    """
    Manager that excludes soft-deleted records by default.

    Pair with a plain ``all_objects = models.Manager()`` for code paths that
    must see tombstoned rows (ledger lookups, admin, reconciliation).
    """

    _queryset_class = SoftDeleteQuerySet

    def get_queryset(self) -> SoftDeleteQuerySet:
        return self._queryset_class(self.model, using=self._db).filter(is_deleted=False)

    def deleted(self) -> SoftDeleteQuerySet:
        """Shortcut to get only deleted records."""
        return self._queryset_class(self.model, using=self._db).filter(is_deleted=True)

    def with_deleted(self) -> SoftDeleteQuerySet:
        """Get queryset including deleted records."""
        return self._queryset_class(self.model, using=self._db)
