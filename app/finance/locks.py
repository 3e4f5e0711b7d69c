"""
Optimistic locking helpers for finance records.

Accounts and documents carry a ``version`` column that is bumped on every
write. Callers holding a version they read earlier use check_version() to
lock the row and prove nobody else changed it in between.

Usage:
    from finance.locks import check_version

    with transaction.atomic():
        document = check_version(Document, document_id, expected_version=3)
        document.notes = "Updated"
        document.save()  # version becomes 4
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from django.db import transaction

from core.exceptions import NotFoundError
from finance.exceptions import StaleRecordError

if TYPE_CHECKING:
    from typing import Any

T = TypeVar("T")


def _manager(model_class: type[T]):
    # Soft-deletable models expose every row through all_objects
    return getattr(model_class, "all_objects", model_class._default_manager)


def check_version(
    model_class: type[T],
    pk: Any,
    expected_version: int,
) -> T:
    """
    Atomically check version and lock a record for update.

    Combines optimistic locking (version check) with pessimistic locking
    (select_for_update) for the update that follows.

    Args:
        model_class: Django model class (must have 'version' field)
        pk: Primary key of the record
        expected_version: Version the caller expects

    Returns:
        The locked model instance

    Raises:
        StaleRecordError: If version doesn't match (concurrent modification)
        NotFoundError: If record doesn't exist

    Note:
        Must be called within a transaction context for the lock to outlive
        this call. The lock is held until the outer transaction ends.
    """
    manager = _manager(model_class)
    with transaction.atomic():
        instance = (
            manager.select_for_update()
            .filter(pk=pk, version=expected_version)
            .first()
        )

        if instance is None:
            model_name = model_class.__name__
            current = manager.filter(pk=pk).values_list("version", flat=True).first()
            if current is None:
                raise NotFoundError(
                    f"{model_name} {pk} not found",
                    error_code=f"{model_name.upper()}_NOT_FOUND",
                    details={"pk": str(pk)},
                )

            raise StaleRecordError(
                f"{model_name} {pk} has been modified "
                f"(expected version {expected_version}, current {current})",
                details={
                    "pk": str(pk),
                    "expected_version": expected_version,
                    "current_version": current,
                },
            )

        return instance


__all__ = [
    "check_version",
]
