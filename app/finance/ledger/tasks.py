"""
Celery tasks for ledger maintenance.

Usage:
    from finance.ledger.tasks import verify_account_balances

    # Scheduled nightly via CELERY_BEAT_SCHEDULE; can also be queued by hand
    verify_account_balances.delay()

    # Repair completed documents that never got their balance effect
    from finance.ledger.tasks import backfill_missing_effects
    backfill_missing_effects.delay()
"""

from __future__ import annotations

import logging

from celery import shared_task

from .reconciliation import BalanceReconciler

logger = logging.getLogger(__name__)


@shared_task(bind=True, acks_late=True)
def verify_account_balances(self) -> dict:
    """
    Periodic task comparing stored balances with the ledger.

    Discrepancies and documents missing their effect are logged at ERROR
    level. Nothing is changed; repairs are a separate, deliberate step.

    Returns:
        Dict with counts of discrepancies and missing effects
    """
    discrepancies = BalanceReconciler.find_discrepancies()
    missing = BalanceReconciler.find_missing_effects()

    for document in missing:
        logger.error(
            "Completed document %s has no balance effect",
            document.document_number,
            extra={
                "document_id": str(document.id),
                "document_type": document.document_type,
                "task_id": self.request.id,
            },
        )

    logger.info(
        "Balance verification finished: %d discrepancies, %d missing effects",
        len(discrepancies),
        len(missing),
        extra={"task_id": self.request.id},
    )
    return {
        "status": "ok" if not discrepancies and not missing else "discrepancies_found",
        "discrepancies": [
            {
                "account_id": str(d.account_id),
                "stored_balance": str(d.stored_balance),
                "ledger_balance": str(d.ledger_balance),
            }
            for d in discrepancies
        ],
        "missing_effects": [str(document.id) for document in missing],
    }


@shared_task
def backfill_missing_effects() -> dict:
    """
    Apply the balance effect of completed documents that lack one.

    Returns:
        Dict with applied and failed document IDs
    """
    report = BalanceReconciler.backfill_missing_effects(created_by="backfill_task")
    return {
        "applied": [str(document_id) for document_id in report.applied],
        "failed": {str(k): v for k, v in report.failed.items()},
    }
