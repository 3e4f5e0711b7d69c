"""
Balance reconciliation and missing-effect backfill.

Two checks keep the ledger honest:

1. Stored vs. derived balance: every account's current_balance must equal
   initial_balance plus its signed ledger entries.
2. Missing effects: every completed, undeleted receipt or statement of
   payment with an account must have an active ledger entry.

Missing effects can be backfilled through the engine, which applies the
same validation as a live completion.

Usage:
    from finance.ledger.reconciliation import BalanceReconciler

    for discrepancy in BalanceReconciler.find_discrepancies():
        print(discrepancy.account_name, discrepancy.difference)

    report = BalanceReconciler.backfill_missing_effects(created_by="backfill")
    print(report.applied, report.failed)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from django.db.models import Exists, OuterRef

from core.services import BaseService
from finance.state_machines import DocumentStatus, DocumentType

from .engine import ledger_engine
from .models import Account, LedgerEntry

if TYPE_CHECKING:
    from finance.models import Company, Document


@dataclass(frozen=True)
class BalanceDiscrepancy:
    """An account whose stored balance disagrees with its ledger."""

    account_id: uuid.UUID
    account_name: str
    currency: str
    stored_balance: Decimal
    ledger_balance: Decimal

    @property
    def difference(self) -> Decimal:
        return self.stored_balance - self.ledger_balance


@dataclass
class BackfillReport:
    """Outcome of a missing-effect backfill run."""

    applied: list[uuid.UUID] = field(default_factory=list)
    failed: dict[uuid.UUID, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.applied) + len(self.failed)


class BalanceReconciler(BaseService):
    """Detects and repairs drift between documents, entries and balances."""

    @classmethod
    def verify_account(cls, account: Account) -> BalanceDiscrepancy | None:
        """Compare one account's stored balance with its ledger."""
        account.refresh_from_db(fields=["current_balance", "initial_balance"])
        ledger_balance = account.get_ledger_balance()
        if ledger_balance == account.current_balance:
            return None
        return BalanceDiscrepancy(
            account_id=account.id,
            account_name=account.name,
            currency=account.currency,
            stored_balance=account.current_balance,
            ledger_balance=ledger_balance,
        )

    @classmethod
    def find_discrepancies(cls, company: Company | None = None) -> list[BalanceDiscrepancy]:
        """Check every account (including retired ones) of a company, or all."""
        accounts = Account.all_objects.order_by("name")
        if company is not None:
            accounts = accounts.filter(company=company)

        discrepancies = []
        for account in accounts:
            discrepancy = cls.verify_account(account)
            if discrepancy is None:
                continue
            cls.get_logger().error(
                "Balance discrepancy on account %s: stored %s, ledger %s",
                account.id,
                discrepancy.stored_balance,
                discrepancy.ledger_balance,
                extra={
                    "account_id": str(account.id),
                    "stored_balance": str(discrepancy.stored_balance),
                    "ledger_balance": str(discrepancy.ledger_balance),
                    "difference": str(discrepancy.difference),
                },
            )
            discrepancies.append(discrepancy)
        return discrepancies

    @classmethod
    def find_missing_effects(cls, company: Company | None = None) -> list[Document]:
        """
        Completed receipts and statements of payment with no active entry.

        Deleted documents and documents without an account are excluded.
        """
        from finance.models import Document

        active_entries = LedgerEntry.objects.active().filter(document=OuterRef("pk"))
        documents = (
            Document.objects.filter(
                status=DocumentStatus.COMPLETED,
                document_type__in=[
                    DocumentType.RECEIPT,
                    DocumentType.STATEMENT_OF_PAYMENT,
                ],
                account__isnull=False,
            )
            .annotate(has_entry=Exists(active_entries))
            .filter(has_entry=False)
            .order_by("completed_at", "created_at")
        )
        if company is not None:
            documents = documents.filter(company=company)
        return list(documents)

    @classmethod
    def backfill_missing_effects(
        cls,
        company: Company | None = None,
        created_by: str = "reconciliation",
    ) -> BackfillReport:
        """
        Apply the effect of every document found by find_missing_effects().

        Each document is applied in its own savepoint; a rejected document
        (e.g. insufficient balance) is recorded and does not stop the run.
        """
        report = BackfillReport()
        for document in cls.find_missing_effects(company):
            result = ledger_engine.on_document_completed(
                document,
                created_by=created_by,
                metadata={"backfilled": True},
            )
            if result.success:
                report.applied.append(document.id)
            else:
                report.failed[document.id] = result.error_code or "UNKNOWN"

        cls.get_logger().info(
            "Backfilled %d missing balance effects (%d failed)",
            len(report.applied),
            len(report.failed),
            extra={"applied": len(report.applied), "failed": len(report.failed)},
        )
        return report
