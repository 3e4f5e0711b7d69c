"""
Ledger - Account balances driven by financial documents.

Keeps each account's cash balance consistent with its completed receipts
and statements of payment. Every balance change is an immutable entry with
before/after snapshots; deletions and edits are undone by reversal entries.

Modules:
    models: Account, LedgerEntry, AccountType, Currency, Direction
    types: Money, BalanceEffect, AppendEntryParams, DocumentSnapshot,
        DocumentDeleted
    resolver: resolve_balance_effect() - document → balance effect
    validators: BalanceValidator - currency and overdraft rules
    services: TransactionLedger (singleton ``ledger``) - the only writer of
        balances
    reversal: ReversalEngine - undo a document's effect
    engine: LedgerEngine (singleton ``ledger_engine``) - entry points called
        by the document service
    reconciliation: BalanceReconciler - drift detection and backfill
    tasks: Celery tasks for scheduled reconciliation

Usage:
    from finance.ledger.engine import ledger_engine
    from finance.ledger.types import DocumentDeleted, DocumentSnapshot

    result = ledger_engine.on_document_completed(receipt)
    if not result:
        print(result.error_code)  # e.g. "CURRENCY_MISMATCH"

Note:
    Models are imported through finance.models so Django registers them
    with the finance app. This package deliberately re-exports nothing.
"""
