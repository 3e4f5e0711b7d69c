"""
Balance effect resolution.

Pure functions mapping (document type, status, amounts) to the effect a
document has on its account balance. Nothing here touches the database.

    invoice               → none
    payment_voucher       → none
    receipt + completed   → increase(amount)
    statement_of_payment
              + completed → decrease(total_deducted, or amount when unset)
    anything else         → none
"""

from __future__ import annotations

from decimal import Decimal

from finance.ledger.types import BalanceEffect
from finance.state_machines import DocumentStatus, DocumentType


def resolve_balance_effect(
    document_type: str,
    status: str,
    amount: Decimal,
    total_deducted: Decimal | None = None,
) -> BalanceEffect:
    """
    Resolve the balance effect of a document in a given state.

    Args:
        document_type: One of DocumentType
        status: One of DocumentStatus
        amount: Document amount
        total_deducted: amount + fee for statements of payment

    Returns:
        BalanceEffect.NONE, or an increase/decrease of the effective amount
    """
    if status != DocumentStatus.COMPLETED:
        return BalanceEffect.NONE

    if document_type == DocumentType.RECEIPT:
        return BalanceEffect.increase(amount)

    if document_type == DocumentType.STATEMENT_OF_PAYMENT:
        # A zero or missing total means no fee was recorded
        return BalanceEffect.decrease(total_deducted or amount)

    return BalanceEffect.NONE


def effect_for_document(document) -> BalanceEffect:
    """Resolve the effect of a Document or DocumentSnapshot as it stands."""
    return resolve_balance_effect(
        document.document_type,
        document.status,
        document.amount,
        document.total_deducted,
    )
