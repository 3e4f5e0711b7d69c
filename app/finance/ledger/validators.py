"""
Balance validation gate.

BalanceValidator runs inside the ledger's transaction, after the account
row has been locked, so the balance it checks is the balance that will be
written.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from finance.ledger.exceptions import CurrencyMismatch, InsufficientBalance
from finance.ledger.models import Direction

if TYPE_CHECKING:
    from finance.ledger.models import Account

logger = logging.getLogger(__name__)


class BalanceValidator:
    """
    Checks a proposed movement against account rules.

    Order of checks:
    1. Currency: the document currency must equal the account currency
    2. Decrease: the resulting balance must not be negative unless the
       owning company allows negative balances

    Increases are always allowed.
    """

    @staticmethod
    def validate(
        account: Account,
        direction: str,
        amount: Decimal,
        currency: str | None = None,
    ) -> None:
        """
        Validate a movement, raising on the first rule it breaks.

        Args:
            account: Locked account the movement applies to
            direction: Direction.INCREASE or Direction.DECREASE
            amount: Positive amount of the movement
            currency: Document currency (skipped when None)

        Raises:
            CurrencyMismatch: If currency differs from the account's
            InsufficientBalance: If a decrease would overdraw the account
        """
        if currency is not None and currency != account.currency:
            logger.warning(
                "Currency mismatch on account %s",
                account.id,
                extra={
                    "account_id": str(account.id),
                    "document_currency": currency,
                    "account_currency": account.currency,
                },
            )
            raise CurrencyMismatch(account.id, currency, account.currency)

        if direction != Direction.DECREASE:
            return

        if account.company.allow_negative_balance:
            return

        if account.current_balance - amount < 0:
            logger.warning(
                "Insufficient balance on account %s",
                account.id,
                extra={
                    "account_id": str(account.id),
                    "available": str(account.current_balance),
                    "required": str(amount),
                },
            )
            raise InsufficientBalance(
                account.id,
                required=amount,
                available=account.current_balance,
                currency=account.currency,
            )
