"""
Finance app configuration.

This app provides the travel finance document workflow:
- Companies, financial documents and per-day document numbering
- Account ledger engine (finance.ledger) that keeps cash balances
  consistent with completed receipts and statements of payment
"""

from django.apps import AppConfig


class FinanceConfig(AppConfig):
    """Configuration for the finance application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "finance"
    verbose_name = "Finance"
