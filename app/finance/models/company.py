"""
Company model.

A company owns accounts and documents. Its settings control ledger
behaviour shared by all of its accounts.
"""

from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class Company(UUIDPrimaryKeyMixin, BaseModel):
    """
    Business entity issuing financial documents.

    Fields:
        name: Display name printed on documents
        allow_negative_balance: Whether statements of payment may drive an
            account below zero (overdraft). Off by default.
    """

    name = models.CharField(
        max_length=200,
        help_text="Company name",
    )
    registration_number = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Company registration number",
    )
    allow_negative_balance = models.BooleanField(
        default=False,
        help_text="Allow account balances to go negative when recording payments",
    )

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Companies"

    def __str__(self) -> str:
        return self.name
