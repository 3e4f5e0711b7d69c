"""
Per-day document number counters.

One row per (company, document type, day). DocumentNumberService increments
the row under a lock, so two documents created at the same moment can
never receive the same sequence number.
"""

from django.db import models

from core.models import BaseModel
from finance.state_machines import DocumentType


class DocumentCounter(BaseModel):
    """
    Sequence counter backing document numbers like WIF-INV-20251113-001.

    Fields:
        company: Company the sequence belongs to
        document_type: Document type the sequence belongs to
        date_key: Day in YYYYMMDD form
        counter: Last number handed out for the day
    """

    company = models.ForeignKey(
        "finance.Company",
        on_delete=models.CASCADE,
        related_name="document_counters",
    )
    document_type = models.CharField(
        max_length=30,
        choices=DocumentType.choices,
    )
    date_key = models.CharField(
        max_length=8,
        help_text="Day in YYYYMMDD format",
    )
    counter = models.PositiveIntegerField(
        default=0,
        help_text="Last sequence number issued for this day",
    )

    class Meta:
        ordering = ["-date_key", "document_type"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "document_type", "date_key"],
                name="unique_document_counter_per_day",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.document_type} {self.date_key}: {self.counter}"
