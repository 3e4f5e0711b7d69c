"""
State machine definitions for finance models.

django-fsm transitions live on the models themselves; this package holds
the TextChoices enums they use.
"""

from finance.state_machines.states import DocumentStatus, DocumentType

__all__ = [
    "DocumentStatus",
    "DocumentType",
]
