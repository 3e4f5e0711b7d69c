"""
State enums for finance models.

Document lifecycle:
    draft → issued → paid → completed
    draft/issued → completed (documents settled on the spot)
    draft/issued/paid/completed → cancelled

Only completion moves money. Receipts increase the account balance and
statements of payment decrease it; invoices and payment vouchers never do.
"""

from django.db import models


class DocumentType(models.TextChoices):
    """
    Kinds of financial document.

    Values:
        INVOICE: Bill sent to a customer (no balance effect)
        RECEIPT: Money received into an account (increase)
        PAYMENT_VOUCHER: Authorisation to pay (no balance effect)
        STATEMENT_OF_PAYMENT: Money paid out of an account (decrease)
    """

    INVOICE = "invoice", "Invoice"
    RECEIPT = "receipt", "Receipt"
    PAYMENT_VOUCHER = "payment_voucher", "Payment Voucher"
    STATEMENT_OF_PAYMENT = "statement_of_payment", "Statement of Payment"


class DocumentStatus(models.TextChoices):
    """
    States for the Document model lifecycle.

    Terminal states: CANCELLED
    COMPLETED is the only state that carries a balance effect.
    """

    DRAFT = "draft", "Draft"
    ISSUED = "issued", "Issued"
    PAID = "paid", "Paid"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"
