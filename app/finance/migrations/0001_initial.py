import decimal
import uuid

import django.db.models.deletion
import django.utils.timezone
import django_fsm
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Company",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(help_text="Company name", max_length=200)),
                (
                    "registration_number",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Company registration number",
                        max_length=100,
                    ),
                ),
                (
                    "allow_negative_balance",
                    models.BooleanField(
                        default=False,
                        help_text="Allow account balances to go negative when recording payments",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "Companies",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Account",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "is_deleted",
                    models.BooleanField(
                        db_index=True,
                        default=False,
                        help_text="Whether this record has been soft deleted",
                    ),
                ),
                (
                    "deleted_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="Timestamp when this record was soft deleted",
                        null=True,
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=200)),
                (
                    "type",
                    models.CharField(
                        choices=[("main_bank", "Main Bank"), ("petty_cash", "Petty Cash")],
                        help_text="Category of this account",
                        max_length=20,
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        choices=[("MYR", "Malaysian Ringgit"), ("JPY", "Japanese Yen")],
                        default="MYR",
                        max_length=3,
                    ),
                ),
                ("bank_name", models.CharField(blank=True, max_length=200, null=True)),
                ("account_number", models.CharField(blank=True, max_length=100, null=True)),
                ("custodian", models.CharField(blank=True, max_length=200, null=True)),
                (
                    "initial_balance",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Opening balance when the account was created",
                        max_digits=15,
                    ),
                ),
                (
                    "current_balance",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Current balance, maintained by the ledger",
                        max_digits=15,
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        db_index=True,
                        default=True,
                        help_text="Whether this account accepts new ledger entries",
                    ),
                ),
                (
                    "version",
                    models.PositiveIntegerField(
                        default=1,
                        help_text="Version for optimistic locking - incremented on each write",
                    ),
                ),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="accounts",
                        to="finance.company",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(
                        fields=["company", "is_active"],
                        name="account_company_active_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("type", "main_bank"), _negated=True),
                            ("bank_name__isnull", False),
                            _connector="OR",
                        ),
                        name="bank_account_requires_bank_name",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("type", "petty_cash"), _negated=True),
                            ("custodian__isnull", False),
                            _connector="OR",
                        ),
                        name="petty_cash_requires_custodian",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Document",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "is_deleted",
                    models.BooleanField(
                        db_index=True,
                        default=False,
                        help_text="Whether this record has been soft deleted",
                    ),
                ),
                (
                    "deleted_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="Timestamp when this record was soft deleted",
                        null=True,
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "document_type",
                    models.CharField(
                        choices=[
                            ("invoice", "Invoice"),
                            ("receipt", "Receipt"),
                            ("payment_voucher", "Payment Voucher"),
                            ("statement_of_payment", "Statement of Payment"),
                        ],
                        db_index=True,
                        max_length=30,
                    ),
                ),
                (
                    "document_number",
                    models.CharField(
                        help_text="Document number, e.g. WIF-RCP-20251113-001",
                        max_length=50,
                    ),
                ),
                ("document_date", models.DateField(default=django.utils.timezone.localdate)),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[
                            ("draft", "Draft"),
                            ("issued", "Issued"),
                            ("paid", "Paid"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="draft",
                        help_text="Current state of the document (managed by FSM)",
                        max_length=50,
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        choices=[("MYR", "Malaysian Ringgit"), ("JPY", "Japanese Yen")],
                        default="MYR",
                        max_length=3,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=15)),
                (
                    "transaction_fee",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Bank/transfer fee (statements of payment only)",
                        max_digits=15,
                        null=True,
                    ),
                ),
                (
                    "total_deducted",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Amount plus fee actually leaving the account",
                        max_digits=15,
                        null=True,
                    ),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("created_by", models.CharField(blank=True, max_length=255, null=True)),
                (
                    "version",
                    models.PositiveIntegerField(
                        default=1,
                        help_text="Version for optimistic locking - incremented on each save",
                    ),
                ),
                ("issued_at", models.DateTimeField(blank=True, null=True)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                (
                    "account",
                    models.ForeignKey(
                        blank=True,
                        help_text="Account receiving or paying the money",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="documents",
                        to="finance.account",
                    ),
                ),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="documents",
                        to="finance.company",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["company", "document_type", "status"],
                        name="document_company_type_idx",
                    ),
                    models.Index(
                        fields=["account", "status"],
                        name="document_account_status_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="document_amount_positive",
                    ),
                    models.UniqueConstraint(
                        fields=("company", "document_number"),
                        name="unique_document_number_per_company",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DocumentCounter",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "document_type",
                    models.CharField(
                        choices=[
                            ("invoice", "Invoice"),
                            ("receipt", "Receipt"),
                            ("payment_voucher", "Payment Voucher"),
                            ("statement_of_payment", "Statement of Payment"),
                        ],
                        max_length=30,
                    ),
                ),
                (
                    "date_key",
                    models.CharField(help_text="Day in YYYYMMDD format", max_length=8),
                ),
                (
                    "counter",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Last sequence number issued for this day",
                    ),
                ),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="document_counters",
                        to="finance.company",
                    ),
                ),
            ],
            options={
                "ordering": ["-date_key", "document_type"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("company", "document_type", "date_key"),
                        name="unique_document_counter_per_day",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerEntry",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this entry was recorded",
                    ),
                ),
                (
                    "direction",
                    models.CharField(
                        choices=[("increase", "Increase"), ("decrease", "Decrease")],
                        max_length=10,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Amount moved (always positive)",
                        max_digits=15,
                    ),
                ),
                ("balance_before", models.DecimalField(decimal_places=2, max_digits=15)),
                ("balance_after", models.DecimalField(decimal_places=2, max_digits=15)),
                ("description", models.TextField(blank=True, default="")),
                ("is_reversal", models.BooleanField(db_index=True, default=False)),
                (
                    "metadata",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Arbitrary JSON data for extensibility",
                    ),
                ),
                (
                    "created_by",
                    models.CharField(
                        blank=True,
                        help_text="Identifier of service/user that created this entry",
                        max_length=255,
                        null=True,
                    ),
                ),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to="finance.account",
                    ),
                ),
                (
                    "document",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to="finance.document",
                    ),
                ),
                (
                    "reverses",
                    models.OneToOneField(
                        blank=True,
                        help_text="Entry neutralised by this reversal",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reversal",
                        to="finance.ledgerentry",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "Ledger entries",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["document", "is_reversal"],
                        name="ledger_entry_document_idx",
                    ),
                    models.Index(
                        fields=["account", "created_at"],
                        name="ledger_entry_account_time_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="ledger_entry_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("is_reversal", False), ("reverses__isnull", True)),
                            models.Q(("is_reversal", True), ("reverses__isnull", False)),
                            _connector="OR",
                        ),
                        name="ledger_entry_reversal_has_target",
                    ),
                ],
            },
        ),
    ]
