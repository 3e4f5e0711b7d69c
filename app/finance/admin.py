"""
Django admin configuration for finance models.

Key features:
- Account balances are read-only; only the ledger moves them
- Document status is read-only; transitions go through DocumentService
- LedgerEntry is immutable (no add/edit/delete permissions)
"""

from django.contrib import admin, messages

from finance.models import Account, Company, Document, DocumentCounter, LedgerEntry
from finance.services import DocumentService
from finance.services.document_service import EDITABLE_FIELDS
from finance.state_machines import DocumentStatus

DRAFT_ONLY_FIELDS = ("amount", "transaction_fee", "currency", "account")


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ["name", "registration_number", "allow_negative_balance", "created_at"]
    list_filter = ["allow_negative_balance"]
    search_fields = ["name", "registration_number"]
    readonly_fields = ["id", "created_at", "updated_at"]


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    """
    Admin configuration for Account.

    current_balance is never editable. initial_balance can be set when the
    account is created and is frozen afterwards.
    """

    list_display = [
        "name",
        "company",
        "type",
        "currency",
        "current_balance",
        "is_active",
        "is_deleted",
    ]
    list_filter = ["type", "currency", "is_active", "is_deleted"]
    search_fields = ["id", "name", "bank_name", "account_number", "custodian"]
    ordering = ["name"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "company", "name", "type", "currency", "is_active"),
            },
        ),
        (
            "Details",
            {
                "fields": ("bank_name", "account_number", "custodian"),
            },
        ),
        (
            "Balance",
            {
                "fields": ("initial_balance", "current_balance", "ledger_balance_display"),
            },
        ),
        (
            "Metadata",
            {
                "fields": ("version", "is_deleted", "deleted_at", "created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def get_queryset(self, request):
        return Account.all_objects.select_related("company")

    def get_readonly_fields(self, request, obj=None):
        readonly = [
            "id",
            "current_balance",
            "ledger_balance_display",
            "version",
            "is_deleted",
            "deleted_at",
            "created_at",
            "updated_at",
        ]
        if obj is not None:
            readonly.append("initial_balance")
        return readonly

    def save_model(self, request, obj, form, change):
        if not change:
            obj.current_balance = obj.initial_balance
        super().save_model(request, obj, form, change)

    def ledger_balance_display(self, obj: Account) -> str:
        """
        Balance re-derived from the ledger entries.

        This performs a database query; it should equal current_balance.
        """
        if obj.pk is None:
            return "-"
        return f"{obj.currency} {obj.get_ledger_balance():,.2f}"

    ledger_balance_display.short_description = "Ledger balance"


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    """
    Admin configuration for Document.

    Documents are created and moved between states by DocumentService.
    Edits made here go through DocumentService.update_document so a
    completed document's balance effect follows its new values. Amount,
    fee, currency and account are frozen once a document leaves draft.
    """

    list_display = [
        "document_number",
        "document_type",
        "status",
        "currency",
        "amount",
        "account",
        "document_date",
        "is_deleted",
    ]
    list_filter = ["document_type", "status", "currency", "is_deleted"]
    search_fields = ["id", "document_number", "notes"]
    readonly_fields = [
        "id",
        "document_number",
        "status",
        "total_deducted",
        "version",
        "created_by",
        "issued_at",
        "paid_at",
        "completed_at",
        "cancelled_at",
        "is_deleted",
        "deleted_at",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "document_date"
    ordering = ["-created_at"]

    def get_queryset(self, request):
        return Document.all_objects.select_related("company", "account")

    def get_readonly_fields(self, request, obj=None):
        readonly = list(self.readonly_fields)
        if obj is not None:
            readonly += ["company", "document_type"]
            if obj.status != DocumentStatus.DRAFT:
                readonly += list(DRAFT_ONLY_FIELDS)
        return readonly

    def has_add_permission(self, request):
        # Numbers are allocated by DocumentService.create_document
        return False

    def save_model(self, request, obj, form, change):
        changes = {
            name: form.cleaned_data[name]
            for name in form.changed_data
            if name in EDITABLE_FIELDS
        }
        if not changes:
            return
        result = DocumentService.update_document(
            obj, created_by=f"admin:{request.user}", **changes
        )
        if not result.success:
            self.message_user(request, result.error, level=messages.ERROR)

    def delete_model(self, request, obj):
        result = DocumentService.delete_document(obj, deleted_by=f"admin:{request.user}")
        if not result.success:
            self.message_user(request, result.error, level=messages.ERROR)

    def delete_queryset(self, request, queryset):
        for document in queryset:
            self.delete_model(request, document)


@admin.register(DocumentCounter)
class DocumentCounterAdmin(admin.ModelAdmin):
    list_display = ["company", "document_type", "date_key", "counter"]
    list_filter = ["document_type"]
    readonly_fields = ["company", "document_type", "date_key", "counter", "created_at", "updated_at"]


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    """
    Admin configuration for LedgerEntry.

    Ledger entries are immutable - they cannot be added, edited or deleted
    through the admin interface. Corrections are reversal entries written
    by the ledger engine.
    """

    list_display = [
        "created_at",
        "account",
        "document",
        "direction",
        "amount",
        "balance_before",
        "balance_after",
        "is_reversal",
        "created_by",
    ]
    list_filter = ["direction", "is_reversal", "created_at"]
    search_fields = ["id", "description", "document__document_number", "created_by"]
    readonly_fields = [
        "id",
        "created_at",
        "account",
        "document",
        "direction",
        "amount",
        "balance_before",
        "balance_after",
        "description",
        "is_reversal",
        "reverses",
        "metadata",
        "created_by",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    def has_delete_permission(self, request, obj=None) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_add_permission(self, request) -> bool:
        return False
