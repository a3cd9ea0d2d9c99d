# accounting/admin.py

from django.contrib import admin

from accounting.models import Account, Category, FundTransfer, JournalEntry, NumberSequence

# ============================================================
# ACCOUNT (balances change only through the ledger services)
# ============================================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ("kind", "name", "balance", "updated_at")
    readonly_fields = ("kind", "balance", "created_at", "updated_at")
    ordering = ("pk",)

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "direction", "is_active", "created_at")
    list_filter = ("direction", "is_active")
    search_fields = ("name",)


# ============================================================
# JOURNAL / FUND TRANSFERS (READ-ONLY)
# ============================================================


class ReadOnlyLedgerAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(JournalEntry)
class JournalEntryAdmin(ReadOnlyLedgerAdmin):
    list_display = (
        "transaction_no",
        "account",
        "direction",
        "amount",
        "category_name",
        "entry_date",
        "is_rollup",
    )
    list_filter = ("account", "direction", "is_rollup", "entry_date")
    search_fields = ("transaction_no", "category_name", "description", "reference_id")
    date_hierarchy = "entry_date"


@admin.register(FundTransfer)
class FundTransferAdmin(ReadOnlyLedgerAdmin):
    list_display = (
        "voucher_no",
        "account",
        "direction",
        "amount",
        "investor_name",
        "transfer_date",
        "is_rollup",
    )
    list_filter = ("account", "direction", "is_rollup")
    search_fields = ("voucher_no", "investor_name")


@admin.register(NumberSequence)
class NumberSequenceAdmin(ReadOnlyLedgerAdmin):
    list_display = ("scope", "last_value", "updated_at")
    search_fields = ("scope",)
