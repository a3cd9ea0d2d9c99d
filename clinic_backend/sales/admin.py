# sales/admin.py

from django.contrib import admin

from sales.models import Payment, Sale, SaleItem


# ======================================================
# SALE ADMIN (read-only; money moves through the engine)
# ======================================================


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    can_delete = False
    readonly_fields = ("stock_item", "item_name", "item_kind", "quantity", "unit_price", "total_price")


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    can_delete = False
    readonly_fields = ("amount", "method", "transaction_ref", "is_advance", "journal_entry", "received_by", "created_at")


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = (
        "invoice_no",
        "account",
        "status",
        "total_amount",
        "due_amount",
        "created_at",
    )
    list_filter = ("status", "account", "created_at")
    search_fields = ("invoice_no", "customer_name", "customer_phone")
    inlines = (SaleItemInline, PaymentInline)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("sale", "amount", "method", "is_advance", "created_at")
    list_filter = ("method", "is_advance")
    search_fields = ("sale__invoice_no", "transaction_ref")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
