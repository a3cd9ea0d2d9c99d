# inventory/admin.py

from django.contrib import admin

from inventory.models import StockItem, StockMovement


@admin.register(StockItem)
class StockItemAdmin(admin.ModelAdmin):
    list_display = ("sku", "name", "kind", "quantity", "unit_price", "is_active")
    list_filter = ("kind", "is_active")
    search_fields = ("sku", "name")
    readonly_fields = ("quantity", "created_at", "updated_at")


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("item", "reason", "quantity", "new_quantity", "sale_reference", "created_at")
    list_filter = ("reason",)
    search_fields = ("item__sku", "item__name", "sale_reference")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
