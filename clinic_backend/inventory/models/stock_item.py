# inventory/models/stock_item.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class StockItem(models.Model):
    """
    A sellable item (frame, lens, complete glasses, medicine...).

    STOCK MODEL:
    - quantity is the on-hand count, never negative (DB check)
    - quantity changes ONLY through inventory.services.stock_guard
    - unit_price is the current selling price (snapshotted on SaleItem)
    """

    class Kind(models.TextChoices):
        FRAME = "frame", "Frame"
        LENS = "lens", "Lens"
        COMPLETE_GLASSES = "complete_glasses", "Complete Glasses"
        MEDICINE = "medicine", "Medicine"
        OTHER = "other", "Other"

    sku = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=255, db_index=True)
    kind = models.CharField(max_length=20, choices=Kind.choices)

    quantity = models.PositiveIntegerField(default=0)
    unit_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["kind", "is_active"], name="inv_item_kind_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name="chk_stock_item_quantity_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(unit_price__gte=0),
                name="chk_stock_item_price_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.sku} - {self.name} ({self.quantity})"

    def clean(self):
        self.sku = (self.sku or "").strip()
        self.name = (self.name or "").strip()
        if not self.sku:
            raise ValidationError("SKU is required")
        if not self.name:
            raise ValidationError("Item name is required")
