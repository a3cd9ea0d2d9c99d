# inventory/models/stock_movement.py

"""
INVENTORY MOVEMENT LEDGER

Append-only audit row for every StockItem.quantity change.

GUARANTEES:
- Created ONCE, never edited or deleted
- quantity is signed (negative = out)
- previous_quantity + quantity == new_quantity
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class StockMovement(models.Model):
    class Reason(models.TextChoices):
        SALE = "sale", "Sale"
        SALE_REVERSAL = "sale_reversal", "Sale Reversal"
        RESTOCK = "restock", "Restock"
        ADJUSTMENT = "adjustment", "Manual Adjustment"

    item = models.ForeignKey(
        "inventory.StockItem",
        on_delete=models.PROTECT,
        related_name="movements",
    )
    reason = models.CharField(max_length=20, choices=Reason.choices)

    quantity = models.IntegerField()
    previous_quantity = models.PositiveIntegerField()
    new_quantity = models.PositiveIntegerField()

    sale = models.ForeignKey(
        "sales.Sale",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )
    sale_reference = models.CharField(
        max_length=40,
        blank=True,
        default="",
        help_text="Invoice number snapshot (survives sale deletion)",
    )

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )
    note = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["item", "created_at"], name="inv_move_item_created_idx"),
            models.Index(fields=["reason"], name="inv_move_reason_idx"),
        ]

    def __str__(self):
        return f"{self.reason} {self.quantity:+d} {self.item_id}"

    def clean(self):
        if self.quantity == 0:
            raise ValidationError("Movement quantity cannot be zero")
        if self.previous_quantity + self.quantity != self.new_quantity:
            raise ValidationError("Movement quantities do not reconcile")

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            raise ValidationError("Stock movements are immutable")
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Stock movements cannot be deleted")
