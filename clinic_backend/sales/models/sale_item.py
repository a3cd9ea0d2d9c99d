# sales/models/sale_item.py

from decimal import Decimal

from django.db import models
from django.db.models import Q


class SaleItem(models.Model):
    """
    One priced line of a Sale.

    unit_price / item_name are snapshots taken when the sale was created;
    later price changes on the StockItem never touch them.
    """

    sale = models.ForeignKey(
        "sales.Sale",
        on_delete=models.CASCADE,
        related_name="items",
    )
    stock_item = models.ForeignKey(
        "inventory.StockItem",
        on_delete=models.PROTECT,
        related_name="sale_items",
    )

    item_name = models.CharField(max_length=255)
    item_kind = models.CharField(max_length=20)

    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(condition=Q(quantity__gt=0), name="chk_sale_item_quantity_positive"),
        ]

    def __str__(self):
        return f"{self.item_name} x{self.quantity}"
