# inventory/models/__init__.py

from inventory.models.stock_item import StockItem
from inventory.models.stock_movement import StockMovement

__all__ = ["StockItem", "StockMovement"]
