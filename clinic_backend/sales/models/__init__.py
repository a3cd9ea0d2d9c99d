# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS
"""

from .payment import Payment
from .sale import Sale
from .sale_item import SaleItem

__all__ = [
    "Sale",
    "SaleItem",
    "Payment",
]
