from .commands import (
    AddPaymentSerializer,
    CreateSaleSerializer,
    SaleLineInputSerializer,
    StatusUpdateSerializer,
)
from .sale import PaymentSerializer, SaleItemSerializer, SaleSerializer

__all__ = [
    "SaleSerializer",
    "SaleItemSerializer",
    "PaymentSerializer",
    "CreateSaleSerializer",
    "SaleLineInputSerializer",
    "AddPaymentSerializer",
    "StatusUpdateSerializer",
]
