from .commands import (
    SaleCancelSerializer,
    SaleCreateSerializer,
    SaleItemInputSerializer,
    SendInvoiceSerializer,
)
from .sale import SaleSerializer
from .sale_item import SaleItemSerializer

__all__ = [
    "SaleSerializer",
    "SaleItemSerializer",
    "SaleCreateSerializer",
    "SaleItemInputSerializer",
    "SaleCancelSerializer",
    "SendInvoiceSerializer",
]
