from .sale import SaleViewSet

__all__ = ["SaleViewSet"]
