from .stock import InsufficientStockError, deduct_stock, lock_products, restock

__all__ = [
    "InsufficientStockError",
    "deduct_stock",
    "lock_products",
    "restock",
]
