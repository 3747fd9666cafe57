# products/services/stock.py

"""
STOCK SERVICE

The only code path that changes Product.stock_quantity.

Rules:
- Quantities are whole units (positive ints).
- Untracked products (services) are ignored.
- Callers must hold the product rows locked (select_for_update) inside
  a transaction; lock_products() does that for a batch of ids.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import F

from products.models import Product

logger = logging.getLogger(__name__)


# ============================================================
# DOMAIN ERRORS
# ============================================================


class InsufficientStockError(Exception):
    pass


def _to_int_qty(value) -> int:
    """
    HARD RULE: quantities are integer units in this system.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("quantity must be a whole integer unit")
    if value <= 0:
        raise ValueError("quantity must be greater than zero")
    return value


def lock_products(product_ids) -> dict:
    """
    Lock and return {id: Product} for the given ids (deterministic lock order).
    """
    qs = (
        Product.objects.select_for_update()
        .filter(id__in=set(product_ids))
        .order_by("id")
    )
    return {p.id: p for p in qs}


@transaction.atomic
def deduct_stock(*, product: Product, quantity) -> None:
    qty = _to_int_qty(quantity)
    if not product.track_inventory:
        return

    updated = Product.objects.filter(
        pk=product.pk,
        stock_quantity__gte=qty,
    ).update(stock_quantity=F("stock_quantity") - qty)

    if not updated:
        product.refresh_from_db(fields=["stock_quantity"])
        raise InsufficientStockError(
            f"Insufficient stock for {product.name}. "
            f"Available: {product.stock_quantity}, requested: {qty}"
        )

    product.refresh_from_db(fields=["stock_quantity"])
    logger.info(
        "Stock deducted",
        extra={"product_id": str(product.pk), "quantity": qty},
    )


@transaction.atomic
def restock(*, product: Product, quantity) -> None:
    qty = _to_int_qty(quantity)
    if not product.track_inventory:
        return

    Product.objects.filter(pk=product.pk).update(
        stock_quantity=F("stock_quantity") + qty
    )
    product.refresh_from_db(fields=["stock_quantity"])
    logger.info(
        "Stock restored",
        extra={"product_id": str(product.pk), "quantity": qty},
    )
