# sales/services/sale_service.py

"""
CORE SALES DOMAIN SERVICE

SINGLE SOURCE OF TRUTH for:
- Sale + SaleItem creation
- Stock deduction / restoration
- Totals calculation
- Status moves (complete / cancel)

GUARANTEES:
- Fully atomic: a failed line rolls back the whole sale
- Product rows are locked (select_for_update) before stock is checked
- Stock checks use the quantity summed per product over all lines
- Notification email is queued only after commit
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from products.services.stock import (
    InsufficientStockError,
    deduct_stock,
    lock_products,
    restock,
)
from sales.models import Sale, SaleItem
from sales.services.sale_lifecycle import INITIAL_STATES, validate_transition

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

# Column limits: PositiveIntegerField quantities, 12 integer digits on money
MAX_QUANTITY = 2147483647
MAX_UNIT_PRICE = Decimal("9999999999.99")
MAX_AMOUNT = Decimal("999999999999.99")


# ============================================================
# DOMAIN ERRORS
# ============================================================


class SaleError(Exception):
    pass


class EmptySaleError(SaleError):
    pass


class InvalidSaleItemError(SaleError):
    pass


class StockValidationError(SaleError):
    pass


def _to_price(value, *, label: str) -> Decimal:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidSaleItemError(f"Invalid unit price for {label}")

    if not price.is_finite() or price < 0:
        raise InvalidSaleItemError(f"Unit price for {label} cannot be negative")
    if price > MAX_UNIT_PRICE:
        raise InvalidSaleItemError(f"Unit price for {label} is too large")
    return price.quantize(TWOPLACES)


def _to_quantity(value, *, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidSaleItemError(f"Quantity for {label} must be a positive whole number")
    if value > MAX_QUANTITY:
        raise InvalidSaleItemError(f"Quantity for {label} is too large")
    return value


# ============================================================
# CREATE
# ============================================================


@transaction.atomic
def create_sale(
    *,
    issuer,
    items,
    customer=None,
    customer_name: str = "",
    status: str = Sale.STATUS_COMPLETED,
    notes: str = "",
) -> Sale:
    """
    Record a sale.

    items: iterable of {"product_id", "quantity", "unit_price"?}.
    A missing unit_price falls back to the catalog price.
    """
    items = list(items or [])
    if not items:
        raise EmptySaleError("A sale needs at least one item")

    if status not in INITIAL_STATES:
        raise SaleError(f"A new sale cannot start as '{status}'")

    customer_name = (customer_name or "").strip()
    if not customer_name and customer is not None:
        customer_name = customer.name
    if not customer_name:
        raise SaleError("Customer is required")

    products = lock_products(item["product_id"] for item in items)

    lines = []
    requested = OrderedDict()
    for item in items:
        product = products.get(item["product_id"])
        if product is None or not product.is_active:
            raise InvalidSaleItemError(
                f"Product {item['product_id']} does not exist or is inactive"
            )

        quantity = _to_quantity(item.get("quantity"), label=product.name)
        unit_price = item.get("unit_price")
        unit_price = (
            product.unit_price.quantize(TWOPLACES)
            if unit_price is None
            else _to_price(unit_price, label=product.name)
        )

        lines.append((product, quantity, unit_price))
        requested[product.pk] = requested.get(product.pk, 0) + quantity

    for product_id, quantity in requested.items():
        product = products[product_id]
        if product.track_inventory and product.stock_quantity < quantity:
            raise StockValidationError(
                f"Insufficient stock for {product.name}. "
                f"Available: {product.stock_quantity}, requested: {quantity}"
            )

    total = Decimal("0.00")
    for product, qty, price in lines:
        line_total = (price * qty).quantize(TWOPLACES)
        if line_total > MAX_AMOUNT:
            raise InvalidSaleItemError(f"Line total for {product.name} is too large")
        total += line_total

    if total <= 0:
        raise SaleError("Sale total must be greater than zero")
    if total > MAX_AMOUNT:
        raise SaleError("Sale total is too large")

    sale = Sale.objects.create(
        customer=customer,
        customer_name=customer_name,
        issuer=issuer,
        issuer_name=issuer.display_name,
        total_amount=total,
        status=status,
        notes=(notes or "").strip(),
    )

    for product, quantity, unit_price in lines:
        SaleItem.objects.create(
            sale=sale,
            product=product,
            product_name=product.name,
            sku=product.sku,
            quantity=quantity,
            unit_price=unit_price,
        )

    try:
        for product_id, quantity in requested.items():
            deduct_stock(product=products[product_id], quantity=quantity)
    except InsufficientStockError as exc:
        raise StockValidationError(str(exc)) from exc

    sale_id = sale.pk
    transaction.on_commit(lambda: _notify(sale_id))

    logger.info(
        "Sale recorded",
        extra={
            "sale_id": str(sale.pk),
            "invoice_no": sale.invoice_no,
            "issuer_id": str(issuer.pk),
            "total": str(total),
            "status": status,
        },
    )
    return sale


def _notify(sale_id) -> None:
    from sales.services.notifications import notify_sale_created

    notify_sale_created(sale_id)


# ============================================================
# STATUS MOVES
# ============================================================


def _lock_sale(sale: Sale) -> Sale:
    return Sale.objects.select_for_update().get(pk=sale.pk)


@transaction.atomic
def complete_sale(*, sale: Sale, user) -> Sale:
    sale = _lock_sale(sale)
    validate_transition(sale=sale, target_status=Sale.STATUS_COMPLETED)

    sale.status = Sale.STATUS_COMPLETED
    sale.completed_at = timezone.now()
    sale.save(update_fields=["status", "completed_at"])

    logger.info(
        "Sale completed",
        extra={"sale_id": str(sale.pk), "user_id": str(user.pk)},
    )
    return sale


@transaction.atomic
def cancel_sale(*, sale: Sale, user, reason: str = "") -> Sale:
    """
    Cancel a sale and put tracked stock back.

    Lines whose product has since been deleted are skipped.
    """
    sale = _lock_sale(sale)
    validate_transition(sale=sale, target_status=Sale.STATUS_CANCELLED)

    returned = OrderedDict()
    for item in sale.items.all():
        if item.product_id is None:
            continue
        returned[item.product_id] = returned.get(item.product_id, 0) + item.quantity

    products = lock_products(returned.keys())
    for product_id, quantity in returned.items():
        product = products.get(product_id)
        if product is not None:
            restock(product=product, quantity=quantity)

    sale.status = Sale.STATUS_CANCELLED
    sale.cancelled_at = timezone.now()
    sale.cancelled_by = user
    sale.cancel_reason = (reason or "").strip()
    sale.save(
        update_fields=["status", "cancelled_at", "cancelled_by", "cancel_reason"]
    )

    logger.info(
        "Sale cancelled",
        extra={"sale_id": str(sale.pk), "user_id": str(user.pk)},
    )
    return sale
