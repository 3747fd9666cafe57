# sales/models/sale_item.py

"""
SALE ITEM (IMMUTABLE SNAPSHOT)

Represents an immutable snapshot of a sold line item.

- product_name / sku are copied at sale time so history survives
  product renames and deletions (product FK is SET_NULL)
- unit_price is the price actually charged (may differ from catalog price)
- total_price is always unit_price * quantity
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from products.models import Product

from .sale import Sale

TWOPLACES = Decimal("0.01")


class SaleItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sale_items",
    )

    product_name = models.CharField(max_length=255)
    sku = models.CharField(max_length=128, blank=True, default="")

    quantity = models.PositiveIntegerField()

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
    )

    total_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        editable=False,
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["sale", "created_at"], name="saleitem_sale_created_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("SaleItem records are immutable")

        if int(self.quantity or 0) <= 0:
            raise ValidationError("SaleItem quantity must be greater than zero")

        # Always keep total_price consistent
        self.total_price = (
            Decimal(str(self.unit_price)) * Decimal(int(self.quantity))
        ).quantize(TWOPLACES)

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("SaleItem records cannot be deleted")

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
