# products/models/product.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    Represents a sellable catalog item (goods or a service).

    STOCK MODEL:
    - stock_quantity is the on-hand count for physical goods
    - track_inventory=False marks services (configuration, support...):
      they are never stock-checked or deducted
    - stock only moves through products.services.stock
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sku = models.CharField(max_length=128, unique=True, db_index=True)
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=128, blank=True, default="", db_index=True)
    image_url = models.URLField(max_length=500, blank=True, default="")

    # Current/default selling price (snapshot at sale time is stored in SaleItem)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)

    stock_quantity = models.PositiveIntegerField(default=0)
    low_stock_threshold = models.PositiveIntegerField(default=10)
    track_inventory = models.BooleanField(default=True)

    is_active = models.BooleanField(default=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products_created",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active", "name"], name="product_active_name_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    def clean(self):
        if self.unit_price is None or Decimal(self.unit_price) < 0:
            raise ValidationError("Unit price must be non-negative")

    @property
    def is_low_stock(self) -> bool:
        if not self.track_inventory:
            return False
        return self.stock_quantity <= int(self.low_stock_threshold or 0)
