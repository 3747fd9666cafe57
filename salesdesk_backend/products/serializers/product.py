# products/serializers/product.py

"""
PRODUCT SERIALIZER

Canonical Product serializer for the catalog screens and the sale form.
"""

from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """
    GUARANTEES:
    - SKU is stored stripped + uppercased (unique)
    - Prices are non-negative
    - is_low_stock is derived, never written
    """

    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "description",
            "category",
            "image_url",
            "unit_price",
            "stock_quantity",
            "low_stock_threshold",
            "track_inventory",
            "is_low_stock",
            "is_active",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "is_low_stock",
            "created_by",
            "created_at",
            "updated_at",
        ]

    def validate_sku(self, value):
        value = (value or "").strip().upper()
        if not value:
            raise serializers.ValidationError("SKU is required")

        qs = Product.objects.filter(sku__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A product with this SKU already exists")

        return value

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value

    def validate_category(self, value):
        return (value or "").strip()

    def validate_unit_price(self, value):
        if value is None or value < 0:
            raise serializers.ValidationError("Unit price must be non-negative")
        return value
