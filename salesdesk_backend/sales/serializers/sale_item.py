# sales/serializers/sale_item.py

from rest_framework import serializers

from sales.models import SaleItem


class SaleItemSerializer(serializers.ModelSerializer):
    """
    Sale line (read-only).
    Names and SKU come from the snapshot, not the live product.
    """

    class Meta:
        model = SaleItem
        fields = [
            "id",
            "product",
            "product_name",
            "sku",
            "quantity",
            "unit_price",
            "total_price",
        ]
        read_only_fields = fields
