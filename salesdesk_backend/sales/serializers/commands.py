# sales/serializers/commands.py

"""
Write-side inputs for the sales endpoints.

These only validate shape; business rules (active products, stock,
totals) live in sales.services.sale_service.
"""

from rest_framework import serializers

from customers.models import Customer
from sales.models import Sale
from sales.services.sale_service import MAX_QUANTITY


class SaleItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY)
    unit_price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
        default=None,
    )


class SaleCreateSerializer(serializers.Serializer):
    customer_id = serializers.PrimaryKeyRelatedField(
        queryset=Customer.objects.all(),
        source="customer",
        required=False,
        allow_null=True,
        default=None,
    )
    customer_name = serializers.CharField(
        max_length=255,
        required=False,
        allow_blank=True,
        default="",
    )
    status = serializers.ChoiceField(
        choices=[Sale.STATUS_COMPLETED, Sale.STATUS_PENDING],
        required=False,
        default=Sale.STATUS_COMPLETED,
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    items = SaleItemInputSerializer(many=True, allow_empty=False)

    def validate(self, attrs):
        name = (attrs.get("customer_name") or "").strip()
        if not name and attrs.get("customer") is None:
            raise serializers.ValidationError(
                {"customer_name": "Provide customer_id or customer_name."}
            )
        attrs["customer_name"] = name
        return attrs


class SaleCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class SendInvoiceSerializer(serializers.Serializer):
    recipient = serializers.EmailField(required=False, allow_blank=True, default="")
    paper = serializers.ChoiceField(choices=["A4", "A5"], required=False, default="A4")
