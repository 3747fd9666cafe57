# sales/serializers/sale.py

from rest_framework import serializers

from sales.models import Sale

from .sale_item import SaleItemSerializer


class SaleSerializer(serializers.ModelSerializer):
    """
    CANONICAL SALE SERIALIZER (read-only)

    Used by sales history, the invoice preview and "My Transactions".
    """

    items = SaleItemSerializer(many=True, read_only=True)
    cancelled_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Sale
        fields = [
            "id",
            "invoice_no",
            "customer",
            "customer_name",
            "issuer",
            "issuer_name",
            "total_amount",
            "status",
            "invoice_sent",
            "notes",
            "created_at",
            "completed_at",
            "cancelled_at",
            "cancelled_by",
            "cancelled_by_name",
            "cancel_reason",
            "items",
        ]
        read_only_fields = fields

    def get_cancelled_by_name(self, obj):
        user = obj.cancelled_by
        return user.display_name if user is not None else None
