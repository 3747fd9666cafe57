# reports/serializers.py

from rest_framework import serializers

from sales.models import Sale


class ReportFilterSerializer(serializers.Serializer):
    """
    Query params shared by the transaction report and its exports.
    """

    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    customer = serializers.CharField(required=False, allow_blank=True, default="")
    issuer = serializers.CharField(required=False, allow_blank=True, default="")
    status = serializers.ChoiceField(
        choices=[c for c, _ in Sale.STATUS_CHOICES],
        required=False,
        allow_blank=True,
        default="",
    )

    def validate(self, attrs):
        date_from = attrs.get("date_from")
        date_to = attrs.get("date_to")
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError(
                {"date_to": "date_to must be on or after date_from."}
            )
        return attrs


class ExportFilterSerializer(ReportFilterSerializer):
    format = serializers.ChoiceField(choices=["csv", "pdf"], required=False, default="csv")


class DashboardQuerySerializer(serializers.Serializer):
    days = serializers.ChoiceField(choices=[7, 30], required=False, default=7)


class TransactionRowSerializer(serializers.ModelSerializer):
    class Meta:
        model = Sale
        fields = [
            "id",
            "invoice_no",
            "created_at",
            "customer_name",
            "issuer_name",
            "total_amount",
            "status",
        ]
        read_only_fields = fields
