# company/serializers.py

from rest_framework import serializers

from company.models import CompanySettings, NotificationSettings


def _single_line(value, *, label):
    # used in mail headers (subject lines)
    if "\n" in value or "\r" in value:
        raise serializers.ValidationError(f"{label} must be a single line")
    return value


class CompanySettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = CompanySettings
        fields = [
            "company_name",
            "address",
            "email",
            "phone",
            "logo_url",
            "currency_symbol",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]

    def validate_company_name(self, value):
        value = _single_line((value or "").strip(), label="Company name")
        if not value:
            raise serializers.ValidationError("Company name is required")
        return value

    def validate_currency_symbol(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Currency symbol is required")
        return value


class NotificationSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = NotificationSettings
        fields = [
            "notification_email",
            "send_on_sale",
            "email_subject_template",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]

    def validate_email_subject_template(self, value):
        value = _single_line((value or "").strip(), label="Email subject")
        if not value:
            raise serializers.ValidationError("Email subject is required")
        return value
