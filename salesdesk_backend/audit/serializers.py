# audit/serializers.py

from rest_framework import serializers

from audit.models import AuditLogEntry


class AuditLogEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = AuditLogEntry
        fields = [
            "id",
            "user",
            "user_name",
            "action_type",
            "entity_type",
            "entity_id",
            "details",
            "ip_address",
            "created_at",
        ]
        read_only_fields = fields
