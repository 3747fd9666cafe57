# audit/views.py

"""
AUDIT LOG API (ADMIN READ-ONLY)

- GET /api/audit/logs/            newest first, capped at the 500 most recent matches
- GET /api/audit/logs/<uuid>/
"""

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from audit.filters import AuditLogEntryFilter
from audit.models import AuditLogEntry
from audit.serializers import AuditLogEntrySerializer
from permissions.roles import CAP_AUDIT_VIEW, HasCapability

AUDIT_LOG_LIMIT = 500


class AuditLogEntryViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = AuditLogEntrySerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_AUDIT_VIEW
    filterset_class = AuditLogEntryFilter

    def get_queryset(self):
        return AuditLogEntry.objects.select_related("user").order_by("-created_at")

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        if self.action == "list":
            # slicing must happen after filtering
            return queryset[:AUDIT_LOG_LIMIT]
        return queryset
