# company/views.py

"""
COMPANY SETTINGS ENDPOINTS

- GET   /api/company/settings/        any authenticated user (invoice header, currency)
- PATCH /api/company/settings/        admin (settings.manage)
- GET   /api/company/notifications/   admin
- PATCH /api/company/notifications/   admin
"""

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from company.models import CompanySettings, NotificationSettings
from company.serializers import CompanySettingsSerializer, NotificationSettingsSerializer
from permissions.roles import CAP_SETTINGS_MANAGE, HasCapability


class _SingletonSettingsView(APIView):
    model = None
    serializer_class = None
    # methods anyone signed in may call; everything else needs settings.manage
    open_methods: tuple = ()
    required_capability = CAP_SETTINGS_MANAGE

    def get_permissions(self):
        if self.request.method in self.open_methods:
            return [IsAuthenticated()]
        return [IsAuthenticated(), HasCapability()]

    def get(self, request):
        return Response(self.serializer_class(self.model.load()).data)

    def patch(self, request):
        obj = self.model.load()
        serializer = self.serializer_class(obj, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save(updated_by=request.user)
        return Response(serializer.data)


@extend_schema(tags=["Company"])
class CompanySettingsView(_SingletonSettingsView):
    model = CompanySettings
    serializer_class = CompanySettingsSerializer
    open_methods = ("GET", "HEAD", "OPTIONS")


@extend_schema(tags=["Company"])
class NotificationSettingsView(_SingletonSettingsView):
    model = NotificationSettings
    serializer_class = NotificationSettingsSerializer
