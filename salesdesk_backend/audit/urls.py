# audit/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from audit.views import AuditLogEntryViewSet

router = DefaultRouter()
router.register(r"logs", AuditLogEntryViewSet, basename="audit-logs")

urlpatterns = [
    path("", include(router.urls)),
]
