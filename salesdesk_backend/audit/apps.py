# audit/apps.py

from django.apps import AppConfig


class AuditConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "audit"
    verbose_name = "Audit Trail"

    def ready(self):
        from audit.signals import connect_tracked_models

        connect_tracked_models()
