# audit/models.py

"""
AUDIT LOG ENTRY (APPEND-ONLY)

One row per tracked change or auth event:
- CREATE / UPDATE / DELETE of tracked business records (written by audit.signals)
- LOGIN / LOGOUT (written by the auth views)

details:
- CREATE / DELETE: snapshot of the row
- UPDATE: {"old": {...}, "new": {...}} limited to the fields that changed
"""

import uuid

from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL

SYSTEM_ACTOR_NAME = "System"


class AuditLogEntry(models.Model):
    ACTION_CREATE = "CREATE"
    ACTION_UPDATE = "UPDATE"
    ACTION_DELETE = "DELETE"
    ACTION_LOGIN = "LOGIN"
    ACTION_LOGOUT = "LOGOUT"

    ACTION_CHOICES = [
        (ACTION_CREATE, "Create"),
        (ACTION_UPDATE, "Update"),
        (ACTION_DELETE, "Delete"),
        (ACTION_LOGIN, "Login"),
        (ACTION_LOGOUT, "Logout"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_entries",
    )

    # Snapshot so entries stay readable after the user is renamed/removed
    user_name = models.CharField(max_length=255, default=SYSTEM_ACTOR_NAME)

    action_type = models.CharField(max_length=16, choices=ACTION_CHOICES, db_index=True)
    entity_type = models.CharField(max_length=64, db_index=True)
    entity_id = models.CharField(max_length=64, blank=True, default="")

    details = models.JSONField(null=True, blank=True)

    ip_address = models.GenericIPAddressField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id"], name="audit_entity_idx"),
            models.Index(fields=["action_type", "created_at"], name="audit_action_created_idx"),
        ]

    def save(self, *args, **kwargs):
        # Allow creation, block updates
        if not self._state.adding:
            raise RuntimeError("AuditLogEntry records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("AuditLogEntry records cannot be deleted")

    def __str__(self):
        return f"{self.action_type} {self.entity_type}:{self.entity_id} by {self.user_name}"
