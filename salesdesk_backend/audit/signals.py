# audit/signals.py

"""
Signal receivers that write CREATE / UPDATE / DELETE audit entries
for tracked business models.

- pre_save keeps a snapshot of the stored row on the instance
- post_save logs CREATE, or UPDATE with only the changed fields
- post_delete logs DELETE with the last known row

Entries are written inside the caller's transaction, so a rolled back
change leaves no audit trail behind.
"""

from __future__ import annotations

from django.db.models.signals import post_delete, post_save, pre_save

from audit.models import AuditLogEntry
from audit.services import diff_snapshots, record_event, snapshot_instance

_ORIGINAL_ATTR = "_audit_original_snapshot"


def tracked_models() -> dict:
    """Model class -> entity_type label."""
    from company.models import CompanySettings, NotificationSettings
    from customers.models import Customer
    from products.models import Product
    from sales.models import Sale

    return {
        Product: "product",
        Sale: "sale",
        Customer: "customer",
        CompanySettings: "company_settings",
        NotificationSettings: "notification_settings",
    }


def _entity_type(sender) -> str:
    return tracked_models().get(sender, sender._meta.model_name)


def store_original_snapshot(sender, instance, raw=False, **kwargs):
    if raw or instance._state.adding:
        return

    original = sender._default_manager.filter(pk=instance.pk).first()
    if original is not None:
        setattr(instance, _ORIGINAL_ATTR, snapshot_instance(original))


def log_save(sender, instance, created, raw=False, **kwargs):
    if raw:
        return

    if created:
        record_event(
            action_type=AuditLogEntry.ACTION_CREATE,
            entity_type=_entity_type(sender),
            entity_id=instance.pk,
            details=snapshot_instance(instance),
        )
        return

    original = getattr(instance, _ORIGINAL_ATTR, None)
    if original is None:
        return

    changes = diff_snapshots(original, snapshot_instance(instance))
    setattr(instance, _ORIGINAL_ATTR, None)
    if not changes:
        return

    record_event(
        action_type=AuditLogEntry.ACTION_UPDATE,
        entity_type=_entity_type(sender),
        entity_id=instance.pk,
        details=changes,
    )


def log_delete(sender, instance, **kwargs):
    record_event(
        action_type=AuditLogEntry.ACTION_DELETE,
        entity_type=_entity_type(sender),
        entity_id=instance.pk,
        details=snapshot_instance(instance),
    )


def connect_tracked_models() -> None:
    for model in tracked_models():
        uid = f"audit:{model._meta.label_lower}"
        pre_save.connect(store_original_snapshot, sender=model, dispatch_uid=f"{uid}:pre")
        post_save.connect(log_save, sender=model, dispatch_uid=f"{uid}:save")
        post_delete.connect(log_delete, sender=model, dispatch_uid=f"{uid}:delete")
