# audit/services.py

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from audit import context
from audit.models import SYSTEM_ACTOR_NAME, AuditLogEntry

logger = logging.getLogger(__name__)

# Bookkeeping columns that change on every save and carry no business meaning
IGNORED_FIELDS = {"updated_at"}


def serialize_value(value):
    """Convert a model field value to something JSONField can store."""
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, UUID):
        return str(value)
    return value


def snapshot_instance(instance) -> dict:
    """
    Flat dict of concrete field values (FKs by id, e.g. "issuer_id").
    """
    data = {}
    for field in instance._meta.concrete_fields:
        if field.name in IGNORED_FIELDS:
            continue
        data[field.attname] = serialize_value(getattr(instance, field.attname))
    return data


def diff_snapshots(old: dict, new: dict) -> dict:
    """
    {"old": {...}, "new": {...}} restricted to keys whose value changed.
    Empty dict when nothing changed.
    """
    changed = [k for k in new if old.get(k) != new.get(k)]
    if not changed:
        return {}
    return {
        "old": {k: old.get(k) for k in changed},
        "new": {k: new.get(k) for k in changed},
    }


def _actor_name(user) -> str:
    if user is None:
        return SYSTEM_ACTOR_NAME
    name = getattr(user, "display_name", None) or getattr(user, "email", None)
    return name or SYSTEM_ACTOR_NAME


def record_event(
    *,
    action_type: str,
    entity_type: str,
    entity_id="",
    details=None,
    user=None,
    ip_address=None,
) -> AuditLogEntry:
    """
    Append one audit entry.

    user / ip_address default to the request-scoped audit context.
    """
    if user is None:
        user = context.get_actor()
    if ip_address is None:
        ip_address = context.get_ip_address()

    entry = AuditLogEntry.objects.create(
        user=user,
        user_name=_actor_name(user),
        action_type=action_type,
        entity_type=entity_type,
        entity_id=str(entity_id or ""),
        details=details,
        ip_address=ip_address,
    )

    logger.info(
        "Audit entry recorded",
        extra={
            "action_type": action_type,
            "entity_type": entity_type,
            "entity_id": entry.entity_id,
            "actor": entry.user_name,
        },
    )
    return entry
