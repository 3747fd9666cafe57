# audit/context.py

"""
REQUEST-SCOPED AUDIT CONTEXT

Who is acting and from where, for the duration of one request.

- AuditContextMiddleware opens/closes the scope and records the client IP.
- AuditedJWTAuthentication records the actor once DRF has authenticated them.
- audit.services reads both when writing an entry.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Optional

from django.core.exceptions import ValidationError
from django.core.validators import validate_ipv46_address

_actor: ContextVar = ContextVar("audit_actor", default=None)
_ip_address: ContextVar[Optional[str]] = ContextVar("audit_ip_address", default=None)


def set_actor(user):
    if user is not None and not getattr(user, "is_authenticated", False):
        user = None
    return _actor.set(user)


def get_actor():
    return _actor.get()


def set_ip_address(ip: Optional[str]):
    return _ip_address.set(ip or None)


def get_ip_address() -> Optional[str]:
    return _ip_address.get()


def reset(actor_token=None, ip_token=None) -> None:
    if actor_token is not None:
        _actor.reset(actor_token)
    if ip_token is not None:
        _ip_address.reset(ip_token)


def _valid_ip(value) -> Optional[str]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        validate_ipv46_address(value)
    except ValidationError:
        return None
    return value


def get_client_ip(request) -> Optional[str]:
    """
    First X-Forwarded-For hop when it is a real address, else REMOTE_ADDR.
    """
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR") or ""
    ip = _valid_ip(forwarded.split(",")[0])
    if ip is None:
        ip = _valid_ip(request.META.get("REMOTE_ADDR"))
    return ip
