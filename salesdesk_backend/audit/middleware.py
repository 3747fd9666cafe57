# audit/middleware.py

from __future__ import annotations

from audit import context


class AuditContextMiddleware:
    """
    Opens a fresh audit scope per request.

    Session-authenticated users (Django admin) are known here already;
    JWT users are attached later by AuditedJWTAuthentication.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        ip_token = context.set_ip_address(context.get_client_ip(request))

        user = getattr(request, "user", None)
        actor_token = context.set_actor(
            user if user is not None and user.is_authenticated else None
        )

        try:
            return self.get_response(request)
        finally:
            context.reset(actor_token=actor_token, ip_token=ip_token)
