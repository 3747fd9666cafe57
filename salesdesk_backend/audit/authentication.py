# audit/authentication.py

from rest_framework_simplejwt.authentication import JWTAuthentication

from audit.context import set_actor


class AuditedJWTAuthentication(JWTAuthentication):
    """
    SimpleJWT authentication that also publishes the authenticated user
    to the audit context, so signal-driven audit entries know the actor.
    """

    def authenticate(self, request):
        result = super().authenticate(request)
        if result is not None:
            set_actor(result[0])
        return result
