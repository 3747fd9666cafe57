# users/views/users.py

from django.contrib.auth import get_user_model
from django.db.models import Q
from rest_framework import mixins, viewsets
from rest_framework.permissions import IsAuthenticated

from permissions.roles import CAP_USERS_MANAGE, HasCapability
from users.serializers import UserAdminSerializer

User = get_user_model()


class UserAdminViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Admin user management.

    - list / retrieve (search: q over email + full_name, filter: role, is_active)
    - PATCH role / is_active (admins cannot demote or deactivate themselves)
    """

    serializer_class = UserAdminSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_USERS_MANAGE

    def get_queryset(self):
        qs = User.objects.all().order_by("-created_at")
        params = self.request.query_params

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(email__icontains=q) | Q(full_name__icontains=q))

        role = (params.get("role") or "").strip().lower()
        if role:
            qs = qs.filter(role=role)

        is_active = (params.get("is_active") or "").strip().lower()
        if is_active in ("true", "1", "yes"):
            qs = qs.filter(is_active=True)
        elif is_active in ("false", "0", "no"):
            qs = qs.filter(is_active=False)

        return qs
