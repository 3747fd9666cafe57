from types import SimpleNamespace

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIRequestFactory

from permissions.roles import (
    CAP_AUDIT_VIEW,
    CAP_REPORTS_VIEW,
    CAP_SALES_CANCEL,
    CAP_SALES_CREATE,
    HasAnyCapability,
    HasCapability,
    IsAdmin,
    IsStaff,
    capabilities_for,
    user_has_capability,
)

User = get_user_model()


class PermissionRoleTests(TestCase):
    """
    Tests for role-based permissions.

    GUARANTEES:
    - Admins hold every capability
    - Staff can only record sales
    - Inactive and anonymous users get nothing
    - Capability checks deny when the view declares nothing
    """

    def setUp(self):
        self.factory = APIRequestFactory()

        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass1234",
            role="admin",
        )
        self.staff = User.objects.create_user(
            email="staff@example.com",
            password="pass1234",
            role="staff",
        )

    # --------------------------------------------------
    # Helpers
    # --------------------------------------------------

    def _request_for(self, user=None):
        request = self.factory.get("/")
        request.user = user
        return request

    def _view(self, **attrs):
        return SimpleNamespace(**attrs)

    # --------------------------------------------------
    # ADMIN
    # --------------------------------------------------

    def test_admin_permissions(self):
        request = self._request_for(self.admin)

        self.assertTrue(IsAdmin().has_permission(request, None))
        self.assertTrue(IsStaff().has_permission(request, None))
        self.assertTrue(
            HasCapability().has_permission(
                request, self._view(required_capability=CAP_AUDIT_VIEW)
            )
        )
        self.assertTrue(user_has_capability(self.admin, CAP_SALES_CANCEL))

    # --------------------------------------------------
    # STAFF
    # --------------------------------------------------

    def test_staff_permissions(self):
        request = self._request_for(self.staff)

        self.assertTrue(IsStaff().has_permission(request, None))
        self.assertFalse(IsAdmin().has_permission(request, None))

        self.assertEqual(capabilities_for(self.staff), {CAP_SALES_CREATE})
        self.assertFalse(
            HasCapability().has_permission(
                request, self._view(required_capability=CAP_REPORTS_VIEW)
            )
        )
        self.assertTrue(
            HasAnyCapability().has_permission(
                request,
                self._view(required_any_capabilities={CAP_REPORTS_VIEW, CAP_SALES_CREATE}),
            )
        )

    def test_inactive_user_has_no_capabilities(self):
        self.admin.is_active = False
        self.admin.save()

        self.assertEqual(capabilities_for(self.admin), set())

    def test_missing_capability_declaration_denies(self):
        request = self._request_for(self.admin)

        self.assertFalse(HasCapability().has_permission(request, self._view()))
        self.assertFalse(HasAnyCapability().has_permission(request, self._view()))

    # --------------------------------------------------
    # ANONYMOUS
    # --------------------------------------------------

    def test_anonymous_user_denied_everywhere(self):
        request = self._request_for(None)
        view = self._view(required_capability=CAP_SALES_CREATE)

        self.assertFalse(IsAdmin().has_permission(request, None))
        self.assertFalse(IsStaff().has_permission(request, None))
        self.assertFalse(HasCapability().has_permission(request, view))
