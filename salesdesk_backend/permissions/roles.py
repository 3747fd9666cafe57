# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS
# =========================================================
# admin: full control (catalog, settings, users, reports, audit)
# staff: records sales and sees only their own transactions
ROLE_ADMIN = "admin"
ROLE_STAFF = "staff"

ROLE_CHOICES = [
    (ROLE_ADMIN, "Admin"),
    (ROLE_STAFF, "Staff"),
]

ALL_ROLES = {ROLE_ADMIN, ROLE_STAFF}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views should protect capabilities, not raw roles.
CAP_SALES_CREATE = "sales.create"
CAP_SALES_VIEW_ALL = "sales.view_all"
CAP_SALES_CANCEL = "sales.cancel"

CAP_PRODUCTS_MANAGE = "products.manage"
CAP_CUSTOMERS_DELETE = "customers.delete"

CAP_REPORTS_VIEW = "reports.view"
CAP_AUDIT_VIEW = "audit.view"

CAP_SETTINGS_MANAGE = "settings.manage"
CAP_USERS_MANAGE = "users.manage"

ALL_CAPABILITIES = {
    CAP_SALES_CREATE,
    CAP_SALES_VIEW_ALL,
    CAP_SALES_CANCEL,
    CAP_PRODUCTS_MANAGE,
    CAP_CUSTOMERS_DELETE,
    CAP_REPORTS_VIEW,
    CAP_AUDIT_VIEW,
    CAP_SETTINGS_MANAGE,
    CAP_USERS_MANAGE,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_STAFF: {
        CAP_SALES_CREATE,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def is_admin(user) -> bool:
    return bool(
        user
        and getattr(user, "is_authenticated", False)
        and get_user_role(user) == ROLE_ADMIN
    )


def capabilities_for(user) -> set[str]:
    """
    Capabilities granted to a user by role. Inactive users get nothing.
    """
    if not user or not getattr(user, "is_authenticated", False):
        return set()
    if not getattr(user, "is_active", True):
        return set()
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def user_has_capability(user, capability: str) -> bool:
    return capability in capabilities_for(user)


# =========================================================
# Base Role Permission (Internal Use)
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Base permission for role-based access control.

    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        user_role = get_user_role(user)
        if not user_role:
            return False

        return user_role in self.allowed_roles


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_REPORTS_VIEW
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # If not set, deny-by-default to avoid accidental open endpoints
            return False

        return required in capabilities_for(user)


class HasAnyCapability(BasePermission):
    """
    Require ANY capability from a list.

    Usage:
        view.required_any_capabilities = {CAP_SALES_CREATE, CAP_SALES_VIEW_ALL}
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_any_capabilities", None)
        if not required:
            return False

        caps = capabilities_for(user)
        return any(cap in caps for cap in set(required))


# =========================================================
# Role Permissions
# =========================================================
class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}


class IsStaff(BaseRolePermission):
    """
    Any signed-in team member (admin or staff).
    """

    allowed_roles = ALL_ROLES
