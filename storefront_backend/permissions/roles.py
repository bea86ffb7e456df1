# permissions/roles.py

from __future__ import annotations

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS
# =========================================================
# The storefront has two audiences:
# - customers (authenticated or guest) buying through the public API
# - store admins managing catalog + orders
ROLE_ADMIN = "admin"
ROLE_CUSTOMER = "customer"


# =========================================================
# HELPERS
# =========================================================
def get_user_role(user) -> str | None:
    """
    Resolve the storefront role for a request user.

    Admin = active staff account (Django's is_staff flag, also what
    grants access to the Django admin site).
    """
    if not user or not getattr(user, "is_authenticated", False):
        return None

    if not getattr(user, "is_active", True):
        return None

    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return ROLE_ADMIN

    return ROLE_CUSTOMER


# =========================================================
# Base Role Permission
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


class IsStoreAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}


class IsCustomer(BaseRolePermission):
    """
    Any signed-in account (admins can see their own purchases too).
    """

    allowed_roles = {ROLE_ADMIN, ROLE_CUSTOMER}
