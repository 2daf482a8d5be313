"""
Permission classes for the front desk API.
"""
from rest_framework.permissions import BasePermission

STAFF_ROLES = {"admin", "staff", "doctor"}


class IsStaffRole(BasePermission):
    """Allow access only to authenticated front desk staff."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) in STAFF_ROLES)


class IsPublicSubmission(BasePermission):
    """Let anyone POST (public intake form); other methods need another permission."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return request.method == "POST"
