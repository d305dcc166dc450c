"""
Role based permission classes used as route level gates.

Per-record ownership checks live in :mod:`records.services.access`.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from records.models import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT


def _has_role(request, *roles) -> bool:
    user = getattr(request, "user", None)
    return bool(user and user.is_authenticated and getattr(user, "role", None) in roles)


class IsAdminRole(BasePermission):
    """Allow access only to users with the admin role."""
    message = "Access denied. Admin role required."

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, ROLE_ADMIN)


class IsDoctorRole(BasePermission):
    """Allow access only to users with the doctor role."""
    message = "Access denied. Doctor role required."

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, ROLE_DOCTOR)


class IsPatientRole(BasePermission):
    """Allow access only to users with the patient role."""
    message = "Access denied. Patient role required."

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, ROLE_PATIENT)


class IsDoctorOrAdmin(BasePermission):
    """doctor or admin."""
    message = "Access denied. Doctor or admin role required."

    def has_permission(self, request, view) -> bool:
        return _has_role(request, ROLE_DOCTOR, ROLE_ADMIN)


class ReadOnly(BasePermission):
    """Allow read-only access (GET, HEAD, OPTIONS)."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return request.method in SAFE_METHODS
