"""Custom DRF permissions for the distributor sales network."""
from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Allow access to administrators (ADMIN role or superuser)."""

    message = "Solo un administrador puede realizar esta accion."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return bool(getattr(user, "is_admin", False))


class IsAdminOrDistributor(BasePermission):
    """Allow administrators and distributors; object access is scoped to owners."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return bool(getattr(user, "is_admin", False) or getattr(user, "is_distributor", False))

    def has_object_permission(self, request, view, obj):
        if getattr(request.user, "is_admin", False):
            return True
        return getattr(obj, "distributor_id", None) == request.user.pk
