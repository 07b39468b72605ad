"""
Custom permissions for role- and capability-based access
"""
from rest_framework import permissions


class IsAdmin(permissions.BasePermission):
    """Permission check for admin role"""
    message = 'Admin access required'

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.role == 'admin'
        )


class IsAdminOrStaff(permissions.BasePermission):
    """Permission check for any back-office role"""
    message = 'Staff access required'

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.role in ('admin', 'staff')
        )


def require_capability(name, safe_methods_open=False):
    """
    Build a permission class that requires capability `name`.
    With safe_methods_open=True, GET/HEAD/OPTIONS only need a back-office role
    and the capability is checked for writes.
    """

    class HasCapability(permissions.BasePermission):
        message = f'Missing permission: {name}'

        def has_permission(self, request, view):
            user = request.user
            if not (user and user.is_authenticated and user.role in ('admin', 'staff')):
                return False
            if safe_methods_open and request.method in permissions.SAFE_METHODS:
                return True
            return user.has_capability(name)

    HasCapability.__name__ = f'HasCapability_{name}'
    return HasCapability
