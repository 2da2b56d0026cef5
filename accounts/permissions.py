"""Role-based DRF permission classes."""

from rest_framework.permissions import SAFE_METHODS, BasePermission

from accounts.models import Role
from accounts.roles import has_role


class RolePermission(BasePermission):
    """Grant access to authenticated users holding `minimum_role` or above."""

    minimum_role = Role.AUTHOR
    read_only_public = False
    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        if self.read_only_public and request.method in SAFE_METHODS:
            return True
        return has_role(request.user, self.minimum_role)


class IsAuthorOrAbove(RolePermission):
    minimum_role = Role.AUTHOR


class IsEditorOrAdmin(RolePermission):
    minimum_role = Role.EDITOR


class IsAdminRole(RolePermission):
    minimum_role = Role.ADMIN


class IsAuthorOrReadOnly(IsAuthorOrAbove):
    """Public reads, author+ writes."""

    read_only_public = True


class IsEditorOrReadOnly(IsEditorOrAdmin):
    """Public reads, editor+ writes."""

    read_only_public = True
