from rest_framework import permissions

from .models import User


def staff_identity(user):
    """
    Resolve a request user into `(staff_id, role)`.

    Anonymous or inactive callers resolve to `(None, None)`.
    """
    if not user or not user.is_authenticated or not user.is_active:
        return None, None
    return user.pk, user.role


def is_self_or_admin(caller_id, caller_role, target_id):
    """Staff may read their own statistics; admins may read anyone's."""
    if caller_id is None:
        return False
    if caller_role == User.Role.ADMIN:
        return True
    return str(caller_id) == str(target_id)


class HasRole(permissions.BasePermission):
    """
    Grants access when the authenticated user's role is in `allowed_roles`.

    Subclasses set `allowed_roles`.
    """

    allowed_roles = ()

    def has_permission(self, request, view):
        _, role = staff_identity(request.user)
        return role in self.allowed_roles


class IsAdmin(HasRole):
    allowed_roles = (User.Role.ADMIN,)


class IsAnyStaff(HasRole):
    allowed_roles = (User.Role.ADMIN, User.Role.WAITER, User.Role.CASHIER)


class CanServeOrders(HasRole):
    allowed_roles = (User.Role.ADMIN, User.Role.WAITER)


class CanCloseOrders(HasRole):
    allowed_roles = (User.Role.ADMIN, User.Role.CASHIER)
