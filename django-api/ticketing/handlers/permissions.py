from rest_framework import permissions

from ticketing.domain import Permission, UserId, authorize
from ticketing.handlers.dependencies import creator_is_admin, identity_gateway


class HasPermission(permissions.BasePermission):
    """Grant access when the caller's roles carry `required`.

    Subclasses with `allow_read = True` let anyone use safe methods.
    """

    required: Permission
    allow_read = False

    def has_permission(self, request, view):
        if self.allow_read and request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user or not user.is_authenticated:
            return False
        roles = identity_gateway().roles_of(UserId(user.pk))
        return authorize(roles, self.required, creator_is_admin())


class CanManageEventsOrReadOnly(HasPermission):
    required = Permission.MANAGE_OWN_EVENTS
    allow_read = True


class CanManageCatalogOrReadOnly(HasPermission):
    required = Permission.MANAGE_CATALOG
    allow_read = True


class CanManageCatalog(HasPermission):
    required = Permission.MANAGE_CATALOG


class CanManageBanners(HasPermission):
    required = Permission.MANAGE_BANNERS


class CanManageUsers(HasPermission):
    required = Permission.MANAGE_USERS


class CanManageTickets(HasPermission):
    required = Permission.MANAGE_TICKETS


class CanCheckIn(HasPermission):
    required = Permission.CHECK_IN


class CanViewBackoffice(HasPermission):
    required = Permission.VIEW_BACKOFFICE
