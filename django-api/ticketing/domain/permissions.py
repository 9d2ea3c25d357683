"""Single source of truth for what each role may do."""

from collections.abc import Iterable
from enum import Enum

from ticketing.domain.models import Role


class Permission(str, Enum):
    MANAGE_OWN_EVENTS = "manage_own_events"
    MANAGE_ALL_EVENTS = "manage_all_events"
    MANAGE_CATALOG = "manage_catalog"
    MANAGE_BANNERS = "manage_banners"
    MANAGE_USERS = "manage_users"
    MANAGE_TICKETS = "manage_tickets"
    CHECK_IN = "check_in"
    VIEW_BACKOFFICE = "view_backoffice"


ADMIN_PERMISSIONS = frozenset(Permission)

ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.BUYER: frozenset(),
    Role.CREATOR: frozenset({Permission.MANAGE_OWN_EVENTS}),
    Role.ORGANIZER: ADMIN_PERMISSIONS,
}


def permissions_for(roles: Iterable[Role], creator_is_admin: bool = False) -> frozenset[Permission]:
    granted: set[Permission] = set()
    for role in roles:
        if role is Role.CREATOR and creator_is_admin:
            granted |= ADMIN_PERMISSIONS
        else:
            granted |= ROLE_PERMISSIONS[role]
    return frozenset(granted)


def authorize(roles: Iterable[Role], permission: Permission, creator_is_admin: bool = False) -> bool:
    """Return True when any of `roles` grants `permission`.

    Every permission check in the service goes through here; callers never
    compare role names themselves.
    """
    return permission in permissions_for(roles, creator_is_admin)


def is_admin(roles: Iterable[Role], creator_is_admin: bool = False) -> bool:
    return authorize(roles, Permission.VIEW_BACKOFFICE, creator_is_admin)
