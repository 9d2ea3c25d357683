"""Sign-up, sign-in and profile maintenance through the identity gateway."""

from dataclasses import replace
from typing import Any

from ticketing.domain import Identity, Permission, Profile, Session, UserId
from ticketing.domain.errors import UserNotFoundError
from ticketing.domain.permissions import is_admin, permissions_for
from ticketing.stores.interfaces import IdentityGateway


class AccountService:
    def __init__(self, identity: IdentityGateway, creator_is_admin: bool = False) -> None:
        self._identity = identity
        self._creator_is_admin = creator_is_admin

    def sign_up(self, email: str, password: str, full_name: str) -> Session:
        return self._identity.sign_up(email, password, full_name)

    def sign_in(self, email: str, password: str) -> Session:
        return self._identity.sign_in(email, password)

    def current_user(self, user_id: UserId) -> Identity:
        identity = self._identity.get_identity(user_id)
        if identity is None:
            raise UserNotFoundError(str(user_id))
        return identity

    def permissions_of(self, identity: Identity) -> frozenset[Permission]:
        return permissions_for(identity.roles, self._creator_is_admin)

    def is_admin(self, identity: Identity) -> bool:
        """Whether the back office opens for this user."""
        return is_admin(identity.roles, self._creator_is_admin)

    def get_profile(self, user_id: UserId) -> Profile:
        return self._identity.get_profile(user_id) or Profile(user_id=user_id)

    def update_profile(self, user_id: UserId, **changes: Any) -> Profile:
        profile = replace(self.get_profile(user_id), **changes)
        return self._identity.save_profile(profile)
