"""Identity gateway backed by django.contrib.auth and DRF tokens."""

import logging

from django.contrib.auth import authenticate, get_user_model
from django.db import IntegrityError, transaction
from rest_framework.authtoken.models import Token

from ticketing import models as orm
from ticketing.domain import Identity, Profile, Role, Session, UserId
from ticketing.domain.errors import EmailTakenError, InvalidCredentialsError, UserNotFoundError
from ticketing.stores.django_store import translate_db_errors
from ticketing.stores.interfaces import IdentityGateway

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _roles(user) -> frozenset[Role]:
    return frozenset(Role(value) for value in user.roles.values_list("role", flat=True))


def to_identity(user) -> Identity:
    profile = getattr(user, "profile", None)
    return Identity(
        id=UserId(user.pk),
        email=user.email,
        full_name=profile.full_name if profile else None,
        roles=_roles(user),
    )


def to_profile(row: orm.Profile) -> Profile:
    return Profile(
        user_id=UserId(row.user_id),
        full_name=row.full_name,
        phone=row.phone,
        bio=row.bio,
        avatar_url=row.avatar_url,
    )


class DjangoIdentityGateway(IdentityGateway):
    """Users live in the auth user table; roles and profiles alongside."""

    def _user(self, user_id: UserId):
        user = get_user_model().objects.select_related("profile").filter(pk=user_id.value).first()
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user

    def _session(self, user) -> Session:
        token, _ = Token.objects.get_or_create(user=user)
        return Session(identity=to_identity(user), token=token.key)

    @translate_db_errors
    def sign_up(self, email: str, password: str, full_name: str) -> Session:
        email = _normalize_email(email)
        User = get_user_model()
        if User.objects.filter(email__iexact=email).exists():
            raise EmailTakenError()
        try:
            with transaction.atomic():
                user = User.objects.create_user(username=email, email=email, password=password)
                orm.Profile.objects.create(user=user, full_name=full_name)
                orm.UserRole.objects.create(user=user, role=Role.BUYER.value)
        except IntegrityError as exc:
            raise EmailTakenError() from exc
        logger.info("Registered user %s", user.pk)
        return self._session(user)

    @translate_db_errors
    def sign_in(self, email: str, password: str) -> Session:
        user = authenticate(username=_normalize_email(email), password=password)
        if user is None:
            raise InvalidCredentialsError()
        return self._session(user)

    @translate_db_errors
    def get_identity(self, user_id: UserId) -> Identity | None:
        user = get_user_model().objects.select_related("profile").filter(pk=user_id.value).first()
        return to_identity(user) if user else None

    @translate_db_errors
    def roles_of(self, user_id: UserId) -> frozenset[Role]:
        values = orm.UserRole.objects.filter(user_id=user_id.value).values_list("role", flat=True)
        return frozenset(Role(value) for value in values)

    @translate_db_errors
    def grant_role(self, user_id: UserId, role: Role) -> frozenset[Role]:
        user = self._user(user_id)
        orm.UserRole.objects.get_or_create(user=user, role=role.value)
        return self.roles_of(user_id)

    @translate_db_errors
    def revoke_role(self, user_id: UserId, role: Role) -> frozenset[Role]:
        user = self._user(user_id)
        orm.UserRole.objects.filter(user=user, role=role.value).delete()
        return self.roles_of(user_id)

    @translate_db_errors
    def list_identities(self) -> list[Identity]:
        users = (
            get_user_model()
            .objects.select_related("profile")
            .prefetch_related("roles")
            .order_by("-date_joined")
        )
        return [
            Identity(
                id=UserId(user.pk),
                email=user.email,
                full_name=getattr(getattr(user, "profile", None), "full_name", None),
                roles=frozenset(Role(r.role) for r in user.roles.all()),
            )
            for user in users
        ]

    @translate_db_errors
    def get_profile(self, user_id: UserId) -> Profile | None:
        row = orm.Profile.objects.filter(user_id=user_id.value).first()
        return to_profile(row) if row else None

    @translate_db_errors
    def save_profile(self, profile: Profile) -> Profile:
        user = self._user(profile.user_id)
        row, _ = orm.Profile.objects.update_or_create(
            user=user,
            defaults={
                "full_name": profile.full_name,
                "phone": profile.phone,
                "bio": profile.bio,
                "avatar_url": profile.avatar_url,
            },
        )
        return to_profile(row)
