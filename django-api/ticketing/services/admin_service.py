"""Read-only back-office views plus user role administration."""

import logging

from ticketing.domain import Identity, Overview, Role, TicketDetail, TicketStatus, UserId
from ticketing.domain.errors import InvalidIdError, UserNotFoundError
from ticketing.stores.interfaces import IdentityGateway, ReportStore, TicketStore

logger = logging.getLogger(__name__)


class AdminQueryService:
    def __init__(
        self,
        reports: ReportStore,
        tickets: TicketStore,
        identity: IdentityGateway,
    ) -> None:
        self._reports = reports
        self._tickets = tickets
        self._identity = identity

    def overview(self, recent_limit: int = 5) -> Overview:
        return self._reports.overview(recent_limit)

    def list_tickets(
        self, status: TicketStatus | None = None, search: str | None = None
    ) -> list[TicketDetail]:
        return self._tickets.list_tickets(status=status, search=(search or "").strip() or None)

    def list_users(self, role: Role | None = None) -> list[Identity]:
        users = self._identity.list_identities()
        if role is not None:
            users = [user for user in users if role in user.roles]
        return users

    def grant_role(self, user_id: str, role: Role) -> frozenset[Role]:
        uid = self._parse_user_id(user_id)
        roles = self._identity.grant_role(uid, role)
        logger.info("Granted %s to user %s", role.value, uid)
        return roles

    def revoke_role(self, user_id: str, role: Role) -> frozenset[Role]:
        uid = self._parse_user_id(user_id)
        roles = self._identity.revoke_role(uid, role)
        logger.info("Revoked %s from user %s", role.value, uid)
        return roles

    def _parse_user_id(self, user_id: str) -> UserId:
        try:
            uid = UserId.from_string(user_id)
        except ValueError as exc:
            raise InvalidIdError("user") from exc
        if self._identity.get_identity(uid) is None:
            raise UserNotFoundError(user_id)
        return uid
