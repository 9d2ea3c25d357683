"""Wire services to their Django-backed stores."""

from ticketing.conf import ticketing_setting
from ticketing.domain import Identity, UserId
from ticketing.services.account_service import AccountService
from ticketing.services.admin_service import AdminQueryService
from ticketing.services.catalog_service import BannerService, CategoryService
from ticketing.services.checkin_validator import CheckInValidator
from ticketing.services.event_service import EventService
from ticketing.services.inventory_ledger import InventoryLedger
from ticketing.services.ticket_issuer import TicketIssuer
from ticketing.stores.django_identity import DjangoIdentityGateway
from ticketing.stores.django_store import (
    DjangoBannerStore,
    DjangoCategoryStore,
    DjangoEventStore,
    DjangoInventoryStore,
    DjangoReportStore,
    DjangoTicketStore,
)


def creator_is_admin() -> bool:
    return bool(ticketing_setting("CREATOR_IS_ADMIN"))


def identity_gateway() -> DjangoIdentityGateway:
    return DjangoIdentityGateway()


def inventory_ledger() -> InventoryLedger:
    return InventoryLedger(
        DjangoInventoryStore(),
        max_per_purchase=ticketing_setting("MAX_TICKETS_PER_PURCHASE"),
    )


def ticket_issuer() -> TicketIssuer:
    return TicketIssuer(DjangoEventStore(), DjangoTicketStore(), inventory_ledger())


def checkin_validator() -> CheckInValidator:
    return CheckInValidator(DjangoTicketStore(), inventory_ledger())


def event_service() -> EventService:
    return EventService(
        DjangoEventStore(),
        categories=DjangoCategoryStore(),
        creator_is_admin=creator_is_admin(),
    )


def category_service() -> CategoryService:
    return CategoryService(DjangoCategoryStore())


def banner_service() -> BannerService:
    return BannerService(DjangoBannerStore())


def admin_query_service() -> AdminQueryService:
    return AdminQueryService(DjangoReportStore(), DjangoTicketStore(), identity_gateway())


def account_service() -> AccountService:
    return AccountService(identity_gateway(), creator_is_admin=creator_is_admin())


def request_identity(request) -> Identity | None:
    """The caller as an Identity, or None for anonymous requests."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return identity_gateway().get_identity(UserId(user.pk))
