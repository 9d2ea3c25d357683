from ticketing.domain.models import (
    BannerPosition,
    Category,
    Event,
    Identity,
    Organizer,
    Overview,
    PriceTier,
    Profile,
    PromoBanner,
    RedeemOutcome,
    RedeemResult,
    ReservationToken,
    Role,
    Session,
    Ticket,
    TicketDetail,
    TicketStatus,
)
from ticketing.domain.permissions import Permission, authorize
from ticketing.domain.value_objects import (
    BannerId,
    Capacity,
    CategoryId,
    EventId,
    Money,
    PriceTierId,
    QrCode,
    TicketId,
    UserId,
)

__all__ = [
    "BannerPosition",
    "Category",
    "Event",
    "Identity",
    "Organizer",
    "Overview",
    "PriceTier",
    "Profile",
    "PromoBanner",
    "RedeemOutcome",
    "RedeemResult",
    "ReservationToken",
    "Role",
    "Session",
    "Ticket",
    "TicketDetail",
    "TicketStatus",
    "Permission",
    "authorize",
    "BannerId",
    "Capacity",
    "CategoryId",
    "EventId",
    "Money",
    "PriceTierId",
    "QrCode",
    "TicketId",
    "UserId",
]
