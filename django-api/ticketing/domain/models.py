"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ticketing/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ticketing.domain.errors import InvalidTicketStatusError
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


class Role(str, Enum):
    BUYER = "buyer"
    CREATOR = "creator"
    ORGANIZER = "organizer"


class TicketStatus(str, Enum):
    ACTIVE = "active"
    USED = "used"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    @property
    def is_terminal(self) -> bool:
        """No redeem transition leaves a terminal status."""
        return self is not TicketStatus.ACTIVE

    @property
    def holds_inventory(self) -> bool:
        """Active and used tickets count against their tier's quantity_sold."""
        return self in (TicketStatus.ACTIVE, TicketStatus.USED)


class BannerPosition(str, Enum):
    TOP = "top"
    MIDDLE = "middle"


class RedeemResult(str, Enum):
    SUCCESS = "success"
    ALREADY_USED = "already_used"
    NOT_FOUND = "not_found"
    INVALID = "invalid"


@dataclass(frozen=True)
class Category:
    """Domain representation of a Category."""

    id: CategoryId
    name: str
    slug: str
    description: str | None = None
    icon: str | None = None


@dataclass(frozen=True)
class PriceTier:
    """Domain representation of a PriceTier."""

    id: PriceTierId
    event_id: EventId
    name: str
    price: Money
    quantity_total: Capacity
    quantity_sold: Capacity
    description: str | None = None
    sale_start: datetime | None = None
    sale_end: datetime | None = None

    def __post_init__(self) -> None:
        if self.quantity_total.value <= 0:
            raise ValueError("quantity_total must be positive")
        if self.quantity_sold.value > self.quantity_total.value:
            raise ValueError("quantity_sold cannot exceed quantity_total")

    @property
    def available(self) -> int:
        return self.quantity_total.value - self.quantity_sold.value

    def is_on_sale(self, now: datetime) -> bool:
        if self.sale_start is not None and now < self.sale_start:
            return False
        if self.sale_end is not None and now > self.sale_end:
            return False
        return True


@dataclass(frozen=True)
class Organizer:
    """Public face of an event's organizer."""

    id: UserId
    full_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    organizer_id: UserId
    title: str
    slug: str
    description: str
    event_date: datetime
    location: str
    category_id: CategoryId | None = None
    end_date: datetime | None = None
    venue_name: str | None = None
    city: str | None = None
    cover_image: str | None = None
    is_published: bool = False
    is_featured: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    price_tiers: tuple[PriceTier, ...] = ()
    organizer: Organizer | None = None
    category: Category | None = None

    def has_started(self, now: datetime) -> bool:
        return self.event_date <= now


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a Ticket."""

    id: TicketId
    user_id: UserId
    event_id: EventId
    price_tier_id: PriceTierId
    qr_code: QrCode
    status: TicketStatus
    purchased_at: datetime
    checked_in_at: datetime | None = None


@dataclass(frozen=True)
class TicketDetail:
    """Ticket joined with the names back-office, wallet and scanner screens display."""

    ticket: Ticket
    event_title: str
    event_date: datetime
    tier_name: str
    price: Money
    holder_name: str | None = None
    venue_name: str | None = None
    location: str | None = None


@dataclass(frozen=True)
class PromoBanner:
    """Domain representation of a PromoBanner."""

    id: BannerId
    title: str
    image_url: str
    position: BannerPosition
    subtitle: str | None = None
    link_url: str | None = None
    is_active: bool = True
    display_order: int = 0


@dataclass(frozen=True)
class Identity:
    """A user as vouched for by the identity gateway."""

    id: UserId
    email: str
    full_name: str | None = None
    roles: frozenset[Role] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Session:
    """Authenticated session handed back by sign-in and sign-up."""

    identity: Identity
    token: str


@dataclass(frozen=True)
class ReservationToken:
    """Proof that `quantity` units of a tier were taken from inventory."""

    tier_id: PriceTierId
    quantity: int
    reserved_at: datetime


@dataclass(frozen=True)
class RedeemOutcome:
    """Discriminated result of a check-in attempt.

    Every outcome except NOT_FOUND carries the ticket together with its
    holder, event and tier so staff can act on it at the door.
    """

    result: RedeemResult
    detail: TicketDetail | None = None

    @property
    def ticket(self) -> Ticket | None:
        return self.detail.ticket if self.detail else None

    @property
    def checked_in_at(self) -> datetime | None:
        return self.ticket.checked_in_at if self.ticket else None

    @property
    def status(self) -> TicketStatus | None:
        return self.ticket.status if self.ticket else None

    @property
    def error(self) -> InvalidTicketStatusError | None:
        if self.result is RedeemResult.INVALID and self.status is not None:
            return InvalidTicketStatusError(self.status.value)
        return None

    @classmethod
    def success(cls, detail: TicketDetail) -> "RedeemOutcome":
        return cls(RedeemResult.SUCCESS, detail)

    @classmethod
    def already_used(cls, detail: TicketDetail) -> "RedeemOutcome":
        return cls(RedeemResult.ALREADY_USED, detail)

    @classmethod
    def not_found(cls) -> "RedeemOutcome":
        return cls(RedeemResult.NOT_FOUND)

    @classmethod
    def invalid(cls, detail: TicketDetail) -> "RedeemOutcome":
        return cls(RedeemResult.INVALID, detail)


@dataclass(frozen=True)
class Overview:
    """Back-office dashboard aggregates."""

    users_count: int
    events_count: int
    tickets_count: int
    revenue_by_status: dict[TicketStatus, Money]
    recent_tickets: tuple[TicketDetail, ...] = ()
    recent_events: tuple[Event, ...] = ()

    @property
    def total_revenue(self) -> Money:
        total = Money(0)
        for status, amount in self.revenue_by_status.items():
            if status.holds_inventory:
                total = total + amount
        return total


@dataclass(frozen=True)
class Profile:
    """Display details a user maintains about themselves."""

    user_id: UserId
    full_name: str | None = None
    phone: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
