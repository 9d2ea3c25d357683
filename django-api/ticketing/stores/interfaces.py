"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
Every store method translates backend failures into UnavailableError (lock or
timeout, retryable) or PersistenceFailureError.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from ticketing.domain import (
    BannerId,
    BannerPosition,
    Category,
    CategoryId,
    Event,
    EventId,
    Identity,
    Overview,
    PriceTier,
    PriceTierId,
    Profile,
    PromoBanner,
    QrCode,
    Role,
    Session,
    Ticket,
    TicketDetail,
    TicketId,
    TicketStatus,
    UserId,
)


@dataclass(frozen=True)
class EventFilter:
    """Discovery filters; None means "don't filter on this"."""

    published_only: bool = True
    category_id: CategoryId | None = None
    city: str | None = None
    search: str | None = None
    featured: bool | None = None


class EventStore(ABC):
    """Interface for event and price tier persistence."""

    @abstractmethod
    def list_events(self, filters: EventFilter) -> list[Event]:
        """Return events matching `filters`.

        Public listings (published_only) are ordered by event_date ascending,
        back-office listings by created_at descending.
        """
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event with its price tiers, or None if not found."""
        ...

    @abstractmethod
    def get_event_by_slug(self, slug: str) -> Event | None:
        ...

    @abstractmethod
    def get_tier(self, tier_id: PriceTierId) -> PriceTier | None:
        ...

    @abstractmethod
    def list_tiers(self, event_id: EventId) -> list[PriceTier]:
        """Return the tiers of an event ordered by price ascending."""
        ...

    @abstractmethod
    def create_event(self, event: Event) -> Event:
        """Persist an event together with its price tiers.

        Raises:
            SlugTakenError: If the slug is already used.
        """
        ...

    @abstractmethod
    def update_event(self, event: Event) -> Event:
        """Overwrite an event's own fields; tiers are left untouched."""
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> bool:
        """Delete an event, cascading to its tiers and tickets."""
        ...


class InventoryStore(ABC):
    """Atomic counter operations on PriceTier.quantity_sold."""

    @abstractmethod
    def tier_exists(self, tier_id: PriceTierId) -> bool:
        ...

    @abstractmethod
    def increment_sold(self, tier_id: PriceTierId, quantity: int) -> bool:
        """Add `quantity` to quantity_sold only if it stays within quantity_total.

        The check and the write are one indivisible step. Returns False when
        the tier is missing or the check fails.
        """
        ...

    @abstractmethod
    def decrement_sold(self, tier_id: PriceTierId, quantity: int) -> bool:
        """Subtract `quantity` from quantity_sold only if it stays non-negative."""
        ...


class TicketStore(ABC):
    """Interface for ticket persistence."""

    @abstractmethod
    def create_tickets(self, tickets: Sequence[Ticket]) -> list[Ticket]:
        """Persist all tickets or none of them."""
        ...

    @abstractmethod
    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        ...

    @abstractmethod
    def get_ticket_detail(self, ticket_id: TicketId) -> TicketDetail | None:
        ...

    @abstractmethod
    def get_ticket_detail_by_qr_code(self, qr_code: QrCode) -> TicketDetail | None:
        """Return the ticket owning `qr_code` with its holder, event and tier."""
        ...

    @abstractmethod
    def compare_and_set_status(
        self,
        ticket_id: TicketId,
        expected: TicketStatus,
        ticket: Ticket,
    ) -> bool:
        """Write `ticket`'s status and checked_in_at if the stored status is `expected`."""
        ...

    @abstractmethod
    def list_tickets_for_user(self, user_id: UserId) -> list[TicketDetail]:
        """Return a user's tickets, newest purchase first."""
        ...

    @abstractmethod
    def list_tickets(
        self, status: TicketStatus | None = None, search: str | None = None
    ) -> list[TicketDetail]:
        ...

    @abstractmethod
    def recent_check_ins(self, limit: int) -> list[TicketDetail]:
        ...


class CategoryStore(ABC):
    @abstractmethod
    def list_categories(self) -> list[Category]:
        ...

    @abstractmethod
    def get_category(self, category_id: CategoryId) -> Category | None:
        ...

    @abstractmethod
    def save_category(self, category: Category) -> Category:
        """Insert or update a category.

        Raises:
            SlugTakenError: If another category owns the slug.
        """
        ...

    @abstractmethod
    def delete_category(self, category_id: CategoryId) -> bool:
        """Delete a category.

        Raises:
            CategoryInUseError: If events still reference it.
        """
        ...


class BannerStore(ABC):
    @abstractmethod
    def list_banners(
        self, position: BannerPosition | None = None, active_only: bool = False
    ) -> list[PromoBanner]:
        """Return banners ordered by position, then display_order."""
        ...

    @abstractmethod
    def get_banner(self, banner_id: BannerId) -> PromoBanner | None:
        ...

    @abstractmethod
    def save_banner(self, banner: PromoBanner) -> PromoBanner:
        ...

    @abstractmethod
    def delete_banner(self, banner_id: BannerId) -> bool:
        ...


class ReportStore(ABC):
    @abstractmethod
    def overview(self, recent_limit: int) -> Overview:
        ...


class IdentityGateway(ABC):
    """External identity collaborator: authentication and role lookup."""

    @abstractmethod
    def sign_up(self, email: str, password: str, full_name: str) -> Session:
        """Register a user with the buyer role.

        Raises:
            EmailTakenError: If the email is already registered.
        """
        ...

    @abstractmethod
    def sign_in(self, email: str, password: str) -> Session:
        """Raises InvalidCredentialsError on a bad email/password pair."""
        ...

    @abstractmethod
    def get_identity(self, user_id: UserId) -> Identity | None:
        ...

    @abstractmethod
    def roles_of(self, user_id: UserId) -> frozenset[Role]:
        ...

    @abstractmethod
    def grant_role(self, user_id: UserId, role: Role) -> frozenset[Role]:
        ...

    @abstractmethod
    def revoke_role(self, user_id: UserId, role: Role) -> frozenset[Role]:
        ...

    @abstractmethod
    def list_identities(self) -> list[Identity]:
        """Return all users, newest first."""
        ...

    @abstractmethod
    def get_profile(self, user_id: UserId) -> Profile | None:
        ...

    @abstractmethod
    def save_profile(self, profile: Profile) -> Profile:
        ...
