"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
import secrets
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from django.utils.text import slugify

from ticketing.domain import (
    Capacity,
    CategoryId,
    Event,
    EventId,
    Identity,
    Money,
    Permission,
    PriceTier,
    PriceTierId,
    authorize,
)
from ticketing.domain.errors import (
    CategoryNotFoundError,
    EventNotFoundError,
    InvalidIdError,
    PermissionDeniedError,
)
from ticketing.services.inventory_ledger import utcnow
from ticketing.stores.interfaces import CategoryStore, EventFilter, EventStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "title",
        "slug",
        "description",
        "event_date",
        "end_date",
        "location",
        "venue_name",
        "city",
        "cover_image",
        "category_id",
        "is_published",
    }
)


@dataclass(frozen=True)
class TierInput:
    """A price tier as submitted with a new event."""

    name: str
    price: int
    quantity_total: int
    description: str | None = None
    sale_start: datetime | None = None
    sale_end: datetime | None = None


def _parse_event_id(event_id: str) -> EventId:
    try:
        return EventId.from_string(event_id)
    except ValueError as exc:
        raise InvalidIdError("event") from exc


def _parse_category_id(category_id: str | None) -> CategoryId | None:
    if not category_id:
        return None
    try:
        return CategoryId.from_string(category_id)
    except ValueError as exc:
        raise InvalidIdError("category") from exc


class EventService:
    """Service for event catalog operations."""

    def __init__(
        self,
        store: EventStore,
        categories: CategoryStore | None = None,
        creator_is_admin: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._categories = categories
        self._creator_is_admin = creator_is_admin
        self._clock = clock

    def _can(self, actor: Identity | None, permission: Permission) -> bool:
        return actor is not None and authorize(actor.roles, permission, self._creator_is_admin)

    def can_manage(self, actor: Identity | None, event: Event) -> bool:
        if self._can(actor, Permission.MANAGE_ALL_EVENTS):
            return True
        return self._can(actor, Permission.MANAGE_OWN_EVENTS) and event.organizer_id == actor.id

    def _require_manage(self, actor: Identity | None, event: Event) -> None:
        if not self.can_manage(actor, event):
            raise PermissionDeniedError(Permission.MANAGE_OWN_EVENTS.value)

    def list_events(
        self,
        category_id: str | None = None,
        city: str | None = None,
        search: str | None = None,
        featured: bool | None = None,
    ) -> list[Event]:
        """Return published events, soonest first."""
        return self._store.list_events(
            EventFilter(
                published_only=True,
                category_id=_parse_category_id(category_id),
                city=city or None,
                search=search or None,
                featured=featured,
            )
        )

    def list_all_events(self) -> list[Event]:
        """Return every event including drafts, newest first."""
        return self._store.list_events(EventFilter(published_only=False))

    def get_event(self, reference: str, viewer: Identity | None = None) -> Event:
        """Return an event by id or slug.

        Drafts are reported as missing to anyone who cannot manage them.

        Raises:
            EventNotFoundError: If the event does not exist or is hidden.
        """
        try:
            event = self._store.get_event(EventId.from_string(reference))
        except ValueError:
            event = self._store.get_event_by_slug(reference)
        if event is None or (not event.is_published and not self.can_manage(viewer, event)):
            raise EventNotFoundError(reference)
        return event

    def get_tiers_for_event(self, event_id: str, viewer: Identity | None = None) -> list[PriceTier]:
        """Return the event's price tiers, cheapest first.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        eid = _parse_event_id(event_id)
        self.get_event(str(eid), viewer)
        return self._store.list_tiers(eid)

    def _check_category(self, category_id: CategoryId | None) -> None:
        if category_id is None or self._categories is None:
            return
        if self._categories.get_category(category_id) is None:
            raise CategoryNotFoundError(str(category_id))

    def _unique_slug(self, title: str) -> str:
        base = slugify(title) or "event"
        if self._store.get_event_by_slug(base) is None:
            return base
        return f"{base}-{secrets.token_hex(3)}"

    def create_event(
        self,
        actor: Identity,
        *,
        title: str,
        event_date: datetime,
        location: str,
        tiers: Sequence[TierInput],
        description: str = "",
        slug: str | None = None,
        category_id: str | None = None,
        end_date: datetime | None = None,
        venue_name: str | None = None,
        city: str | None = None,
        cover_image: str | None = None,
        is_published: bool = False,
        is_featured: bool = False,
    ) -> Event:
        """Create an event owned by `actor`, draft unless told otherwise.

        Raises:
            PermissionDeniedError: If the actor may not create events.
            CategoryNotFoundError: If category_id is unknown.
            SlugTakenError: If an explicit slug is already used.
            ValueError: If a tier has a negative price or non-positive quantity.
        """
        if not self._can(actor, Permission.MANAGE_OWN_EVENTS):
            raise PermissionDeniedError(Permission.MANAGE_OWN_EVENTS.value)
        if is_featured and not self._can(actor, Permission.MANAGE_ALL_EVENTS):
            raise PermissionDeniedError(Permission.MANAGE_ALL_EVENTS.value)
        cid = _parse_category_id(category_id)
        self._check_category(cid)

        eid = EventId.generate()
        now = self._clock()
        event = Event(
            id=eid,
            organizer_id=actor.id,
            category_id=cid,
            title=title,
            slug=slugify(slug) if slug else self._unique_slug(title),
            description=description,
            event_date=event_date,
            end_date=end_date,
            location=location,
            venue_name=venue_name,
            city=city,
            cover_image=cover_image,
            is_published=is_published,
            is_featured=is_featured,
            created_at=now,
            updated_at=now,
            price_tiers=tuple(
                PriceTier(
                    id=PriceTierId.generate(),
                    event_id=eid,
                    name=tier.name,
                    description=tier.description,
                    price=Money(tier.price),
                    quantity_total=Capacity(tier.quantity_total),
                    quantity_sold=Capacity(0),
                    sale_start=tier.sale_start,
                    sale_end=tier.sale_end,
                )
                for tier in tiers
            ),
        )
        created = self._store.create_event(event)
        logger.info("User %s created event %s (%s)", actor.id, created.id, created.slug)
        return created

    def update_event(self, actor: Identity, event_id: str, **changes: Any) -> Event:
        """Apply field changes to an event.

        Raises:
            EventNotFoundError, PermissionDeniedError, CategoryNotFoundError, SlugTakenError
        """
        event = self._load(event_id)
        self._require_manage(actor, event)
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        if "category_id" in changes:
            changes["category_id"] = _parse_category_id(changes["category_id"])
            self._check_category(changes["category_id"])
        if "slug" in changes:
            changes["slug"] = slugify(changes["slug"] or "") or event.slug
        updated = self._store.update_event(replace(event, **changes))
        logger.info("User %s updated event %s", actor.id, updated.id)
        return updated

    def set_published(self, actor: Identity, event_id: str, published: bool) -> Event:
        event = self._load(event_id)
        self._require_manage(actor, event)
        return self._store.update_event(replace(event, is_published=published))

    def set_featured(self, actor: Identity, event_id: str, featured: bool) -> Event:
        """Featuring is a back-office decision, not an organizer's own."""
        event = self._load(event_id)
        if not self._can(actor, Permission.MANAGE_ALL_EVENTS):
            raise PermissionDeniedError(Permission.MANAGE_ALL_EVENTS.value)
        return self._store.update_event(replace(event, is_featured=featured))

    def delete_event(self, actor: Identity, event_id: str) -> None:
        """Delete an event along with its tiers and tickets."""
        event = self._load(event_id)
        self._require_manage(actor, event)
        self._store.delete_event(event.id)
        logger.info("User %s deleted event %s", actor.id, event.id)

    def _load(self, event_id: str) -> Event:
        event = self._store.get_event(_parse_event_id(event_id))
        if event is None:
            raise EventNotFoundError(event_id)
        return event
