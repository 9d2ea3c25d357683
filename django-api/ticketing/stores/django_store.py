"""Django ORM implementation of the ticketing stores.

Counter and status mutations are single conditional UPDATE statements, so the
database row lock makes the check and the write one step.
"""

import functools
import logging
from collections.abc import Sequence

from django.contrib.auth import get_user_model
from django.db import DatabaseError, IntegrityError, OperationalError, transaction
from django.db.models import F, ProtectedError, Q, Sum

from ticketing import models as orm
from ticketing.domain import (
    BannerId,
    BannerPosition,
    Capacity,
    Category,
    CategoryId,
    Event,
    EventId,
    Money,
    Organizer,
    Overview,
    PriceTier,
    PriceTierId,
    PromoBanner,
    QrCode,
    Ticket,
    TicketDetail,
    TicketId,
    TicketStatus,
    UserId,
)
from ticketing.domain.errors import (
    CategoryInUseError,
    PersistenceFailureError,
    SlugTakenError,
    UnavailableError,
)
from ticketing.stores.interfaces import (
    BannerStore,
    CategoryStore,
    EventFilter,
    EventStore,
    InventoryStore,
    ReportStore,
    TicketStore,
)

logger = logging.getLogger(__name__)


def translate_db_errors(func):
    """Map backend failures onto the retryable domain errors."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except OperationalError as exc:
            logger.warning("Database unavailable during %s: %s", func.__name__, exc)
            raise UnavailableError(str(exc)) from exc
        except DatabaseError as exc:
            logger.error("Database call failed during %s: %s", func.__name__, exc)
            raise PersistenceFailureError(str(exc)) from exc

    return wrapper


def _holder_name(user) -> str | None:
    profile = getattr(user, "profile", None)
    if profile is not None and profile.full_name:
        return profile.full_name
    return user.get_full_name() or user.email or None


def to_tier(row: orm.PriceTier) -> PriceTier:
    return PriceTier(
        id=PriceTierId(row.id),
        event_id=EventId(row.event_id),
        name=row.name,
        description=row.description,
        price=Money(row.price),
        quantity_total=Capacity(row.quantity_total),
        quantity_sold=Capacity(row.quantity_sold),
        sale_start=row.sale_start,
        sale_end=row.sale_end,
    )


def to_organizer(user) -> Organizer:
    profile = getattr(user, "profile", None)
    return Organizer(
        id=UserId(user.pk),
        full_name=_holder_name(user),
        avatar_url=profile.avatar_url if profile else None,
        bio=profile.bio if profile else None,
    )


def to_event(row: orm.Event, with_tiers: bool = True) -> Event:
    tiers: tuple[PriceTier, ...] = ()
    if with_tiers:
        tiers = tuple(sorted((to_tier(t) for t in row.price_tiers.all()), key=lambda t: t.price.amount))
    return Event(
        id=EventId(row.id),
        organizer_id=UserId(row.organizer_id),
        category_id=CategoryId(row.category_id) if row.category_id else None,
        title=row.title,
        slug=row.slug,
        description=row.description,
        event_date=row.event_date,
        end_date=row.end_date,
        location=row.location,
        venue_name=row.venue_name,
        city=row.city,
        cover_image=row.cover_image,
        is_published=row.is_published,
        is_featured=row.is_featured,
        created_at=row.created_at,
        updated_at=row.updated_at,
        price_tiers=tiers,
        organizer=to_organizer(row.organizer),
        category=to_category(row.category) if row.category_id else None,
    )


def to_ticket(row: orm.Ticket) -> Ticket:
    return Ticket(
        id=TicketId(row.id),
        user_id=UserId(row.user_id),
        event_id=EventId(row.event_id),
        price_tier_id=PriceTierId(row.price_tier_id),
        qr_code=QrCode(row.qr_code),
        status=TicketStatus(row.status),
        purchased_at=row.purchased_at,
        checked_in_at=row.checked_in_at,
    )


def to_ticket_detail(row: orm.Ticket) -> TicketDetail:
    return TicketDetail(
        ticket=to_ticket(row),
        event_title=row.event.title,
        event_date=row.event.event_date,
        tier_name=row.price_tier.name,
        price=Money(row.price_tier.price),
        holder_name=_holder_name(row.user),
        venue_name=row.event.venue_name,
        location=row.event.location,
    )


def to_category(row: orm.Category) -> Category:
    return Category(
        id=CategoryId(row.id),
        name=row.name,
        slug=row.slug,
        description=row.description,
        icon=row.icon,
    )


def to_banner(row: orm.PromoBanner) -> PromoBanner:
    return PromoBanner(
        id=BannerId(row.id),
        title=row.title,
        subtitle=row.subtitle,
        image_url=row.image_url,
        link_url=row.link_url,
        position=BannerPosition(row.position),
        is_active=row.is_active,
        display_order=row.display_order,
    )


def _events():
    return orm.Event.objects.select_related("category", "organizer__profile")


def _ticket_details():
    return orm.Ticket.objects.select_related("event", "price_tier", "user__profile")


class DjangoEventStore(EventStore):
    """PostgreSQL-backed event store using Django ORM."""

    @translate_db_errors
    def list_events(self, filters: EventFilter) -> list[Event]:
        qs = _events().prefetch_related("price_tiers")
        if filters.published_only:
            qs = qs.filter(is_published=True).order_by("event_date")
        else:
            qs = qs.order_by("-created_at")
        if filters.category_id is not None:
            qs = qs.filter(category_id=filters.category_id.value)
        if filters.city:
            qs = qs.filter(city__icontains=filters.city)
        if filters.search:
            qs = qs.filter(title__icontains=filters.search)
        if filters.featured is not None:
            qs = qs.filter(is_featured=filters.featured)
        return [to_event(row) for row in qs]

    @translate_db_errors
    def get_event(self, event_id: EventId) -> Event | None:
        row = _events().prefetch_related("price_tiers").filter(pk=event_id.value).first()
        return to_event(row) if row else None

    @translate_db_errors
    def get_event_by_slug(self, slug: str) -> Event | None:
        row = _events().prefetch_related("price_tiers").filter(slug=slug).first()
        return to_event(row) if row else None

    @translate_db_errors
    def get_tier(self, tier_id: PriceTierId) -> PriceTier | None:
        row = orm.PriceTier.objects.filter(pk=tier_id.value).first()
        return to_tier(row) if row else None

    @translate_db_errors
    def list_tiers(self, event_id: EventId) -> list[PriceTier]:
        rows = orm.PriceTier.objects.filter(event_id=event_id.value).order_by("price", "name")
        return [to_tier(row) for row in rows]

    @translate_db_errors
    def create_event(self, event: Event) -> Event:
        if orm.Event.objects.filter(slug=event.slug).exists():
            raise SlugTakenError(event.slug)
        try:
            with transaction.atomic():
                row = orm.Event.objects.create(
                    id=event.id.value,
                    organizer_id=event.organizer_id.value,
                    category_id=event.category_id.value if event.category_id else None,
                    title=event.title,
                    slug=event.slug,
                    description=event.description,
                    event_date=event.event_date,
                    end_date=event.end_date,
                    location=event.location,
                    venue_name=event.venue_name,
                    city=event.city,
                    cover_image=event.cover_image,
                    is_published=event.is_published,
                    is_featured=event.is_featured,
                )
                orm.PriceTier.objects.bulk_create(
                    orm.PriceTier(
                        id=tier.id.value,
                        event=row,
                        name=tier.name,
                        description=tier.description,
                        price=tier.price.amount,
                        quantity_total=tier.quantity_total.value,
                        quantity_sold=tier.quantity_sold.value,
                        sale_start=tier.sale_start,
                        sale_end=tier.sale_end,
                    )
                    for tier in event.price_tiers
                )
        except IntegrityError as exc:
            if orm.Event.objects.filter(slug=event.slug).exists():
                raise SlugTakenError(event.slug) from exc
            raise
        return self.get_event(event.id)

    @translate_db_errors
    def update_event(self, event: Event) -> Event:
        if orm.Event.objects.filter(slug=event.slug).exclude(pk=event.id.value).exists():
            raise SlugTakenError(event.slug)
        row = orm.Event.objects.get(pk=event.id.value)
        row.category_id = event.category_id.value if event.category_id else None
        row.title = event.title
        row.slug = event.slug
        row.description = event.description
        row.event_date = event.event_date
        row.end_date = event.end_date
        row.location = event.location
        row.venue_name = event.venue_name
        row.city = event.city
        row.cover_image = event.cover_image
        row.is_published = event.is_published
        row.is_featured = event.is_featured
        row.save()
        return self.get_event(event.id)

    @translate_db_errors
    def delete_event(self, event_id: EventId) -> bool:
        deleted, _ = orm.Event.objects.filter(pk=event_id.value).delete()
        return deleted > 0


class DjangoInventoryStore(InventoryStore):
    """Conditional-update counter on price_tiers.quantity_sold."""

    @translate_db_errors
    def tier_exists(self, tier_id: PriceTierId) -> bool:
        return orm.PriceTier.objects.filter(pk=tier_id.value).exists()

    @translate_db_errors
    def increment_sold(self, tier_id: PriceTierId, quantity: int) -> bool:
        updated = orm.PriceTier.objects.filter(
            pk=tier_id.value,
            quantity_sold__lte=F("quantity_total") - quantity,
        ).update(quantity_sold=F("quantity_sold") + quantity)
        return updated == 1

    @translate_db_errors
    def decrement_sold(self, tier_id: PriceTierId, quantity: int) -> bool:
        updated = orm.PriceTier.objects.filter(
            pk=tier_id.value,
            quantity_sold__gte=quantity,
        ).update(quantity_sold=F("quantity_sold") - quantity)
        return updated == 1


class DjangoTicketStore(TicketStore):
    @translate_db_errors
    def create_tickets(self, tickets: Sequence[Ticket]) -> list[Ticket]:
        with transaction.atomic():
            orm.Ticket.objects.bulk_create(
                orm.Ticket(
                    id=ticket.id.value,
                    user_id=ticket.user_id.value,
                    event_id=ticket.event_id.value,
                    price_tier_id=ticket.price_tier_id.value,
                    qr_code=ticket.qr_code.value,
                    status=ticket.status.value,
                    purchased_at=ticket.purchased_at,
                    checked_in_at=ticket.checked_in_at,
                )
                for ticket in tickets
            )
        return list(tickets)

    @translate_db_errors
    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        row = orm.Ticket.objects.filter(pk=ticket_id.value).first()
        return to_ticket(row) if row else None

    @translate_db_errors
    def get_ticket_detail(self, ticket_id: TicketId) -> TicketDetail | None:
        row = _ticket_details().filter(pk=ticket_id.value).first()
        return to_ticket_detail(row) if row else None

    @translate_db_errors
    def get_ticket_detail_by_qr_code(self, qr_code: QrCode) -> TicketDetail | None:
        row = _ticket_details().filter(qr_code=qr_code.value).first()
        return to_ticket_detail(row) if row else None

    @translate_db_errors
    def compare_and_set_status(
        self,
        ticket_id: TicketId,
        expected: TicketStatus,
        ticket: Ticket,
    ) -> bool:
        updated = orm.Ticket.objects.filter(pk=ticket_id.value, status=expected.value).update(
            status=ticket.status.value,
            checked_in_at=ticket.checked_in_at,
        )
        return updated == 1

    @translate_db_errors
    def list_tickets_for_user(self, user_id: UserId) -> list[TicketDetail]:
        rows = _ticket_details().filter(user_id=user_id.value).order_by("-purchased_at")
        return [to_ticket_detail(row) for row in rows]

    @translate_db_errors
    def list_tickets(
        self, status: TicketStatus | None = None, search: str | None = None
    ) -> list[TicketDetail]:
        rows = _ticket_details().order_by("-purchased_at")
        if status is not None:
            rows = rows.filter(status=status.value)
        if search:
            rows = rows.filter(
                Q(qr_code__icontains=search)
                | Q(event__title__icontains=search)
                | Q(user__profile__full_name__icontains=search)
                | Q(user__email__icontains=search)
            )
        return [to_ticket_detail(row) for row in rows]

    @translate_db_errors
    def recent_check_ins(self, limit: int) -> list[TicketDetail]:
        rows = _ticket_details().filter(checked_in_at__isnull=False).order_by("-checked_in_at")[:limit]
        return [to_ticket_detail(row) for row in rows]


class DjangoCategoryStore(CategoryStore):
    @translate_db_errors
    def list_categories(self) -> list[Category]:
        return [to_category(row) for row in orm.Category.objects.order_by("name")]

    @translate_db_errors
    def get_category(self, category_id: CategoryId) -> Category | None:
        row = orm.Category.objects.filter(pk=category_id.value).first()
        return to_category(row) if row else None

    @translate_db_errors
    def save_category(self, category: Category) -> Category:
        if orm.Category.objects.filter(slug=category.slug).exclude(pk=category.id.value).exists():
            raise SlugTakenError(category.slug)
        row, _ = orm.Category.objects.update_or_create(
            pk=category.id.value,
            defaults={
                "name": category.name,
                "slug": category.slug,
                "description": category.description,
                "icon": category.icon,
            },
        )
        return to_category(row)

    @translate_db_errors
    def delete_category(self, category_id: CategoryId) -> bool:
        try:
            deleted, _ = orm.Category.objects.filter(pk=category_id.value).delete()
        except ProtectedError as exc:
            raise CategoryInUseError(str(category_id)) from exc
        return deleted > 0


class DjangoBannerStore(BannerStore):
    @translate_db_errors
    def list_banners(
        self, position: BannerPosition | None = None, active_only: bool = False
    ) -> list[PromoBanner]:
        qs = orm.PromoBanner.objects.order_by("position", "display_order")
        if position is not None:
            qs = qs.filter(position=position.value)
        if active_only:
            qs = qs.filter(is_active=True)
        return [to_banner(row) for row in qs]

    @translate_db_errors
    def get_banner(self, banner_id: BannerId) -> PromoBanner | None:
        row = orm.PromoBanner.objects.filter(pk=banner_id.value).first()
        return to_banner(row) if row else None

    @translate_db_errors
    def save_banner(self, banner: PromoBanner) -> PromoBanner:
        row, _ = orm.PromoBanner.objects.update_or_create(
            pk=banner.id.value,
            defaults={
                "title": banner.title,
                "subtitle": banner.subtitle,
                "image_url": banner.image_url,
                "link_url": banner.link_url,
                "position": banner.position.value,
                "is_active": banner.is_active,
                "display_order": banner.display_order,
            },
        )
        return to_banner(row)

    @translate_db_errors
    def delete_banner(self, banner_id: BannerId) -> bool:
        deleted, _ = orm.PromoBanner.objects.filter(pk=banner_id.value).delete()
        return deleted > 0


class DjangoReportStore(ReportStore):
    @translate_db_errors
    def overview(self, recent_limit: int) -> Overview:
        revenue = {status: Money(0) for status in TicketStatus}
        rows = (
            orm.Ticket.objects.order_by()
            .values("status")
            .annotate(total=Sum("price_tier__price"))
        )
        for row in rows:
            revenue[TicketStatus(row["status"])] = Money(row["total"] or 0)

        recent_tickets = _ticket_details().order_by("-purchased_at")[:recent_limit]
        recent_events = _events().order_by("-created_at")[:recent_limit]
        return Overview(
            users_count=get_user_model().objects.count(),
            events_count=orm.Event.objects.count(),
            tickets_count=orm.Ticket.objects.count(),
            revenue_by_status=revenue,
            recent_tickets=tuple(to_ticket_detail(row) for row in recent_tickets),
            recent_events=tuple(to_event(row, with_tiers=False) for row in recent_events),
        )
