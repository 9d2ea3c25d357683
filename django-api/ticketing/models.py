"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.conf import settings
from django.db import models

from ticketing.domain.models import BannerPosition, Role, TicketStatus
from ticketing.domain.value_objects import QR_CODE_MAX_LENGTH


class Category(models.Model):
    """Persistence model for event categories."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, unique=True)
    description = models.TextField(blank=True, null=True)
    icon = models.CharField(max_length=50, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="organized_events"
    )
    # PROTECT: a category cannot be deleted while events reference it.
    category = models.ForeignKey(
        Category, on_delete=models.PROTECT, related_name="events", blank=True, null=True
    )
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")
    event_date = models.DateTimeField()
    end_date = models.DateTimeField(blank=True, null=True)
    location = models.CharField(max_length=255)
    venue_name = models.CharField(max_length=255, blank=True, null=True)
    city = models.CharField(max_length=100, blank=True, null=True)
    cover_image = models.URLField(max_length=500, blank=True, null=True)
    is_published = models.BooleanField(default=False)
    is_featured = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="event_created_idx"),
            models.Index(fields=["is_published", "event_date"], name="event_published_date_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class PriceTier(models.Model):
    """Persistence model for an event's price tiers."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="price_tiers")
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    price = models.PositiveBigIntegerField()
    quantity_total = models.PositiveIntegerField()
    quantity_sold = models.PositiveIntegerField(default=0)
    sale_start = models.DateTimeField(blank=True, null=True)
    sale_end = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["price"]
        indexes = [
            models.Index(fields=["event"], name="price_tier_event_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_total__gt=0),
                name="price_tier_quantity_total_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity_sold__lte=models.F("quantity_total")),
                name="price_tier_no_oversell",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.price}"


class Ticket(models.Model):
    """Persistence model for issued tickets."""

    class Status(models.TextChoices):
        ACTIVE = TicketStatus.ACTIVE.value, "Active"
        USED = TicketStatus.USED.value, "Used"
        CANCELLED = TicketStatus.CANCELLED.value, "Cancelled"
        REFUNDED = TicketStatus.REFUNDED.value, "Refunded"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="tickets"
    )
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tickets")
    price_tier = models.ForeignKey(PriceTier, on_delete=models.CASCADE, related_name="tickets")
    qr_code = models.CharField(max_length=QR_CODE_MAX_LENGTH, unique=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    purchased_at = models.DateTimeField()
    checked_in_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ["-purchased_at"]
        indexes = [
            models.Index(fields=["user", "-purchased_at"], name="ticket_user_purchased_idx"),
            models.Index(fields=["-checked_in_at"], name="ticket_checked_in_idx"),
        ]

    def __str__(self) -> str:
        return self.qr_code


class PromoBanner(models.Model):
    """Persistence model for home page promotional banners."""

    class Position(models.TextChoices):
        TOP = BannerPosition.TOP.value, "Top"
        MIDDLE = BannerPosition.MIDDLE.value, "Middle"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    subtitle = models.CharField(max_length=255, blank=True, null=True)
    image_url = models.URLField(max_length=500)
    link_url = models.CharField(max_length=500, blank=True, null=True)
    position = models.CharField(max_length=10, choices=Position.choices, default=Position.TOP)
    is_active = models.BooleanField(default=True)
    display_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["position", "display_order"]

    def __str__(self) -> str:
        return self.title


class Profile(models.Model):
    """Display data kept alongside the auth user."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile"
    )
    full_name = models.CharField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=30, blank=True, null=True)
    bio = models.TextField(blank=True, null=True)
    avatar_url = models.URLField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.full_name or str(self.user)


class UserRole(models.Model):
    class Name(models.TextChoices):
        BUYER = Role.BUYER.value, "Buyer"
        CREATOR = Role.CREATOR.value, "Creator"
        ORGANIZER = Role.ORGANIZER.value, "Organizer"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="roles"
    )
    role = models.CharField(max_length=20, choices=Name.choices, default=Name.BUYER)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "role"], name="unique_role_per_user"),
        ]

    def __str__(self) -> str:
        return f"{self.user} - {self.role}"
