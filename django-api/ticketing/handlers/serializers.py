"""Serializers for transforming domain models to API responses, and
validating request bodies before they reach a service."""

from rest_framework import serializers

from ticketing.domain import BannerPosition, Role, TicketStatus
from ticketing.handlers.errors import error_body


class CategorySerializer(serializers.Serializer):
    """Serializer for Category domain model."""

    id = serializers.CharField()
    name = serializers.CharField()
    slug = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    icon = serializers.CharField(allow_null=True)


class CategoryInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    slug = serializers.SlugField(max_length=120, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    icon = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)


class PriceTierSerializer(serializers.Serializer):
    """Serializer for PriceTier domain model."""

    id = serializers.CharField()
    event_id = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    price = serializers.IntegerField(source="price.amount")
    quantity_total = serializers.IntegerField(source="quantity_total.value")
    quantity_sold = serializers.IntegerField(source="quantity_sold.value")
    available = serializers.IntegerField()
    sale_start = serializers.DateTimeField(allow_null=True)
    sale_end = serializers.DateTimeField(allow_null=True)


class OrganizerSerializer(serializers.Serializer):
    id = serializers.IntegerField(source="id.value")
    full_name = serializers.CharField(allow_null=True)
    avatar_url = serializers.CharField(allow_null=True)
    bio = serializers.CharField(allow_null=True)


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.CharField()
    organizer_id = serializers.IntegerField(source="organizer_id.value")
    category_id = serializers.CharField(allow_null=True)
    title = serializers.CharField()
    slug = serializers.CharField()
    description = serializers.CharField()
    event_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField(allow_null=True)
    location = serializers.CharField()
    venue_name = serializers.CharField(allow_null=True)
    city = serializers.CharField(allow_null=True)
    cover_image = serializers.CharField(allow_null=True)
    is_published = serializers.BooleanField()
    is_featured = serializers.BooleanField()
    created_at = serializers.DateTimeField(allow_null=True)
    updated_at = serializers.DateTimeField(allow_null=True)
    min_price = serializers.SerializerMethodField()
    price_tiers = PriceTierSerializer(many=True)
    organizer = OrganizerSerializer(allow_null=True)
    category = CategorySerializer(allow_null=True)

    def get_min_price(self, event) -> int | None:
        prices = [tier.price.amount for tier in event.price_tiers]
        return min(prices) if prices else None


class TierInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    price = serializers.IntegerField(min_value=0)
    quantity_total = serializers.IntegerField(min_value=1)
    sale_start = serializers.DateTimeField(required=False, allow_null=True)
    sale_end = serializers.DateTimeField(required=False, allow_null=True)

    def validate(self, attrs):
        start, end = attrs.get("sale_start"), attrs.get("sale_end")
        if start and end and end <= start:
            raise serializers.ValidationError("sale_end must be after sale_start")
        return attrs


class EventInputSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    slug = serializers.SlugField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    category_id = serializers.UUIDField(required=False, allow_null=True)
    event_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField(required=False, allow_null=True)
    location = serializers.CharField(max_length=255)
    venue_name = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    cover_image = serializers.URLField(max_length=500, required=False, allow_null=True, allow_blank=True)
    is_published = serializers.BooleanField(required=False, default=False)
    is_featured = serializers.BooleanField(required=False, default=False)
    price_tiers = TierInputSerializer(many=True, allow_empty=False)

    def validate(self, attrs):
        start, end = attrs.get("event_date"), attrs.get("end_date")
        if start and end and end < start:
            raise serializers.ValidationError("end_date cannot be before event_date")
        if "category_id" in attrs and attrs["category_id"] is not None:
            attrs["category_id"] = str(attrs["category_id"])
        return attrs


class EventUpdateSerializer(EventInputSerializer):
    price_tiers = None
    is_featured = None

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("partial", True)
        super().__init__(*args, **kwargs)


class FlagSerializer(serializers.Serializer):
    value = serializers.BooleanField()


class TicketSerializer(serializers.Serializer):
    id = serializers.CharField()
    user_id = serializers.IntegerField(source="user_id.value")
    event_id = serializers.CharField()
    price_tier_id = serializers.CharField()
    qr_code = serializers.CharField()
    status = serializers.CharField(source="status.value")
    purchased_at = serializers.DateTimeField()
    checked_in_at = serializers.DateTimeField(allow_null=True)


class TicketDetailSerializer(serializers.Serializer):
    ticket = TicketSerializer()
    event_title = serializers.CharField()
    event_date = serializers.DateTimeField()
    tier_name = serializers.CharField()
    price = serializers.IntegerField(source="price.amount")
    holder_name = serializers.CharField(allow_null=True)
    venue_name = serializers.CharField(allow_null=True)
    location = serializers.CharField(allow_null=True)


class PurchaseSerializer(serializers.Serializer):
    tier_id = serializers.CharField()
    # Range is enforced by the ledger so the error carries INVALID_QUANTITY.
    quantity = serializers.IntegerField(default=1)


class RedeemSerializer(serializers.Serializer):
    # No max_length: an overlong code is an unknown ticket, not bad input.
    qr_code = serializers.CharField(allow_blank=True)


class RedeemOutcomeSerializer(serializers.Serializer):
    outcome = serializers.CharField(source="result.value")
    status = serializers.SerializerMethodField()
    checked_in_at = serializers.DateTimeField(allow_null=True)
    ticket = TicketDetailSerializer(source="detail", allow_null=True)
    error = serializers.SerializerMethodField()

    def get_status(self, outcome) -> str | None:
        return outcome.status.value if outcome.status else None

    def get_error(self, outcome) -> dict | None:
        return error_body(outcome.error)["error"] if outcome.error else None


class TicketStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in TicketStatus])


class BannerSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField()
    subtitle = serializers.CharField(allow_null=True)
    image_url = serializers.CharField()
    link_url = serializers.CharField(allow_null=True)
    position = serializers.CharField(source="position.value")
    is_active = serializers.BooleanField()
    display_order = serializers.IntegerField()


class BannerInputSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    subtitle = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    image_url = serializers.URLField(max_length=500)
    link_url = serializers.CharField(max_length=500, required=False, allow_null=True, allow_blank=True)
    position = serializers.ChoiceField(choices=[p.value for p in BannerPosition], default=BannerPosition.TOP.value)
    is_active = serializers.BooleanField(required=False, default=True)
    display_order = serializers.IntegerField(required=False, default=0)


class BannerQuerySerializer(serializers.Serializer):
    position = serializers.ChoiceField(choices=[p.value for p in BannerPosition], default=BannerPosition.TOP.value)


class IdentitySerializer(serializers.Serializer):
    id = serializers.IntegerField(source="id.value")
    email = serializers.CharField()
    full_name = serializers.CharField(allow_null=True)
    roles = serializers.SerializerMethodField()

    def get_roles(self, identity) -> list[str]:
        return sorted(role.value for role in identity.roles)


class RoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=[r.value for r in Role])


class SignUpSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    full_name = serializers.CharField(max_length=255)


class SignInSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class ProfileSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    phone = serializers.CharField(max_length=30, required=False, allow_null=True, allow_blank=True)
    bio = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    avatar_url = serializers.URLField(max_length=500, required=False, allow_null=True, allow_blank=True)


class OverviewSerializer(serializers.Serializer):
    users_count = serializers.IntegerField()
    events_count = serializers.IntegerField()
    tickets_count = serializers.IntegerField()
    total_revenue = serializers.IntegerField(source="total_revenue.amount")
    revenue_by_status = serializers.SerializerMethodField()
    recent_tickets = TicketDetailSerializer(many=True)
    recent_events = EventSerializer(many=True)

    def get_revenue_by_status(self, overview) -> dict[str, int]:
        return {status.value: amount.amount for status, amount in overview.revenue_by_status.items()}
