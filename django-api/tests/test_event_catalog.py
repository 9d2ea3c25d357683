"""Integration tests for the public catalog: events, tiers, categories, banners.

Run with: pytest tests/test_event_catalog.py -v
"""

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from ticketing.models import Category, Event, PriceTier, Profile, PromoBanner


@pytest.mark.django_db
class TestEventList:
    """Tests for GET /api/events"""

    def test_list_events_returns_published_only(self, api_client: APIClient, organizer, make_event):
        published = make_event(organizer, title="Jazz Night")
        make_event(organizer, title="Secret Draft", published=False)

        response = api_client.get("/api/events")

        assert response.status_code == 200
        assert [e["id"] for e in response.data] == [str(published.id)]

    def test_list_events_empty_catalog(self, api_client: APIClient):
        response = api_client.get("/api/events")
        assert response.status_code == 200
        assert response.data == []

    def test_list_events_ordered_by_date(self, api_client: APIClient, organizer, make_event):
        later = make_event(organizer, days_ahead=30)
        sooner = make_event(organizer, days_ahead=2)

        response = api_client.get("/api/events")

        assert [e["id"] for e in response.data] == [str(sooner.id), str(later.id)]

    def test_list_events_filters(self, api_client: APIClient, organizer, make_event):
        music = Category.objects.create(name="Music", slug="music")
        jazz = make_event(organizer, title="Jazz Night", city="Jakarta", category=music, is_featured=True)
        make_event(organizer, title="Tech Summit", city="Bandung")

        assert [e["id"] for e in api_client.get("/api/events", {"q": "jazz"}).data] == [str(jazz.id)]
        assert [e["id"] for e in api_client.get("/api/events", {"city": "jak"}).data] == [str(jazz.id)]
        assert [e["id"] for e in api_client.get("/api/events", {"category": str(music.id)}).data] == [str(jazz.id)]
        assert [e["id"] for e in api_client.get("/api/events", {"featured": "true"}).data] == [str(jazz.id)]

    def test_list_events_bad_category_id(self, api_client: APIClient):
        response = api_client.get("/api/events", {"category": "music"})
        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_ID"


@pytest.mark.django_db
class TestEventDetail:
    """Tests for GET /api/events/{id}"""

    def test_get_event_returns_details(self, api_client: APIClient, organizer, make_event):
        event = make_event(organizer, tiers=(("VIP", 500_000, 5), ("General", 150_000, 50)))

        response = api_client.get(f"/api/events/{event.id}")

        assert response.status_code == 200
        assert response.data["title"] == event.title
        assert response.data["min_price"] == 150_000
        assert [t["name"] for t in response.data["price_tiers"]] == ["General", "VIP"]

    def test_get_event_includes_organizer_and_category(self, api_client: APIClient, organizer, make_event):
        Profile.objects.filter(user=organizer).update(bio="Runs the jazz club", avatar_url="https://cdn.example.com/olu.png")
        music = Category.objects.create(name="Music", slug="music", icon="music")
        event = make_event(organizer, category=music)

        response = api_client.get(f"/api/events/{event.id}")

        assert response.data["organizer"] == {
            "id": organizer.pk,
            "full_name": "Olu Organizer",
            "avatar_url": "https://cdn.example.com/olu.png",
            "bio": "Runs the jazz club",
        }
        assert response.data["category"]["id"] == str(music.id)
        assert response.data["category"]["name"] == "Music"
        assert response.data["category"]["slug"] == "music"
        assert response.data["category"]["icon"] == "music"

    def test_uncategorized_event(self, api_client: APIClient, organizer, make_event):
        event = make_event(organizer)
        response = api_client.get(f"/api/events/{event.id}")
        assert response.data["category"] is None
        assert response.data["organizer"]["full_name"] == "Olu Organizer"

    def test_get_event_by_slug(self, api_client: APIClient, organizer, make_event):
        event = make_event(organizer)
        response = api_client.get(f"/api/events/{event.slug}")
        assert response.status_code == 200
        assert response.data["id"] == str(event.id)

    def test_get_event_not_found(self, api_client: APIClient):
        response = api_client.get("/api/events/0b8f2a46-44a4-4b55-a3a4-1f0e7a6e3c55")
        assert response.status_code == 404
        assert response.data == {
            "error": {"code": "EVENT_NOT_FOUND", "message": "Event not found", "retryable": False}
        }

    def test_draft_hidden_from_public(self, api_client: APIClient, organizer, make_event):
        draft = make_event(organizer, published=False)
        assert api_client.get(f"/api/events/{draft.id}").status_code == 404

    def test_draft_visible_to_owner(self, as_user, creator, make_event):
        draft = make_event(creator, published=False)
        assert as_user(creator).get(f"/api/events/{draft.id}").status_code == 200


@pytest.mark.django_db
class TestTierList:
    """Tests for GET /api/events/{id}/tiers"""

    def test_list_tiers_ordered_by_price(self, api_client: APIClient, organizer, make_event):
        event = make_event(organizer, tiers=(("VIP", 500_000, 5), ("Early Bird", 90_000, 20)))

        response = api_client.get(f"/api/events/{event.id}/tiers")

        assert response.status_code == 200
        assert [t["name"] for t in response.data] == ["Early Bird", "VIP"]
        assert response.data[0]["available"] == 20

    def test_list_tiers_event_not_found(self, api_client: APIClient):
        response = api_client.get("/api/events/0b8f2a46-44a4-4b55-a3a4-1f0e7a6e3c55/tiers")
        assert response.status_code == 404

    def test_list_tiers_invalid_id_format(self, api_client: APIClient):
        response = api_client.get("/api/events/not-a-uuid/tiers")
        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_ID"


@pytest.mark.django_db
class TestEventManagement:
    """Tests for POST/PATCH/DELETE /api/events"""

    def payload(self, **overrides) -> dict:
        body = {
            "title": "Summer Fest",
            "event_date": (timezone.now() + timedelta(days=10)).isoformat(),
            "location": "City Park",
            "price_tiers": [{"name": "General", "price": 120_000, "quantity_total": 100}],
        }
        body.update(overrides)
        return body

    def test_creator_creates_draft(self, as_user, creator):
        response = as_user(creator).post("/api/events", self.payload(), format="json")

        assert response.status_code == 201
        assert response.data["slug"] == "summer-fest"
        assert response.data["is_published"] is False
        event = Event.objects.get(pk=response.data["id"])
        assert event.organizer_id == creator.pk
        assert event.price_tiers.get().quantity_sold == 0

    def test_buyer_cannot_create(self, as_user, buyer):
        response = as_user(buyer).post("/api/events", self.payload(), format="json")
        assert response.status_code == 403

    def test_anonymous_cannot_create(self, api_client: APIClient):
        response = api_client.post("/api/events", self.payload(), format="json")
        assert response.status_code == 401

    def test_event_requires_a_tier(self, as_user, creator):
        response = as_user(creator).post("/api/events", self.payload(price_tiers=[]), format="json")
        assert response.status_code == 400

    def test_creator_cannot_feature_on_create(self, as_user, creator):
        response = as_user(creator).post("/api/events", self.payload(is_featured=True), format="json")
        assert response.status_code == 403
        assert response.data["error"]["code"] == "PERMISSION_DENIED"

    def test_owner_updates_event(self, as_user, creator, make_event):
        event = make_event(creator)
        response = as_user(creator).patch(f"/api/events/{event.id}", {"title": "Renamed"}, format="json")
        assert response.status_code == 200
        event.refresh_from_db()
        assert event.title == "Renamed"

    def test_creator_cannot_update_others_event(self, as_user, creator, organizer, make_event):
        event = make_event(organizer)
        response = as_user(creator).patch(f"/api/events/{event.id}", {"title": "Mine"}, format="json")
        assert response.status_code == 403

    def test_publish_toggle(self, as_user, creator, make_event):
        event = make_event(creator, published=False)
        response = as_user(creator).post(f"/api/events/{event.id}/publish", {"value": True}, format="json")
        assert response.status_code == 200
        assert response.data["is_published"] is True

    def test_feature_requires_organizer(self, as_user, creator, organizer, make_event):
        event = make_event(creator)
        assert as_user(creator).post(f"/api/events/{event.id}/feature", {"value": True}, format="json").status_code == 403
        response = as_user(organizer).post(f"/api/events/{event.id}/feature", {"value": True}, format="json")
        assert response.status_code == 200
        assert response.data["is_featured"] is True

    def test_delete_cascades_to_tiers(self, as_user, organizer, make_event):
        event = make_event(organizer)
        response = as_user(organizer).delete(f"/api/events/{event.id}")
        assert response.status_code == 204
        assert not PriceTier.objects.filter(event_id=event.id).exists()


@pytest.mark.django_db
class TestCategories:
    """Tests for /api/categories"""

    def test_list_categories_by_name(self, api_client: APIClient):
        Category.objects.create(name="Sports", slug="sports")
        Category.objects.create(name="Music", slug="music")

        response = api_client.get("/api/categories")

        assert response.status_code == 200
        assert [c["name"] for c in response.data] == ["Music", "Sports"]

    def test_organizer_creates_category(self, as_user, organizer):
        response = as_user(organizer).post("/api/categories", {"name": "Live Music"}, format="json")
        assert response.status_code == 201
        assert response.data["slug"] == "live-music"

    def test_creator_cannot_create_category(self, as_user, creator):
        response = as_user(creator).post("/api/categories", {"name": "Live Music"}, format="json")
        assert response.status_code == 403

    def test_duplicate_slug(self, as_user, organizer):
        Category.objects.create(name="Music", slug="music")
        response = as_user(organizer).post("/api/categories", {"name": "Music"}, format="json")
        assert response.status_code == 409
        assert response.data["error"]["code"] == "SLUG_TAKEN"

    def test_delete_unused_category(self, as_user, organizer):
        category = Category.objects.create(name="Music", slug="music")
        response = as_user(organizer).delete(f"/api/categories/{category.id}")
        assert response.status_code == 204
        assert not Category.objects.exists()

    def test_delete_category_in_use_is_refused(self, as_user, organizer, make_event):
        category = Category.objects.create(name="Music", slug="music")
        make_event(organizer, category=category)

        response = as_user(organizer).delete(f"/api/categories/{category.id}")

        assert response.status_code == 409
        assert response.data["error"]["code"] == "CATEGORY_IN_USE"
        assert Category.objects.filter(pk=category.id).exists()


@pytest.mark.django_db
class TestBanners:
    """Tests for /api/banners and /api/admin/banners"""

    def test_active_banners_for_position(self, api_client: APIClient):
        PromoBanner.objects.create(title="Second", image_url="https://cdn.example.com/2.png", display_order=2)
        PromoBanner.objects.create(title="First", image_url="https://cdn.example.com/1.png", display_order=1)
        PromoBanner.objects.create(title="Hidden", image_url="https://cdn.example.com/h.png", is_active=False)
        PromoBanner.objects.create(title="Middle", image_url="https://cdn.example.com/m.png", position="middle")

        top = api_client.get("/api/banners")
        middle = api_client.get("/api/banners", {"position": "middle"})

        assert [b["title"] for b in top.data] == ["First", "Second"]
        assert [b["title"] for b in middle.data] == ["Middle"]

    def test_unknown_position(self, api_client: APIClient):
        assert api_client.get("/api/banners", {"position": "bottom"}).status_code == 400

    def test_admin_creates_and_toggles_banner(self, as_user, organizer):
        client = as_user(organizer)
        created = client.post(
            "/api/admin/banners",
            {"title": "Sale", "image_url": "https://cdn.example.com/sale.png", "position": "middle"},
            format="json",
        )
        assert created.status_code == 201

        toggled = client.patch(f"/api/admin/banners/{created.data['id']}", {"is_active": False}, format="json")

        assert toggled.status_code == 200
        assert toggled.data["is_active"] is False
        assert toggled.data["position"] == "middle"

    def test_creator_cannot_manage_banners(self, as_user, creator):
        assert as_user(creator).get("/api/admin/banners").status_code == 403

    def test_delete_missing_banner(self, as_user, organizer):
        response = as_user(organizer).delete("/api/admin/banners/0b8f2a46-44a4-4b55-a3a4-1f0e7a6e3c55")
        assert response.status_code == 404
