"""Integration tests for buying tickets and checking them in.

Run with: pytest tests/test_purchase_checkin.py -v
"""

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from ticketing.models import PriceTier, Ticket


def buy(client: APIClient, event, quantity: int = 1, tier=None):
    tier = tier or event.price_tiers.get()
    return client.post(
        f"/api/events/{event.id}/purchase",
        {"tier_id": str(tier.id), "quantity": quantity},
        format="json",
    )


@pytest.mark.django_db
class TestPurchase:
    """Tests for POST /api/events/{id}/purchase"""

    def test_purchase_issues_tickets(self, as_user, buyer, organizer, make_event):
        event = make_event(organizer, tiers=(("General", 100_000, 10),))

        response = buy(as_user(buyer), event, quantity=3)

        assert response.status_code == 201
        assert len(response.data) == 3
        assert {t["status"] for t in response.data} == {"active"}
        assert all(t["qr_code"].startswith("DTIX-") for t in response.data)
        assert PriceTier.objects.get(event=event).quantity_sold == 3
        assert Ticket.objects.filter(user=buyer).count() == 3

    def test_purchase_requires_login(self, api_client: APIClient, organizer, make_event):
        event = make_event(organizer)
        assert buy(api_client, event).status_code == 401

    def test_sold_out(self, as_user, buyer, organizer, make_event):
        event = make_event(organizer, tiers=(("General", 100_000, 2),))
        client = as_user(buyer)
        assert buy(client, event, quantity=2).status_code == 201

        response = buy(client, event, quantity=1)

        assert response.status_code == 409
        assert response.data["error"]["code"] == "INSUFFICIENT_INVENTORY"
        assert PriceTier.objects.get(event=event).quantity_sold == 2

    @pytest.mark.parametrize("quantity", [0, 6])
    def test_quantity_out_of_range(self, as_user, buyer, organizer, make_event, quantity):
        event = make_event(organizer)
        response = buy(as_user(buyer), event, quantity=quantity)
        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_QUANTITY"

    def test_draft_event(self, as_user, buyer, organizer, make_event):
        event = make_event(organizer, published=False)
        response = buy(as_user(buyer), event)
        assert response.status_code == 409
        assert response.data["error"]["code"] == "EVENT_NOT_PUBLISHED"

    def test_past_event(self, as_user, buyer, organizer, make_event):
        event = make_event(organizer, days_ahead=-1)
        response = buy(as_user(buyer), event)
        assert response.status_code == 409
        assert response.data["error"]["code"] == "EVENT_ENDED"

    def test_sale_window_closed(self, as_user, buyer, organizer, make_event):
        event = make_event(organizer)
        PriceTier.objects.filter(event=event).update(sale_end=timezone.now() - timedelta(hours=1))
        response = buy(as_user(buyer), event)
        assert response.status_code == 409
        assert response.data["error"]["code"] == "SALE_CLOSED"

    def test_tier_from_another_event(self, as_user, buyer, organizer, make_event):
        event = make_event(organizer)
        other = make_event(organizer)
        response = buy(as_user(buyer), event, tier=other.price_tiers.get())
        assert response.status_code == 404
        assert response.data["error"]["code"] == "TIER_NOT_FOUND"

    def test_my_tickets(self, as_user, buyer, organizer, make_event):
        event = make_event(organizer, title="Jazz Night")
        client = as_user(buyer)
        buy(client, event, quantity=2)

        response = client.get("/api/me/tickets")

        assert response.status_code == 200
        assert len(response.data) == 2
        assert response.data[0]["event_title"] == "Jazz Night"
        assert response.data[0]["holder_name"] == "Bea Buyer"
        assert response.data[0]["price"] == 100_000


@pytest.mark.django_db
class TestCheckIn:
    """Tests for POST /api/check-in"""

    @pytest.fixture
    def ticket(self, as_user, buyer, organizer, make_event):
        event = make_event(organizer, title="Jazz Night", venue_name="Blue Room")
        buy(as_user(buyer), event)
        return Ticket.objects.get(user=buyer)

    def test_redeem_success(self, as_user, organizer, ticket):
        response = as_user(organizer).post("/api/check-in", {"qr_code": ticket.qr_code}, format="json")

        assert response.status_code == 200
        assert response.data["outcome"] == "success"
        assert response.data["status"] == "used"
        assert response.data["checked_in_at"] is not None
        ticket.refresh_from_db()
        assert ticket.status == Ticket.Status.USED

    def test_redeem_shows_holder_event_and_tier(self, as_user, organizer, ticket):
        response = as_user(organizer).post("/api/check-in", {"qr_code": ticket.qr_code}, format="json")

        detail = response.data["ticket"]
        assert detail["holder_name"] == "Bea Buyer"
        assert detail["event_title"] == "Jazz Night"
        assert detail["venue_name"] == "Blue Room"
        assert detail["tier_name"] == "General"
        assert detail["price"] == 100_000
        assert detail["ticket"]["id"] == str(ticket.id)
        assert response.data["error"] is None

    def test_redeem_twice(self, as_user, organizer, ticket):
        client = as_user(organizer)
        first = client.post("/api/check-in", {"qr_code": ticket.qr_code}, format="json")

        second = client.post("/api/check-in", {"qr_code": ticket.qr_code}, format="json")

        assert second.status_code == 200
        assert second.data["outcome"] == "already_used"
        assert second.data["checked_in_at"] == first.data["checked_in_at"]
        assert second.data["ticket"]["holder_name"] == "Bea Buyer"

    @pytest.mark.parametrize("code", ["", "DTIX-does-not-exist", "X" * 300])
    def test_redeem_unknown_code(self, as_user, organizer, code):
        response = as_user(organizer).post("/api/check-in", {"qr_code": code}, format="json")
        assert response.status_code == 404
        assert response.data["outcome"] == "not_found"
        assert response.data["ticket"] is None

    def test_redeem_cancelled_ticket(self, as_user, organizer, ticket):
        Ticket.objects.filter(pk=ticket.pk).update(status=Ticket.Status.CANCELLED)

        response = as_user(organizer).post("/api/check-in", {"qr_code": ticket.qr_code}, format="json")

        assert response.status_code == 409
        assert response.data["outcome"] == "invalid"
        assert response.data["status"] == "cancelled"
        assert response.data["error"]["code"] == "INVALID_TICKET_STATUS"
        assert response.data["ticket"]["event_title"] == "Jazz Night"

    def test_buyer_cannot_check_in(self, as_user, buyer, ticket):
        response = as_user(buyer).post("/api/check-in", {"qr_code": ticket.qr_code}, format="json")
        assert response.status_code == 403
        assert response.data["error"]["code"] == "PERMISSION_DENIED"
        ticket.refresh_from_db()
        assert ticket.status == Ticket.Status.ACTIVE

    def test_recent_check_ins(self, as_user, organizer, ticket):
        client = as_user(organizer)
        client.post("/api/check-in", {"qr_code": ticket.qr_code}, format="json")

        response = client.get("/api/check-in/recent")

        assert response.status_code == 200
        assert [row["ticket"]["id"] for row in response.data] == [str(ticket.id)]


@pytest.mark.django_db
class TestTicketOverride:
    """Tests for PATCH /api/admin/tickets/{id}"""

    @pytest.fixture
    def ticket(self, as_user, buyer, organizer, make_event):
        event = make_event(organizer, tiers=(("General", 100_000, 1),))
        buy(as_user(buyer), event)
        return Ticket.objects.get(user=buyer)

    def test_cancel_releases_inventory(self, as_user, organizer, ticket):
        response = as_user(organizer).patch(
            f"/api/admin/tickets/{ticket.id}", {"status": "cancelled"}, format="json"
        )
        assert response.status_code == 200
        assert response.data["status"] == "cancelled"
        assert PriceTier.objects.get(pk=ticket.price_tier_id).quantity_sold == 0

    def test_reactivate_when_sold_out(self, as_user, organizer, make_user, ticket):
        client = as_user(organizer)
        client.patch(f"/api/admin/tickets/{ticket.id}", {"status": "refunded"}, format="json")
        buy(as_user(make_user()), ticket.event)

        response = as_user(organizer).patch(f"/api/admin/tickets/{ticket.id}", {"status": "active"}, format="json")

        assert response.status_code == 409
        assert response.data["error"]["code"] == "INSUFFICIENT_INVENTORY"
        ticket.refresh_from_db()
        assert ticket.status == Ticket.Status.REFUNDED

    def test_unknown_status(self, as_user, organizer, ticket):
        response = as_user(organizer).patch(f"/api/admin/tickets/{ticket.id}", {"status": "lost"}, format="json")
        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_INPUT"
        assert "status" in response.data["error"]["fields"]

    def test_unknown_ticket(self, as_user, organizer):
        response = as_user(organizer).patch(
            "/api/admin/tickets/0b8f2a46-44a4-4b55-a3a4-1f0e7a6e3c55", {"status": "used"}, format="json"
        )
        assert response.status_code == 404
        assert response.data["error"]["code"] == "TICKET_NOT_FOUND"
