"""Tests for the Django-backed stores under contention and failure.

The concurrency cases commit for real (transaction=True) so every thread
works through its own database connection.
Run with: pytest tests/test_django_stores.py -v
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from django.db import OperationalError, connection

from ticketing import models as orm
from ticketing.domain import EventId, PriceTierId, QrCode, RedeemResult, TicketId, UserId
from ticketing.domain.errors import (
    InsufficientInventoryError,
    PersistenceFailureError,
    UnavailableError,
)
from ticketing.handlers import dependencies
from ticketing.stores.django_store import DjangoEventStore, DjangoInventoryStore, DjangoTicketStore

WORKERS = 8


def run_concurrently(task, count: int = WORKERS) -> list:
    barrier = threading.Barrier(count)

    def worker(index):
        barrier.wait()
        try:
            return task(index)
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=count) as pool:
        return list(pool.map(worker, range(count)))


def retrying(call, attempts: int = 5):
    """Retry UNAVAILABLE the way a client honouring Retry-After would."""
    for _ in range(attempts - 1):
        try:
            return call()
        except UnavailableError:
            time.sleep(0.05)
    return call()


def sold(tier) -> int:
    return orm.PriceTier.objects.get(pk=tier.pk).quantity_sold


@pytest.mark.django_db(transaction=True)
class TestConcurrentPurchase:
    @pytest.mark.parametrize("total", [1, 3])
    def test_never_oversells(self, make_user, organizer, make_event, total):
        event = make_event(organizer, tiers=(("General", 100_000, total),))
        tier = event.price_tiers.get()
        buyers = [make_user() for _ in range(WORKERS)]

        def buy(index):
            issuer = dependencies.ticket_issuer()
            try:
                return retrying(
                    lambda: issuer.purchase(UserId(buyers[index].pk), str(event.id), str(tier.id), 1)
                )
            except InsufficientInventoryError as exc:
                return exc

        results = run_concurrently(buy)

        assert sum(isinstance(r, list) for r in results) == total
        assert sum(isinstance(r, InsufficientInventoryError) for r in results) == WORKERS - total
        assert sold(tier) == total
        assert orm.Ticket.objects.filter(event=event).count() == total


@pytest.mark.django_db(transaction=True)
class TestConcurrentCheckIn:
    def test_one_scan_wins(self, buyer, organizer, make_event):
        event = make_event(organizer)
        tier = event.price_tiers.get()
        ticket = dependencies.ticket_issuer().purchase(UserId(buyer.pk), str(event.id), str(tier.id), 1)[0]

        def scan(_):
            return retrying(lambda: dependencies.checkin_validator().redeem(ticket.qr_code.value)).result

        results = run_concurrently(scan)

        assert results.count(RedeemResult.SUCCESS) == 1
        assert results.count(RedeemResult.ALREADY_USED) == WORKERS - 1
        row = orm.Ticket.objects.get(pk=ticket.id.value)
        assert row.status == orm.Ticket.Status.USED
        assert row.checked_in_at is not None


@pytest.mark.django_db
class TestPurchaseCompensation:
    def test_failed_ticket_insert_restores_inventory(self, monkeypatch, buyer, organizer, make_event):
        event = make_event(organizer, tiers=(("General", 100_000, 5),))
        tier = event.price_tiers.get()
        issuer = dependencies.ticket_issuer()
        first = issuer.purchase(UserId(buyer.pk), str(event.id), str(tier.id), 1)[0]
        # Reusing an issued code trips the unique constraint on insert.
        monkeypatch.setattr(QrCode, "generate", classmethod(lambda cls: first.qr_code))

        with pytest.raises(PersistenceFailureError):
            issuer.purchase(UserId(buyer.pk), str(event.id), str(tier.id), 2)

        assert sold(tier) == 1
        assert orm.Ticket.objects.filter(event=event).count() == 1

    def test_failed_purchase_is_reported_as_retryable(self, monkeypatch, as_user, buyer, organizer, make_event):
        event = make_event(organizer)
        tier = event.price_tiers.get()
        existing = dependencies.ticket_issuer().purchase(UserId(buyer.pk), str(event.id), str(tier.id), 1)[0]
        monkeypatch.setattr(QrCode, "generate", classmethod(lambda cls: existing.qr_code))

        response = as_user(buyer).post(
            f"/api/events/{event.id}/purchase", {"tier_id": str(tier.id), "quantity": 1}, format="json"
        )

        assert response.status_code == 503
        assert response.data["error"]["code"] == "PERSISTENCE_FAILURE"
        assert response.data["error"]["retryable"] is True
        assert sold(tier) == 1


class LockedManager:
    """Stands in for a model manager whose every query hits a lock timeout."""

    def __getattr__(self, name):
        def locked(*args, **kwargs):
            raise OperationalError("database is locked")

        return locked


class TestReadErrorTranslation:
    @pytest.mark.parametrize(
        "model, call",
        [
            (orm.Event, lambda: DjangoEventStore().get_event(EventId.generate())),
            (orm.PriceTier, lambda: DjangoEventStore().get_tier(PriceTierId.generate())),
            (orm.PriceTier, lambda: DjangoInventoryStore().tier_exists(PriceTierId.generate())),
            (orm.Ticket, lambda: DjangoTicketStore().get_ticket(TicketId.generate())),
            (orm.Ticket, lambda: DjangoTicketStore().get_ticket_detail_by_qr_code(QrCode("DTIX-x"))),
        ],
    )
    def test_lock_timeout_on_read_is_unavailable(self, monkeypatch, model, call):
        monkeypatch.setattr(model, "objects", LockedManager())
        with pytest.raises(UnavailableError):
            call()

    @pytest.mark.django_db
    def test_lock_timeout_on_event_detail_is_503(self, monkeypatch, api_client):
        monkeypatch.setattr(orm.Event, "objects", LockedManager())

        response = api_client.get(f"/api/events/{EventId.generate()}")

        assert response.status_code == 503
        assert response.data["error"]["code"] == "UNAVAILABLE"
        assert response["Retry-After"] == "1"
