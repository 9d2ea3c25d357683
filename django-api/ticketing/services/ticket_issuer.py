"""Ticket issuer - turns a reservation into individually redeemable tickets.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Callable
from datetime import datetime

from ticketing.domain import (
    EventId,
    PriceTierId,
    QrCode,
    Ticket,
    TicketDetail,
    TicketId,
    TicketStatus,
    UserId,
)
from ticketing.domain.errors import (
    DomainError,
    EventEndedError,
    EventNotFoundError,
    EventNotPublishedError,
    InvalidIdError,
    PersistenceFailureError,
    SaleClosedError,
    TierNotFoundError,
)
from ticketing.services.inventory_ledger import InventoryLedger, utcnow
from ticketing.stores.interfaces import EventStore, TicketStore

logger = logging.getLogger(__name__)


class TicketIssuer:
    """Service for ticket purchase."""

    def __init__(
        self,
        events: EventStore,
        tickets: TicketStore,
        ledger: InventoryLedger,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._events = events
        self._tickets = tickets
        self._ledger = ledger
        self._clock = clock

    def purchase(self, user_id: UserId, event_id: str, tier_id: str, quantity: int) -> list[Ticket]:
        """Buy `quantity` tickets of one tier.

        Raises:
            InvalidIdError: If an id is malformed.
            EventNotFoundError: If the event does not exist.
            EventNotPublishedError: If the event is a draft.
            EventEndedError: If the event date has passed.
            InvalidQuantityError: If quantity is outside [1, max per purchase].
            TierNotFoundError: If the tier does not exist or is not the event's.
            SaleClosedError: If now is outside the tier's sale window.
            InsufficientInventoryError: If the tier cannot cover the quantity.
            PersistenceFailureError: If tickets could not be stored; the
                reservation has been released.
        """
        try:
            eid = EventId.from_string(event_id)
            tid = PriceTierId.from_string(tier_id)
        except ValueError as exc:
            raise InvalidIdError("event or tier") from exc

        now = self._clock()
        event = self._events.get_event(eid)
        if event is None:
            raise EventNotFoundError(event_id)
        if not event.is_published:
            raise EventNotPublishedError(event_id)
        if event.has_started(now):
            raise EventEndedError(event_id)
        self._ledger.validate_quantity(quantity)

        tier = self._events.get_tier(tid)
        if tier is None or tier.event_id != eid:
            raise TierNotFoundError(tier_id)
        if not tier.is_on_sale(now):
            raise SaleClosedError(tier_id)

        reservation = self._ledger.reserve(tid, quantity)
        batch = [
            Ticket(
                id=TicketId.generate(),
                user_id=user_id,
                event_id=eid,
                price_tier_id=tid,
                qr_code=QrCode.generate(),
                status=TicketStatus.ACTIVE,
                purchased_at=now,
            )
            for _ in range(reservation.quantity)
        ]

        issued = False
        try:
            created = self._tickets.create_tickets(batch)
            issued = True
        except DomainError:
            raise
        except Exception as exc:
            raise PersistenceFailureError(str(exc)) from exc
        finally:
            if not issued:
                self._compensate(reservation.tier_id, reservation.quantity)

        logger.info(
            "User %s bought %s ticket(s) for event %s tier %s",
            user_id,
            len(created),
            event_id,
            tier_id,
        )
        return created

    def _compensate(self, tier_id: PriceTierId, quantity: int) -> None:
        logger.warning("Ticket persistence failed, releasing %s unit(s) of tier %s", quantity, tier_id)
        try:
            self._ledger.release(tier_id, quantity)
        except DomainError:
            logger.exception("Compensating release failed for tier %s", tier_id)
            raise

    def tickets_for_user(self, user_id: UserId) -> list[TicketDetail]:
        """Return the user's tickets, newest first."""
        return self._tickets.list_tickets_for_user(user_id)
