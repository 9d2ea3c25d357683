"""Check-in validator - the ticket status state machine.

active -> used happens at most once per ticket: the transition is a
compare-and-set on the stored status, so of two concurrent scans of the same
code only one can observe success.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from ticketing.domain import QrCode, RedeemOutcome, Ticket, TicketDetail, TicketId, TicketStatus
from ticketing.domain.errors import (
    InvalidIdError,
    TicketNotFoundError,
    UnavailableError,
)
from ticketing.domain.value_objects import QR_CODE_MAX_LENGTH
from ticketing.services.inventory_ledger import InventoryLedger, utcnow
from ticketing.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)


class CheckInValidator:
    def __init__(
        self,
        tickets: TicketStore,
        ledger: InventoryLedger,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._tickets = tickets
        self._ledger = ledger
        self._clock = clock

    def redeem(self, qr_code: str) -> RedeemOutcome:
        """Check a ticket in by its QR code.

        Never raises for unknown, blank or overlong codes; those are NOT_FOUND.
        """
        code = (qr_code or "").strip()
        if not code or len(code) > QR_CODE_MAX_LENGTH:
            return RedeemOutcome.not_found()
        detail = self._tickets.get_ticket_detail_by_qr_code(QrCode(code))
        if detail is None:
            logger.info("Check-in with unknown code")
            return RedeemOutcome.not_found()
        return self._redeem(detail)

    def _redeem(self, detail: TicketDetail) -> RedeemOutcome:
        ticket = detail.ticket
        if ticket.checked_in_at is not None or ticket.status is TicketStatus.USED:
            return RedeemOutcome.already_used(detail)
        if ticket.status.is_terminal:
            return RedeemOutcome.invalid(detail)

        used = replace(ticket, status=TicketStatus.USED, checked_in_at=self._clock())
        if self._tickets.compare_and_set_status(ticket.id, TicketStatus.ACTIVE, used):
            logger.info("Ticket %s checked in", ticket.id)
            return RedeemOutcome.success(replace(detail, ticket=used))

        # Lost the race: someone else moved the ticket first.
        current = self._tickets.get_ticket_detail(ticket.id)
        if current is None:
            return RedeemOutcome.not_found()
        logger.info("Ticket %s was redeemed concurrently", ticket.id)
        return self._redeem(current)

    def override_status(self, ticket_id: str, status: TicketStatus) -> Ticket:
        """Admin transition to any status, keeping inventory in step.

        Leaving active/used for cancelled/refunded releases one unit; the
        reverse reserves one first.

        Raises:
            InvalidIdError: If ticket_id is malformed.
            TicketNotFoundError: If the ticket does not exist.
            InsufficientInventoryError: If reactivating and the tier is sold out.
            UnavailableError: If the ticket changed underneath the override.
        """
        try:
            tid = TicketId.from_string(ticket_id)
        except ValueError as exc:
            raise InvalidIdError("ticket") from exc
        ticket = self._tickets.get_ticket(tid)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        if ticket.status is status:
            return ticket

        checked_in_at = ticket.checked_in_at
        if status is TicketStatus.USED:
            checked_in_at = checked_in_at or self._clock()
        elif status is TicketStatus.ACTIVE:
            checked_in_at = None
        updated = replace(ticket, status=status, checked_in_at=checked_in_at)

        reclaim = not ticket.status.holds_inventory and status.holds_inventory
        give_back = ticket.status.holds_inventory and not status.holds_inventory

        if reclaim:
            self._ledger.reserve(ticket.price_tier_id, 1)
        if not self._tickets.compare_and_set_status(tid, ticket.status, updated):
            if reclaim:
                self._ledger.release(ticket.price_tier_id, 1)
            raise UnavailableError(f"ticket {ticket_id} changed concurrently")
        if give_back:
            self._ledger.release(ticket.price_tier_id, 1)

        logger.info("Ticket %s status overridden %s -> %s", tid, ticket.status.value, status.value)
        return updated

    def recent_check_ins(self, limit: int = 10) -> list[TicketDetail]:
        return self._tickets.recent_check_ins(limit)
