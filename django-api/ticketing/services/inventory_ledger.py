"""Inventory ledger - the only writer of PriceTier.quantity_sold."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from ticketing.domain import PriceTierId, ReservationToken
from ticketing.domain.errors import (
    InsufficientInventoryError,
    InvalidQuantityError,
    InvalidReleaseError,
    TierNotFoundError,
)
from ticketing.stores.interfaces import InventoryStore

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


class InventoryLedger:
    """Reserve and release units of a price tier.

    `reserve` is not idempotent: every successful call consumes inventory, so
    callers must not blindly retry one that may already have succeeded.
    """

    def __init__(
        self,
        store: InventoryStore,
        max_per_purchase: int = 5,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self.max_per_purchase = max_per_purchase
        self._clock = clock

    def validate_quantity(self, quantity: object) -> int:
        """Return `quantity` if it is an int in [1, max_per_purchase].

        Raises:
            InvalidQuantityError: Otherwise.
        """
        if (
            isinstance(quantity, bool)
            or not isinstance(quantity, int)
            or not 1 <= quantity <= self.max_per_purchase
        ):
            raise InvalidQuantityError(quantity, self.max_per_purchase)
        return quantity

    def reserve(self, tier_id: PriceTierId, quantity: int) -> ReservationToken:
        """Atomically take `quantity` units from the tier.

        Raises:
            InvalidQuantityError: If quantity is not within the per-purchase cap.
            TierNotFoundError: If the tier does not exist.
            InsufficientInventoryError: If fewer than `quantity` units remain.
            UnavailableError: If the store could not be locked in time.
        """
        self.validate_quantity(quantity)
        if not self._store.increment_sold(tier_id, quantity):
            if not self._store.tier_exists(tier_id):
                raise TierNotFoundError(str(tier_id))
            raise InsufficientInventoryError(str(tier_id), quantity)
        logger.info("Reserved %s unit(s) of tier %s", quantity, tier_id)
        return ReservationToken(tier_id=tier_id, quantity=quantity, reserved_at=self._clock())

    def release(self, tier_id: PriceTierId, quantity: int) -> None:
        """Give `quantity` units back to the tier.

        Raises:
            TierNotFoundError: If the tier does not exist.
            InvalidReleaseError: If quantity_sold would drop below zero; nothing changes.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidReleaseError(str(tier_id), quantity)
        if not self._store.decrement_sold(tier_id, quantity):
            if not self._store.tier_exists(tier_id):
                raise TierNotFoundError(str(tier_id))
            raise InvalidReleaseError(str(tier_id), quantity)
        logger.info("Released %s unit(s) of tier %s", quantity, tier_id)
