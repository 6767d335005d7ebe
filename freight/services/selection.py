"""Selection Service -- applies the customer's accept decision."""

from __future__ import annotations

import logging

from freight.domain.entities import Booking
from freight.services.registry import BookingRegistry

logger = logging.getLogger(__name__)


class SelectionService:
    def __init__(self, registry: BookingRegistry):
        self.registry = registry

    async def accept_bid(self, booking_id: str, bid_id: str) -> Booking:
        """Accept *bid_id*, move the booking to ACCEPTED and freeze bidding.

        Final: a second accept on the same booking raises
        ``InvalidStateError`` whatever bid id it names.  The other bids stay
        on the booking untouched; no rejection notice is produced.
        """
        _, booking = await self.registry.apply(
            booking_id, lambda b: b.accept(bid_id)
        )
        winner = booking.accepted_bid
        logger.info(
            "Booking %s accepted bid %s (driver=%s, amount=%s)",
            booking_id,
            bid_id,
            winner.driver_id if winner else None,
            winner.amount if winner else None,
        )
        return booking
