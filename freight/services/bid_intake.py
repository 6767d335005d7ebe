"""Bid Intake Service -- validates offers and appends them to open bookings."""

from __future__ import annotations

import logging
from typing import Optional

from freight.domain.entities import Bid, Booking
from freight.domain.validation import validate_bid
from freight.services.registry import BookingRegistry

logger = logging.getLogger(__name__)


class BidIntakeService:
    def __init__(self, registry: BookingRegistry):
        self.registry = registry

    async def submit_bid(
        self,
        booking_id: str,
        driver_id: str,
        driver_name: str,
        amount: float,
        rating: float,
        eta_minutes: int,
        vehicle_no: str,
        vehicle_capacity: Optional[str] = None,
        vehicle_dimensions: Optional[str] = None,
    ) -> Bid:
        """Append a new bid in arrival order.

        Raises ``ValidationError`` on malformed input, ``BookingNotFoundError``
        for an unknown booking and ``InvalidStateError`` once bidding closed.
        The same driver may bid any number of times; nothing is deduplicated.
        """
        validate_bid(
            driver_id=driver_id,
            amount=amount,
            rating=rating,
            eta_minutes=eta_minutes,
            vehicle_no=vehicle_no,
        )
        bid = Bid(
            driver_id=driver_id,
            driver_name=driver_name,
            amount=amount,
            rating=rating,
            eta_minutes=eta_minutes,
            vehicle_no=vehicle_no,
            vehicle_capacity=vehicle_capacity or None,
            vehicle_dimensions=vehicle_dimensions or None,
        )

        def _append(booking: Booking) -> int:
            booking.add_bid(bid)
            return len(booking.bids)

        position, _ = await self.registry.apply(booking_id, _append)
        logger.info(
            "Bid %s from driver %s on booking %s (amount=%s, #%d)",
            bid.id,
            driver_id,
            booking_id,
            amount,
            position,
        )
        return bid
