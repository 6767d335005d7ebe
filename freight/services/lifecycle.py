"""Trip lifecycle transitions outside bidding and acceptance."""

from __future__ import annotations

import logging

from freight.domain.entities import Booking
from freight.domain.enums import BookingStatus
from freight.services.registry import BookingRegistry

logger = logging.getLogger(__name__)


class TripLifecycleService:
    def __init__(self, registry: BookingRegistry):
        self.registry = registry

    async def _move(self, booking_id: str, new_status: BookingStatus) -> Booking:
        _, booking = await self.registry.apply(
            booking_id, lambda b: b.transition_to(new_status)
        )
        logger.info("Booking %s -> %s", booking_id, new_status.value)
        return booking

    async def open_bidding(self, booking_id: str) -> Booking:
        """PENDING -> BIDDING, for bookings held for triage."""
        return await self._move(booking_id, BookingStatus.BIDDING)

    async def start_trip(self, booking_id: str) -> Booking:
        """ACCEPTED -> IN_PROGRESS once the driver confirms pickup."""
        return await self._move(booking_id, BookingStatus.IN_PROGRESS)

    async def complete_trip(self, booking_id: str) -> Booking:
        return await self._move(booking_id, BookingStatus.COMPLETED)
