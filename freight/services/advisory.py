"""
AI route / cost advisory.

Best effort and stateless: every call is bounded by a timeout and any
failure turns into one of the fallback strings below.  Nothing here ever
raises to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from freight.domain.entities import Booking
from freight.infrastructure.advisory import AdvisoryProvider

logger = logging.getLogger(__name__)

FALLBACK_NO_PROVIDER = "AI Analysis unavailable: API Key missing."
FALLBACK_FAILED = "AI analysis failed. Please verify network connection."
FALLBACK_EMPTY = "Analysis could not be generated."


class AdvisoryService:
    def __init__(self, provider: Optional[AdvisoryProvider], timeout: float = 8.0):
        self.provider = provider
        self.timeout = timeout

    async def analyze_route(
        self, pickup: str, drop: str, distance_km: float, truck_type: str
    ) -> str:
        if self.provider is None:
            return FALLBACK_NO_PROVIDER
        try:
            text = await asyncio.wait_for(
                self.provider.analyze(pickup, drop, distance_km, truck_type),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Advisory timed out after %.1fs", self.timeout)
            return FALLBACK_FAILED
        except Exception:
            logger.warning("Advisory provider failed", exc_info=True)
            return FALLBACK_FAILED
        return (text or "").strip() or FALLBACK_EMPTY

    async def analyze_booking(self, booking: Booking) -> str:
        return await self.analyze_route(
            booking.pickup_location,
            booking.drop_location,
            booking.distance_km,
            booking.truck_type.value,
        )
