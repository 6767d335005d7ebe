"""
Fleet registry.

A sibling aggregate to the booking engine: vehicle status, fuel and the
service schedule.  It shares no state with bookings.  Maintenance alerts are
recomputed from ``next_service_date`` on every read.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Callable, Iterable, Optional

from freight.domain.entities import Truck
from freight.domain.enums import TruckStatus
from freight.domain.exceptions import TruckNotFoundError, ValidationError
from freight.domain.maintenance import (
    DEFAULT_WARNING_DAYS,
    MaintenanceAlert,
    maintenance_alerts,
)
from freight.infrastructure.stores import FleetStore, MemoryFleetStore

logger = logging.getLogger(__name__)


class FleetRegistry:
    def __init__(
        self,
        store: FleetStore | None = None,
        warning_days: int = DEFAULT_WARNING_DAYS,
        clock: Callable[[], date] = date.today,
    ):
        self._store = store or MemoryFleetStore()
        self._trucks: dict[str, Truck] = {}
        self._lock = asyncio.Lock()
        self.warning_days = warning_days
        self.clock = clock

    async def hydrate(self) -> int:
        trucks = await self._store.load_all()
        for truck in trucks:
            self._trucks[truck.truck_id] = truck
        return len(trucks)

    async def register(self, trucks: Iterable[Truck]) -> None:
        async with self._lock:
            for truck in trucks:
                await self._store.save(truck)
                self._trucks[truck.truck_id] = truck.snapshot()

    # ── Queries ───────────────────────────────────────────────────────

    def list_trucks(self) -> list[Truck]:
        return [self._trucks[k].snapshot() for k in sorted(self._trucks)]

    def get_truck(self, truck_id: str) -> Truck:
        truck = self._trucks.get(truck_id)
        if truck is None:
            raise TruckNotFoundError(truck_id)
        return truck.snapshot()

    def maintenance_alerts(self, today: Optional[date] = None) -> list[MaintenanceAlert]:
        return maintenance_alerts(
            self._trucks.values(), today or self.clock(), self.warning_days
        )

    def summary(self, today: Optional[date] = None) -> dict:
        trucks = list(self._trucks.values())
        return {
            "total_trucks": len(trucks),
            "active_trucks": sum(1 for t in trucks if t.status == TruckStatus.ACTIVE),
            "online_trucks": sum(1 for t in trucks if t.is_online),
            "todays_earnings": round(sum(t.todays_earnings for t in trucks), 2),
            "maintenance_alerts": len(self.maintenance_alerts(today)),
        }

    # ── Commands ──────────────────────────────────────────────────────

    async def _update(self, truck_id: str, change: Callable[[Truck], None]) -> Truck:
        async with self._lock:
            current = self._trucks.get(truck_id)
            if current is None:
                raise TruckNotFoundError(truck_id)
            working = current.snapshot()
            change(working)
            await self._store.save(working)
            self._trucks[truck_id] = working
            return working.snapshot()

    async def schedule_maintenance(
        self, truck_id: str, service_date: date, today: Optional[date] = None
    ) -> Truck:
        """Book the next service; the truck goes back to ACTIVE."""
        if service_date < (today or self.clock()):
            raise ValidationError(f"Service date {service_date} is in the past")

        def _schedule(truck: Truck) -> None:
            truck.next_service_date = service_date
            truck.status = TruckStatus.ACTIVE

        truck = await self._update(truck_id, _schedule)
        logger.info("Maintenance for %s scheduled on %s", truck_id, service_date)
        return truck

    async def toggle_online(self, truck_id: str) -> Truck:
        def _toggle(truck: Truck) -> None:
            truck.is_online = not truck.is_online

        return await self._update(truck_id, _toggle)
