"""
Persistence ports used by the registries.

The registries keep the live state in memory and write every committed
change through one of these stores.  ``Memory*`` stores keep copies in a
dict (default, and what the tests use); ``Sql*`` stores run each call in
its own unit-of-work via the repositories.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .repositories import BookingRepository, TruckRepository
from freight.domain.entities import Booking, Truck


class BookingStore(ABC):
    @abstractmethod
    async def save(self, booking: Booking) -> None: ...

    @abstractmethod
    async def load_all(self) -> list[Booking]:
        """Every stored booking, oldest first."""


class FleetStore(ABC):
    @abstractmethod
    async def save(self, truck: Truck) -> None: ...

    @abstractmethod
    async def load_all(self) -> list[Truck]: ...


# ── In-memory ─────────────────────────────────────────────────────────


class MemoryBookingStore(BookingStore):
    def __init__(self) -> None:
        self._rows: dict[str, Booking] = {}

    async def save(self, booking: Booking) -> None:
        self._rows[booking.id] = booking.snapshot()

    async def load_all(self) -> list[Booking]:
        rows = sorted(self._rows.values(), key=lambda b: b.created_at)
        return [b.snapshot() for b in rows]


class MemoryFleetStore(FleetStore):
    def __init__(self) -> None:
        self._rows: dict[str, Truck] = {}

    async def save(self, truck: Truck) -> None:
        self._rows[truck.truck_id] = truck.snapshot()

    async def load_all(self) -> list[Truck]:
        return [self._rows[k].snapshot() for k in sorted(self._rows)]


# ── SQL ───────────────────────────────────────────────────────────────


class SqlBookingStore(BookingStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def save(self, booking: Booking) -> None:
        async with self.session_factory() as session:
            try:
                await BookingRepository(session).save(booking)
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def load_all(self) -> list[Booking]:
        async with self.session_factory() as session:
            return await BookingRepository(session).list_all()


class SqlFleetStore(FleetStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def save(self, truck: Truck) -> None:
        async with self.session_factory() as session:
            try:
                await TruckRepository(session).save(truck)
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def load_all(self) -> list[Truck]:
        async with self.session_factory() as session:
            return await TruckRepository(session).list_all()
