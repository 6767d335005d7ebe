"""
Shared test fixtures.

Engine tests run against the in-memory stores.  SQL store tests use a
file-backed SQLite database (via aiosqlite) in ``tmp_path`` so they run
without Docker / PostgreSQL / Redis.
"""

from datetime import date, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from freight.domain.entities import Booking, BookingSpec
from freight.domain.enums import TruckType
from freight.infrastructure.database import Base, build_engine, build_session_factory
from freight.services.bid_intake import BidIntakeService
from freight.services.lifecycle import TripLifecycleService
from freight.services.registry import BookingRegistry
from freight.services.selection import SelectionService


def make_spec(**overrides) -> BookingSpec:
    values = dict(
        pickup_location="Central Warehouse, Industrial Area",
        drop_location="City Port Terminal 4",
        truck_type=TruckType.LCV,
        material_type="FMCG",
        weight_kg=1500,
        budget=150,
        distance_km=42,
        requested_date=date.today() + timedelta(days=1),
    )
    values.update(overrides)
    return BookingSpec(**values)


BID_DEFAULTS = dict(
    driver_id="d_99",
    driver_name="Fast Logistics",
    amount=160,
    rating=4.8,
    eta_minutes=30,
    vehicle_no="TN-01-AB-1234",
)


# ── Engine fixtures ───────────────────────────────────────────────────


@pytest.fixture
def registry() -> BookingRegistry:
    return BookingRegistry()


@pytest.fixture
def intake(registry) -> BidIntakeService:
    return BidIntakeService(registry)


@pytest.fixture
def selection(registry) -> SelectionService:
    return SelectionService(registry)


@pytest.fixture
def lifecycle(registry) -> TripLifecycleService:
    return TripLifecycleService(registry)


@pytest_asyncio.fixture
async def booking(registry) -> Booking:
    """A fresh BIDDING booking with budget 150."""
    return await registry.create_booking(make_spec(), "cust_1")


# ── SQL fixtures ──────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create tables in a throwaway SQLite file, yield a session factory, dispose."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'freight.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_session_factory(engine)

    await engine.dispose()
