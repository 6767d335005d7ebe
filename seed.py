"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations (with STORE_PROVIDER=sql):
    python seed.py

Creates:
  - 4 demo trucks (one overdue for service, one due this week)
  - 5 bookings walked through the real engine so every invariant holds:
    PENDING, BIDDING (with bids), ACCEPTED, IN_PROGRESS and COMPLETED
"""

import asyncio
from datetime import date, timedelta

from freight.config import settings
from freight.domain.entities import BookingSpec
from freight.domain.enums import TruckType
from freight.infrastructure.database import build_engine, build_session_factory
from freight.infrastructure.demo_data import demo_trucks
from freight.infrastructure.stores import SqlBookingStore, SqlFleetStore
from freight.services.bid_intake import BidIntakeService
from freight.services.fleet import FleetRegistry
from freight.services.lifecycle import TripLifecycleService
from freight.services.registry import BookingRegistry
from freight.services.selection import SelectionService


def _spec(pickup, drop, truck_type, material, weight, budget, distance, days_ahead):
    return BookingSpec(
        pickup_location=pickup,
        drop_location=drop,
        truck_type=truck_type,
        material_type=material,
        weight_kg=weight,
        budget=budget,
        distance_km=distance,
        requested_date=date.today() + timedelta(days=days_ahead),
    )


BOOKINGS = [
    # (customer, spec, final state)
    ("cust_1", _spec("Central Warehouse, Industrial Area", "City Port Terminal 4",
                     TruckType.LCV, "FMCG", 2000, 4500, 38, 1), "BIDDING"),
    ("cust_2", _spec("Main Market Square", "Tech Park Logistics Hub",
                     TruckType.MINI, "Electronics", 800, 1800, 22, 2), "ACCEPTED"),
    ("cust_3", _spec("Suburban Distribution Center", "City Port Terminal 4",
                     TruckType.FT20, "Steel / Iron", 9000, 21000, 240, 0), "IN_PROGRESS"),
    ("cust_4", _spec("Tech Park Logistics Hub", "Central Warehouse, Industrial Area",
                     TruckType.FT14, "Textiles", 4000, 7000, 65, -3), "COMPLETED"),
    ("cust_5", _spec("City Port Terminal 4", "Suburban Distribution Center",
                     TruckType.FT32, "Cement / Construction", 15000, 38000, 310, 5), "PENDING"),
]

DRIVERS = [
    ("d_01", "Ramesh K.", 4.8, "KA-01-AB-1234", "2.5 Tons", "14ft x 7ft"),
    ("d_02", "Suresh P.", 4.5, "KA-53-Z-9988", "9 Tons", "20ft x 8ft"),
    ("d_03", "Vikram S.", 4.9, "MH-12-Q-4455", "16 Tons", "32ft x 8ft"),
]


async def seed():
    engine = build_engine(settings.database_url)
    factory = build_session_factory(engine)
    registry = BookingRegistry(SqlBookingStore(factory))
    fleet = FleetRegistry(SqlFleetStore(factory))

    try:
        if await registry.hydrate() or await fleet.hydrate():
            print("Database already seeded. Skipping.")
            return

        # ── Trucks ────────────────────────────────────────────────────
        trucks = demo_trucks(date.today())
        await fleet.register(trucks)
        print(f"  Created {len(trucks)} trucks")

        # ── Bookings ──────────────────────────────────────────────────
        intake = BidIntakeService(registry)
        selection = SelectionService(registry)
        lifecycle = TripLifecycleService(registry)

        for customer_id, spec, final in BOOKINGS:
            booking = await registry.create_booking(
                spec, customer_id, hold_for_triage=(final == "PENDING")
            )
            if final == "PENDING":
                continue

            bids = []
            for i, (driver_id, name, rating, plate, capacity, dims) in enumerate(DRIVERS):
                bids.append(
                    await intake.submit_bid(
                        booking.id,
                        driver_id,
                        name,
                        round(spec.budget * (0.95 + 0.05 * i), 2),
                        rating,
                        20 + 15 * i,
                        plate,
                        capacity,
                        dims,
                    )
                )
            if final == "BIDDING":
                continue

            await selection.accept_bid(booking.id, bids[0].id)
            if final in ("IN_PROGRESS", "COMPLETED"):
                await lifecycle.start_trip(booking.id)
            if final == "COMPLETED":
                await lifecycle.complete_trip(booking.id)

        print(f"  Created {len(BOOKINGS)} bookings")
        print("\nSeed complete!")
    finally:
        await engine.dispose()


async def main():
    print("Seeding database...")
    await seed()


if __name__ == "__main__":
    asyncio.run(main())
