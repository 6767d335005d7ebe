"""Sample fleet used by ``seed.py`` and by a fresh in-memory deployment."""

from __future__ import annotations

from datetime import date, timedelta

from freight.domain.entities import Truck
from freight.domain.enums import TruckStatus


def demo_trucks(today: date) -> list[Truck]:
    """Four trucks: one healthy, one due soon, one overdue, one far out."""
    return [
        Truck(
            truck_id="t1",
            plate_number="KA-01-AB-1234",
            driver_name="Ramesh K.",
            status=TruckStatus.ACTIVE,
            todays_earnings=450,
            fuel_level=65,
            next_service_date=today + timedelta(days=45),
            is_online=True,
        ),
        Truck(
            truck_id="t2",
            plate_number="KA-53-Z-9988",
            driver_name="Suresh P.",
            status=TruckStatus.IDLE,
            todays_earnings=0,
            fuel_level=90,
            next_service_date=today + timedelta(days=5),
            is_online=True,
        ),
        Truck(
            truck_id="t3",
            plate_number="TN-45-X-1122",
            driver_name="John D.",
            status=TruckStatus.MAINTENANCE,
            todays_earnings=120,
            fuel_level=20,
            next_service_date=today - timedelta(days=2),
            is_online=False,
        ),
        Truck(
            truck_id="t4",
            plate_number="MH-12-Q-4455",
            driver_name="Vikram S.",
            status=TruckStatus.ACTIVE,
            todays_earnings=890,
            fuel_level=45,
            next_service_date=today + timedelta(days=120),
            is_online=False,
        ),
    ]
