"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Rows are translated to and from the domain
dataclasses at this boundary; nothing above it sees an ORM object.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import BidModel, BookingModel, TruckModel
from freight.domain.entities import Bid, Booking, Truck
from freight.domain.enums import BookingStatus


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _bid_to_domain(row: BidModel) -> Bid:
    return Bid(
        id=row.id,
        driver_id=row.driver_id,
        driver_name=row.driver_name,
        amount=row.amount,
        rating=row.rating,
        eta_minutes=row.eta_minutes,
        vehicle_no=row.vehicle_no,
        vehicle_capacity=row.vehicle_capacity,
        vehicle_dimensions=row.vehicle_dimensions,
        created_at=_aware(row.created_at),
    )


def _booking_to_domain(row: BookingModel) -> Booking:
    return Booking(
        id=row.id,
        customer_id=row.customer_id,
        pickup_location=row.pickup_location,
        drop_location=row.drop_location,
        truck_type=row.truck_type,
        material_type=row.material_type,
        weight_kg=row.weight_kg,
        budget=row.budget,
        distance_km=row.distance_km,
        requested_date=row.requested_date,
        status=BookingStatus(row.status),
        bids=[_bid_to_domain(b) for b in row.bids],
        accepted_bid_id=row.accepted_bid_id,
        created_at=_aware(row.created_at),
    )


def _truck_to_domain(row: TruckModel) -> Truck:
    return Truck(
        truck_id=row.truck_id,
        plate_number=row.plate_number,
        driver_name=row.driver_name,
        status=row.status,
        todays_earnings=row.todays_earnings,
        fuel_level=row.fuel_level,
        next_service_date=row.next_service_date,
        is_online=row.is_online,
    )


class BookingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, booking: Booking) -> None:
        """Upsert the booking row and insert any bids not yet stored.

        Bids are append-only, so existing bid rows are never rewritten.
        """
        row = await self.session.get(BookingModel, booking.id)
        if row is None:
            row = BookingModel(id=booking.id, created_at=booking.created_at)
            self.session.add(row)
            stored_ids: set[str] = set()
        else:
            stored_ids = {b.id for b in row.bids}

        row.customer_id = booking.customer_id
        row.pickup_location = booking.pickup_location
        row.drop_location = booking.drop_location
        row.truck_type = booking.truck_type
        row.material_type = booking.material_type
        row.weight_kg = booking.weight_kg
        row.budget = booking.budget
        row.distance_km = booking.distance_km
        row.requested_date = booking.requested_date
        row.status = booking.status
        row.accepted_bid_id = booking.accepted_bid_id

        for position, bid in enumerate(booking.bids):
            if bid.id in stored_ids:
                continue
            self.session.add(
                BidModel(
                    id=bid.id,
                    booking_id=booking.id,
                    position=position,
                    driver_id=bid.driver_id,
                    driver_name=bid.driver_name,
                    amount=bid.amount,
                    rating=bid.rating,
                    eta_minutes=bid.eta_minutes,
                    vehicle_no=bid.vehicle_no,
                    vehicle_capacity=bid.vehicle_capacity,
                    vehicle_dimensions=bid.vehicle_dimensions,
                    created_at=bid.created_at,
                )
            )
        await self.session.flush()

    async def get_by_id(self, booking_id: str) -> Optional[Booking]:
        row = await self.session.get(BookingModel, booking_id)
        return _booking_to_domain(row) if row else None

    async def list_all(self) -> list[Booking]:
        """All bookings, oldest first."""
        result = await self.session.execute(
            select(BookingModel).order_by(BookingModel.created_at)
        )
        return [_booking_to_domain(r) for r in result.scalars().all()]


class TruckRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, truck: Truck) -> None:
        row = await self.session.get(TruckModel, truck.truck_id)
        if row is None:
            row = TruckModel(truck_id=truck.truck_id)
            self.session.add(row)
        row.plate_number = truck.plate_number
        row.driver_name = truck.driver_name
        row.status = truck.status
        row.todays_earnings = truck.todays_earnings
        row.fuel_level = truck.fuel_level
        row.next_service_date = truck.next_service_date
        row.is_online = truck.is_online
        await self.session.flush()

    async def list_all(self) -> list[Truck]:
        result = await self.session.execute(
            select(TruckModel).order_by(TruckModel.truck_id)
        )
        return [_truck_to_domain(r) for r in result.scalars().all()]
