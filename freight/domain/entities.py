"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Booking``: enforces valid lifecycle transitions
  (PENDING -> BIDDING -> ACCEPTED -> IN_PROGRESS -> COMPLETED).
- ``Bid`` is a frozen value: once submitted it is never edited or removed.
- ``Booking.accept`` encapsulates the single-accepted-bid invariant.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Optional

from .enums import (
    BOOKING_TRANSITIONS,
    OPEN_FOR_BIDDING,
    BookingStatus,
    SenderRole,
    TruckStatus,
    TruckType,
)
from .exceptions import BidNotFoundError, InvalidStateError


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ── Values ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Bid:
    driver_id: str
    driver_name: str
    amount: float
    rating: float
    eta_minutes: int
    vehicle_no: str
    vehicle_capacity: Optional[str] = None
    vehicle_dimensions: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class BookingSpec:
    """Customer input for a new shipment request."""

    pickup_location: str
    drop_location: str
    truck_type: TruckType
    material_type: str
    weight_kg: float
    budget: float
    distance_km: float
    requested_date: date


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Booking:
    customer_id: str
    pickup_location: str
    drop_location: str
    truck_type: TruckType
    material_type: str
    weight_kg: float
    budget: float
    distance_km: float
    requested_date: date
    id: str = field(default_factory=new_id)
    status: BookingStatus = BookingStatus.BIDDING
    bids: list[Bid] = field(default_factory=list)
    accepted_bid_id: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_spec(
        cls,
        spec: BookingSpec,
        customer_id: str,
        status: BookingStatus = BookingStatus.BIDDING,
    ) -> Booking:
        return cls(
            customer_id=customer_id,
            pickup_location=spec.pickup_location,
            drop_location=spec.drop_location,
            truck_type=spec.truck_type,
            material_type=spec.material_type,
            weight_kg=spec.weight_kg,
            budget=spec.budget,
            distance_km=spec.distance_km,
            requested_date=spec.requested_date,
            status=status,
        )

    @property
    def is_open_for_bidding(self) -> bool:
        return self.status in OPEN_FOR_BIDDING

    @property
    def accepted_bid(self) -> Optional[Bid]:
        if self.accepted_bid_id is None:
            return None
        return self.find_bid(self.accepted_bid_id)

    @property
    def lowest_bid(self) -> Optional[Bid]:
        return min(self.bids, key=lambda b: b.amount, default=None)

    def find_bid(self, bid_id: str) -> Optional[Bid]:
        for bid in self.bids:
            if bid.id == bid_id:
                return bid
        return None

    def transition_to(self, new_status: BookingStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        allowed = BOOKING_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateError(
                f"Cannot transition booking {self.id} "
                f"from {self.status.value} to {new_status.value}"
            )
        self.status = new_status

    def add_bid(self, bid: Bid) -> None:
        if not self.is_open_for_bidding:
            raise InvalidStateError(
                f"Booking {self.id} is {self.status.value}; bidding is closed"
            )
        self.bids.append(bid)

    def accept(self, bid_id: str) -> None:
        """Freeze bidding on *bid_id*.  Can only ever succeed once."""
        if self.accepted_bid_id is not None or not self.is_open_for_bidding:
            raise InvalidStateError(
                f"Booking {self.id} is {self.status.value}; cannot accept a bid"
            )
        if self.find_bid(bid_id) is None:
            raise BidNotFoundError(self.id, bid_id)
        if self.status == BookingStatus.PENDING:
            self.transition_to(BookingStatus.BIDDING)
        self.transition_to(BookingStatus.ACCEPTED)
        self.accepted_bid_id = bid_id

    def snapshot(self) -> Booking:
        """Independent copy for readers; bids are frozen so a shallow list copy suffices."""
        return replace(self, bids=list(self.bids))


@dataclass(frozen=True)
class ChatMessage:
    booking_id: str
    sender_role: SenderRole
    text: str
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class Truck:
    truck_id: str
    plate_number: str
    driver_name: str
    status: TruckStatus = TruckStatus.IDLE
    todays_earnings: float = 0.0
    fuel_level: int = 100
    next_service_date: date = field(default_factory=date.today)
    is_online: bool = False

    def snapshot(self) -> Truck:
        return replace(self)
