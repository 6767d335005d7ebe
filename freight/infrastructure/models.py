"""
SQLAlchemy ORM models.

Tables
------
* ``bookings``  -- shipment requests, one row per booking (never deleted)
* ``bids``      -- driver offers, append-only, ordered by ``position``
* ``trucks``    -- fleet vehicles with their service schedule

Indexes
-------
* **B-Tree** on ``status``, ``customer_id`` and ``created_at`` for the
  open-bookings and active-booking queries.
* **Unique** ``(booking_id, position)`` on bids keeps arrival order intact.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base
from freight.domain.enums import BookingStatus, TruckStatus, TruckType


class BookingModel(Base):
    __tablename__ = "bookings"

    id = Column(String(32), primary_key=True)
    customer_id = Column(String(64), nullable=False)
    pickup_location = Column(String(255), nullable=False)
    drop_location = Column(String(255), nullable=False)
    truck_type = Column(Enum(TruckType), nullable=False)
    material_type = Column(String(120), nullable=False)
    weight_kg = Column(Float, nullable=False)
    budget = Column(Float, nullable=False)
    distance_km = Column(Float, nullable=False)
    requested_date = Column(Date, nullable=False)
    status = Column(Enum(BookingStatus), default=BookingStatus.BIDDING, nullable=False)
    accepted_bid_id = Column(String(32), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    bids = relationship(
        "BidModel",
        back_populates="booking",
        order_by="BidModel.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_bookings_status", "status"),
        Index("idx_bookings_customer", "customer_id"),
        Index("idx_bookings_created", "created_at"),
    )


class BidModel(Base):
    __tablename__ = "bids"

    id = Column(String(32), primary_key=True)
    booking_id = Column(String(32), ForeignKey("bookings.id"), nullable=False)
    position = Column(Integer, nullable=False)
    driver_id = Column(String(64), nullable=False)
    driver_name = Column(String(120), nullable=False)
    amount = Column(Float, nullable=False)
    rating = Column(Float, nullable=False)
    eta_minutes = Column(Integer, nullable=False)
    vehicle_no = Column(String(32), nullable=False)
    vehicle_capacity = Column(String(64), nullable=True)
    vehicle_dimensions = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    booking = relationship("BookingModel", back_populates="bids")

    __table_args__ = (
        UniqueConstraint("booking_id", "position", name="uq_bids_booking_position"),
        Index("idx_bids_driver", "driver_id"),
    )


class TruckModel(Base):
    __tablename__ = "trucks"

    truck_id = Column(String(32), primary_key=True)
    plate_number = Column(String(32), unique=True, nullable=False)
    driver_name = Column(String(120), nullable=False)
    status = Column(Enum(TruckStatus), default=TruckStatus.IDLE, nullable=False)
    todays_earnings = Column(Float, default=0.0, nullable=False)
    fuel_level = Column(Integer, default=100, nullable=False)
    next_service_date = Column(Date, nullable=False)
    is_online = Column(Boolean, default=False, nullable=False)

    __table_args__ = (Index("idx_trucks_service", "next_service_date"),)
