"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from freight.domain.enums import AlertType, BookingStatus, SenderRole, TruckStatus, TruckType


# ── Requests ──────────────────────────────────────────────────────────


class BookingCreateRequest(BaseModel):
    customer_id: str = Field(..., min_length=1, max_length=64)
    pickup_location: str = Field(..., min_length=1, max_length=255)
    drop_location: str = Field(..., min_length=1, max_length=255)
    truck_type: TruckType
    material_type: str = Field(..., min_length=1, max_length=120)
    weight_kg: float = Field(..., gt=0, allow_inf_nan=False)
    budget: float = Field(..., gt=0, allow_inf_nan=False)
    distance_km: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Supplied by an external distance estimator.",
    )
    requested_date: date
    hold_for_triage: bool = Field(
        False,
        description="Create in PENDING instead of opening bidding immediately.",
    )


class BidCreateRequest(BaseModel):
    driver_id: str = Field(..., min_length=1, max_length=64)
    driver_name: str = Field(..., min_length=1, max_length=120)
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    rating: float = Field(..., ge=0, le=5, allow_inf_nan=False)
    eta_minutes: int = Field(..., ge=0)
    vehicle_no: str = Field(..., min_length=1, max_length=32)
    vehicle_capacity: Optional[str] = Field(None, max_length=64)
    vehicle_dimensions: Optional[str] = Field(None, max_length=64)


class BidFeedItem(BidCreateRequest):
    booking_id: str = Field(..., min_length=1)


class BidFeedRequest(BaseModel):
    bids: list[BidFeedItem] = Field(..., min_length=1, max_length=500)


class ChatMessageRequest(BaseModel):
    sender_role: SenderRole
    text: str = Field(..., min_length=1, max_length=2000)


class ScheduleMaintenanceRequest(BaseModel):
    service_date: date


# ── Responses ─────────────────────────────────────────────────────────


class BidResponse(BaseModel):
    id: str
    driver_id: str
    driver_name: str
    amount: float
    rating: float
    eta_minutes: int
    vehicle_no: str
    vehicle_capacity: Optional[str] = None
    vehicle_dimensions: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    id: str
    customer_id: str
    pickup_location: str
    drop_location: str
    truck_type: TruckType
    material_type: str
    weight_kg: float
    budget: float
    distance_km: float
    requested_date: date
    status: BookingStatus
    bids: list[BidResponse] = []
    accepted_bid_id: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CostEstimateResponse(BaseModel):
    bid_amount: float
    fuel_cost: float
    toll_cost: float
    commission: float
    total_expense: float
    net: float
    suggested_bid: float
    break_even_bid: float


class AdvisoryResponse(BaseModel):
    booking_id: str
    text: str


class ChatMessageResponse(BaseModel):
    id: str
    booking_id: str
    sender_role: SenderRole
    text: str
    timestamp: datetime

    model_config = {"from_attributes": True}


class TruckResponse(BaseModel):
    truck_id: str
    plate_number: str
    driver_name: str
    status: TruckStatus
    todays_earnings: float
    fuel_level: int
    next_service_date: date
    is_online: bool

    model_config = {"from_attributes": True}


class MaintenanceAlertResponse(BaseModel):
    truck_id: str
    plate_number: str
    driver_name: str
    next_service_date: date
    diff_days: int
    alert_type: AlertType

    model_config = {"from_attributes": True}


class FleetSummaryResponse(BaseModel):
    total_trucks: int
    active_trucks: int
    online_trucks: int
    todays_earnings: float
    maintenance_alerts: int


class BidFeedResponse(BaseModel):
    queued: int
    pending: int


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
