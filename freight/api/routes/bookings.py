"""
Booking endpoints
=================

POST /api/v1/bookings                              -- post a shipment request
GET  /api/v1/bookings                              -- all bookings, newest first
GET  /api/v1/bookings/open                         -- bookings drivers can bid on
GET  /api/v1/bookings/{booking_id}                 -- booking snapshot with bids
POST /api/v1/bookings/{booking_id}/bids            -- driver submits a bid
POST /api/v1/bookings/{booking_id}/bids/{bid_id}/accept -- customer accepts
POST /api/v1/bookings/{booking_id}/open-bidding    -- PENDING -> BIDDING
POST /api/v1/bookings/{booking_id}/start           -- ACCEPTED -> IN_PROGRESS
POST /api/v1/bookings/{booking_id}/complete        -- IN_PROGRESS -> COMPLETED
GET  /api/v1/bookings/{booking_id}/cost-estimate   -- driver's trip economics
GET  /api/v1/bookings/{booking_id}/advisory        -- AI route commentary

Engine errors are mapped to 404 / 409 / 422 by the handlers in ``app.py``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from freight.api.dependencies import get_container
from freight.api.middleware import limiter
from freight.api.schemas import (
    AdvisoryResponse,
    BidCreateRequest,
    BidResponse,
    BookingCreateRequest,
    BookingResponse,
    CostEstimateResponse,
    ErrorResponse,
)
from freight.config import settings
from freight.domain.entities import BookingSpec
from freight.wiring import Container

router = APIRouter(prefix="/bookings", tags=["bookings"])

_errors = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=BookingResponse,
    summary="Create a booking (opens for bids)",
    responses=_errors,
)
@limiter.limit(settings.rate_limit)
async def create_booking(
    request: Request,
    body: BookingCreateRequest,
    container: Container = Depends(get_container),
):
    spec = BookingSpec(
        pickup_location=body.pickup_location,
        drop_location=body.drop_location,
        truck_type=body.truck_type,
        material_type=body.material_type,
        weight_kg=body.weight_kg,
        budget=body.budget,
        distance_km=body.distance_km,
        requested_date=body.requested_date,
    )
    booking = await container.registry.create_booking(
        spec, body.customer_id, hold_for_triage=body.hold_for_triage
    )
    return BookingResponse.model_validate(booking)


@router.get("", response_model=list[BookingResponse], summary="List bookings")
@limiter.limit(settings.rate_limit)
async def list_bookings(
    request: Request, container: Container = Depends(get_container)
):
    return [BookingResponse.model_validate(b) for b in container.registry.list_bookings()]


@router.get(
    "/open",
    response_model=list[BookingResponse],
    summary="Bookings still accepting bids",
)
@limiter.limit(settings.rate_limit)
async def list_open_bookings(
    request: Request, container: Container = Depends(get_container)
):
    return [
        BookingResponse.model_validate(b)
        for b in container.registry.list_open_bookings()
    ]


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking with its bids",
    responses=_errors,
)
@limiter.limit(settings.rate_limit)
async def get_booking(
    request: Request,
    booking_id: str,
    container: Container = Depends(get_container),
):
    return BookingResponse.model_validate(container.registry.get_booking(booking_id))


@router.post(
    "/{booking_id}/bids",
    status_code=201,
    response_model=BidResponse,
    summary="Submit a bid",
    description=(
        "Appends a bid in arrival order.  Rejected with 409 once the "
        "booking has left PENDING / BIDDING."
    ),
    responses=_errors,
)
@limiter.limit(settings.rate_limit)
async def submit_bid(
    request: Request,
    booking_id: str,
    body: BidCreateRequest,
    container: Container = Depends(get_container),
):
    bid = await container.intake.submit_bid(
        booking_id,
        body.driver_id,
        body.driver_name,
        body.amount,
        body.rating,
        body.eta_minutes,
        body.vehicle_no,
        body.vehicle_capacity,
        body.vehicle_dimensions,
    )
    return BidResponse.model_validate(bid)


@router.post(
    "/{booking_id}/bids/{bid_id}/accept",
    response_model=BookingResponse,
    summary="Accept a bid",
    description="Final: a booking accepts at most one bid in its lifetime.",
    responses=_errors,
)
@limiter.limit(settings.rate_limit)
async def accept_bid(
    request: Request,
    booking_id: str,
    bid_id: str,
    container: Container = Depends(get_container),
):
    booking = await container.selection.accept_bid(booking_id, bid_id)
    return BookingResponse.model_validate(booking)


@router.post(
    "/{booking_id}/open-bidding",
    response_model=BookingResponse,
    summary="Open a triaged booking for bids",
    responses=_errors,
)
@limiter.limit(settings.rate_limit)
async def open_bidding(
    request: Request,
    booking_id: str,
    container: Container = Depends(get_container),
):
    booking = await container.lifecycle.open_bidding(booking_id)
    return BookingResponse.model_validate(booking)


@router.post(
    "/{booking_id}/start",
    response_model=BookingResponse,
    summary="Driver confirms pickup",
    responses=_errors,
)
@limiter.limit(settings.rate_limit)
async def start_trip(
    request: Request,
    booking_id: str,
    container: Container = Depends(get_container),
):
    booking = await container.lifecycle.start_trip(booking_id)
    return BookingResponse.model_validate(booking)


@router.post(
    "/{booking_id}/complete",
    response_model=BookingResponse,
    summary="Mark the trip delivered",
    responses=_errors,
)
@limiter.limit(settings.rate_limit)
async def complete_trip(
    request: Request,
    booking_id: str,
    container: Container = Depends(get_container),
):
    booking = await container.lifecycle.complete_trip(booking_id)
    return BookingResponse.model_validate(booking)


@router.get(
    "/{booking_id}/cost-estimate",
    response_model=CostEstimateResponse,
    summary="Fuel, toll and commission for a prospective bid",
    responses=_errors,
)
@limiter.limit(settings.rate_limit)
async def cost_estimate(
    request: Request,
    booking_id: str,
    bid_amount: Optional[float] = Query(
        None,
        gt=0,
        allow_inf_nan=False,
        description="Defaults to the suggested bid (budget + 10 %).",
    ),
    container: Container = Depends(get_container),
):
    booking = container.registry.get_booking(booking_id)
    costs = container.costs
    suggested = costs.suggested_bid(booking.budget)
    breakdown = costs.breakdown(booking.distance_km, bid_amount or suggested)
    return CostEstimateResponse(
        bid_amount=breakdown.bid_amount,
        fuel_cost=breakdown.fuel_cost,
        toll_cost=breakdown.toll_cost,
        commission=breakdown.commission,
        total_expense=breakdown.total_expense,
        net=breakdown.net,
        suggested_bid=suggested,
        break_even_bid=costs.break_even_bid(booking.distance_km),
    )


@router.get(
    "/{booking_id}/advisory",
    response_model=AdvisoryResponse,
    summary="AI route and pricing commentary",
    description="Best effort; returns a fallback message when the provider is down.",
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def advisory(
    request: Request,
    booking_id: str,
    container: Container = Depends(get_container),
):
    booking = container.registry.get_booking(booking_id)
    text = await container.advisory.analyze_booking(booking)
    return AdvisoryResponse(booking_id=booking_id, text=text)
