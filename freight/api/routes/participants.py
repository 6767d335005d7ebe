"""
Customer / driver views
=======================

GET /api/v1/customers/{customer_id}/active-booking -- newest non-completed booking
GET /api/v1/drivers/{driver_id}/current-job        -- booking won by the driver

Both return 204 when there is nothing in flight.
"""

from fastapi import APIRouter, Depends, Request, Response

from freight.api.dependencies import get_container
from freight.api.middleware import limiter
from freight.api.schemas import BookingResponse
from freight.config import settings
from freight.wiring import Container

router = APIRouter(tags=["participants"])


@router.get(
    "/customers/{customer_id}/active-booking",
    response_model=BookingResponse,
    summary="Customer's active booking",
    responses={204: {"description": "No booking in flight."}},
)
@limiter.limit(settings.rate_limit)
async def active_booking(
    request: Request,
    customer_id: str,
    container: Container = Depends(get_container),
):
    booking = container.registry.find_active_booking_for_customer(customer_id)
    if booking is None:
        return Response(status_code=204)
    return BookingResponse.model_validate(booking)


@router.get(
    "/drivers/{driver_id}/current-job",
    response_model=BookingResponse,
    summary="Driver's accepted or in-progress job",
    responses={204: {"description": "Driver has no current job."}},
)
@limiter.limit(settings.rate_limit)
async def current_job(
    request: Request,
    driver_id: str,
    container: Container = Depends(get_container),
):
    booking = container.registry.find_current_job_for_driver(driver_id)
    if booking is None:
        return Response(status_code=204)
    return BookingResponse.model_validate(booking)
