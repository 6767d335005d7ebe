"""
Fleet endpoints
===============

GET  /api/v1/fleet/trucks                          -- every vehicle
GET  /api/v1/fleet/alerts                          -- overdue / upcoming service
GET  /api/v1/fleet/summary                         -- dashboard counters
POST /api/v1/fleet/trucks/{truck_id}/maintenance   -- schedule the next service
POST /api/v1/fleet/trucks/{truck_id}/toggle-online -- driver goes on/off duty
"""

from fastapi import APIRouter, Depends, Request

from freight.api.dependencies import get_container
from freight.api.middleware import limiter
from freight.api.schemas import (
    ErrorResponse,
    FleetSummaryResponse,
    MaintenanceAlertResponse,
    ScheduleMaintenanceRequest,
    TruckResponse,
)
from freight.config import settings
from freight.wiring import Container

router = APIRouter(prefix="/fleet", tags=["fleet"])


@router.get("/trucks", response_model=list[TruckResponse], summary="List trucks")
@limiter.limit(settings.rate_limit)
async def list_trucks(request: Request, container: Container = Depends(get_container)):
    return [TruckResponse.model_validate(t) for t in container.fleet.list_trucks()]


@router.get(
    "/alerts",
    response_model=list[MaintenanceAlertResponse],
    summary="Maintenance alerts, most urgent first",
)
@limiter.limit(settings.rate_limit)
async def list_alerts(request: Request, container: Container = Depends(get_container)):
    return [
        MaintenanceAlertResponse.model_validate(a)
        for a in container.fleet.maintenance_alerts()
    ]


@router.get("/summary", response_model=FleetSummaryResponse, summary="Fleet counters")
@limiter.limit(settings.rate_limit)
async def summary(request: Request, container: Container = Depends(get_container)):
    return FleetSummaryResponse(**container.fleet.summary())


@router.post(
    "/trucks/{truck_id}/maintenance",
    response_model=TruckResponse,
    summary="Schedule maintenance",
    description="Sets the next service date and returns the truck to ACTIVE.",
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def schedule_maintenance(
    request: Request,
    truck_id: str,
    body: ScheduleMaintenanceRequest,
    container: Container = Depends(get_container),
):
    truck = await container.fleet.schedule_maintenance(truck_id, body.service_date)
    return TruckResponse.model_validate(truck)


@router.post(
    "/trucks/{truck_id}/toggle-online",
    response_model=TruckResponse,
    summary="Toggle a driver's online status",
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def toggle_online(
    request: Request,
    truck_id: str,
    container: Container = Depends(get_container),
):
    truck = await container.fleet.toggle_online(truck_id)
    return TruckResponse.model_validate(truck)
