"""
FastAPI application factory.

* Builds the service container once per app and keeps it on ``app.state``.
* Hydrates persisted state and starts / stops the bid feed worker (and its
  optional Redis subscriber) via lifespan events.
* Maps engine errors onto HTTP status codes.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
import math

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from freight.api.middleware import limiter
from freight.api.routes import admin, bookings, chat, feed, fleet, participants
from freight.config import Settings, settings as default_settings
from freight.domain.entities import Booking
from freight.domain.exceptions import (
    BidNotFoundError,
    BookingNotFoundError,
    FreightError,
    InvalidStateError,
    TruckNotFoundError,
    ValidationError,
)
from freight.infrastructure.redis_client import get_redis
from freight.wiring import build_container, shutdown, startup
from freight.workers import bid_feed

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[FreightError], int] = {
    BookingNotFoundError: 404,
    BidNotFoundError: 404,
    TruckNotFoundError: 404,
    InvalidStateError: 409,
    ValidationError: 422,
    FreightError: 400,
}


async def _engine_error_handler(request: Request, exc: FreightError) -> JSONResponse:
    status_code = 400
    for error_type, code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            status_code = code
            break
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def _finite(value):
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_finite(v) for v in value]
    return value


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # errors echo the rejected input, and JSONResponse refuses NaN / Infinity
    detail = _finite(jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=422, content={"detail": detail})


def _log_transition(booking: Booking) -> None:
    logger.debug(
        "Booking %s now %s with %d bids",
        booking.id,
        booking.status.value,
        len(booking.bids),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load state and start the bid feed on startup; stop on shutdown."""
    container = app.state.container
    await startup(container)
    settings = container.settings
    await bid_feed.start_bid_feed(
        container.intake,
        redis_client=get_redis() if settings.bid_feed_redis_enabled else None,
        channel=settings.bid_feed_channel,
    )
    yield
    await bid_feed.stop_bid_feed()
    await shutdown(container)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    app = FastAPI(
        title="Freight Bidding API",
        description=(
            "Customers post shipment requests, drivers bid on them and the "
            "customer accepts exactly one bid, turning the request into a "
            "trackable job.  Includes booking-scoped chat, AI route advisory "
            "and fleet maintenance alerts."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    container = build_container(settings)
    container.registry.add_listener(_log_transition)
    app.state.container = container

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Request validation (bodies may carry NaN / Infinity)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    # Engine errors
    for error_type in _STATUS_BY_ERROR:
        app.add_exception_handler(error_type, _engine_error_handler)

    # Routers
    app.include_router(bookings.router, prefix="/api/v1")
    app.include_router(feed.router, prefix="/api/v1")
    app.include_router(chat.router, prefix="/api/v1")
    app.include_router(participants.router, prefix="/api/v1")
    app.include_router(fleet.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
