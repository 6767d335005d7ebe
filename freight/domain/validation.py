"""Input checks shared by the intake paths (API, bid feed, scripts)."""

from __future__ import annotations

import math

from .entities import BookingSpec
from .enums import TruckType
from .exceptions import ValidationError

MAX_RATING = 5.0


def _require_text(value: str | None, name: str) -> None:
    if not value or not str(value).strip():
        raise ValidationError(f"{name} must not be empty")


def _is_number(value) -> bool:
    return value is not None and math.isfinite(value)


def _require_positive(value: float, name: str) -> None:
    # NaN compares False against everything, so check finiteness first
    if not _is_number(value) or value <= 0:
        raise ValidationError(f"{name} must be positive, got {value!r}")


def validate_booking_spec(spec: BookingSpec) -> None:
    _require_text(spec.pickup_location, "pickup_location")
    _require_text(spec.drop_location, "drop_location")
    _require_text(spec.material_type, "material_type")
    if not isinstance(spec.truck_type, TruckType):
        raise ValidationError(f"Unknown truck type: {spec.truck_type!r}")
    _require_positive(spec.weight_kg, "weight_kg")
    _require_positive(spec.budget, "budget")
    _require_positive(spec.distance_km, "distance_km")
    if spec.requested_date is None:
        raise ValidationError("requested_date is required")


def validate_bid(
    *,
    driver_id: str,
    amount: float,
    rating: float,
    eta_minutes: int,
    vehicle_no: str,
) -> None:
    _require_text(driver_id, "driver_id")
    _require_text(vehicle_no, "vehicle_no")
    _require_positive(amount, "amount")
    if not _is_number(rating) or not 0.0 <= rating <= MAX_RATING:
        raise ValidationError(f"rating must be within 0.0-{MAX_RATING}, got {rating!r}")
    if eta_minutes is None or eta_minutes < 0:
        raise ValidationError(f"eta_minutes must be non-negative, got {eta_minutes!r}")
