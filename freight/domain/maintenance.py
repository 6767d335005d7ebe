"""
Maintenance alert rules.

Alert state is never stored; it is derived from the truck's
``next_service_date`` against the current date every time it is asked for:

* ``overdue``  -- service date already passed (diff_days < 0)
* ``upcoming`` -- due within the warning window (0 <= diff_days <= window)
* no alert     -- otherwise
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from .entities import Truck
from .enums import AlertType

DEFAULT_WARNING_DAYS = 7


@dataclass(frozen=True)
class MaintenanceAlert:
    truck_id: str
    plate_number: str
    driver_name: str
    next_service_date: date
    diff_days: int
    alert_type: AlertType


def classify(diff_days: int, warning_days: int = DEFAULT_WARNING_DAYS) -> Optional[AlertType]:
    if diff_days < 0:
        return AlertType.OVERDUE
    if diff_days <= warning_days:
        return AlertType.UPCOMING
    return None


def alert_for(
    truck: Truck, today: date, warning_days: int = DEFAULT_WARNING_DAYS
) -> Optional[MaintenanceAlert]:
    diff_days = (truck.next_service_date - today).days
    alert_type = classify(diff_days, warning_days)
    if alert_type is None:
        return None
    return MaintenanceAlert(
        truck_id=truck.truck_id,
        plate_number=truck.plate_number,
        driver_name=truck.driver_name,
        next_service_date=truck.next_service_date,
        diff_days=diff_days,
        alert_type=alert_type,
    )


def maintenance_alerts(
    trucks: Iterable[Truck], today: date, warning_days: int = DEFAULT_WARNING_DAYS
) -> list[MaintenanceAlert]:
    """Alerts for every truck that needs attention, most urgent first."""
    alerts: list[MaintenanceAlert] = []
    for truck in trucks:
        alert = alert_for(truck, today, warning_days)
        if alert is not None:
            alerts.append(alert)
    return sorted(alerts, key=lambda a: a.diff_days)
