"""Unit tests for maintenance alerts and the fleet registry."""

from datetime import date, timedelta

import pytest

from freight.domain.entities import Truck
from freight.domain.enums import AlertType, TruckStatus
from freight.domain.exceptions import TruckNotFoundError, ValidationError
from freight.domain.maintenance import alert_for, classify, maintenance_alerts
from freight.infrastructure.demo_data import demo_trucks
from freight.infrastructure.stores import MemoryFleetStore
from freight.services.fleet import FleetRegistry

TODAY = date(2024, 6, 10)


def _truck(days_until_service: int, **kw) -> Truck:
    values = dict(
        truck_id="t9",
        plate_number="KA-09-ZZ-0001",
        driver_name="Anil M.",
        next_service_date=TODAY + timedelta(days=days_until_service),
    )
    values.update(kw)
    return Truck(**values)


class TestClassify:
    @pytest.mark.parametrize(
        "diff,expected",
        [
            (-30, AlertType.OVERDUE),
            (-1, AlertType.OVERDUE),
            (0, AlertType.UPCOMING),
            (7, AlertType.UPCOMING),
            (8, None),
            (120, None),
        ],
    )
    def test_default_window(self, diff, expected):
        assert classify(diff) == expected

    def test_custom_window(self):
        assert classify(10, warning_days=14) == AlertType.UPCOMING
        assert classify(3, warning_days=2) is None


class TestAlerts:
    def test_overdue_truck(self):
        alert = alert_for(_truck(-2), TODAY)
        assert alert.diff_days == -2
        assert alert.alert_type == AlertType.OVERDUE
        assert alert.plate_number == "KA-09-ZZ-0001"

    def test_healthy_truck_has_no_alert(self):
        assert alert_for(_truck(30), TODAY) is None

    def test_most_urgent_first(self):
        trucks = [
            _truck(5, truck_id="a"),
            _truck(90, truck_id="b"),
            _truck(-4, truck_id="c"),
            _truck(0, truck_id="d"),
        ]
        alerts = maintenance_alerts(trucks, TODAY)
        assert [a.truck_id for a in alerts] == ["c", "d", "a"]

    def test_demo_fleet(self):
        alerts = maintenance_alerts(demo_trucks(TODAY), TODAY)
        assert [(a.truck_id, a.alert_type) for a in alerts] == [
            ("t3", AlertType.OVERDUE),
            ("t2", AlertType.UPCOMING),
        ]


class TestFleetRegistry:
    @pytest.fixture
    def fleet(self) -> FleetRegistry:
        return FleetRegistry(clock=lambda: TODAY)

    @pytest.mark.asyncio
    async def test_schedule_clears_overdue_alert(self, fleet):
        await fleet.register([_truck(-2, status=TruckStatus.MAINTENANCE)])
        assert fleet.maintenance_alerts()[0].diff_days == -2

        truck = await fleet.schedule_maintenance("t9", TODAY + timedelta(days=10))
        assert truck.status == TruckStatus.ACTIVE
        assert truck.next_service_date == TODAY + timedelta(days=10)
        assert fleet.maintenance_alerts() == []

    @pytest.mark.asyncio
    async def test_schedule_into_window_keeps_upcoming(self, fleet):
        await fleet.register([_truck(-2)])
        await fleet.schedule_maintenance("t9", TODAY + timedelta(days=3))
        [alert] = fleet.maintenance_alerts()
        assert alert.alert_type == AlertType.UPCOMING

    @pytest.mark.asyncio
    async def test_schedule_in_past_rejected(self, fleet):
        await fleet.register([_truck(-2)])
        with pytest.raises(ValidationError):
            await fleet.schedule_maintenance("t9", TODAY - timedelta(days=1))
        assert fleet.get_truck("t9").next_service_date == TODAY - timedelta(days=2)

    @pytest.mark.asyncio
    async def test_unknown_truck(self, fleet):
        with pytest.raises(TruckNotFoundError):
            await fleet.schedule_maintenance("nope", TODAY)
        with pytest.raises(TruckNotFoundError):
            fleet.get_truck("nope")

    @pytest.mark.asyncio
    async def test_toggle_online(self, fleet):
        await fleet.register([_truck(30, is_online=False)])
        assert (await fleet.toggle_online("t9")).is_online is True
        assert (await fleet.toggle_online("t9")).is_online is False

    @pytest.mark.asyncio
    async def test_summary_of_demo_fleet(self, fleet):
        await fleet.register(demo_trucks(TODAY))
        assert fleet.summary() == {
            "total_trucks": 4,
            "active_trucks": 2,
            "online_trucks": 2,
            "todays_earnings": 1460,
            "maintenance_alerts": 2,
        }

    @pytest.mark.asyncio
    async def test_hydrate_from_store(self):
        store = MemoryFleetStore()
        first = FleetRegistry(store, clock=lambda: TODAY)
        await first.register(demo_trucks(TODAY))
        await first.toggle_online("t4")

        second = FleetRegistry(store, clock=lambda: TODAY)
        assert await second.hydrate() == 4
        assert [t.truck_id for t in second.list_trucks()] == ["t1", "t2", "t3", "t4"]
        assert second.get_truck("t4").is_online is True

    @pytest.mark.asyncio
    async def test_returned_trucks_are_copies(self, fleet):
        await fleet.register([_truck(30)])
        copy = fleet.get_truck("t9")
        copy.status = TruckStatus.MAINTENANCE
        assert fleet.get_truck("t9").status == TruckStatus.IDLE
