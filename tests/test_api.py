"""
Integration tests for the REST API endpoints.

The app runs with in-memory stores, the in-memory chat channel and the
mock advisor, so no PostgreSQL / Redis / OpenAI is needed.  ASGITransport
does not fire lifespan events; the fixture runs ``startup`` itself.
"""

from __future__ import annotations

import json
from datetime import date, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from freight.api.app import create_app
from freight.api.middleware import limiter
from freight.config import Settings
from freight.wiring import startup
from freight.workers import bid_feed
from tests.conftest import BID_DEFAULTS

BOOKING_BODY = {
    "customer_id": "cust_1",
    "pickup_location": "Central Warehouse, Industrial Area",
    "drop_location": "City Port Terminal 4",
    "truck_type": "LCV (2.5T)",
    "material_type": "FMCG",
    "weight_kg": 1500,
    "budget": 150,
    "distance_km": 42,
    "requested_date": (date.today() + timedelta(days=1)).isoformat(),
}

BID_BODY = dict(BID_DEFAULTS, driver_name="Fast Logistics")


# ── Fixture ───────────────────────────────────────────────────────────


def _memory_app():
    return create_app(
        Settings(
            store_provider="memory",
            chat_provider="memory",
            advisory_provider="mock",
            seed_demo_fleet=True,
        )
    )


@pytest_asyncio.fixture
async def client(monkeypatch):
    monkeypatch.setattr(limiter, "enabled", False)
    app = _memory_app()
    await startup(app.state.container)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def feed_client(monkeypatch):
    """Like ``client`` but with the bid feed worker running."""
    monkeypatch.setattr(limiter, "enabled", False)
    app = _memory_app()
    await startup(app.state.container)
    await bid_feed.start_bid_feed(app.state.container.intake)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await bid_feed.stop_bid_feed()


async def _create_booking(client: AsyncClient, **overrides) -> dict:
    resp = await client.post("/api/v1/bookings", json={**BOOKING_BODY, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _bid(client: AsyncClient, booking_id: str, **overrides):
    return await client.post(
        f"/api/v1/bookings/{booking_id}/bids", json={**BID_BODY, **overrides}
    )


async def _accepted_booking(client: AsyncClient) -> dict:
    booking = await _create_booking(client)
    bid = (await _bid(client, booking["id"])).json()
    resp = await client.post(f"/api/v1/bookings/{booking['id']}/bids/{bid['id']}/accept")
    assert resp.status_code == 200
    return resp.json()


# ── Bookings and bids ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/api/v1/admin/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_bid_accept_then_late_bid_conflicts(client: AsyncClient):
    booking = await _create_booking(client)
    assert booking["status"] == "BIDDING"
    assert booking["bids"] == []

    resp = await _bid(client, booking["id"], amount=160)
    assert resp.status_code == 201
    bid = resp.json()

    resp = await client.post(f"/api/v1/bookings/{booking['id']}/bids/{bid['id']}/accept")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ACCEPTED"
    assert body["accepted_bid_id"] == bid["id"]

    resp = await _bid(client, booking["id"], amount=150)
    assert resp.status_code == 409

    resp = await client.get(f"/api/v1/bookings/{booking['id']}")
    assert len(resp.json()["bids"]) == 1


@pytest.mark.asyncio
async def test_hold_for_triage_then_open(client: AsyncClient):
    booking = await _create_booking(client, hold_for_triage=True)
    assert booking["status"] == "PENDING"
    resp = await client.post(f"/api/v1/bookings/{booking['id']}/open-bidding")
    assert resp.status_code == 200
    assert resp.json()["status"] == "BIDDING"


@pytest.mark.asyncio
async def test_full_trip(client: AsyncClient):
    booking = await _accepted_booking(client)
    resp = await client.post(f"/api/v1/bookings/{booking['id']}/start")
    assert resp.json()["status"] == "IN_PROGRESS"
    resp = await client.post(f"/api/v1/bookings/{booking['id']}/complete")
    assert resp.json()["status"] == "COMPLETED"


@pytest.mark.asyncio
async def test_start_before_accept_conflicts(client: AsyncClient):
    booking = await _create_booking(client)
    resp = await client.post(f"/api/v1/bookings/{booking['id']}/start")
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_second_accept_conflicts(client: AsyncClient):
    booking = await _create_booking(client)
    first = (await _bid(client, booking["id"])).json()
    second = (await _bid(client, booking["id"], driver_id="d_2")).json()
    url = f"/api/v1/bookings/{booking['id']}/bids"
    assert (await client.post(f"{url}/{first['id']}/accept")).status_code == 200
    assert (await client.post(f"{url}/{second['id']}/accept")).status_code == 409


@pytest.mark.asyncio
async def test_list_and_open_bookings(client: AsyncClient):
    first = await _create_booking(client)
    accepted = await _accepted_booking(client)

    resp = await client.get("/api/v1/bookings")
    assert [b["id"] for b in resp.json()] == [accepted["id"], first["id"]]

    resp = await client.get("/api/v1/bookings/open")
    assert [b["id"] for b in resp.json()] == [first["id"]]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/v1/bookings/nope"),
        ("post", "/api/v1/bookings/nope/start"),
        ("get", "/api/v1/bookings/nope/messages"),
        ("get", "/api/v1/bookings/nope/cost-estimate"),
        ("get", "/api/v1/bookings/nope/advisory"),
        ("post", "/api/v1/fleet/trucks/nope/toggle-online"),
    ],
)
async def test_unknown_ids_404(client: AsyncClient, method, path):
    resp = await getattr(client, method)(path)
    assert resp.status_code == 404
    assert "detail" in resp.json()


@pytest.mark.asyncio
async def test_bid_on_unknown_booking_404(client: AsyncClient):
    assert (await _bid(client, "nope")).status_code == 404


@pytest.mark.asyncio
async def test_accept_unknown_bid_404(client: AsyncClient):
    booking = await _create_booking(client)
    resp = await client.post(f"/api/v1/bookings/{booking['id']}/bids/nope/accept")
    assert resp.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [{"budget": 0}, {"weight_kg": -1}, {"truck_type": "Bicycle"}, {"pickup_location": ""}],
)
async def test_invalid_booking_422(client: AsyncClient, overrides):
    resp = await client.post("/api/v1/bookings", json={**BOOKING_BODY, **overrides})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_whitespace_location_rejected_by_engine(client: AsyncClient):
    resp = await client.post(
        "/api/v1/bookings", json={**BOOKING_BODY, "drop_location": "   "}
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [{"amount": 0}, {"rating": 6}, {"eta_minutes": -5}])
async def test_invalid_bid_422(client: AsyncClient, overrides):
    booking = await _create_booking(client)
    assert (await _bid(client, booking["id"], **overrides)).status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path,body",
    [
        ("/api/v1/bookings", {**BOOKING_BODY, "budget": float("inf")}),
        ("/api/v1/bookings", {**BOOKING_BODY, "distance_km": float("nan")}),
        ("/api/v1/bookings/{id}/bids", {**BID_BODY, "amount": float("nan")}),
        ("/api/v1/bookings/{id}/bids", {**BID_BODY, "rating": float("nan")}),
    ],
)
async def test_non_finite_numbers_422(client: AsyncClient, path, body):
    booking = await _create_booking(client)
    # json.dumps emits the bare Infinity / NaN tokens
    resp = await client.post(
        path.format(id=booking["id"]),
        content=json.dumps(body),
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 422
    assert "finite_number" in {e["type"] for e in resp.json()["detail"]}
    assert (await client.get(f"/api/v1/bookings/{booking['id']}")).json()["bids"] == []
    assert len((await client.get("/api/v1/bookings")).json()) == 1


# ── Bid feed ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_bid_feed_batch_is_applied_in_order(feed_client: AsyncClient):
    booking = await _create_booking(feed_client)
    batch = [
        {**BID_BODY, "booking_id": booking["id"], "driver_id": "d_1"},
        {**BID_BODY, "booking_id": "missing", "driver_id": "d_lost"},
        {**BID_BODY, "booking_id": booking["id"], "driver_id": "d_2"},
    ]
    resp = await feed_client.post("/api/v1/bid-feed", json={"bids": batch})
    assert resp.status_code == 202
    assert resp.json()["queued"] == 3

    await bid_feed.drain()
    resp = await feed_client.get(f"/api/v1/bookings/{booking['id']}")
    assert [b["driver_id"] for b in resp.json()["bids"]] == ["d_1", "d_2"]


@pytest.mark.asyncio
async def test_bid_feed_validates_shape(feed_client: AsyncClient):
    booking = await _create_booking(feed_client)
    bad = {**BID_BODY, "booking_id": booking["id"], "amount": -1}
    for body in ({"bids": [bad]}, {"bids": []}):
        resp = await feed_client.post("/api/v1/bid-feed", json=body)
        assert resp.status_code == 422
    assert bid_feed.pending() == 0


@pytest.mark.asyncio
async def test_bid_feed_503_when_worker_stopped(client: AsyncClient):
    await bid_feed.stop_bid_feed()
    booking = await _create_booking(client)
    body = {"bids": [{**BID_BODY, "booking_id": booking["id"]}]}
    resp = await client.post("/api/v1/bid-feed", json=body)
    assert resp.status_code == 503


# ── Participants ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_customer_active_booking(client: AsyncClient):
    resp = await client.get("/api/v1/customers/cust_1/active-booking")
    assert resp.status_code == 204

    booking = await _create_booking(client)
    resp = await client.get("/api/v1/customers/cust_1/active-booking")
    assert resp.status_code == 200
    assert resp.json()["id"] == booking["id"]


@pytest.mark.asyncio
async def test_driver_current_job(client: AsyncClient):
    resp = await client.get("/api/v1/drivers/d_99/current-job")
    assert resp.status_code == 204

    booking = await _accepted_booking(client)
    resp = await client.get("/api/v1/drivers/d_99/current-job")
    assert resp.status_code == 200
    assert resp.json()["id"] == booking["id"]


# ── Costs and advisory ────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_cost_estimate_defaults_to_suggested_bid(client: AsyncClient):
    booking = await _create_booking(client)
    resp = await client.get(f"/api/v1/bookings/{booking['id']}/cost-estimate")
    assert resp.status_code == 200
    body = resp.json()
    assert body["suggested_bid"] == 165.0
    assert body["bid_amount"] == 165.0
    assert body["toll_cost"] == 105.0
    assert body["commission"] == 16.5
    assert body["net"] < 0


@pytest.mark.asyncio
async def test_cost_estimate_for_given_bid(client: AsyncClient):
    booking = await _create_booking(client, distance_km=40)
    resp = await client.get(
        f"/api/v1/bookings/{booking['id']}/cost-estimate", params={"bid_amount": 1000}
    )
    body = resp.json()
    assert body["fuel_cost"] == 477.5
    assert body["total_expense"] == 677.5
    assert body["net"] == 322.5


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", ["inf", "nan", "-inf"])
async def test_cost_estimate_rejects_non_finite_bid(client: AsyncClient, amount):
    booking = await _create_booking(client)
    resp = await client.get(
        f"/api/v1/bookings/{booking['id']}/cost-estimate", params={"bid_amount": amount}
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_advisory_with_mock_provider(client: AsyncClient):
    booking = await _create_booking(client)
    resp = await client.get(f"/api/v1/bookings/{booking['id']}/advisory")
    assert resp.status_code == 200
    body = resp.json()
    assert body["booking_id"] == booking["id"]
    assert "City Port Terminal 4" in body["text"]


@pytest.mark.asyncio
async def test_advisory_without_key_returns_fallback(monkeypatch):
    monkeypatch.setattr(limiter, "enabled", False)
    app = create_app(Settings(advisory_provider="openai", openai_api_key=None))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        booking = await _create_booking(ac)
        resp = await ac.get(f"/api/v1/bookings/{booking['id']}/advisory")
    assert resp.status_code == 200
    assert resp.json()["text"] == "AI Analysis unavailable: API Key missing."


# ── Chat ──────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_chat_closed_before_accept(client: AsyncClient):
    booking = await _create_booking(client)
    resp = await client.post(
        f"/api/v1/bookings/{booking['id']}/messages",
        json={"sender_role": "CUSTOMER", "text": "hello?"},
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_chat_after_accept(client: AsyncClient):
    booking = await _accepted_booking(client)
    url = f"/api/v1/bookings/{booking['id']}/messages"
    first = await client.post(url, json={"sender_role": "CUSTOMER", "text": "Gate 3 please"})
    assert first.status_code == 201
    await client.post(url, json={"sender_role": "DRIVER", "text": "On my way"})

    resp = await client.get(url)
    assert [m["text"] for m in resp.json()] == ["Gate 3 please", "On my way"]
    assert resp.json()[1]["sender_role"] == "DRIVER"


# ── Fleet ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_fleet_alerts_and_schedule(client: AsyncClient):
    resp = await client.get("/api/v1/fleet/alerts")
    alerts = resp.json()
    assert [(a["truck_id"], a["alert_type"]) for a in alerts] == [
        ("t3", "overdue"),
        ("t2", "upcoming"),
    ]
    assert alerts[0]["diff_days"] == -2

    service_date = (date.today() + timedelta(days=10)).isoformat()
    resp = await client.post(
        "/api/v1/fleet/trucks/t3/maintenance", json={"service_date": service_date}
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "ACTIVE"

    resp = await client.get("/api/v1/fleet/alerts")
    assert [a["truck_id"] for a in resp.json()] == ["t2"]


@pytest.mark.asyncio
async def test_schedule_in_past_422(client: AsyncClient):
    past = (date.today() - timedelta(days=1)).isoformat()
    resp = await client.post("/api/v1/fleet/trucks/t1/maintenance", json={"service_date": past})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_fleet_summary_and_toggle(client: AsyncClient):
    resp = await client.get("/api/v1/fleet/summary")
    assert resp.json()["total_trucks"] == 4
    assert resp.json()["online_trucks"] == 2

    resp = await client.post("/api/v1/fleet/trucks/t4/toggle-online")
    assert resp.json()["is_online"] is True
    resp = await client.get("/api/v1/fleet/summary")
    assert resp.json()["online_trucks"] == 3


# ── Admin ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_stats(client: AsyncClient):
    booking = await _create_booking(client)
    await _bid(client, booking["id"])
    resp = await client.get("/api/v1/admin/stats")
    body = resp.json()
    assert body["BIDDING"] == 1
    assert body["total_bookings"] == 1
    assert body["total_bids"] == 1
    assert body["pending_feed_bids"] == 0
