"""
Background Bid Feed Worker
==========================

Bids do not only arrive through the HTTP API: partner dispatch systems and
driver apps push offers asynchronously.  This worker is the single consumer
of that event source.

* Producers call ``enqueue_bid`` (never blocks, never touches booking state).
  Two producers ship with the service: a Redis subscriber on
  ``bids:incoming`` (one JSON object per message) and the batch endpoint
  ``POST /api/v1/bid-feed``.
* The worker pops submissions in arrival order and funnels each one through
  ``BidIntakeService.submit_bid`` -- the same path the API uses, so every
  invariant is enforced centrally by the registry.
* A rejected submission (closed booking, unknown booking, bad amount) is
  logged and dropped; the loop keeps running.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from freight.domain.entities import Bid
from freight.domain.exceptions import FreightError
from freight.services.bid_intake import BidIntakeService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BidSubmission:
    booking_id: str
    driver_id: str
    driver_name: str
    amount: float
    rating: float
    eta_minutes: int
    vehicle_no: str
    vehicle_capacity: Optional[str] = None
    vehicle_dimensions: Optional[str] = None


DEFAULT_CHANNEL = "bids:incoming"

_task: asyncio.Task | None = None
_source_task: asyncio.Task | None = None
_stop_event: asyncio.Event | None = None
_queue: asyncio.Queue | None = None
_intake: BidIntakeService | None = None


# ── Public API ────────────────────────────────────────────────────────


async def start_bid_feed(
    intake: BidIntakeService,
    redis_client: Any = None,
    channel: str = DEFAULT_CHANNEL,
) -> None:
    """Start the consumer; with a Redis client, also subscribe to *channel*."""
    global _task, _source_task, _stop_event, _queue, _intake
    _intake = intake
    _queue = asyncio.Queue()
    _stop_event = asyncio.Event()
    _task = asyncio.create_task(_loop())
    if redis_client is not None:
        _source_task = asyncio.create_task(consume_redis_bids(redis_client, channel))
    logger.info("Bid feed worker started")


async def stop_bid_feed() -> None:
    global _task, _source_task
    if _stop_event:
        _stop_event.set()
    if _source_task:
        _source_task.cancel()
        try:
            await _source_task
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Bid channel subscriber failed")
        _source_task = None
    if _task:
        _task.cancel()
        try:
            await _task
        except asyncio.CancelledError:
            pass
        _task = None
    logger.info("Bid feed worker stopped")


def enqueue_bid(submission: BidSubmission) -> None:
    if _queue is None or _stop_event is None or _stop_event.is_set():
        raise RuntimeError("Bid feed worker is not running")
    _queue.put_nowait(submission)


def pending() -> int:
    return _queue.qsize() if _queue is not None else 0


async def drain() -> None:
    """Wait until every enqueued submission has been processed."""
    if _queue is not None:
        await _queue.join()


def decode_submission(raw: str | bytes) -> BidSubmission:
    """Parse one ``bids:incoming`` payload.

    Raises ``ValueError``, ``KeyError`` or ``TypeError`` on malformed input.
    Range checks are left to the intake service.
    """
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("bid event must be a JSON object")
    return BidSubmission(
        booking_id=str(data["booking_id"]),
        driver_id=str(data["driver_id"]),
        driver_name=str(data["driver_name"]),
        amount=float(data["amount"]),
        rating=float(data["rating"]),
        eta_minutes=int(data["eta_minutes"]),
        vehicle_no=str(data["vehicle_no"]),
        vehicle_capacity=data.get("vehicle_capacity"),
        vehicle_dimensions=data.get("vehicle_dimensions"),
    )


async def consume_redis_bids(redis_client: Any, channel: str = DEFAULT_CHANNEL) -> None:
    """Forward every message on *channel* into the queue until cancelled."""
    pubsub = redis_client.pubsub()
    await pubsub.subscribe(channel)
    logger.info("Subscribed to bid channel %s", channel)
    try:
        async for event in pubsub.listen():
            if event.get("type") != "message":
                continue
            try:
                submission = decode_submission(event["data"])
            except (ValueError, KeyError, TypeError) as e:
                logger.warning("Malformed bid event on %s: %s", channel, e)
                continue
            try:
                enqueue_bid(submission)
            except RuntimeError:
                logger.warning("Bid feed stopped; leaving %s", channel)
                return
    finally:
        await pubsub.unsubscribe(channel)
        await pubsub.aclose()


async def process_submission(
    intake: BidIntakeService, submission: BidSubmission
) -> Optional[Bid]:
    """Submit one event; engine rejections are logged, not raised."""
    try:
        return await intake.submit_bid(
            submission.booking_id,
            submission.driver_id,
            submission.driver_name,
            submission.amount,
            submission.rating,
            submission.eta_minutes,
            submission.vehicle_no,
            submission.vehicle_capacity,
            submission.vehicle_dimensions,
        )
    except FreightError as e:
        logger.warning(
            "Dropped bid from driver %s on booking %s: %s",
            submission.driver_id,
            submission.booking_id,
            e,
        )
        return None


# ── Internals ─────────────────────────────────────────────────────────


async def _loop() -> None:
    assert _queue is not None and _stop_event is not None and _intake is not None
    while not _stop_event.is_set():
        submission = await _queue.get()
        try:
            await process_submission(_intake, submission)
        except Exception:
            logger.exception("Unhandled error in bid feed")
        finally:
            _queue.task_done()
