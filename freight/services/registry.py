"""
Booking Registry
================

Single owner of booking state.  Every booking lives in one dict keyed by
id; creation order is kept separately, newest first.

Concurrency model
-----------------
* One asyncio event loop owns the state; callers may be many concurrent
  tasks (drivers bidding, a customer accepting).
* Writes go through ``apply``: the booking's ``asyncio.Lock`` is taken,
  the command runs synchronously against a *working copy*, the copy is
  persisted, and only then swapped in.  A failing command or store leaves
  the committed booking untouched.
* ``apply`` is shielded: once invoked, cancelling the caller does not
  abort the write half-way.  A write whose caller went away still notifies
  listeners, or logs its failure.
* Reads never take a lock and always hand out snapshot copies.
* Listeners run after commit, outside the lock; their errors are logged
  and never reach the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import Callable, Optional, TypeVar

from freight.domain.entities import Booking, BookingSpec
from freight.domain.enums import BookingStatus
from freight.domain.exceptions import BookingNotFoundError
from freight.domain.validation import validate_booking_spec
from freight.infrastructure.stores import BookingStore, MemoryBookingStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

BookingListener = Callable[[Booking], None]

JOB_STATUSES = frozenset({BookingStatus.ACCEPTED, BookingStatus.IN_PROGRESS})


class BookingRegistry:
    def __init__(self, store: BookingStore | None = None):
        self._store = store or MemoryBookingStore()
        self._bookings: dict[str, Booking] = {}
        self._order: list[str] = []
        self._locks: dict[str, asyncio.Lock] = {}
        self._listeners: list[BookingListener] = []

    # ── Lifecycle ─────────────────────────────────────────────────────

    async def hydrate(self) -> int:
        """Load persisted history into memory.  Returns the number loaded."""
        bookings = await self._store.load_all()
        for booking in bookings:
            self._track(booking)
        if bookings:
            logger.info("Registry hydrated with %d bookings", len(bookings))
        return len(bookings)

    def add_listener(self, listener: BookingListener) -> None:
        self._listeners.append(listener)

    # ── Commands ──────────────────────────────────────────────────────

    async def create_booking(
        self,
        spec: BookingSpec,
        customer_id: str,
        hold_for_triage: bool = False,
    ) -> Booking:
        validate_booking_spec(spec)
        status = BookingStatus.PENDING if hold_for_triage else BookingStatus.BIDDING
        booking = Booking.from_spec(spec, customer_id, status=status)
        await self._store.save(booking)
        self._track(booking)
        logger.info(
            "Booking %s created for customer %s (%s)",
            booking.id,
            customer_id,
            status.value,
        )
        snapshot = booking.snapshot()
        self._notify(snapshot)
        return snapshot

    async def apply(
        self, booking_id: str, command: Callable[[Booking], T]
    ) -> tuple[T, Booking]:
        """Run *command* against the booking atomically.

        Returns the command's result and a snapshot of the committed booking.
        Any exception raised by *command* propagates and nothing is committed.
        """
        if booking_id not in self._bookings:
            raise BookingNotFoundError(booking_id)
        write = asyncio.ensure_future(self._apply(booking_id, command))
        try:
            result, committed = await asyncio.shield(write)
        except asyncio.CancelledError:
            # the write keeps running without an awaiter
            write.add_done_callback(self._finish_abandoned_write)
            raise
        self._notify(committed.snapshot())
        return result, committed.snapshot()

    async def _apply(
        self, booking_id: str, command: Callable[[Booking], T]
    ) -> tuple[T, Booking]:
        async with self._locks[booking_id]:
            working = self._bookings[booking_id].snapshot()
            result = command(working)
            await self._store.save(working)
            self._bookings[booking_id] = working
            return result, working

    def _finish_abandoned_write(self, write: asyncio.Future) -> None:
        if write.cancelled():
            return
        error = write.exception()
        if error is not None:
            logger.error("Write abandoned by its caller failed", exc_info=error)
            return
        _, committed = write.result()
        self._notify(committed.snapshot())

    # ── Queries ───────────────────────────────────────────────────────

    def get_booking(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking.snapshot()

    def list_bookings(self) -> list[Booking]:
        """All bookings, newest first."""
        return [self._bookings[i].snapshot() for i in self._order]

    def list_open_bookings(self) -> list[Booking]:
        return [
            self._bookings[i].snapshot()
            for i in self._order
            if self._bookings[i].is_open_for_bidding
        ]

    def find_active_booking_for_customer(self, customer_id: str) -> Optional[Booking]:
        """The customer's most recently created booking that is not COMPLETED."""
        for booking_id in self._order:
            booking = self._bookings[booking_id]
            if (
                booking.customer_id == customer_id
                and booking.status != BookingStatus.COMPLETED
            ):
                return booking.snapshot()
        return None

    def find_current_job_for_driver(self, driver_id: str) -> Optional[Booking]:
        """Newest ACCEPTED / IN_PROGRESS booking won by *driver_id*."""
        for booking_id in self._order:
            booking = self._bookings[booking_id]
            if booking.status not in JOB_STATUSES:
                continue
            winner = booking.accepted_bid
            if winner is not None and winner.driver_id == driver_id:
                return booking.snapshot()
        return None

    def stats(self) -> dict[str, int]:
        counts = Counter(b.status.value for b in self._bookings.values())
        out = {status.value: counts.get(status.value, 0) for status in BookingStatus}
        out["total_bookings"] = len(self._bookings)
        out["total_bids"] = sum(len(b.bids) for b in self._bookings.values())
        return out

    # ── Internals ─────────────────────────────────────────────────────

    def _track(self, booking: Booking) -> None:
        known = booking.id in self._bookings
        self._bookings[booking.id] = booking
        if not known:
            self._order.insert(0, booking.id)
            self._locks[booking.id] = asyncio.Lock()

    def _notify(self, snapshot: Booking) -> None:
        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Booking listener failed for %s", snapshot.id)
