"""
Engine error kinds.

All of them are local and recoverable: the caller surfaces the message and
may retry.  The API layer maps them onto HTTP status codes.
"""


class FreightError(Exception):
    """Base class for every error raised by the booking engine."""


class BookingNotFoundError(FreightError):
    def __init__(self, booking_id: str):
        super().__init__(f"Booking not found: {booking_id}")
        self.booking_id = booking_id


class BidNotFoundError(FreightError):
    def __init__(self, booking_id: str, bid_id: str):
        super().__init__(f"Bid {bid_id} not found on booking {booking_id}")
        self.booking_id = booking_id
        self.bid_id = bid_id


class TruckNotFoundError(FreightError):
    def __init__(self, truck_id: str):
        super().__init__(f"Truck not found: {truck_id}")
        self.truck_id = truck_id


class InvalidStateError(FreightError):
    """Raised on an illegal status transition or a bid against a closed booking."""


class ValidationError(FreightError):
    """Raised on malformed input (non-positive amounts, out-of-range ratings...)."""
