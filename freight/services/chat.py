"""
Booking-scoped chat.

Chat is a side channel: it reads booking snapshots to decide whether the
conversation is open but never changes booking state.  It opens once a bid
is accepted and stays open while the job is ACCEPTED or IN_PROGRESS.
Delivery problems are logged and never surface as engine errors.
"""

from __future__ import annotations

import asyncio
import logging

from freight.domain.entities import ChatMessage
from freight.domain.enums import SenderRole
from freight.domain.exceptions import InvalidStateError, ValidationError
from freight.infrastructure.chat import ChatChannel
from freight.services.registry import JOB_STATUSES, BookingRegistry

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000


class ChatService:
    def __init__(
        self,
        registry: BookingRegistry,
        channel: ChatChannel,
        delivery_timeout: float = 2.0,
    ):
        self.registry = registry
        self.channel = channel
        self.delivery_timeout = delivery_timeout

    def is_open(self, booking_id: str) -> bool:
        booking = self.registry.get_booking(booking_id)
        return booking.accepted_bid_id is not None and booking.status in JOB_STATUSES

    async def send(
        self, booking_id: str, sender_role: SenderRole, text: str
    ) -> ChatMessage:
        text = (text or "").strip()
        if not text:
            raise ValidationError("Message text must not be empty")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise ValidationError(f"Message longer than {MAX_MESSAGE_LENGTH} characters")
        if not self.is_open(booking_id):
            raise InvalidStateError(
                f"Chat for booking {booking_id} opens once a bid is accepted"
            )

        message = ChatMessage(booking_id=booking_id, sender_role=sender_role, text=text)
        try:
            await asyncio.wait_for(
                self.channel.publish(booking_id, message),
                timeout=self.delivery_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Chat delivery timed out for booking %s", booking_id)
        except Exception:
            logger.warning(
                "Chat delivery failed for booking %s", booking_id, exc_info=True
            )
        return message

    async def history(self, booking_id: str) -> list[ChatMessage]:
        self.registry.get_booking(booking_id)
        try:
            return await asyncio.wait_for(
                self.channel.history(booking_id), timeout=self.delivery_timeout
            )
        except Exception:
            logger.warning(
                "Chat history unavailable for booking %s", booking_id, exc_info=True
            )
            return []
