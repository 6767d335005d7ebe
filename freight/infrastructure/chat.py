"""
Chat channel adapters.

A channel accepts ``(booking_id, message)`` and delivers it to every
listener of that booking.  The engine never reads message content; it only
needs messages scoped per booking and returned in timestamp order.

* ``MemoryChatChannel`` -- single process, asyncio queues per listener.
* ``RedisChatChannel``  -- PUBLISH on ``chat:{booking_id}`` for live
  listeners plus an RPUSH history list so late joiners can catch up.
"""

from __future__ import annotations

import asyncio
import json
from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import datetime
from typing import AsyncIterator

import redis.asyncio as aioredis

from freight.domain.entities import ChatMessage
from freight.domain.enums import SenderRole


def encode_message(message: ChatMessage) -> str:
    return json.dumps(
        {
            "id": message.id,
            "booking_id": message.booking_id,
            "sender_role": message.sender_role.value,
            "text": message.text,
            "timestamp": message.timestamp.isoformat(),
        }
    )


def decode_message(raw: str) -> ChatMessage:
    data = json.loads(raw)
    return ChatMessage(
        id=data["id"],
        booking_id=data["booking_id"],
        sender_role=SenderRole(data["sender_role"]),
        text=data["text"],
        timestamp=datetime.fromisoformat(data["timestamp"]),
    )


class ChatChannel(ABC):
    @abstractmethod
    async def publish(self, booking_id: str, message: ChatMessage) -> None: ...

    @abstractmethod
    async def history(self, booking_id: str) -> list[ChatMessage]:
        """Messages for *booking_id*, ordered by timestamp."""

    @abstractmethod
    def listen(self, booking_id: str) -> AsyncIterator[ChatMessage]: ...


class MemoryChatChannel(ChatChannel):
    def __init__(self) -> None:
        self._history: dict[str, list[ChatMessage]] = defaultdict(list)
        self._listeners: dict[str, set[asyncio.Queue]] = defaultdict(set)

    async def publish(self, booking_id: str, message: ChatMessage) -> None:
        self._history[booking_id].append(message)
        for queue in list(self._listeners[booking_id]):
            queue.put_nowait(message)

    async def history(self, booking_id: str) -> list[ChatMessage]:
        return sorted(self._history.get(booking_id, []), key=lambda m: m.timestamp)

    async def listen(self, booking_id: str) -> AsyncIterator[ChatMessage]:
        queue: asyncio.Queue = asyncio.Queue()
        self._listeners[booking_id].add(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._listeners[booking_id].discard(queue)


class RedisChatChannel(ChatChannel):
    def __init__(self, client: aioredis.Redis, history_limit: int = 500):
        self.redis = client
        self.history_limit = history_limit

    @staticmethod
    def channel_key(booking_id: str) -> str:
        return f"chat:{booking_id}"

    @staticmethod
    def history_key(booking_id: str) -> str:
        return f"chat:history:{booking_id}"

    async def publish(self, booking_id: str, message: ChatMessage) -> None:
        payload = encode_message(message)
        key = self.history_key(booking_id)
        await self.redis.rpush(key, payload)
        await self.redis.ltrim(key, -self.history_limit, -1)
        await self.redis.publish(self.channel_key(booking_id), payload)

    async def history(self, booking_id: str) -> list[ChatMessage]:
        raw = await self.redis.lrange(self.history_key(booking_id), 0, -1)
        return sorted((decode_message(r) for r in raw), key=lambda m: m.timestamp)

    async def listen(self, booking_id: str) -> AsyncIterator[ChatMessage]:
        pubsub = self.redis.pubsub()
        await pubsub.subscribe(self.channel_key(booking_id))
        try:
            async for event in pubsub.listen():
                if event.get("type") == "message":
                    yield decode_message(event["data"])
        finally:
            await pubsub.unsubscribe(self.channel_key(booking_id))
            await pubsub.aclose()
