"""Builds the object graph from settings; one container per application."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from freight.config import Settings
from freight.domain.costs import TripCostCalculator
from freight.infrastructure.advisory import AdvisoryProvider, MockAdvisor, OpenAIAdvisor
from freight.infrastructure.chat import ChatChannel, MemoryChatChannel, RedisChatChannel
from freight.infrastructure.database import build_engine, build_session_factory
from freight.infrastructure.demo_data import demo_trucks
from freight.infrastructure.redis_client import get_redis
from freight.infrastructure.stores import (
    BookingStore,
    FleetStore,
    MemoryBookingStore,
    MemoryFleetStore,
    SqlBookingStore,
    SqlFleetStore,
)
from freight.services.advisory import AdvisoryService
from freight.services.bid_intake import BidIntakeService
from freight.services.chat import ChatService
from freight.services.fleet import FleetRegistry
from freight.services.lifecycle import TripLifecycleService
from freight.services.registry import BookingRegistry
from freight.services.selection import SelectionService

logger = logging.getLogger(__name__)


@dataclass
class Container:
    settings: Settings
    registry: BookingRegistry
    intake: BidIntakeService
    selection: SelectionService
    lifecycle: TripLifecycleService
    fleet: FleetRegistry
    chat: ChatService
    advisory: AdvisoryService
    costs: TripCostCalculator
    engine: Optional[AsyncEngine] = field(default=None)


def _build_advisory_provider(
    settings: Settings, costs: TripCostCalculator
) -> Optional[AdvisoryProvider]:
    if settings.advisory_provider == "openai":
        if not (settings.openai_api_key and settings.openai_api_key.strip()):
            return None
        return OpenAIAdvisor(settings.openai_api_key, settings.openai_model)
    return MockAdvisor(costs)


def _build_chat_channel(settings: Settings) -> ChatChannel:
    if settings.chat_provider == "redis":
        return RedisChatChannel(get_redis())
    return MemoryChatChannel()


def build_container(settings: Settings) -> Container:
    engine: Optional[AsyncEngine] = None
    booking_store: BookingStore
    fleet_store: FleetStore
    if settings.store_provider == "sql":
        engine = build_engine(settings.database_url)
        factory = build_session_factory(engine)
        booking_store = SqlBookingStore(factory)
        fleet_store = SqlFleetStore(factory)
    else:
        booking_store = MemoryBookingStore()
        fleet_store = MemoryFleetStore()

    costs = TripCostCalculator.from_settings(settings)
    registry = BookingRegistry(booking_store)
    return Container(
        settings=settings,
        registry=registry,
        intake=BidIntakeService(registry),
        selection=SelectionService(registry),
        lifecycle=TripLifecycleService(registry),
        fleet=FleetRegistry(fleet_store, warning_days=settings.maintenance_warning_days),
        chat=ChatService(
            registry,
            _build_chat_channel(settings),
            delivery_timeout=settings.chat_delivery_timeout_seconds,
        ),
        advisory=AdvisoryService(
            _build_advisory_provider(settings, costs),
            timeout=settings.advisory_timeout_seconds,
        ),
        costs=costs,
        engine=engine,
    )


async def startup(container: Container) -> None:
    """Load persisted state and seed the demo fleet on an empty store."""
    await container.registry.hydrate()
    if not await container.fleet.hydrate() and container.settings.seed_demo_fleet:
        await container.fleet.register(demo_trucks(date.today()))
        logger.info("Seeded demo fleet")


async def shutdown(container: Container) -> None:
    if container.engine is not None:
        await container.engine.dispose()
