"""Tests for service wiring."""

import pytest

from kitchen_ops.config import Settings
from kitchen_ops.services.container import ServiceContainer, build_container
from kitchen_ops.state import (
    InMemoryOrderRepository,
    InMemoryWasteRepository,
    RedisStockRepository,
    RedisWasteRepository,
)


def test_memory_backend() -> None:
    settings = Settings(
        storage_backend="memory",
        batch_capacity=4,
        notification_hour=21,
        manager_email="owner@example.com",
    )

    container = build_container(settings)

    assert isinstance(container.orders, InMemoryOrderRepository)
    assert container.state_manager is None
    assert container.queue.settings.batch_capacity == 4
    assert container.end_of_day.schedule.hour == 21
    assert container.end_of_day.recipient == "owner@example.com"
    assert isinstance(container.waste, InMemoryWasteRepository)
    assert container.end_of_day.waste_repository is container.waste
    assert container.end_of_day.order_repository is container.orders
    assert container.waste_tracker.orders is container.orders


def test_redis_backend_is_lazy() -> None:
    """Test that building the container does not connect to Redis."""
    container = build_container(Settings(storage_backend="redis", redis_url="redis://cache:6379/2"))

    assert isinstance(container.stock, RedisStockRepository)
    assert isinstance(container.waste, RedisWasteRepository)
    assert container.state_manager.redis_url == "redis://cache:6379/2"
    assert container.state_manager.redis_client is None


@pytest.mark.asyncio
async def test_start_pushes_orders_to_queue(container: ServiceContainer) -> None:
    await container.start()

    assert container.queue.started
    assert container.queue.orders == []

    await container.stop()
    assert not container.queue.started
