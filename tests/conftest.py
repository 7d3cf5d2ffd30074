"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from kitchen_ops.catalog import RecipeCatalog, default_catalog
from kitchen_ops.config import Settings
from kitchen_ops.main import create_app
from kitchen_ops.models.inventory import StockEntry, StockSnapshot
from kitchen_ops.models.kitchen import KitchenSettings
from kitchen_ops.models.order import Order, OrderStatus, PizzaLine
from kitchen_ops.services.container import ServiceContainer
from kitchen_ops.services.queue import QueueEstimator
from kitchen_ops.services.resolver import IngredientResolver
from kitchen_ops.services.usage import UsageCalculator
from kitchen_ops.state import (
    InMemoryNotificationLogRepository,
    InMemoryOrderRepository,
    InMemorySettingsRepository,
    InMemoryStockRepository,
)

# A quiet Tuesday morning: no historical pattern for this hour
TUESDAY_MORNING = datetime(2026, 10, 13, 10, 0, tzinfo=timezone.utc)


def build_order(*lines: tuple[str, int], minutes_ago: int = 0, **fields) -> Order:
    """Order with pizza lines given as (name, quantity) pairs."""
    return Order(
        pizzas=[PizzaLine(pizza_type=name, quantity=quantity) for name, quantity in lines],
        created_at=TUESDAY_MORNING - timedelta(minutes=minutes_ago),
        **fields,
    )


# Catalog fixtures


@pytest.fixture
def catalog() -> RecipeCatalog:
    """The shop's menu."""
    return default_catalog()


@pytest.fixture
def resolver(catalog: RecipeCatalog) -> IngredientResolver:
    return IngredientResolver(catalog)


@pytest.fixture
def calculator(catalog: RecipeCatalog, resolver: IngredientResolver) -> UsageCalculator:
    return UsageCalculator(catalog, resolver)


# Sample data fixtures


@pytest.fixture
def sample_snapshot() -> StockSnapshot:
    """Stock with one ingredient in each alert tier."""
    return {
        "shredded_mozzarella": StockEntry(amount=500, unit="g", category="cheese", threshold=200),
        "sourdough_dough": StockEntry(amount=40, unit="ball", category="dough", threshold=10),
        "tomato_sauce": StockEntry(amount=2000, unit="ml", category="sauce", threshold=500),
        "pepperoni": StockEntry(amount=0, unit="g", category="meat", threshold=300),
        "fresh_basil": StockEntry(amount=50, unit="g", category="herb", threshold=100),
    }


@pytest.fixture
def sample_order() -> Order:
    """Two Champs and a Margie, straight out of the oven."""
    return build_order(
        ("THE CHAMP", 2),
        ("MARGIE", 1),
        customer_name="Test Customer",
        status=OrderStatus.READY,
        cooked=[True, True],
    )


@pytest.fixture
def make_order() -> Callable[..., Order]:
    """Factory for orders placed relative to the fixed clock."""
    return build_order


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: TUESDAY_MORNING


@pytest.fixture
def kitchen_settings() -> KitchenSettings:
    """Normal staffing without historical adjustments."""
    return KitchenSettings(base_prep_minutes=10, batch_capacity=3, predictive_enabled=False)


# Repository fixtures


@pytest.fixture
def order_repository() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def settings_repository(kitchen_settings: KitchenSettings) -> InMemorySettingsRepository:
    return InMemorySettingsRepository(settings=kitchen_settings)


@pytest_asyncio.fixture
async def queue(
    order_repository: InMemoryOrderRepository,
    settings_repository: InMemorySettingsRepository,
    catalog: RecipeCatalog,
    clock: Callable[[], datetime],
) -> AsyncGenerator[QueueEstimator, None]:
    """A running queue estimator fed by the in-memory order repository."""
    estimator = QueueEstimator(
        order_source=order_repository,
        settings_repository=settings_repository,
        clock=clock,
        catalog=catalog,
    )
    await estimator.start()
    await order_repository.refresh()
    yield estimator
    estimator.stop()


# Application fixtures


@pytest.fixture
def app_settings() -> Settings:
    """Settings for an application backed by memory."""
    return Settings(
        storage_backend="memory",
        predictive_enabled=False,
        default_low_stock_threshold=10,
    )


@pytest.fixture
def container(
    app_settings: Settings,
    sample_snapshot: StockSnapshot,
    clock: Callable[[], datetime],
) -> ServiceContainer:
    """Services over in-memory repositories seeded with sample stock."""
    return ServiceContainer(
        settings=app_settings,
        stock=InMemoryStockRepository(sample_snapshot),
        orders=InMemoryOrderRepository(),
        kitchen_settings=InMemorySettingsRepository(),
        notifications=InMemoryNotificationLogRepository(),
        clock=clock,
    )


@pytest_asyncio.fixture
async def test_client(container: ServiceContainer) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client around running services."""
    app = create_app(container)
    # ASGITransport does not run the lifespan handler
    await container.start()
    app.state.container = container
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    await container.stop()
