"""Wiring of repositories and services for one running application."""

from datetime import datetime
from typing import Callable

from kitchen_ops.catalog import RecipeCatalog, default_catalog
from kitchen_ops.config import Settings
from kitchen_ops.models.kitchen import KitchenSettings
from kitchen_ops.services.end_of_day import EndOfDayProcessor
from kitchen_ops.services.queue import QueueEstimator, local_now
from kitchen_ops.services.reporting import NotificationSchedule
from kitchen_ops.services.resolver import IngredientResolver
from kitchen_ops.services.usage import UsageCalculator
from kitchen_ops.services.waste import WasteTracker
from kitchen_ops.state import (
    InMemoryNotificationLogRepository,
    InMemoryOrderRepository,
    InMemorySettingsRepository,
    InMemoryStockRepository,
    InMemoryWasteRepository,
    NotificationLogRepository,
    OrderRepository,
    RedisNotificationLogRepository,
    RedisOrderRepository,
    RedisSettingsRepository,
    RedisStockRepository,
    RedisWasteRepository,
    SettingsRepository,
    StateManager,
    StockRepository,
    WasteRepository,
)
from kitchen_ops.utils.logging import get_logger

logger = get_logger(__name__)


def kitchen_defaults(settings: Settings) -> KitchenSettings:
    """Kitchen settings used until staff save their own."""
    return KitchenSettings(
        base_prep_minutes=settings.base_prep_minutes,
        batch_capacity=settings.batch_capacity,
        rush_multiplier=settings.rush_multiplier,
        rush_hour_multiplier=settings.rush_hour_multiplier,
        predictive_enabled=settings.predictive_enabled,
    )


class ServiceContainer:
    """Holds the repositories and the services built on them."""

    def __init__(
        self,
        settings: Settings,
        stock: StockRepository,
        orders: OrderRepository,
        kitchen_settings: SettingsRepository,
        notifications: NotificationLogRepository,
        waste: WasteRepository | None = None,
        catalog: RecipeCatalog | None = None,
        clock: Callable[[], datetime] = local_now,
        state_manager: StateManager | None = None,
    ):
        self.settings = settings
        self.stock = stock
        self.orders = orders
        self.kitchen_settings = kitchen_settings
        self.notifications = notifications
        self.waste = waste or InMemoryWasteRepository()
        self.state_manager = state_manager
        self.clock = clock

        self.catalog = catalog or default_catalog()
        self.resolver = IngredientResolver(self.catalog)
        self.calculator = UsageCalculator(self.catalog, self.resolver)
        self.queue = QueueEstimator(
            order_source=orders,
            settings_repository=kitchen_settings,
            clock=clock,
            catalog=self.catalog,
            default_settings=kitchen_defaults(settings),
            delay_threshold=settings.delay_threshold_minutes,
        )
        self.end_of_day = EndOfDayProcessor(
            stock_repository=stock,
            calculator=self.calculator,
            notification_log=notifications,
            schedule=NotificationSchedule(
                hour=settings.notification_hour,
                minute=settings.notification_minute,
                enabled=settings.notifications_enabled,
            ),
            recipient=settings.manager_email,
            default_threshold=settings.default_low_stock_threshold,
            order_repository=orders,
            waste_repository=self.waste,
        )
        self.waste_tracker = WasteTracker(orders, self.waste, self.calculator)

    async def start(self) -> None:
        """Connect storage, start the queue and push the current orders."""
        if self.state_manager is not None:
            await self.state_manager.connect()
        await self.queue.start()
        await self.orders.refresh()
        logger.info("services_started", backend=self.settings.storage_backend)

    async def stop(self) -> None:
        self.queue.stop()
        if self.state_manager is not None:
            await self.state_manager.disconnect()
        logger.info("services_stopped")


def build_container(
    settings: Settings,
    clock: Callable[[], datetime] = local_now,
) -> ServiceContainer:
    """Create a container for the configured storage backend."""
    retention = settings.notification_log_retention_days

    if settings.storage_backend == "memory":
        return ServiceContainer(
            settings=settings,
            stock=InMemoryStockRepository(),
            orders=InMemoryOrderRepository(),
            kitchen_settings=InMemorySettingsRepository(),
            notifications=InMemoryNotificationLogRepository(retention),
            waste=InMemoryWasteRepository(),
            clock=clock,
        )

    state = StateManager(settings.redis_url)
    return ServiceContainer(
        settings=settings,
        stock=RedisStockRepository(state),
        orders=RedisOrderRepository(state),
        kitchen_settings=RedisSettingsRepository(state),
        notifications=RedisNotificationLogRepository(state, retention),
        waste=RedisWasteRepository(state),
        clock=clock,
        state_manager=state,
    )
