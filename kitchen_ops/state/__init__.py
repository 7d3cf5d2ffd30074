"""State management modules."""

from kitchen_ops.state.feed import SnapshotFeed
from kitchen_ops.state.in_memory import (
    InMemoryNotificationLogRepository,
    InMemoryOrderRepository,
    InMemorySettingsRepository,
    InMemoryStockRepository,
    InMemoryWasteRepository,
)
from kitchen_ops.state.manager import StateManager
from kitchen_ops.state.redis_store import (
    RedisNotificationLogRepository,
    RedisOrderRepository,
    RedisSettingsRepository,
    RedisStockRepository,
    RedisWasteRepository,
)
from kitchen_ops.state.repositories import (
    NotificationLogRepository,
    OrderRepository,
    PersistenceError,
    SettingsRepository,
    StockRepository,
    WasteRepository,
)

__all__ = [
    "StateManager",
    "SnapshotFeed",
    "PersistenceError",
    # Interfaces
    "StockRepository",
    "OrderRepository",
    "SettingsRepository",
    "NotificationLogRepository",
    "WasteRepository",
    # Redis
    "RedisStockRepository",
    "RedisOrderRepository",
    "RedisSettingsRepository",
    "RedisNotificationLogRepository",
    "RedisWasteRepository",
    # In-memory
    "InMemoryStockRepository",
    "InMemoryOrderRepository",
    "InMemorySettingsRepository",
    "InMemoryNotificationLogRepository",
    "InMemoryWasteRepository",
]
