"""Redis-backed repositories."""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Iterable

from pydantic import ValidationError
from redis.exceptions import RedisError

from kitchen_ops.models.inventory import StockSnapshot, snapshot_from_raw, snapshot_to_raw
from kitchen_ops.models.kitchen import HistoricalPatterns, KitchenSettings
from kitchen_ops.models.order import Order
from kitchen_ops.models.report import NotificationLogEntry
from kitchen_ops.models.waste import WasteRecord
from kitchen_ops.state.manager import StateManager
from kitchen_ops.state.repositories import (
    NotificationLogRepository,
    OrderRepository,
    PersistenceError,
    SettingsRepository,
    StockRepository,
    WasteRepository,
)
from kitchen_ops.utils.logging import get_logger

logger = get_logger(__name__)

STOCK_KEY = "kitchen:stock"
PRIOR_STOCK_KEY = "kitchen:stock:prior"
ACTIVE_ORDERS_KEY = "kitchen:orders:active"
ARCHIVED_ORDERS_KEY = "kitchen:orders:archived"
ARCHIVE_INDEX_KEY = "kitchen:orders:archived:index"
SETTINGS_KEY = "kitchen:settings"
PATTERNS_KEY = "kitchen:patterns"
NOTIFICATION_LOG_KEY = "kitchen:notifications"
WASTE_KEY = "kitchen:waste"
WASTE_INDEX_KEY = "kitchen:waste:index"


@asynccontextmanager
async def redis_guard(operation: str) -> AsyncIterator[None]:
    """Translate Redis failures into PersistenceError."""
    try:
        yield
    except RedisError as e:
        logger.error("persistence_failed", operation=operation, error=str(e))
        raise PersistenceError(operation, e) from e


def _order_or_none(order_id: str, data: dict | None) -> Order | None:
    if not data:
        return None
    try:
        return Order.model_validate(data)
    except ValidationError as e:
        logger.warning("stored_order_invalid", order_id=order_id, error=str(e))
        return None


class RedisStockRepository(StockRepository):
    def __init__(self, state: StateManager) -> None:
        self.state = state

    async def load(self) -> StockSnapshot:
        async with redis_guard("stock.load"):
            data = await self.state.get(STOCK_KEY)
        return snapshot_from_raw(data if isinstance(data, dict) else None)

    async def save(self, snapshot: StockSnapshot) -> None:
        async with redis_guard("stock.save"):
            await self.state.set(STOCK_KEY, snapshot_to_raw(snapshot))
        logger.info("stock_saved", ingredients=len(snapshot))

    async def load_prior(self) -> StockSnapshot | None:
        async with redis_guard("stock.load_prior"):
            data = await self.state.get(PRIOR_STOCK_KEY)
        return snapshot_from_raw(data) if isinstance(data, dict) else None

    async def save_prior(self, snapshot: StockSnapshot) -> None:
        async with redis_guard("stock.save_prior"):
            await self.state.set(PRIOR_STOCK_KEY, snapshot_to_raw(snapshot))


class RedisOrderRepository(OrderRepository):
    def __init__(self, state: StateManager) -> None:
        super().__init__()
        self.state = state

    async def list_active(self) -> list[Order]:
        async with redis_guard("orders.list_active"):
            data = await self.state.hgetall(ACTIVE_ORDERS_KEY)
        orders = [
            order
            for order_id, raw in data.items()
            if (order := _order_or_none(order_id, raw)) is not None
        ]
        return sorted(orders, key=lambda order: order.created_at)

    async def get(self, order_id: str) -> Order | None:
        async with redis_guard("orders.get"):
            raw = await self.state.hget(ACTIVE_ORDERS_KEY, order_id)
            if raw is None:
                raw = await self.state.hget(ARCHIVED_ORDERS_KEY, order_id)
        return _order_or_none(order_id, raw)

    async def save(self, order: Order) -> None:
        async with redis_guard("orders.save"):
            await self.state.hset(ACTIVE_ORDERS_KEY, order.id, order.model_dump(mode="json"))
        await self.refresh()

    async def archive(self, order_id: str) -> Order:
        async with redis_guard("orders.archive"):
            raw = await self.state.hget(ACTIVE_ORDERS_KEY, order_id)
            order = _order_or_none(order_id, raw)
            if order is None:
                raise KeyError(order_id)
            await self.state.hset(ARCHIVED_ORDERS_KEY, order_id, order.model_dump(mode="json"))
            await self.state.zadd(
                ARCHIVE_INDEX_KEY, {order_id: datetime.now(timezone.utc).timestamp()}
            )
            await self.state.hdel(ACTIVE_ORDERS_KEY, order_id)
        logger.info("order_archived", order_id=order_id)
        await self.refresh()
        return order

    async def list_archived(self, limit: int = 100) -> list[Order]:
        async with redis_guard("orders.list_archived"):
            order_ids = await self.state.zrevrange(ARCHIVE_INDEX_KEY, 0, limit - 1)
            orders = []
            for order_id in order_ids:
                order = _order_or_none(
                    order_id, await self.state.hget(ARCHIVED_ORDERS_KEY, order_id)
                )
                if order is not None:
                    orders.append(order)
        return orders

    async def delete(self, order_id: str) -> Order:
        async with redis_guard("orders.delete"):
            raw = await self.state.hget(ACTIVE_ORDERS_KEY, order_id)
            order = _order_or_none(order_id, raw)
            if order is None:
                raise KeyError(order_id)
            await self.state.hdel(ACTIVE_ORDERS_KEY, order_id)
        logger.info("order_deleted", order_id=order_id)
        await self.refresh()
        return order

    async def mark_deducted(self, order_ids: Iterable[str], at: datetime) -> list[str]:
        stamped = []
        active_changed = False
        async with redis_guard("orders.mark_deducted"):
            for order_id in order_ids:
                for key in (ACTIVE_ORDERS_KEY, ARCHIVED_ORDERS_KEY):
                    order = _order_or_none(order_id, await self.state.hget(key, order_id))
                    if order is None:
                        continue
                    order = order.model_copy(update={"deducted_at": at})
                    await self.state.hset(key, order_id, order.model_dump(mode="json"))
                    stamped.append(order_id)
                    active_changed = active_changed or key == ACTIVE_ORDERS_KEY
                    break
        if active_changed:
            await self.refresh()
        return stamped


class RedisSettingsRepository(SettingsRepository):
    def __init__(self, state: StateManager) -> None:
        self.state = state

    async def load(self) -> KitchenSettings | None:
        async with redis_guard("settings.load"):
            data = await self.state.get(SETTINGS_KEY)
        return KitchenSettings(**data) if isinstance(data, dict) else None

    async def save(self, settings: KitchenSettings) -> None:
        async with redis_guard("settings.save"):
            await self.state.set(SETTINGS_KEY, settings.model_dump(mode="json"))

    async def load_patterns(self) -> HistoricalPatterns | None:
        async with redis_guard("patterns.load"):
            data = await self.state.get(PATTERNS_KEY)
        return HistoricalPatterns(**data) if isinstance(data, dict) else None

    async def save_patterns(self, patterns: HistoricalPatterns) -> None:
        async with redis_guard("patterns.save"):
            await self.state.set(PATTERNS_KEY, patterns.model_dump(mode="json"))


class RedisNotificationLogRepository(NotificationLogRepository):
    """Entries live in a sorted set scored by timestamp."""

    def __init__(self, state: StateManager, retention_days: int = 30) -> None:
        super().__init__(retention_days)
        self.state = state

    async def append(self, entry: NotificationLogEntry) -> None:
        cutoff = datetime.now(timezone.utc) - timedelta(days=self.retention_days)
        async with redis_guard("notifications.append"):
            await self.state.zadd(
                NOTIFICATION_LOG_KEY,
                {entry.model_dump_json(): entry.timestamp.timestamp()},
            )
            await self.state.zremrangebyscore(
                NOTIFICATION_LOG_KEY, "-inf", f"({cutoff.timestamp()}"
            )

    async def recent(self, limit: int = 50) -> list[NotificationLogEntry]:
        async with redis_guard("notifications.list"):
            members = await self.state.zrevrange(NOTIFICATION_LOG_KEY, 0, limit - 1)
        return [NotificationLogEntry.model_validate_json(member) for member in members]


class RedisWasteRepository(WasteRepository):
    """Records live in a hash, indexed by a sorted set scored by timestamp."""

    def __init__(self, state: StateManager) -> None:
        self.state = state

    async def save(self, record: WasteRecord) -> None:
        async with redis_guard("waste.save"):
            await self.state.hset(WASTE_KEY, record.id, record.model_dump(mode="json"))
            await self.state.zadd(WASTE_INDEX_KEY, {record.id: record.timestamp.timestamp()})

    async def get(self, record_id: str) -> WasteRecord | None:
        async with redis_guard("waste.get"):
            raw = await self.state.hget(WASTE_KEY, record_id)
        return WasteRecord.model_validate(raw) if raw else None

    async def recent(self, limit: int | None = 50) -> list[WasteRecord]:
        end = -1 if limit is None else limit - 1
        async with redis_guard("waste.list"):
            record_ids = await self.state.zrevrange(WASTE_INDEX_KEY, 0, end)
            records = []
            for record_id in record_ids:
                raw = await self.state.hget(WASTE_KEY, record_id)
                if raw:
                    records.append(WasteRecord.model_validate(raw))
        return records
