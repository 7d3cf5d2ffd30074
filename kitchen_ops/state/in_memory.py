"""Process-local repositories for tests and the memory backend."""

from datetime import datetime, timezone
from typing import Iterable

from kitchen_ops.models.inventory import StockSnapshot
from kitchen_ops.models.kitchen import HistoricalPatterns, KitchenSettings
from kitchen_ops.models.order import Order
from kitchen_ops.models.report import NotificationLogEntry
from kitchen_ops.models.waste import WasteRecord
from kitchen_ops.services.reporting import prune_log
from kitchen_ops.state.repositories import (
    NotificationLogRepository,
    OrderRepository,
    SettingsRepository,
    StockRepository,
    WasteRepository,
)


def _copy(snapshot: StockSnapshot) -> StockSnapshot:
    return {ingredient: entry.model_copy() for ingredient, entry in snapshot.items()}


class InMemoryStockRepository(StockRepository):
    def __init__(self, snapshot: StockSnapshot | None = None) -> None:
        self.snapshot: StockSnapshot = _copy(snapshot or {})
        self.prior: StockSnapshot | None = None

    async def load(self) -> StockSnapshot:
        return _copy(self.snapshot)

    async def save(self, snapshot: StockSnapshot) -> None:
        self.snapshot = _copy(snapshot)

    async def load_prior(self) -> StockSnapshot | None:
        return _copy(self.prior) if self.prior is not None else None

    async def save_prior(self, snapshot: StockSnapshot) -> None:
        self.prior = _copy(snapshot)


class InMemoryOrderRepository(OrderRepository):
    def __init__(self, orders: list[Order] | None = None) -> None:
        super().__init__()
        self.active: dict[str, Order] = {order.id: order for order in orders or []}
        self.archived: dict[str, Order] = {}

    async def list_active(self) -> list[Order]:
        return sorted(self.active.values(), key=lambda order: order.created_at)

    async def get(self, order_id: str) -> Order | None:
        return self.active.get(order_id) or self.archived.get(order_id)

    async def save(self, order: Order) -> None:
        self.active[order.id] = order
        await self.refresh()

    async def archive(self, order_id: str) -> Order:
        order = self.active.pop(order_id)
        self.archived[order_id] = order
        await self.refresh()
        return order

    async def list_archived(self, limit: int = 100) -> list[Order]:
        # Insertion order is archive order
        return list(reversed(list(self.archived.values())))[:limit]

    async def delete(self, order_id: str) -> Order:
        order = self.active.pop(order_id)
        await self.refresh()
        return order

    async def mark_deducted(self, order_ids: Iterable[str], at: datetime) -> list[str]:
        stamped = []
        active_changed = False
        for order_id in order_ids:
            for store in (self.active, self.archived):
                if order_id in store:
                    store[order_id] = store[order_id].model_copy(update={"deducted_at": at})
                    stamped.append(order_id)
                    active_changed = active_changed or store is self.active
                    break
        if active_changed:
            await self.refresh()
        return stamped


class InMemorySettingsRepository(SettingsRepository):
    def __init__(
        self,
        settings: KitchenSettings | None = None,
        patterns: HistoricalPatterns | None = None,
    ) -> None:
        self.settings = settings
        self.patterns = patterns

    async def load(self) -> KitchenSettings | None:
        return self.settings

    async def save(self, settings: KitchenSettings) -> None:
        self.settings = settings

    async def load_patterns(self) -> HistoricalPatterns | None:
        return self.patterns

    async def save_patterns(self, patterns: HistoricalPatterns) -> None:
        self.patterns = patterns


class InMemoryNotificationLogRepository(NotificationLogRepository):
    def __init__(self, retention_days: int = 30) -> None:
        super().__init__(retention_days)
        self.entries: list[NotificationLogEntry] = []

    async def append(self, entry: NotificationLogEntry) -> None:
        self.entries = prune_log(
            [*self.entries, entry],
            retention_days=self.retention_days,
            now=datetime.now(timezone.utc),
        )

    async def recent(self, limit: int = 50) -> list[NotificationLogEntry]:
        ordered = sorted(self.entries, key=lambda entry: entry.timestamp, reverse=True)
        return ordered[:limit]


class InMemoryWasteRepository(WasteRepository):
    def __init__(self, records: list[WasteRecord] | None = None) -> None:
        self.records: dict[str, WasteRecord] = {record.id: record for record in records or []}

    async def save(self, record: WasteRecord) -> None:
        self.records[record.id] = record

    async def get(self, record_id: str) -> WasteRecord | None:
        return self.records.get(record_id)

    async def recent(self, limit: int | None = 50) -> list[WasteRecord]:
        ordered = sorted(self.records.values(), key=lambda record: record.timestamp, reverse=True)
        return ordered if limit is None else ordered[:limit]
