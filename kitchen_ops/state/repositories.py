"""Repository interfaces for everything the service persists."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Iterable

from kitchen_ops.models.inventory import StockSnapshot
from kitchen_ops.models.kitchen import HistoricalPatterns, KitchenSettings
from kitchen_ops.models.order import Order
from kitchen_ops.models.report import NotificationLogEntry
from kitchen_ops.models.waste import WasteRecord
from kitchen_ops.state.feed import SnapshotFeed


class PersistenceError(Exception):
    """A storage backend call failed."""

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Persistence operation '{operation}' failed{detail}")


class StockRepository(ABC):
    """Current stock levels plus the snapshot taken before the last deduction."""

    @abstractmethod
    async def load(self) -> StockSnapshot:
        raise NotImplementedError

    @abstractmethod
    async def save(self, snapshot: StockSnapshot) -> None:
        """Replace the whole snapshot."""
        raise NotImplementedError

    @abstractmethod
    async def load_prior(self) -> StockSnapshot | None:
        raise NotImplementedError

    @abstractmethod
    async def save_prior(self, snapshot: StockSnapshot) -> None:
        raise NotImplementedError


class OrderRepository(ABC):
    """Active and archived orders.

    Every write to the active set pushes the new active list to feed
    subscribers, which makes the repository an order source for the queue.
    """

    def __init__(self) -> None:
        self.feed: SnapshotFeed[list[Order]] = SnapshotFeed("orders")

    def subscribe(self, callback: Callable[[list[Order]], Any]) -> Callable[[], None]:
        return self.feed.subscribe(callback)

    async def refresh(self) -> list[Order]:
        """Publish the current active orders to subscribers."""
        orders = await self.list_active()
        self.feed.publish(orders)
        return orders

    @abstractmethod
    async def list_active(self) -> list[Order]:
        """Active orders, oldest first."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, order_id: str) -> Order | None:
        """Find an order among active then archived orders."""
        raise NotImplementedError

    @abstractmethod
    async def save(self, order: Order) -> None:
        """Create or replace one active order."""
        raise NotImplementedError

    @abstractmethod
    async def archive(self, order_id: str) -> Order:
        """Move an active order to the archive.

        Raises:
            KeyError: no active order with that id
        """
        raise NotImplementedError

    @abstractmethod
    async def list_archived(self, limit: int = 100) -> list[Order]:
        """Archived orders, most recently archived first."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, order_id: str) -> Order:
        """Remove an active order entirely.

        Raises:
            KeyError: no active order with that id
        """
        raise NotImplementedError

    @abstractmethod
    async def mark_deducted(self, order_ids: Iterable[str], at: datetime) -> list[str]:
        """Stamp active or archived orders as taken off stock.

        Returns the ids that were found and stamped.
        """
        raise NotImplementedError


class SettingsRepository(ABC):
    """Kitchen settings and historical demand patterns."""

    @abstractmethod
    async def load(self) -> KitchenSettings | None:
        raise NotImplementedError

    @abstractmethod
    async def save(self, settings: KitchenSettings) -> None:
        raise NotImplementedError

    @abstractmethod
    async def load_patterns(self) -> HistoricalPatterns | None:
        raise NotImplementedError

    @abstractmethod
    async def save_patterns(self, patterns: HistoricalPatterns) -> None:
        raise NotImplementedError


class NotificationLogRepository(ABC):
    """Audit trail of stock notifications, pruned to a retention window."""

    def __init__(self, retention_days: int = 30):
        self.retention_days = retention_days

    @abstractmethod
    async def append(self, entry: NotificationLogEntry) -> None:
        """Record an entry and drop entries past retention."""
        raise NotImplementedError

    @abstractmethod
    async def recent(self, limit: int = 50) -> list[NotificationLogEntry]:
        """Entries newest first."""
        raise NotImplementedError

    async def last_sent(self) -> NotificationLogEntry | None:
        """Most recent delivered notification."""
        for entry in await self.recent():
            if entry.delivered:
                return entry
        return None


class WasteRepository(ABC):
    """Records of wasted orders and pizzas."""

    @abstractmethod
    async def save(self, record: WasteRecord) -> None:
        """Create or replace one record."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, record_id: str) -> WasteRecord | None:
        raise NotImplementedError

    @abstractmethod
    async def recent(self, limit: int | None = 50) -> list[WasteRecord]:
        """Records newest first; every record when limit is None."""
        raise NotImplementedError

    async def pending_deduction(self) -> list[WasteRecord]:
        """Records whose usage has not been taken off stock yet, oldest first."""
        records = await self.recent(limit=None)
        return [record for record in reversed(records) if record.deducted_at is None]
