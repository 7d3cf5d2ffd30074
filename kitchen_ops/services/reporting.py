"""Daily stock report content and notification scheduling."""

from datetime import datetime, timedelta, timezone
from typing import Iterable

from kitchen_ops.catalog import RecipeCatalog
from kitchen_ops.models.inventory import StockSnapshot, UsageRecord
from kitchen_ops.models.order import Order
from kitchen_ops.models.report import (
    DailyReport,
    LowStockLine,
    NotificationLogEntry,
    StockNotification,
    UsedIngredient,
)
from kitchen_ops.services.deduction import diff

TOP_USED_LIMIT = 10


def efficiency_score(low_count: int) -> int:
    """Rough kitchen health score from the number of low-stock items."""
    score = 95 if low_count == 0 else max(50, 90 - 10 * low_count)
    return max(0, min(100, score))


def _money(value: float) -> float:
    return round(value, 2)


def build_daily_report(
    snapshot: StockSnapshot,
    prior_snapshot: StockSnapshot | None,
    orders: Iterable[Order],
    usage: UsageRecord,
    notification: StockNotification,
    catalog: RecipeCatalog,
) -> DailyReport:
    """Assemble the end-of-day email content.

    Stock is valued at catalog unit cost. Ingredients with no prior record
    are valued at their current amount for the starting figure.
    """
    prior_snapshot = prior_snapshot or {}
    orders = list(orders)

    starting_value = 0.0
    ending_value = 0.0
    for ingredient, entry in snapshot.items():
        cost = catalog.unit_cost(ingredient)
        previous = prior_snapshot.get(ingredient)
        starting_value += (previous.amount if previous else entry.amount) * cost
        ending_value += entry.amount * cost

    used = []
    total_usage_cost = 0.0
    for ingredient, entry in usage.items():
        cost = entry.used * catalog.unit_cost(ingredient)
        total_usage_cost += cost
        used.append(
            UsedIngredient(name=ingredient, used=entry.used, unit=entry.unit, cost=_money(cost))
        )
    used.sort(key=lambda item: (-item.used, item.name))

    low_lines = [
        LowStockLine(
            name=alert.ingredient,
            amount=alert.current_stock,
            threshold=alert.threshold,
            unit=alert.unit,
        )
        for alert in notification.critical_items + notification.low_items
    ]

    return DailyReport(
        starting_stock_value=_money(starting_value),
        ending_stock_value=_money(ending_value),
        total_usage_cost=_money(total_usage_cost),
        low_stock_items=low_lines,
        efficiency_score=efficiency_score(notification.total_items_low),
        top_used_ingredients=used[:TOP_USED_LIMIT],
        stock_changes=diff(prior_snapshot, snapshot),
        orders_today=len(orders),
        pizzas_today=sum(max(line.quantity, 0) for o in orders for line in o.pizzas),
        drinks_today=sum(max(line.quantity, 0) for o in orders for line in o.cold_drinks),
        has_low_stock=notification.has_alerts,
        critical_items_count=notification.critical_count,
        low_stock_items_count=notification.low_stock_count,
        notification_message=notification.message,
        generated_at=notification.timestamp,
    )


class NotificationSchedule:
    """When the daily stock email goes out."""

    def __init__(self, hour: int = 22, minute: int = 0, enabled: bool = True):
        self.hour = hour
        self.minute = minute
        self.enabled = enabled

    def should_send(self, now: datetime, last_sent: datetime | None) -> bool:
        """Check if today's notification is due and not yet sent."""
        if not self.enabled:
            return False
        if (now.hour, now.minute) < (self.hour, self.minute):
            return False
        if last_sent is None:
            return True
        if last_sent.tzinfo is not None and now.tzinfo is not None:
            last_sent = last_sent.astimezone(now.tzinfo)
        return last_sent.date() < now.date()


def notification_log_entry(
    notification: StockNotification,
    recipient: str,
    delivered: bool = True,
    error: str | None = None,
) -> NotificationLogEntry:
    """Audit record for a stock notification handed to the mailer."""
    return NotificationLogEntry(
        timestamp=notification.timestamp,
        recipient=recipient,
        has_alerts=notification.has_alerts,
        critical_count=notification.critical_count,
        low_stock_count=notification.low_stock_count,
        delivered=delivered,
        error=error,
    )


def prune_log(
    entries: Iterable[NotificationLogEntry],
    retention_days: int = 30,
    now: datetime | None = None,
) -> list[NotificationLogEntry]:
    """Drop log entries older than the retention window."""
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=retention_days)
    return [entry for entry in entries if entry.timestamp >= cutoff]
