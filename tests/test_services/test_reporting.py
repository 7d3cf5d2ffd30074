"""Tests for the daily report and notification schedule."""

from datetime import datetime, timedelta, timezone

import pytest

from kitchen_ops.catalog import RecipeCatalog
from kitchen_ops.models.inventory import StockEntry, StockSnapshot
from kitchen_ops.models.order import Order
from kitchen_ops.models.report import NotificationLogEntry
from kitchen_ops.services.alerts import stock_notification
from kitchen_ops.services.reporting import (
    NotificationSchedule,
    build_daily_report,
    efficiency_score,
    notification_log_entry,
    prune_log,
)
from kitchen_ops.services.usage import UsageCalculator

NIGHT = datetime(2026, 10, 13, 22, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "low_count,score",
    [(0, 95), (1, 80), (3, 60), (4, 50), (9, 50)],
)
def test_efficiency_score(low_count: int, score: int) -> None:
    assert efficiency_score(low_count) == score


def test_daily_report(
    sample_snapshot: StockSnapshot,
    sample_order: Order,
    calculator: UsageCalculator,
    catalog: RecipeCatalog,
) -> None:
    prior = {key: entry.model_copy() for key, entry in sample_snapshot.items()}
    prior["shredded_mozzarella"] = StockEntry(amount=782, unit="g", category="cheese")
    usage = calculator.usage_for_order(sample_order)
    notification = stock_notification(sample_snapshot, now=NIGHT)

    report = build_daily_report(
        sample_snapshot, prior, [sample_order], usage, notification, catalog
    )

    assert report.orders_today == 1
    assert report.pizzas_today == 3
    assert report.drinks_today == 0
    assert report.critical_items_count == 1
    assert report.low_stock_items_count == 1
    assert [line.name for line in report.low_stock_items] == ["pepperoni", "fresh_basil"]
    assert report.efficiency_score == 70
    assert report.top_used_ingredients[0].name == "shredded_mozzarella"
    assert report.top_used_ingredients[0].cost == pytest.approx(282 * 0.12)
    assert report.stock_changes[0].name == "shredded_mozzarella"
    assert report.stock_changes[0].change == -282
    assert report.starting_stock_value - report.ending_stock_value == pytest.approx(282 * 0.12)
    assert report.generated_at == NIGHT


def test_schedule() -> None:
    schedule = NotificationSchedule(hour=22, minute=0)

    assert not schedule.should_send(NIGHT.replace(hour=21, minute=59), None)
    assert schedule.should_send(NIGHT, None)
    assert not schedule.should_send(NIGHT, NIGHT.replace(hour=22, minute=5))
    assert schedule.should_send(NIGHT, NIGHT - timedelta(days=1))
    assert not NotificationSchedule(enabled=False).should_send(NIGHT, None)


def test_log_entry_and_pruning(sample_snapshot: StockSnapshot) -> None:
    notification = stock_notification(sample_snapshot, now=NIGHT)
    entry = notification_log_entry(notification, "manager@example.com")

    assert entry.recipient == "manager@example.com"
    assert entry.critical_count == 1
    assert entry.delivered

    old = NotificationLogEntry(
        timestamp=NIGHT - timedelta(days=31),
        recipient="manager@example.com",
        has_alerts=False,
        critical_count=0,
        low_stock_count=0,
    )
    assert prune_log([old, entry], retention_days=30, now=NIGHT) == [entry]
