"""Tests for the end-of-day stock run."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from kitchen_ops.models.inventory import StockSnapshot
from kitchen_ops.models.order import Order, OrderStatus, PizzaLine
from kitchen_ops.models.waste import WasteRecord, WasteType
from kitchen_ops.services.end_of_day import EndOfDayProcessor
from kitchen_ops.services.reporting import NotificationSchedule
from kitchen_ops.services.usage import UsageCalculator
from kitchen_ops.state import (
    InMemoryNotificationLogRepository,
    InMemoryOrderRepository,
    InMemoryStockRepository,
    InMemoryWasteRepository,
    PersistenceError,
)

# The notification log prunes against the real clock
NIGHT = datetime.now(timezone.utc).replace(hour=22, minute=30, second=0, microsecond=0)


class UnavailableStockRepository(InMemoryStockRepository):
    """Stock storage that fails on every read."""

    async def load(self) -> StockSnapshot:
        raise PersistenceError("load_stock", ConnectionError("connection refused"))


@pytest.mark.asyncio
async def test_run_deducts_and_saves(
    sample_snapshot: StockSnapshot,
    sample_order: Order,
    calculator: UsageCalculator,
) -> None:
    """Test that two Champs and a Margie use 282g of cheese."""
    repository = InMemoryStockRepository(sample_snapshot)
    processor = EndOfDayProcessor(repository, calculator)

    result = await processor.run([sample_order, {"pizzas": "broken"}])

    assert result.success
    assert result.orders_processed == 1
    assert result.usage["shredded_mozzarella"].used == 282
    assert repository.snapshot["shredded_mozzarella"].amount == 218
    assert repository.prior["shredded_mozzarella"].amount == 500
    # Untracked ingredients are created at zero
    assert repository.snapshot["parmesan"].amount == 0
    assert result.ingredients_updated == len(result.usage)


@pytest.mark.asyncio
async def test_run_reports_storage_failure(
    sample_order: Order, calculator: UsageCalculator
) -> None:
    processor = EndOfDayProcessor(UnavailableStockRepository(), calculator)

    result = await processor.run([sample_order])

    assert not result.success
    assert "load_stock" in result.error
    assert not processor.running


@pytest.mark.asyncio
async def test_concurrent_runs_are_serialized(
    sample_snapshot: StockSnapshot,
    sample_order: Order,
    calculator: UsageCalculator,
) -> None:
    repository = InMemoryStockRepository(sample_snapshot)
    processor = EndOfDayProcessor(repository, calculator)

    results = await asyncio.gather(processor.run([sample_order]), processor.run([sample_order]))

    assert all(result.success for result in results)
    assert repository.snapshot["shredded_mozzarella"].amount == 0
    assert repository.snapshot["sourdough_dough"].amount == 34


@pytest.mark.asyncio
async def test_sent_daily_report_is_logged(
    sample_snapshot: StockSnapshot,
    sample_order: Order,
    calculator: UsageCalculator,
) -> None:
    log = InMemoryNotificationLogRepository()
    processor = EndOfDayProcessor(
        InMemoryStockRepository(sample_snapshot),
        calculator,
        notification_log=log,
        recipient="chef@example.com",
    )

    report = await processor.send_daily_report([sample_order], now=NIGHT)

    assert report.orders_today == 1
    entries = await log.recent()
    assert len(entries) == 1
    assert entries[0].recipient == "chef@example.com"
    assert entries[0].critical_count == report.critical_items_count


@pytest.mark.asyncio
async def test_report_sent_once_per_day(
    sample_snapshot: StockSnapshot,
    sample_order: Order,
    calculator: UsageCalculator,
) -> None:
    log = InMemoryNotificationLogRepository()
    processor = EndOfDayProcessor(
        InMemoryStockRepository(sample_snapshot),
        calculator,
        notification_log=log,
        schedule=NotificationSchedule(hour=22, minute=0),
    )

    assert await processor.report_if_due([sample_order], NIGHT - timedelta(hours=2)) is None
    assert await processor.report_if_due([sample_order], NIGHT) is not None
    assert await processor.report_if_due([sample_order], NIGHT + timedelta(minutes=30)) is None


@pytest.mark.asyncio
async def test_reading_the_report_does_not_count_as_sent(
    sample_snapshot: StockSnapshot,
    sample_order: Order,
    calculator: UsageCalculator,
) -> None:
    log = InMemoryNotificationLogRepository()
    processor = EndOfDayProcessor(
        InMemoryStockRepository(sample_snapshot),
        calculator,
        notification_log=log,
        schedule=NotificationSchedule(hour=22, minute=0),
    )

    await processor.daily_report([sample_order], now=NIGHT - timedelta(minutes=20))

    assert await log.recent() == []
    assert await processor.report_if_due([sample_order], NIGHT) is not None
    assert len(await log.recent()) == 1


@pytest.mark.asyncio
async def test_second_run_skips_deducted_orders(
    sample_snapshot: StockSnapshot,
    calculator: UsageCalculator,
) -> None:
    """Test that retrying the run does not take the same Margie off stock twice."""
    order = Order(
        id="order-1",
        pizzas=[PizzaLine(pizza_type="MARGIE", quantity=1)],
        status=OrderStatus.READY,
        cooked=[True],
    )
    stock = InMemoryStockRepository(sample_snapshot)
    orders = InMemoryOrderRepository([order])
    processor = EndOfDayProcessor(stock, calculator, order_repository=orders)

    first = await processor.run(await orders.list_active(), now=NIGHT)
    prior_after_first = stock.prior
    second = await processor.run(await orders.list_active(), now=NIGHT)

    assert first.orders_processed == 1
    assert second.success
    assert second.orders_processed == 0
    assert second.orders_skipped == 1
    assert stock.snapshot["shredded_mozzarella"].amount == 406
    # The prior snapshot still describes the day before the first run
    assert stock.prior == prior_after_first
    assert (await orders.get("order-1")).deducted_at == NIGHT


@pytest.mark.asyncio
async def test_stale_order_copies_are_skipped(
    sample_snapshot: StockSnapshot,
    calculator: UsageCalculator,
) -> None:
    """Test that the stored deduction stamp wins over a caller's stale copy."""
    order = Order(
        id="order-1",
        pizzas=[PizzaLine(pizza_type="MARGIE", quantity=1)],
        status=OrderStatus.READY,
    )
    stock = InMemoryStockRepository(sample_snapshot)
    processor = EndOfDayProcessor(
        stock, calculator, order_repository=InMemoryOrderRepository([order])
    )

    await processor.run([order], now=NIGHT)
    result = await processor.run([order, order], now=NIGHT)

    assert result.orders_processed == 0
    assert result.orders_skipped == 2
    assert stock.snapshot["shredded_mozzarella"].amount == 406


@pytest.mark.asyncio
async def test_pending_waste_is_deducted_once(
    sample_snapshot: StockSnapshot,
    calculator: UsageCalculator,
) -> None:
    wasted = Order(pizzas=[PizzaLine(pizza_type="MARGIE", quantity=1)])
    record = WasteRecord(
        original_order_id=wasted.id,
        order_time=wasted.created_at,
        waste_type=WasteType.FULL_ORDER,
        reason="Dropped",
        usage=calculator.usage_for_order(wasted),
    )
    stock = InMemoryStockRepository(sample_snapshot)
    waste = InMemoryWasteRepository([record])
    processor = EndOfDayProcessor(stock, calculator, waste_repository=waste)

    first = await processor.run([], now=NIGHT)
    second = await processor.run([], now=NIGHT)

    assert first.waste_records_processed == 1
    assert second.waste_records_processed == 0
    assert stock.snapshot["shredded_mozzarella"].amount == 406
    assert (await waste.get(record.id)).deducted_at == NIGHT
