"""End-of-day stock deduction and the daily stock report."""

import asyncio
from datetime import datetime, timezone
from typing import Iterable

from kitchen_ops.models.inventory import DEFAULT_THRESHOLD
from kitchen_ops.models.order import Order
from kitchen_ops.models.report import DailyReport, EndOfDayResult, StockNotification
from kitchen_ops.models.waste import WasteRecord
from kitchen_ops.services.alerts import stock_notification
from kitchen_ops.services.deduction import deduct
from kitchen_ops.services.reporting import (
    NotificationSchedule,
    build_daily_report,
    notification_log_entry,
)
from kitchen_ops.services.usage import OrderLike, UsageCalculator, coerce_order, merge_usage
from kitchen_ops.state.repositories import (
    NotificationLogRepository,
    OrderRepository,
    PersistenceError,
    StockRepository,
    WasteRepository,
)
from kitchen_ops.utils.logging import StockLogger, get_logger

logger = get_logger(__name__)


class EndOfDayProcessor:
    """Deducts the day's ingredient usage from stored stock.

    Runs are serialized with an asyncio.Lock, which only covers this
    process. Deployments running several workers must make sure a single
    worker triggers the end-of-day run.

    With an order repository, deducted orders are stamped and later runs
    skip them. With a waste repository, pending waste records are deducted
    along with the orders.
    """

    def __init__(
        self,
        stock_repository: StockRepository,
        calculator: UsageCalculator,
        notification_log: NotificationLogRepository | None = None,
        schedule: NotificationSchedule | None = None,
        recipient: str = "manager@example.com",
        default_threshold: float = DEFAULT_THRESHOLD,
        order_repository: OrderRepository | None = None,
        waste_repository: WasteRepository | None = None,
    ):
        self.stock_repository = stock_repository
        self.calculator = calculator
        self.notification_log = notification_log
        self.schedule = schedule or NotificationSchedule()
        self.recipient = recipient
        self.default_threshold = default_threshold
        self.order_repository = order_repository
        self.waste_repository = waste_repository
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def _pending_orders(self, orders: list[Order]) -> tuple[list[Order], int]:
        """Orders not yet deducted, and how many were left out."""
        pending = []
        seen: set[str] = set()
        for order in orders:
            deducted_at = order.deducted_at
            if self.order_repository is not None and deducted_at is None:
                stored = await self.order_repository.get(order.id)
                deducted_at = stored.deducted_at if stored else None
            if order.id in seen or deducted_at is not None:
                logger.info("order_already_deducted", order_id=order.id)
                continue
            seen.add(order.id)
            pending.append(order)
        return pending, len(orders) - len(pending)

    async def _pending_waste(self) -> list[WasteRecord]:
        if self.waste_repository is None:
            return []
        return await self.waste_repository.pending_deduction()

    async def _stamp(self, orders: list[Order], waste: list[WasteRecord], now: datetime) -> None:
        if self.order_repository is not None and orders:
            await self.order_repository.mark_deducted([order.id for order in orders], now)
        if self.waste_repository is not None:
            for record in waste:
                await self.waste_repository.save(record.model_copy(update={"deducted_at": now}))

    async def run(
        self,
        orders: Iterable[OrderLike],
        now: datetime | None = None,
    ) -> EndOfDayResult:
        """Deduct usage for the given orders and save the new stock levels.

        The snapshot before deduction is kept as the prior snapshot for the
        daily report. Orders already deducted by an earlier run are skipped,
        and a run with nothing left to deduct leaves storage untouched.
        Storage failures are reported in the result and not retried.
        """
        now = now or datetime.now(timezone.utc)
        valid = [order for raw in orders if (order := coerce_order(raw)) is not None]

        async with self._lock:
            logger.info("end_of_day_started", orders=len(valid))
            try:
                pending, skipped = await self._pending_orders(valid)
                waste = await self._pending_waste()
                snapshot = await self.stock_repository.load()

                if not pending and not waste:
                    logger.info("end_of_day_nothing_to_deduct", orders_skipped=skipped)
                    return EndOfDayResult(
                        success=True,
                        orders_skipped=skipped,
                        updated_snapshot=snapshot,
                    )

                await self.stock_repository.save_prior(snapshot)
                usage = merge_usage(
                    [self.calculator.usage_for_orders(pending), *(r.usage for r in waste)]
                )
                updated = deduct(
                    usage,
                    snapshot,
                    default_threshold=self.default_threshold,
                    stock_logger=StockLogger("end_of_day"),
                )
                await self.stock_repository.save(updated)
                await self._stamp(pending, waste, now)
            except PersistenceError as e:
                logger.error("end_of_day_failed", error=str(e), orders=len(valid))
                return EndOfDayResult(
                    success=False,
                    orders_processed=0,
                    error=str(e),
                )

        logger.info(
            "end_of_day_completed",
            orders_processed=len(pending),
            orders_skipped=skipped,
            waste_records=len(waste),
            ingredients_updated=len(usage),
        )
        return EndOfDayResult(
            success=True,
            orders_processed=len(pending),
            orders_skipped=skipped,
            waste_records_processed=len(waste),
            ingredients_updated=len(usage),
            usage=usage,
            updated_snapshot=updated,
        )

    async def _build_report(
        self,
        orders: Iterable[OrderLike],
        now: datetime,
    ) -> tuple[DailyReport, StockNotification]:
        valid = [order for raw in orders if (order := coerce_order(raw)) is not None]

        snapshot = await self.stock_repository.load()
        prior = await self.stock_repository.load_prior()
        usage = self.calculator.usage_for_orders(valid)
        notification = stock_notification(snapshot, now=now)
        report = build_daily_report(
            snapshot, prior, valid, usage, notification, self.calculator.catalog
        )
        return report, notification

    async def daily_report(
        self,
        orders: Iterable[OrderLike],
        now: datetime | None = None,
    ) -> DailyReport:
        """Build the daily stock report without recording it as sent."""
        report, _ = await self._build_report(orders, now or datetime.now(timezone.utc))
        return report

    async def send_daily_report(
        self,
        orders: Iterable[OrderLike],
        now: datetime | None = None,
    ) -> DailyReport:
        """Build the daily report and record its handoff in the notification log."""
        report, notification = await self._build_report(
            orders, now or datetime.now(timezone.utc)
        )

        if self.notification_log is not None:
            await self.notification_log.append(
                notification_log_entry(notification, self.recipient)
            )

        logger.info(
            "daily_report_sent",
            recipient=self.recipient,
            orders=report.orders_today,
            low_stock=report.low_stock_items_count,
            critical=report.critical_items_count,
            efficiency=report.efficiency_score,
        )
        return report

    async def report_if_due(
        self,
        orders: Iterable[OrderLike],
        now: datetime,
    ) -> DailyReport | None:
        """Send today's report once the scheduled time has passed."""
        last = await self.notification_log.last_sent() if self.notification_log else None
        if not self.schedule.should_send(now, last.timestamp if last else None):
            return None
        return await self.send_daily_report(orders, now=now)
