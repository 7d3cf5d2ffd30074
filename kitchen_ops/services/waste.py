"""Recording wasted food and summarizing it."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Literal

from kitchen_ops.models.inventory import UsageRecord
from kitchen_ops.models.order import Order
from kitchen_ops.models.waste import (
    WasteAnalytics,
    WasteBucket,
    WastedPizza,
    WasteRecord,
    WasteRequest,
    WasteResult,
    WasteType,
)
from kitchen_ops.services.usage import UsageCalculator
from kitchen_ops.state.repositories import OrderRepository, WasteRepository
from kitchen_ops.utils.logging import get_logger

logger = get_logger(__name__)

WastePeriod = Literal["today", "week", "month", "all"]

UNKNOWN_REASON = "Unknown"


def usage_value(usage: UsageRecord) -> float:
    """Ingredient cost of a usage record."""
    return round(sum(entry.cost for entry in usage.values()), 2)


def period_start(period: WastePeriod, now: datetime | None = None) -> datetime | None:
    """Start of a reporting period, counted from midnight UTC today."""
    now = now or datetime.now(timezone.utc)
    today = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "today":
        return today
    if period == "week":
        return today - timedelta(days=7)
    if period == "month":
        return today - timedelta(days=30)
    return None


def waste_analytics(
    records: Iterable[WasteRecord],
    start: datetime | None = None,
    end: datetime | None = None,
) -> WasteAnalytics:
    """Totals by reason and by UTC day for records inside [start, end]."""
    selected = [
        record
        for record in records
        if (start is None or record.timestamp >= start)
        and (end is None or record.timestamp <= end)
    ]

    by_reason: dict[str, WasteBucket] = {}
    by_date: dict[str, WasteBucket] = {}
    for record in selected:
        day = record.timestamp.astimezone(timezone.utc).date().isoformat()
        for bucket in (
            by_reason.setdefault(record.reason or UNKNOWN_REASON, WasteBucket()),
            by_date.setdefault(day, WasteBucket()),
        ):
            bucket.count += 1
            bucket.value = round(bucket.value + record.waste_value, 2)

    total_value = round(sum(record.waste_value for record in selected), 2)
    return WasteAnalytics(
        total_wasted_items=len(selected),
        total_waste_value=total_value,
        waste_by_reason=by_reason,
        waste_by_date=by_date,
        average_waste_per_item=round(total_value / len(selected), 2) if selected else 0.0,
    )


class WasteTracker:
    """Takes wasted food out of active orders and keeps a record of it.

    Each record carries the ingredient usage of the wasted food. The
    end-of-day run takes that usage off stock once.
    """

    def __init__(
        self,
        orders: OrderRepository,
        waste: WasteRepository,
        calculator: UsageCalculator,
    ):
        self.orders = orders
        self.waste = waste
        self.calculator = calculator

    async def _active_order(self, order_id: str) -> Order:
        for order in await self.orders.list_active():
            if order.id == order_id:
                return order
        raise KeyError(order_id)

    def _record(
        self,
        order: Order,
        indexes: list[int],
        waste_type: WasteType,
        usage: UsageRecord,
        request: WasteRequest,
        now: datetime,
    ) -> WasteRecord:
        return WasteRecord(
            original_order_id=order.id,
            customer_name=order.customer_name,
            platform=order.platform,
            order_time=order.created_at,
            waste_type=waste_type,
            reason=request.reason,
            details=request.details,
            wasted_by=request.wasted_by,
            pizzas=[
                WastedPizza(
                    index=index,
                    pizza_type=order.pizzas[index].pizza_type,
                    quantity=order.pizzas[index].quantity,
                )
                for index in indexes
            ],
            usage=usage,
            waste_value=usage_value(usage),
            timestamp=now,
            # Food from an order already taken off stock is not deducted again
            deducted_at=order.deducted_at,
        )

    async def mark_order_wasted(
        self,
        order_id: str,
        request: WasteRequest,
        now: datetime | None = None,
    ) -> WasteResult:
        """Throw away a whole order, drinks included.

        Raises:
            KeyError: no active order with that id
        """
        now = now or datetime.now(timezone.utc)
        order = await self._active_order(order_id)

        usage = self.calculator.usage_for_order(order)
        record = self._record(
            order, list(range(len(order.pizzas))), WasteType.FULL_ORDER, usage, request, now
        )
        await self.waste.save(record)
        await self.orders.delete(order_id)

        logger.info(
            "order_wasted",
            order_id=order_id,
            waste_id=record.id,
            reason=record.reason,
            value=record.waste_value,
        )
        return WasteResult(record=record)

    async def mark_pizzas_wasted(
        self,
        order_id: str,
        indexes: Iterable[int],
        request: WasteRequest,
        now: datetime | None = None,
    ) -> WasteResult:
        """Throw away some pizza lines of an order.

        The order keeps its other lines. An order left with no pizzas is
        removed.

        Raises:
            KeyError: no active order with that id
            ValueError: no pizza lines selected
            IndexError: a selected line does not exist
        """
        now = now or datetime.now(timezone.utc)
        order = await self._active_order(order_id)

        selected = sorted(set(indexes))
        if not selected:
            raise ValueError("Select at least one pizza to waste")
        for index in selected:
            if index < 0 or index >= len(order.pizzas):
                raise IndexError(f"Order {order.id} has no pizza at position {index}")

        wasted_lines = [order.pizzas[index] for index in selected]
        usage = self.calculator.usage_for_order(Order(id=order.id, pizzas=wasted_lines))
        record = self._record(
            order, selected, WasteType.PARTIAL_PIZZAS, usage, request, now
        )
        await self.waste.save(record)

        keep = [index for index in range(len(order.pizzas)) if index not in selected]
        remaining = None
        if keep:
            remaining = order.model_copy(
                update={
                    "pizzas": [order.pizzas[index] for index in keep],
                    "cooked": [order.cooked[index] for index in keep],
                    "has_wasted_items": True,
                    "updated_at": now,
                }
            )
            await self.orders.save(remaining)
        else:
            await self.orders.delete(order_id)

        logger.info(
            "pizzas_wasted",
            order_id=order_id,
            waste_id=record.id,
            indexes=selected,
            remaining=len(keep),
            value=record.waste_value,
        )
        return WasteResult(record=record, remaining_order=remaining)

    async def analytics(
        self, period: WastePeriod = "today", now: datetime | None = None
    ) -> WasteAnalytics:
        """Waste totals for a reporting period."""
        return waste_analytics(await self.waste.recent(limit=None), start=period_start(period, now))
