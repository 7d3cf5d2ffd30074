"""Ingredient usage derived from orders."""

from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from kitchen_ops.catalog import RecipeCatalog
from kitchen_ops.models.inventory import DailyEstimate, UsageEntry, UsageRecord
from kitchen_ops.models.order import FINISHED_STATUSES, Order
from kitchen_ops.models.recipe import RecipeIngredient
from kitchen_ops.services.resolver import IngredientResolver
from kitchen_ops.utils.logging import get_logger

logger = get_logger(__name__)

# Safety margin on top of the average when recommending daily prep
RECOMMENDED_BUFFER = 1.3

OrderLike = Order | Mapping[str, Any]


def merge_usage(records: Iterable[UsageRecord]) -> UsageRecord:
    """Element-wise sum of usage records."""
    total: UsageRecord = {}
    for record in records:
        for ingredient, entry in record.items():
            current = total.get(ingredient)
            if current is None:
                total[ingredient] = entry.model_copy()
            else:
                current.used += entry.used
                current.cost += entry.cost
    return total


def is_cooked(order: Order) -> bool:
    """Check if an order has left the oven."""
    return order.status in FINISHED_STATUSES or order.all_cooked


def coerce_order(raw: OrderLike) -> Order | None:
    """Validate a raw order, returning None when it is malformed."""
    if isinstance(raw, Order):
        return raw
    try:
        return Order.model_validate(raw)
    except (ValidationError, TypeError) as e:
        logger.warning("order_malformed", error=str(e))
        return None


class UsageCalculator:
    """Turns orders into ingredient usage using a recipe catalog."""

    def __init__(self, catalog: RecipeCatalog, resolver: IngredientResolver | None = None):
        self.catalog = catalog
        self.resolver = resolver or IngredientResolver(catalog)

    def _add(
        self,
        record: UsageRecord,
        key: str,
        ingredient: RecipeIngredient,
        quantity: int,
    ) -> None:
        canonical = self.resolver.resolve(key)
        used = ingredient.amount * quantity
        entry = record.get(canonical)
        if entry is None:
            entry = record[canonical] = UsageEntry(
                unit=ingredient.unit, category=ingredient.category
            )
        entry.used += used
        entry.cost += used * ingredient.unit_cost

    def usage_for_order(self, raw: OrderLike) -> UsageRecord:
        """Ingredient usage for a single order."""
        record: UsageRecord = {}
        order = coerce_order(raw)
        if order is None:
            return record

        for line in order.pizzas:
            if line.quantity <= 0:
                logger.warning(
                    "line_quantity_rejected",
                    order_id=order.id,
                    item=line.pizza_type,
                    quantity=line.quantity,
                )
                continue
            resolution = self.resolver.resolve_item(line.pizza_type, "pizza")
            if not resolution.resolved:
                logger.warning(
                    "pizza_line_skipped", order_id=order.id, item=line.pizza_type
                )
                continue
            recipe = self.catalog.recipe(resolution.name, "pizza")
            if recipe.uses_base:
                for key, ingredient in self.catalog.base_ingredients.items():
                    if key not in recipe.excludes:
                        self._add(record, key, ingredient, line.quantity)
            for key, ingredient in recipe.ingredients.items():
                self._add(record, key, ingredient, line.quantity)

        for line in order.cold_drinks:
            if line.quantity <= 0:
                logger.warning(
                    "line_quantity_rejected",
                    order_id=order.id,
                    item=line.drink_type,
                    quantity=line.quantity,
                )
                continue
            # Drinks are matched by exact name or alias only
            recipe = self.catalog.lookup(line.drink_type, "drink")
            if recipe is None:
                logger.debug("drink_line_skipped", order_id=order.id, item=line.drink_type)
                continue
            for key, ingredient in recipe.ingredients.items():
                self._add(record, key, ingredient, line.quantity)

        return record

    def usage_for_orders(
        self,
        orders: Iterable[OrderLike],
        only_cooked: bool = False,
    ) -> UsageRecord:
        """Total ingredient usage across orders.

        With only_cooked set, orders still waiting for the oven are left out.
        """
        records = []
        for raw in orders:
            order = coerce_order(raw)
            if order is None:
                continue
            if only_cooked and not is_cooked(order):
                continue
            records.append(self.usage_for_order(order))
        return merge_usage(records)

    def daily_estimate(
        self,
        orders: Iterable[OrderLike],
        days: int = 7,
        now: datetime | None = None,
    ) -> dict[str, DailyEstimate]:
        """Average daily use over the last `days` days, plus a 30% buffer."""
        if days <= 0:
            raise ValueError("days must be positive")
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=days)

        recent = []
        for raw in orders:
            order = coerce_order(raw)
            if order is not None and order.created_at >= cutoff:
                recent.append(order)

        usage = self.usage_for_orders(recent, only_cooked=True)
        return {
            ingredient: DailyEstimate(
                daily_average=round(entry.used / days, 2),
                recommended_daily=round(entry.used / days * RECOMMENDED_BUFFER, 2),
                unit=entry.unit,
                category=entry.category,
            )
            for ingredient, entry in usage.items()
        }


def usage_by_category(usage: UsageRecord) -> dict[str, UsageRecord]:
    """Group a usage record by ingredient category."""
    grouped: dict[str, UsageRecord] = {}
    for ingredient, entry in usage.items():
        grouped.setdefault(entry.category, {})[ingredient] = entry
    return grouped


def most_used(usage: UsageRecord, limit: int = 10) -> list[tuple[str, UsageEntry]]:
    """Ingredients with the largest usage, biggest first."""
    ranked = sorted(usage.items(), key=lambda item: (-item[1].used, item[0]))
    return ranked[:limit]
