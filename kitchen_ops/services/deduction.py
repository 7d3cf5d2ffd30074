"""Applying ingredient usage and staff edits to stock levels."""

from kitchen_ops.models.inventory import (
    DEFAULT_THRESHOLD,
    StockEntry,
    StockSnapshot,
    UsageRecord,
)
from kitchen_ops.models.report import StockChange
from kitchen_ops.utils.logging import StockLogger, get_logger

logger = get_logger(__name__)

OPERATIONS = ("set", "add", "subtract")


def _copy(snapshot: StockSnapshot) -> StockSnapshot:
    return {ingredient: entry.model_copy() for ingredient, entry in snapshot.items()}


def deduct(
    usage: UsageRecord,
    snapshot: StockSnapshot,
    default_threshold: float = DEFAULT_THRESHOLD,
    stock_logger: StockLogger | None = None,
) -> StockSnapshot:
    """Return a new snapshot with usage subtracted.

    Amounts never drop below zero. Ingredients missing from the snapshot are
    created at zero with the default threshold. The input is left untouched.
    """
    stock_logger = stock_logger or StockLogger("deduction")
    updated = _copy(snapshot)

    for ingredient, used in usage.items():
        entry = updated.get(ingredient)
        if entry is None:
            entry = StockEntry(
                amount=0,
                unit=used.unit,
                category=used.category,
                threshold=default_threshold,
            )
            updated[ingredient] = entry
            stock_logger.log_created(ingredient, entry.unit, entry.threshold)

        before = entry.amount
        entry.amount = max(0.0, before - used.used)
        stock_logger.log_movement(ingredient, before, entry.amount, entry.unit, used=used.used)

    stock_logger.log_batch(len(usage))
    return updated


def adjust(
    snapshot: StockSnapshot,
    ingredient: str,
    quantity: float,
    operation: str = "set",
    unit: str | None = None,
    category: str | None = None,
    threshold: float | None = None,
    default_threshold: float = DEFAULT_THRESHOLD,
) -> StockSnapshot:
    """Apply a manual set/add/subtract to one ingredient.

    Raises:
        ValueError: unknown operation or negative quantity
    """
    if operation not in OPERATIONS:
        raise ValueError(f"Unknown stock operation {operation!r}, expected one of {OPERATIONS}")
    if quantity < 0:
        raise ValueError("Stock quantity cannot be negative")

    updated = _copy(snapshot)
    stock_logger = StockLogger(f"manual_{operation}")

    entry = updated.get(ingredient)
    if entry is None:
        entry = StockEntry(
            amount=0,
            unit=unit or "unit",
            category=category or "other",
            threshold=default_threshold if threshold is None else threshold,
        )
        updated[ingredient] = entry
        stock_logger.log_created(ingredient, entry.unit, entry.threshold)
    else:
        if unit:
            entry.unit = unit
        if category:
            entry.category = category
        if threshold is not None:
            entry.threshold = threshold

    before = entry.amount
    if operation == "set":
        entry.amount = quantity
    elif operation == "add":
        entry.amount = before + quantity
    else:
        entry.amount = max(0.0, before - quantity)

    stock_logger.log_movement(ingredient, before, entry.amount, entry.unit)
    return updated


def diff(before: StockSnapshot, after: StockSnapshot) -> list[StockChange]:
    """Ingredients whose amount changed between two snapshots.

    Ingredients missing from `before` are compared against their current
    amount; ingredients missing from `after` count as zero. Largest changes
    come first.
    """
    changes = []
    for ingredient in sorted(set(before) | set(after)):
        current = after.get(ingredient)
        previous = before.get(ingredient)
        after_amount = current.amount if current else 0.0
        before_amount = previous.amount if previous else after_amount
        if before_amount == after_amount:
            continue
        changes.append(
            StockChange(
                name=ingredient,
                before=before_amount,
                after=after_amount,
                change=after_amount - before_amount,
                unit=(current or previous).unit,
            )
        )
    changes.sort(key=lambda change: -abs(change.change))
    return changes
