"""Order status changes and per-pizza cooking progress."""

from datetime import datetime, timezone

from kitchen_ops.models.order import (
    Order,
    OrderStatus,
    OrderUpdate,
    PatchFields,
    SetCompletion,
    SetStatus,
)
from kitchen_ops.utils.logging import get_logger

logger = get_logger(__name__)

PROTECTED_FIELDS = frozenset({"id", "created_at"})
ARCHIVABLE_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.DELIVERED})


def _now() -> datetime:
    return datetime.now(timezone.utc)


def apply_update(order: Order, update: OrderUpdate) -> Order:
    """Return a copy of the order with the update applied.

    Raises:
        ValueError: a field patch touches the order id or creation time
    """
    if isinstance(update, SetStatus):
        changes = {"status": update.status}

    elif isinstance(update, SetCompletion):
        if update.completed:
            changes = {"cooked": [True] * len(order.pizzas), "status": OrderStatus.READY}
        else:
            changes = {"cooked": [False] * len(order.pizzas), "status": OrderStatus.PENDING}

    elif isinstance(update, PatchFields):
        protected = PROTECTED_FIELDS & set(update.fields)
        if protected:
            raise ValueError(f"Cannot change {', '.join(sorted(protected))} of an order")
        data = order.model_dump()
        data.update(update.fields)
        data["updated_at"] = _now()
        # Re-validate so patched lines and cooked flags stay consistent
        updated = Order.model_validate(data)
        logger.info("order_patched", order_id=order.id, fields=sorted(update.fields))
        return updated

    else:
        raise TypeError(f"Unsupported order update {type(update).__name__}")

    changes["updated_at"] = _now()
    updated = order.model_copy(update=changes)
    logger.info("order_updated", order_id=order.id, kind=update.kind, status=updated.status)
    return updated


def mark_pizza_cooked(order: Order, index: int, cooked: bool = True) -> Order:
    """Set the cooked flag of one pizza line.

    The order moves to ready once every pizza is cooked.

    Raises:
        IndexError: no pizza line at `index`
    """
    if index < 0 or index >= len(order.pizzas):
        raise IndexError(f"Order {order.id} has no pizza at position {index}")

    flags = list(order.cooked)
    flags[index] = cooked
    changes = {"cooked": flags, "updated_at": _now()}
    if all(flags):
        changes["status"] = OrderStatus.READY
    elif order.status == OrderStatus.READY:
        changes["status"] = OrderStatus.IN_OVEN

    updated = order.model_copy(update=changes)
    logger.info(
        "pizza_cooked_marked",
        order_id=order.id,
        index=index,
        cooked=cooked,
        status=updated.status,
    )
    return updated


def is_archivable(order: Order) -> bool:
    """Check if an order can move to the archive."""
    return order.status in ARCHIVABLE_STATUSES
