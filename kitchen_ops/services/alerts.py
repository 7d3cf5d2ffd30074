"""Low-stock classification and the management stock summary."""

from datetime import datetime, timezone

from kitchen_ops.models.inventory import Alert, StockSnapshot, Urgency
from kitchen_ops.models.report import StockNotification

ALL_CLEAR_MESSAGE = "All inventory levels are above threshold. No immediate action needed."


def _classify(amount: float, threshold: float) -> Urgency | None:
    if amount == 0:
        return Urgency.CRITICAL
    if amount <= threshold:
        return Urgency.LOW
    return None


def alerts_for(snapshot: StockSnapshot) -> list[Alert]:
    """Low-stock alerts, most urgent first.

    Out-of-stock items come before low items. Within each tier the biggest
    shortfall against the threshold comes first, then ingredient name.
    """
    alerts = []
    for ingredient, entry in snapshot.items():
        urgency = _classify(entry.amount, entry.threshold)
        if urgency is None:
            continue
        alerts.append(
            Alert(
                ingredient=ingredient,
                current_stock=entry.amount,
                threshold=entry.threshold,
                unit=entry.unit,
                category=entry.category,
                urgency=urgency,
            )
        )

    alerts.sort(
        key=lambda alert: (
            alert.urgency != Urgency.CRITICAL,
            -alert.deficit,
            alert.ingredient,
        )
    )
    return alerts


def _label(ingredient: str) -> str:
    return ingredient.replace("_", " ")


def _format_message(critical: list[Alert], low: list[Alert]) -> str:
    if not critical and not low:
        return ALL_CLEAR_MESSAGE

    lines = ["Daily Inventory Update:", ""]
    if critical:
        lines.append(f"CRITICAL - OUT OF STOCK ({len(critical)} items):")
        lines.extend(
            f"- {_label(a.ingredient)}: {a.current_stock:g}{a.unit} (need to reorder immediately)"
            for a in critical
        )
        lines.append("")
    if low:
        lines.append(f"LOW STOCK ({len(low)} items):")
        lines.extend(
            f"- {_label(a.ingredient)}: {a.current_stock:g}{a.unit} "
            f"(threshold: {a.threshold:g}{a.unit})"
            for a in low
        )
    return "\n".join(lines).rstrip("\n")


def stock_notification(
    snapshot: StockSnapshot,
    *,
    now: datetime | None = None,
) -> StockNotification:
    """Summarize low stock for the manager."""
    alerts = alerts_for(snapshot)
    critical = [a for a in alerts if a.urgency == Urgency.CRITICAL]
    low = [a for a in alerts if a.urgency == Urgency.LOW]

    grouped: dict[str, list[Alert]] = {}
    for alert in alerts:
        grouped.setdefault(alert.category, []).append(alert)

    return StockNotification(
        has_alerts=bool(alerts),
        critical_count=len(critical),
        low_stock_count=len(low),
        total_items_low=len(alerts),
        critical_items=critical,
        low_items=low,
        grouped_by_category=grouped,
        message=_format_message(critical, low),
        timestamp=now or datetime.now(timezone.utc),
    )
