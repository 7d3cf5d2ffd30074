"""Inventory, queue and reporting services."""

from kitchen_ops.services.alerts import alerts_for, stock_notification
from kitchen_ops.services.deduction import adjust, deduct, diff
from kitchen_ops.services.orders import apply_update, is_archivable, mark_pizza_cooked
from kitchen_ops.services.queue import QueueEstimator
from kitchen_ops.services.reporting import NotificationSchedule, build_daily_report
from kitchen_ops.services.resolver import IngredientResolver, MatchStrategy, Resolution
from kitchen_ops.services.usage import UsageCalculator, most_used, usage_by_category
from kitchen_ops.services.end_of_day import EndOfDayProcessor
from kitchen_ops.services.waste import WasteTracker, waste_analytics

__all__ = [
    # Usage
    "IngredientResolver",
    "Resolution",
    "MatchStrategy",
    "UsageCalculator",
    "usage_by_category",
    "most_used",
    # Stock
    "deduct",
    "adjust",
    "diff",
    "alerts_for",
    "stock_notification",
    # Kitchen
    "QueueEstimator",
    "apply_update",
    "mark_pizza_cooked",
    "is_archivable",
    # Reporting
    "build_daily_report",
    "NotificationSchedule",
    "EndOfDayProcessor",
    # Waste
    "WasteTracker",
    "waste_analytics",
]
