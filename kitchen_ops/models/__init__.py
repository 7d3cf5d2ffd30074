"""Data models for the kitchen operations service."""

from kitchen_ops.models.inventory import (
    Alert,
    StockAdjustment,
    StockEntry,
    StockSnapshot,
    Urgency,
    UsageEntry,
    UsageRecord,
)
from kitchen_ops.models.kitchen import (
    HistoricalPatterns,
    HourPattern,
    KitchenSettings,
    OrderEstimate,
    Prediction,
    QueueOverview,
    WindowEstimate,
)
from kitchen_ops.models.order import (
    DrinkLine,
    Order,
    OrderStatus,
    OrderUpdate,
    PatchFields,
    PizzaLine,
    SetCompletion,
    SetStatus,
)
from kitchen_ops.models.recipe import Recipe, RecipeIngredient, RecipeKind
from kitchen_ops.models.report import (
    DailyReport,
    EndOfDayResult,
    NotificationLogEntry,
    StockNotification,
)
from kitchen_ops.models.waste import (
    WasteAnalytics,
    WasteRecord,
    WasteRequest,
    WasteResult,
    WasteType,
)

__all__ = [
    # Recipe
    "Recipe",
    "RecipeIngredient",
    "RecipeKind",
    # Order
    "Order",
    "PizzaLine",
    "DrinkLine",
    "OrderStatus",
    "OrderUpdate",
    "SetStatus",
    "SetCompletion",
    "PatchFields",
    # Inventory
    "StockEntry",
    "StockSnapshot",
    "UsageEntry",
    "UsageRecord",
    "Alert",
    "Urgency",
    "StockAdjustment",
    # Kitchen
    "KitchenSettings",
    "HistoricalPatterns",
    "HourPattern",
    "Prediction",
    "OrderEstimate",
    "WindowEstimate",
    "QueueOverview",
    # Reports
    "StockNotification",
    "DailyReport",
    "NotificationLogEntry",
    "EndOfDayResult",
    # Waste
    "WasteRecord",
    "WasteRequest",
    "WasteResult",
    "WasteType",
    "WasteAnalytics",
]
