"""Stock notification, daily report and end-of-day models."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from kitchen_ops.models.inventory import Alert, StockEntry, UsageEntry


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StockNotification(BaseModel):
    """Summary of low stock for management."""

    has_alerts: bool
    critical_count: int
    low_stock_count: int
    total_items_low: int
    critical_items: list[Alert] = Field(default_factory=list)
    low_items: list[Alert] = Field(default_factory=list)
    grouped_by_category: dict[str, list[Alert]] = Field(default_factory=dict)
    message: str
    timestamp: datetime = Field(default_factory=_utcnow)


class UsedIngredient(BaseModel):
    """One row of the top-used ingredients table."""

    name: str
    used: float
    unit: str
    cost: float


class LowStockLine(BaseModel):
    """Low-stock row in the daily report."""

    name: str
    amount: float
    threshold: float
    unit: str


class StockChange(BaseModel):
    """Amount change for one ingredient between two snapshots."""

    name: str
    before: float
    after: float
    change: float
    unit: str


class DailyReport(BaseModel):
    """Content of the end-of-day email."""

    starting_stock_value: float
    ending_stock_value: float
    total_usage_cost: float
    low_stock_items: list[LowStockLine] = Field(default_factory=list)
    efficiency_score: int
    top_used_ingredients: list[UsedIngredient] = Field(default_factory=list)
    stock_changes: list[StockChange] = Field(default_factory=list)
    orders_today: int
    pizzas_today: int
    drinks_today: int
    has_low_stock: bool
    critical_items_count: int
    low_stock_items_count: int
    notification_message: str
    generated_at: datetime


class NotificationLogEntry(BaseModel):
    """Audit record of a sent notification."""

    type: str = "daily_stock_notification"
    timestamp: datetime = Field(default_factory=_utcnow)
    recipient: str
    has_alerts: bool
    critical_count: int
    low_stock_count: int
    delivered: bool = True
    error: str | None = None

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Naive timestamps are read as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class EndOfDayResult(BaseModel):
    """Outcome of an end-of-day stock deduction run."""

    success: bool
    orders_processed: int = 0
    # Orders left out because an earlier run already deducted them
    orders_skipped: int = 0
    waste_records_processed: int = 0
    ingredients_updated: int = 0
    usage: dict[str, UsageEntry] = Field(default_factory=dict)
    updated_snapshot: dict[str, StockEntry] = Field(default_factory=dict)
    error: str | None = None
    finished_at: datetime = Field(default_factory=_utcnow)
