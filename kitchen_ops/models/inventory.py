"""Inventory management models."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_THRESHOLD = 10.0


class StockEntry(BaseModel):
    """Stock on hand for one canonical ingredient."""

    amount: float = Field(default=0.0, ge=0)
    unit: str = "unit"
    category: str = "other"
    threshold: float = DEFAULT_THRESHOLD

    @field_validator("amount", mode="before")
    @classmethod
    def clamp_amount(cls, value: Any) -> Any:
        """Stored amounts below zero are read back as zero."""
        if isinstance(value, (int, float)) and value < 0:
            return 0.0
        return value

    @property
    def is_out_of_stock(self) -> bool:
        """Check if nothing is left."""
        return self.amount == 0

    @property
    def is_low_stock(self) -> bool:
        """Check if the ingredient is at or under its threshold."""
        return self.amount <= self.threshold


StockSnapshot = dict[str, StockEntry]


class UsageEntry(BaseModel):
    """Derived consumption of one ingredient."""

    used: float = 0.0
    unit: str = "unit"
    category: str = "other"
    cost: float = 0.0


UsageRecord = dict[str, UsageEntry]


class Urgency(str, Enum):
    """How urgently an ingredient needs restocking."""

    CRITICAL = "critical"
    LOW = "low"


class Alert(BaseModel):
    """Low-stock alert for one ingredient."""

    ingredient: str
    current_stock: float
    threshold: float
    unit: str
    category: str
    urgency: Urgency

    @property
    def deficit(self) -> float:
        """How far the ingredient is below its threshold."""
        return self.threshold - self.current_stock


StockOperation = Literal["set", "add", "subtract"]


class StockAdjustment(BaseModel):
    """Manual stock change entered by staff."""

    quantity: float = Field(ge=0)
    operation: StockOperation = "set"
    unit: str | None = None
    category: str | None = None
    threshold: float | None = Field(default=None, ge=0)


def snapshot_from_raw(data: dict[str, Any] | None) -> StockSnapshot:
    """Build a snapshot from stored or request data."""
    return {
        ingredient: entry if isinstance(entry, StockEntry) else StockEntry(**entry)
        for ingredient, entry in (data or {}).items()
    }


def snapshot_to_raw(snapshot: StockSnapshot) -> dict[str, dict[str, Any]]:
    """Serialize a snapshot for storage."""
    return {
        ingredient: entry.model_dump(mode="json")
        for ingredient, entry in snapshot.items()
    }


class DailyEstimate(BaseModel):
    """Average daily consumption of one ingredient."""

    daily_average: float
    recommended_daily: float
    unit: str
    category: str = "other"
