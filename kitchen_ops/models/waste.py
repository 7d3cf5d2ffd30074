"""Wasted orders and pizzas."""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from kitchen_ops.models.inventory import UsageEntry
from kitchen_ops.models.order import Order


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WasteType(str, Enum):
    """How much of an order was thrown away."""

    FULL_ORDER = "full_order"
    PARTIAL_PIZZAS = "partial_pizzas"


class WasteRequest(BaseModel):
    """Why food was thrown away and who did it."""

    reason: str
    details: str = ""
    wasted_by: str = "Unknown"

    @field_validator("reason")
    @classmethod
    def reason_required(cls, v: str) -> str:
        """A waste reason must not be blank."""
        if not v.strip():
            raise ValueError("A waste reason is required")
        return v.strip()


class WastedPizza(BaseModel):
    """One pizza line taken out of an order."""

    index: int
    pizza_type: str | None = None
    quantity: int = 1


class WasteRecord(BaseModel):
    """Audit record of wasted food and the stock it used."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    original_order_id: str
    customer_name: str | None = None
    platform: str = "Window"
    order_time: datetime
    waste_type: WasteType
    reason: str
    details: str = ""
    wasted_by: str = "Unknown"
    pizzas: list[WastedPizza] = Field(default_factory=list)
    usage: dict[str, UsageEntry] = Field(default_factory=dict)
    # Ingredient cost of the wasted food
    waste_value: float = 0.0
    timestamp: datetime = Field(default_factory=_utcnow)
    # Set once the usage has been taken off stock
    deducted_at: datetime | None = None

    @field_validator("order_time", "timestamp", "deducted_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        """Naive timestamps are read as UTC."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class WasteResult(BaseModel):
    """A new waste record and what is left of the order."""

    record: WasteRecord
    remaining_order: Order | None = None


class WasteBucket(BaseModel):
    count: int = 0
    value: float = 0.0


class WasteAnalytics(BaseModel):
    """Waste totals for a period."""

    total_wasted_items: int
    total_waste_value: float
    waste_by_reason: dict[str, WasteBucket] = Field(default_factory=dict)
    waste_by_date: dict[str, WasteBucket] = Field(default_factory=dict)
    average_waste_per_item: float
