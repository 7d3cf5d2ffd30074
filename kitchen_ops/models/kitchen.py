"""Kitchen queue settings, historical patterns and estimate models."""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class KitchenSettings(BaseModel):
    """Tunable queue estimator settings.

    Out-of-range numbers are clamped into their allowed range rather than
    rejected, so a stale or hand-edited settings record still loads.
    """

    base_prep_minutes: int = 10
    batch_capacity: int = 3
    rush_mode_enabled: bool = False
    rush_multiplier: float = 1.5
    predictive_enabled: bool = True
    rush_hour_multiplier: float = 1.3
    alert_threshold: int = 60

    @field_validator("base_prep_minutes")
    @classmethod
    def clamp_prep_minutes(cls, v: int) -> int:
        """Base prep time is kept between 5 and 30 minutes."""
        return int(_clamp(v, 5, 30))

    @field_validator("batch_capacity")
    @classmethod
    def clamp_capacity(cls, v: int) -> int:
        """Batch capacity is kept between 1 and 10 pizzas."""
        return int(_clamp(v, 1, 10))

    @field_validator("rush_multiplier", "rush_hour_multiplier")
    @classmethod
    def clamp_multiplier(cls, v: float) -> float:
        """Multipliers are kept between 1.0 and 3.0."""
        return _clamp(v, 1.0, 3.0)

    @field_validator("alert_threshold")
    @classmethod
    def clamp_alert_threshold(cls, v: int) -> int:
        """Queue alert threshold is kept between 15 and 180 minutes."""
        return int(_clamp(v, 15, 180))

    def merged(self, changes: dict[str, Any]) -> "KitchenSettings":
        """Return new settings with known fields from changes applied."""
        data = self.model_dump()
        data.update({k: v for k, v in changes.items() if k in type(self).model_fields})
        return KitchenSettings(**data)


class SettingsPreset(BaseModel):
    """Settings for a staffing level."""

    name: str
    description: str
    base_prep_minutes: int
    batch_capacity: int
    rush_mode_enabled: bool


PRESETS: dict[str, SettingsPreset] = {
    "minimal": SettingsPreset(
        name="Minimal Staff (1 cook)",
        description="Single cook handling all orders",
        base_prep_minutes=15,
        batch_capacity=2,
        rush_mode_enabled=False,
    ),
    "normal": SettingsPreset(
        name="Normal Staff (2 cooks)",
        description="Standard staffing level",
        base_prep_minutes=10,
        batch_capacity=3,
        rush_mode_enabled=False,
    ),
    "busy": SettingsPreset(
        name="Busy Period (3+ cooks)",
        description="Full staff during peak hours",
        base_prep_minutes=8,
        batch_capacity=5,
        rush_mode_enabled=False,
    ),
    "rush": SettingsPreset(
        name="Friday Rush (3+ cooks)",
        description="Full staff with rush multiplier",
        base_prep_minutes=10,
        batch_capacity=3,
        rush_mode_enabled=True,
    ),
}


class HourPattern(BaseModel):
    """Average demand for one hour of the day."""

    avg_orders: float = Field(ge=0)
    avg_pizzas: float = Field(ge=0)
    rush_period: bool = False


class HistoricalPatterns(BaseModel):
    """Demand history used for predictive estimates."""

    hourly_patterns: dict[int, HourPattern] = Field(default_factory=dict)
    friday_multiplier: float = 1.4
    weekend_multiplier: float = 1.2
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def default(cls) -> "HistoricalPatterns":
        """Typical evening trade for a small pizzeria."""
        return cls(
            hourly_patterns={
                17: HourPattern(avg_orders=15, avg_pizzas=25, rush_period=True),
                18: HourPattern(avg_orders=20, avg_pizzas=35, rush_period=True),
                19: HourPattern(avg_orders=18, avg_pizzas=30, rush_period=True),
                20: HourPattern(avg_orders=12, avg_pizzas=20, rush_period=False),
                21: HourPattern(avg_orders=8, avg_pizzas=15, rush_period=False),
            }
        )


# Estimates


class TimeSlot(BaseModel):
    """Where "now" falls in the trading week."""

    hour: int
    is_friday: bool
    is_weekend: bool
    is_rush_period: bool

    @property
    def label(self) -> str:
        """Hour range label such as 18:00-19:00."""
        return f"{self.hour}:00-{self.hour + 1}:00"


class Prediction(BaseModel):
    """Expected demand for the coming hour."""

    expected_orders: int = 0
    expected_pizzas: int = 0
    confidence: Literal["high", "low"] = "low"
    hour: int
    is_rush_period: bool = False


class OrderEstimate(BaseModel):
    """How far back in the queue an order sits."""

    order_id: str
    pizzas_ahead: int
    position: int
    estimated_prep_time: int


class WindowEstimate(BaseModel):
    """Estimate shown to a walk-in customer before ordering."""

    estimated_prep_time: int
    current_queue: int
    your_pizzas: int
    expected_incoming_pizzas: int
    is_rush_period: bool
    is_friday_rush: bool
    confidence: Literal["high", "low"]
    time_slot: str


class TrackedWindowOrder(BaseModel):
    """Original estimate given to a walk-in customer."""

    order_id: str
    customer_name: str | None = None
    original_estimate: int
    current_estimate: int
    order_time: datetime
    estimated_ready_time: datetime
    notifications_sent: list[str] = Field(default_factory=list)


class DelayedOrder(BaseModel):
    """A tracked order whose estimate has grown past the delay threshold."""

    order_id: str
    customer_name: str | None = None
    original_estimate: int
    new_estimate: int
    delay_minutes: int
    order_time: datetime
    reason: str


class RushInfo(BaseModel):
    """Rush period details for the queue overview."""

    is_rush_period: bool
    is_friday_rush: bool
    time_slot: str
    expected_orders: int
    expected_pizzas: int
    confidence: Literal["high", "low"]


class QueueOverview(BaseModel):
    """Everything the kitchen display shows about the queue."""

    total_pizzas_in_queue: int
    active_orders_count: int
    estimated_wait_time: int
    settings: KitchenSettings
    rush_info: RushInfo
    delayed_orders: list[DelayedOrder] = Field(default_factory=list)
    window_orders_tracked: int = 0
    last_updated: datetime
