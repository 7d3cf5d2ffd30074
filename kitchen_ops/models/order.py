"""Order-related data models."""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union
from uuid import uuid4

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_quantity(value: Any) -> Any:
    """Missing or non-numeric quantities count as one item.

    Fractional positive quantities round half up, but never below one.
    """
    if value is None or isinstance(value, bool):
        return 1
    try:
        number = float(str(value).strip())
        if number > 0 and not number.is_integer():
            return max(1, math.floor(number + 0.5))
        return int(number)
    except (ValueError, OverflowError):
        return 1


Quantity = Annotated[int, BeforeValidator(_coerce_quantity)]


class OrderStatus(str, Enum):
    """Order status progression."""

    PENDING = "pending"
    IN_OVEN = "in-oven"
    READY = "ready"
    COMPLETED = "completed"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


INACTIVE_STATUSES = frozenset(
    {
        OrderStatus.READY,
        OrderStatus.COMPLETED,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    }
)

FINISHED_STATUSES = frozenset(
    {
        OrderStatus.READY,
        OrderStatus.COMPLETED,
        OrderStatus.DELIVERED,
    }
)


class PizzaLine(BaseModel):
    """A pizza (or kitchen side) line item."""

    model_config = ConfigDict(populate_by_name=True)

    pizza_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("pizza_type", "pizzaType", "type"),
    )
    quantity: Quantity = 1
    is_cooked: bool = Field(
        default=False, validation_alias=AliasChoices("is_cooked", "isCooked")
    )


class DrinkLine(BaseModel):
    """A cold drink line item."""

    model_config = ConfigDict(populate_by_name=True)

    drink_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("drink_type", "drinkType", "type"),
    )
    quantity: Quantity = 1


class Order(BaseModel):
    """One customer transaction."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "orderId", "order_id"),
    )
    customer_name: str | None = Field(
        default=None, validation_alias=AliasChoices("customer_name", "customerName")
    )
    platform: str = "Window"
    status: OrderStatus = OrderStatus.PENDING

    pizzas: list[PizzaLine] = Field(default_factory=list)
    cold_drinks: list[DrinkLine] = Field(
        default_factory=list,
        validation_alias=AliasChoices("cold_drinks", "coldDrinks"),
    )
    cooked: list[bool] = Field(default_factory=list)

    # Timing
    created_at: datetime = Field(
        default_factory=_utcnow,
        validation_alias=AliasChoices("created_at", "createdAt", "orderTime"),
    )
    due_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("due_at", "dueAt", "dueTime")
    )
    updated_at: datetime | None = None
    # Set once the end-of-day run has taken this order off stock
    deducted_at: datetime | None = None

    notes: str | None = None
    has_wasted_items: bool = False

    @field_validator("pizzas", "cold_drinks", "cooked", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        """Missing line arrays are treated as empty."""
        return [] if value is None else value

    @field_validator("created_at", "due_at", "updated_at", "deducted_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        """Naive timestamps are stored as UTC so they compare with aware ones."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def align_cooked(self) -> "Order":
        """Keep one cooked flag per pizza line."""
        flags = list(self.cooked[: len(self.pizzas)])
        for index in range(len(flags), len(self.pizzas)):
            flags.append(self.pizzas[index].is_cooked)
        self.cooked = flags
        return self

    @property
    def is_active(self) -> bool:
        """Check if the order still needs kitchen work."""
        return self.status not in INACTIVE_STATUSES

    @property
    def all_cooked(self) -> bool:
        """Check if every pizza line has been cooked."""
        return bool(self.pizzas) and all(self.cooked)

    def uncooked_lines(self) -> list[PizzaLine]:
        """Pizza lines still waiting for the oven."""
        return [
            pizza for pizza, done in zip(self.pizzas, self.cooked) if not done
        ]


# Order updates


class SetStatus(BaseModel):
    """Move an order to a new status."""

    kind: Literal["set_status"] = "set_status"
    status: OrderStatus


class SetCompletion(BaseModel):
    """Mark every pizza in an order as cooked (or undo it)."""

    kind: Literal["set_completion"] = "set_completion"
    completed: bool


class PatchFields(BaseModel):
    """Overwrite arbitrary order fields."""

    kind: Literal["patch_fields"] = "patch_fields"
    fields: dict[str, Any] = Field(default_factory=dict)


OrderUpdate = Annotated[
    Union[SetStatus, SetCompletion, PatchFields],
    Field(discriminator="kind"),
]
