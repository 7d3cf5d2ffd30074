"""Recipe models for sellable items."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RecipeKind(str, Enum):
    """What kind of sellable item a recipe describes."""

    PIZZA = "pizza"
    SIDE = "side"
    DRINK = "drink"


class RecipeIngredient(BaseModel):
    """Quantity of one ingredient used by a single item."""

    model_config = ConfigDict(frozen=True)

    unit: str
    amount: float = Field(gt=0)
    unit_cost: float = Field(default=0.0, ge=0)
    category: str = "other"


class Recipe(BaseModel):
    """Ingredient list for one sellable item."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: RecipeKind = RecipeKind.PIZZA
    ingredients: dict[str, RecipeIngredient] = Field(default_factory=dict)
    excludes: frozenset[str] = Field(default_factory=frozenset)
    price: float | None = None

    @property
    def uses_base(self) -> bool:
        """Pizzas get the base ingredients; sides and drinks do not."""
        return self.kind == RecipeKind.PIZZA
