"""Lookup layer over the static recipe tables."""

from typing import Iterable, Literal

from kitchen_ops.catalog.aliases import (
    DRINK_NAME_ALIASES,
    INGREDIENT_ALIASES,
    NON_PIZZA_MARKERS,
    NON_PIZZA_NAMES,
    PIZZA_NAME_ALIASES,
)
from kitchen_ops.catalog.recipes import (
    BASE_INGREDIENTS,
    DRINK_RECIPES,
    PIZZA_RECIPES,
    SIDE_RECIPES,
)
from kitchen_ops.models.recipe import Recipe, RecipeIngredient, RecipeKind

# Which order line an item name came from
LineKind = Literal["pizza", "drink"]

DEFAULT_UNIT_COST = 1.0


class RecipeCatalog:
    """Recipes, base ingredients and alias tables for one menu.

    Pizza lines on an order may name either a pizza or a kitchen side
    (dough balls go through the oven too), so both live in the "pizza"
    line namespace. Drinks have their own namespace.
    """

    def __init__(
        self,
        recipes: Iterable[Recipe],
        base_ingredients: dict[str, RecipeIngredient],
        ingredient_aliases: dict[str, str] | None = None,
        pizza_name_aliases: dict[str, str] | None = None,
        drink_name_aliases: dict[str, str] | None = None,
    ):
        self.base_ingredients = dict(base_ingredients)
        self.ingredient_aliases = dict(ingredient_aliases or {})
        self._recipes: dict[LineKind, dict[str, Recipe]] = {"pizza": {}, "drink": {}}
        for recipe in recipes:
            line_kind: LineKind = "drink" if recipe.kind == RecipeKind.DRINK else "pizza"
            self._recipes[line_kind][recipe.name] = recipe
        self._name_aliases: dict[LineKind, dict[str, str]] = {
            "pizza": dict(pizza_name_aliases or {}),
            "drink": dict(drink_name_aliases or {}),
        }
        self._ingredient_index = self._build_ingredient_index()

    def _build_ingredient_index(self) -> dict[str, RecipeIngredient]:
        """First recipe definition of each canonical ingredient wins."""
        index: dict[str, RecipeIngredient] = {}
        sources = [self.base_ingredients] + [
            recipe.ingredients
            for kind in ("pizza", "drink")
            for recipe in self._recipes[kind].values()
        ]
        for ingredients in sources:
            for key, ingredient in ingredients.items():
                index.setdefault(self.ingredient_aliases.get(key, key), ingredient)
        return index

    def recipe(self, name: str, kind: LineKind = "pizza") -> Recipe | None:
        """Get a recipe by its exact canonical name."""
        return self._recipes[kind].get(name)

    def lookup(self, name: str | None, kind: LineKind = "pizza") -> Recipe | None:
        """Get a recipe by canonical name or exact alias."""
        if not name:
            return None
        recipe = self._recipes[kind].get(name)
        if recipe is None and name in self._name_aliases[kind]:
            recipe = self._recipes[kind].get(self._name_aliases[kind][name])
        return recipe

    def names(self, kind: LineKind = "pizza") -> list[str]:
        """Canonical names in catalog order."""
        return list(self._recipes[kind])

    def name_aliases(self, kind: LineKind = "pizza") -> dict[str, str]:
        """Alias table for order-supplied names of one line kind."""
        return self._name_aliases[kind]

    def recipes(self) -> list[Recipe]:
        """Every recipe across both namespaces."""
        return [*self._recipes["pizza"].values(), *self._recipes["drink"].values()]

    def ingredient_keys(self) -> list[tuple[str, str]]:
        """Every (recipe name, raw ingredient key) pair, base ingredients included."""
        pairs = [("BASE", key) for key in self.base_ingredients]
        for recipe in self.recipes():
            pairs.extend((recipe.name, key) for key in recipe.ingredients)
        return pairs

    def ingredient(self, canonical_key: str) -> RecipeIngredient | None:
        """Recipe data for a canonical ingredient key."""
        return self._ingredient_index.get(canonical_key)

    def unit_cost(self, canonical_key: str) -> float:
        """Cost per unit of an ingredient, 1.0 when no recipe prices it."""
        ingredient = self._ingredient_index.get(canonical_key)
        return ingredient.unit_cost if ingredient else DEFAULT_UNIT_COST

    def is_non_pizza(self, name: str | None, recipe: Recipe | None = None) -> bool:
        """Check if a kitchen line item should not count toward oven capacity."""
        if recipe is not None and recipe.kind == RecipeKind.SIDE:
            return True
        if not name:
            return False
        lowered = name.strip().lower()
        return lowered in NON_PIZZA_NAMES or any(
            marker in lowered for marker in NON_PIZZA_MARKERS
        )


def default_catalog() -> RecipeCatalog:
    """Build the catalog for the shop's current menu."""
    return RecipeCatalog(
        recipes=[*PIZZA_RECIPES, *SIDE_RECIPES, *DRINK_RECIPES],
        base_ingredients=BASE_INGREDIENTS,
        ingredient_aliases=INGREDIENT_ALIASES,
        pizza_name_aliases=PIZZA_NAME_ALIASES,
        drink_name_aliases=DRINK_NAME_ALIASES,
    )
