"""Static recipe data for the menu.

Amounts are per single item. Costs are rand per unit (gram, millilitre,
ball or can) and feed the daily report's stock valuation.
"""

from kitchen_ops.models.recipe import Recipe, RecipeIngredient, RecipeKind


def _ing(unit: str, amount: float, unit_cost: float, category: str) -> RecipeIngredient:
    return RecipeIngredient(unit=unit, amount=amount, unit_cost=unit_cost, category=category)


# Used by every pizza unless the recipe excludes it
BASE_INGREDIENTS: dict[str, RecipeIngredient] = {
    "sourdough_dough": _ing("ball", 1, 2.50, "dough"),
    "tomato_sauce": _ing("ml", 80, 0.02, "sauce"),
    "shredded_mozzarella": _ing("g", 94, 0.12, "cheese"),
}

NO_SAUCE = frozenset({"tomato_sauce"})
NO_CHEESE = frozenset({"shredded_mozzarella"})


PIZZA_RECIPES: list[Recipe] = [
    Recipe(
        name="THE CHAMP",
        price=159.00,
        ingredients={
            "pepperoni": _ing("g", 60, 0.20, "meat"),
            "red_onion": _ing("g", 20, 0.03, "vegetable"),
            "parmesan": _ing("g", 15, 0.35, "cheese"),
        },
    ),
    Recipe(
        name="LEKKER'IZZA",
        price=185.00,
        ingredients={
            "anchovies": _ing("g", 30, 0.45, "seafood"),
            "olives": _ing("g", 30, 0.15, "vegetable"),
            "fresh_mozzarella": _ing("g", 60, 0.22, "cheese"),
            "fresh_basil": _ing("g", 5, 0.40, "herb"),
        },
        excludes=NO_CHEESE,
    ),
    Recipe(
        name="CHICK TICK BOOM!",
        price=155.00,
        ingredients={
            "chicken_tikka": _ing("g", 80, 0.18, "meat"),
            "peppadews": _ing("g", 30, 0.12, "vegetable"),
            "fresh_coriander": _ing("g", 8, 0.30, "herb"),
        },
    ),
    Recipe(
        name="MISH-MASH",
        price=149.00,
        ingredients={
            "parma_ham": _ing("g", 50, 0.55, "meat"),
            "fig_preserve": _ing("g", 30, 0.10, "spread"),
            "goats_cheese": _ing("g", 50, 0.30, "cheese"),
            "rocket": _ing("g", 20, 0.15, "vegetable"),
        },
    ),
    Recipe(
        name="POPPA'S PIG IN PARADISE",
        price=169.00,
        ingredients={
            "bacon": _ing("g", 50, 0.16, "meat"),
            "caramelised_pineapple": _ing("g", 80, 0.06, "fruit"),
        },
    ),
    Recipe(
        name="MEAT LOVERS MAYHEM",
        price=149.00,
        ingredients={
            "bacon": _ing("g", 30, 0.16, "meat"),
            "pepperoni": _ing("g", 30, 0.20, "meat"),
            "biltong": _ing("g", 25, 0.60, "meat"),
            "peppadews": _ing("g", 20, 0.12, "vegetable"),
            "red_onions": _ing("g", 15, 0.03, "vegetable"),
            "chutney": _ing("ml", 15, 0.04, "sauce"),
            "feta": _ing("g", 30, 0.14, "cheese"),
        },
    ),
    Recipe(
        name="ARTICHOKE & HAM",
        price=159.00,
        ingredients={
            "ham": _ing("g", 50, 0.14, "meat"),
            "mushrooms": _ing("g", 40, 0.08, "vegetable"),
            "artichoke_hearts": _ing("g", 60, 0.25, "vegetable"),
            "olives": _ing("g", 20, 0.15, "vegetable"),
        },
    ),
    Recipe(
        name="GLAZE OF GLORY",
        price=149.00,
        ingredients={
            "bacon": _ing("g", 50, 0.16, "meat"),
            "feta": _ing("g", 40, 0.14, "cheese"),
            "red_onion": _ing("g", 20, 0.03, "vegetable"),
            "balsamic_glaze": _ing("ml", 10, 0.12, "sauce"),
        },
    ),
    Recipe(
        name="MEDITERRANEAN",
        price=165.00,
        ingredients={
            "mushrooms": _ing("g", 60, 0.08, "vegetable"),
            "baby_marrow": _ing("g", 60, 0.05, "vegetable"),
            "kalamata_olives": _ing("g", 30, 0.15, "vegetable"),
            "sundried_tomatoes": _ing("g", 40, 0.20, "vegetable"),
            "seasonal_herbs": _ing("g", 8, 0.30, "herb"),
            "hummus": _ing("g", 50, 0.09, "spread"),
            "olive_oil": _ing("ml", 15, 0.10, "oil"),
        },
        excludes=NO_CHEESE,
    ),
    Recipe(
        name="MARGIE",
        price=119.00,
        ingredients={
            "fresh_basil": _ing("g", 10, 0.40, "herb"),
            "olive_oil": _ing("ml", 10, 0.10, "oil"),
        },
    ),
    Recipe(
        name="OWEN!",
        price=159.00,
        ingredients={
            "mozzarella": _ing("g", 140, 0.12, "cheese"),
        },
        excludes=NO_CHEESE,
    ),
    Recipe(
        name="CAPRESE",
        price=155.00,
        ingredients={
            "fresh_mozzarella": _ing("g", 80, 0.22, "cheese"),
            "cherry_tomatoes": _ing("g", 60, 0.07, "vegetable"),
            "balsamic_glaze": _ing("ml", 10, 0.12, "sauce"),
            "basil_pesto": _ing("g", 30, 0.25, "sauce"),
        },
        excludes=NO_CHEESE,
    ),
    Recipe(
        name="VEGAN HARVEST",
        price=99.00,
        ingredients={
            "mushrooms": _ing("g", 80, 0.08, "vegetable"),
            "courgette": _ing("g", 60, 0.05, "vegetable"),
            "olives": _ing("g", 30, 0.15, "vegetable"),
            "sun_dried_tomatoes": _ing("g", 40, 0.20, "vegetable"),
            "seasonal_herbs": _ing("g", 8, 0.30, "herb"),
            "hummus": _ing("g", 50, 0.09, "spread"),
            "olive_oil": _ing("ml", 15, 0.10, "oil"),
        },
        excludes=NO_CHEESE,
    ),
    Recipe(
        name="SPUD",
        price=129.00,
        ingredients={
            "potato_slices": _ing("g", 120, 0.03, "vegetable"),
            "caramelised_onions": _ing("g", 40, 0.06, "vegetable"),
            "rosemary": _ing("g", 5, 0.30, "herb"),
            "chilli_oil": _ing("ml", 10, 0.15, "oil"),
            "parmesan": _ing("g", 20, 0.35, "cheese"),
        },
        excludes=NO_SAUCE,
    ),
    Recipe(
        name="GREEK GODDESS",
        price=129.00,
        ingredients={
            "zucchini": _ing("g", 60, 0.05, "vegetable"),
            "sundried_tomatoes": _ing("g", 30, 0.20, "vegetable"),
            "olives": _ing("g", 25, 0.15, "vegetable"),
            "feta": _ing("g", 40, 0.14, "cheese"),
            "garlic": _ing("g", 5, 0.10, "vegetable"),
        },
    ),
    Recipe(
        name="QUATTRO FORMAGGI",
        price=159.00,
        ingredients={
            "provolone": _ing("g", 30, 0.30, "cheese"),
            "blue_cheese": _ing("g", 30, 0.40, "cheese"),
            "parmesan": _ing("g", 20, 0.35, "cheese"),
            "red_onion": _ing("g", 15, 0.03, "vegetable"),
            "fig_jam": _ing("g", 20, 0.10, "spread"),
        },
    ),
    Recipe(
        name="MUSHROOM CLOUD",
        price=159.00,
        ingredients={
            "mushrooms": _ing("g", 100, 0.08, "vegetable"),
            "caramelized_onions": _ing("g", 40, 0.06, "vegetable"),
            "goat_cheese": _ing("g", 50, 0.30, "cheese"),
            "chilli_infused_oil": _ing("ml", 10, 0.15, "oil"),
            "sunflower_seeds": _ing("g", 10, 0.08, "seed"),
        },
    ),
    Recipe(
        name="BUILD YOUR OWN",
        price=99.00,
    ),
    Recipe(
        name="STRETCHED BASE WITH SAUCE",
        price=55.00,
        excludes=NO_CHEESE,
    ),
]


SIDE_RECIPES: list[Recipe] = [
    Recipe(
        name="DOUGH BALLS",
        kind=RecipeKind.SIDE,
        price=45.00,
        ingredients={
            "sourdough_dough": _ing("ball", 1, 2.50, "dough"),
            "garlic_butter": _ing("g", 20, 0.12, "spread"),
        },
    ),
]


def _soda(syrup: str, price: float = 25.00) -> dict:
    return {
        "price": price,
        "ingredients": {
            syrup: _ing("ml", 50, 0.08, "beverage_ingredient"),
            "carbonated_water": _ing("ml", 280, 0.001, "beverage_ingredient"),
            "cups_330ml": _ing("unit", 1, 0.60, "packaging"),
        },
    }


def _packaged(stock_item: str, price: float) -> dict:
    return {
        "price": price,
        "ingredients": {stock_item: _ing("unit", 1, price * 0.45, "beverage")},
    }


DRINK_RECIPES: list[Recipe] = [
    Recipe(name="Coca-Cola 330ml", kind=RecipeKind.DRINK, **_soda("coke_syrup")),
    Recipe(name="Coke Zero 330ml", kind=RecipeKind.DRINK, **_soda("coke_zero_syrup")),
    Recipe(name="Sprite 330ml", kind=RecipeKind.DRINK, **_soda("sprite_syrup")),
    Recipe(name="Fanta Orange 330ml", kind=RecipeKind.DRINK, **_soda("fanta_syrup")),
    Recipe(name="Appletizer 330ml", kind=RecipeKind.DRINK, **_packaged("appletizer", 28.00)),
    Recipe(name="Grapetizer 330ml", kind=RecipeKind.DRINK, **_packaged("grapetizer", 28.00)),
    Recipe(name="Still Water 500ml", kind=RecipeKind.DRINK, **_packaged("still_water", 18.00)),
    Recipe(
        name="Sparkling Water 500ml",
        kind=RecipeKind.DRINK,
        **_packaged("sparkling_water", 18.00),
    ),
    Recipe(name="Ice Tea 500ml", kind=RecipeKind.DRINK, **_packaged("ice_tea", 26.00)),
    Recipe(name="Red Bull 250ml", kind=RecipeKind.DRINK, **_packaged("red_bull", 35.00)),
]
