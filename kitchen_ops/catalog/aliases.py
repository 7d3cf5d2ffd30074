"""Alias tables mapping spelling variants to canonical names."""

# Recipe-side or staff-entered ingredient spellings -> canonical inventory key.
# Canonical keys never appear on the left-hand side.
INGREDIENT_ALIASES: dict[str, str] = {
    # Dough and sauce
    "sourdough": "sourdough_dough",
    "dough_balls": "sourdough_dough",
    "dough_ball": "sourdough_dough",
    "pizza_sauce": "tomato_sauce",
    # Cheese
    "mozzarella": "shredded_mozzarella",
    "mozzarella_cheese": "shredded_mozzarella",
    "shredded_cheese": "shredded_mozzarella",
    "goat_cheese": "goats_cheese",
    "ricotta_cheese": "ricotta",
    # Vegetables
    "red_onions": "red_onion",
    "caramelized_onions": "caramelised_onions",
    "caramelised_onion": "caramelised_onions",
    "bell_pepper": "bell_peppers",
    "baby_marrow": "zucchini",
    "courgette": "zucchini",
    "kalamata_olives": "olives",
    "sun_dried_tomatoes": "sundried_tomatoes",
    "potato_slices": "potatoes",
    "crispy_potatoes": "potatoes",
    "artichoke_hearts": "artichoke",
    "caramelized_pineapple": "caramelised_pineapple",
    # Herbs, oils and spreads
    "basil": "fresh_basil",
    "chilli_infused_oil": "chilli_oil",
    "fig_preserve": "fig_jam",
    "mrs_balls_chutney": "chutney",
    # Drinks
    "coca_cola_syrup": "coke_syrup",
    "soda_water": "carbonated_water",
}


# Order-supplied pizza and side names -> canonical recipe name
PIZZA_NAME_ALIASES: dict[str, str] = {
    "The Champ": "THE CHAMP",
    "The Champ Pizza": "THE CHAMP",
    "Champ": "THE CHAMP",
    "Lekkerizza": "LEKKER'IZZA",
    "Lekker'izza Pizza": "LEKKER'IZZA",
    "Chick Tick Boom": "CHICK TICK BOOM!",
    "Chick Tick": "CHICK TICK BOOM!",
    "Mish Mash": "MISH-MASH",
    "Pig in Paradise": "POPPA'S PIG IN PARADISE",
    "Pig n Paradise": "POPPA'S PIG IN PARADISE",
    "Pig Paradise": "POPPA'S PIG IN PARADISE",
    "Poppa's": "POPPA'S PIG IN PARADISE",
    "Poppa": "POPPA'S PIG IN PARADISE",
    "Meat Lovers": "MEAT LOVERS MAYHEM",
    "Artichoke and Ham": "ARTICHOKE & HAM",
    "Ham & Artichoke": "ARTICHOKE & HAM",
    "Artichoke Ham": "ARTICHOKE & HAM",
    "Margie Pizza": "MARGIE",
    "Margherita": "MARGIE",
    "Margherita Pizza": "MARGIE",
    "Owen": "OWEN!",
    "Vegan": "VEGAN HARVEST",
    "Potato Pizza": "SPUD",
    "Greek": "GREEK GODDESS",
    "Four Cheese": "QUATTRO FORMAGGI",
    "Custom Pizza": "BUILD YOUR OWN",
    "Pizza Base": "STRETCHED BASE WITH SAUCE",
    "Base with Sauce": "STRETCHED BASE WITH SAUCE",
    "Garlic Dough Balls": "DOUGH BALLS",
    "Garlic Doughballs": "DOUGH BALLS",
    "Doughballs": "DOUGH BALLS",
    "Garlic Bread Balls": "DOUGH BALLS",
}


DRINK_NAME_ALIASES: dict[str, str] = {
    "Coke 330ml": "Coca-Cola 330ml",
    "Coca Cola": "Coca-Cola 330ml",
    "Coke": "Coca-Cola 330ml",
    "Coca-Cola Zero": "Coke Zero 330ml",
    "Coke Zero": "Coke Zero 330ml",
    "Sprite": "Sprite 330ml",
    "Fanta": "Fanta Orange 330ml",
    "Fanta Orange": "Fanta Orange 330ml",
    "Appletizer": "Appletizer 330ml",
    "Grapetizer": "Grapetizer 330ml",
    "Water": "Still Water 500ml",
    "Still Water": "Still Water 500ml",
    "Sparkling Water": "Sparkling Water 500ml",
    "Iced Tea": "Ice Tea 500ml",
    "Ice Tea": "Ice Tea 500ml",
    "Red Bull": "Red Bull 250ml",
}


# Lower-cased kitchen item names that never count toward oven capacity
NON_PIZZA_NAMES: frozenset[str] = frozenset(
    {
        "garlic doughballs",
        "garlic bread balls",
    }
)
NON_PIZZA_MARKERS: tuple[str, ...] = ("doughball", "dough ball")
