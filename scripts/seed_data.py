"""Seed initial stock, kitchen settings and sample orders."""

import asyncio
from datetime import datetime, timedelta, timezone

from kitchen_ops.catalog import default_catalog
from kitchen_ops.models.inventory import StockEntry
from kitchen_ops.models.kitchen import HistoricalPatterns, KitchenSettings
from kitchen_ops.models.order import DrinkLine, Order, OrderStatus, PizzaLine
from kitchen_ops.services.resolver import IngredientResolver
from kitchen_ops.state import (
    RedisOrderRepository,
    RedisSettingsRepository,
    RedisStockRepository,
    StateManager,
)

# Opening stock per unit of measure
OPENING_AMOUNTS = {
    "ball": 60,
    "g": 3000,
    "ml": 4000,
    "unit": 48,
}

OPENING_THRESHOLDS = {
    "ball": 15,
    "g": 500,
    "ml": 800,
    "unit": 12,
}


async def seed_stock(state_manager: StateManager) -> None:
    """Seed a stock entry for every ingredient the menu uses."""
    print("Seeding stock...")

    catalog = default_catalog()
    resolver = IngredientResolver(catalog)
    snapshot: dict[str, StockEntry] = {}

    for _, raw_key in catalog.ingredient_keys():
        key = resolver.resolve(raw_key)
        if key in snapshot:
            continue
        ingredient = catalog.ingredient(key)
        snapshot[key] = StockEntry(
            amount=OPENING_AMOUNTS.get(ingredient.unit, 100),
            unit=ingredient.unit,
            category=ingredient.category,
            threshold=OPENING_THRESHOLDS.get(ingredient.unit, 10),
        )

    await RedisStockRepository(state_manager).save(snapshot)
    for key, entry in sorted(snapshot.items()):
        print(f"  ✓ {key}: {entry.amount:g}{entry.unit}")
    print(f"✓ {len(snapshot)} ingredients seeded\n")


async def seed_kitchen(state_manager: StateManager) -> None:
    """Seed default kitchen settings and demand patterns."""
    print("Seeding kitchen settings...")

    repository = RedisSettingsRepository(state_manager)
    await repository.save(KitchenSettings())
    await repository.save_patterns(HistoricalPatterns.default())

    print("✓ Kitchen settings seeded\n")


async def seed_sample_orders(state_manager: StateManager) -> None:
    """Seed a few active orders for the kitchen display."""
    print("Seeding sample orders...")

    now = datetime.now(timezone.utc)
    orders = [
        Order(
            customer_name="Thandi",
            platform="Window",
            pizzas=[
                PizzaLine(pizza_type="THE CHAMP", quantity=2),
                PizzaLine(pizza_type="MARGIE", quantity=1),
            ],
            cold_drinks=[DrinkLine(drink_type="Coca-Cola 330ml", quantity=2)],
            created_at=now - timedelta(minutes=25),
        ),
        Order(
            customer_name="Pieter",
            platform="Uber Eats",
            status=OrderStatus.IN_OVEN,
            pizzas=[
                PizzaLine(pizza_type="MISH-MASH", quantity=1),
                PizzaLine(pizza_type="Garlic Doughballs", quantity=1),
            ],
            created_at=now - timedelta(minutes=15),
        ),
        Order(
            customer_name="Lerato",
            platform="Mr D Food",
            pizzas=[PizzaLine(pizza_type="SPUD", quantity=3)],
            cold_drinks=[DrinkLine(drink_type="Still Water 500ml", quantity=1)],
            created_at=now - timedelta(minutes=5),
        ),
    ]

    repository = RedisOrderRepository(state_manager)
    for order in orders:
        await repository.save(order)
        print(f"  ✓ Added order for {order.customer_name} ({order.platform})")

    print("✓ Sample orders seeded successfully\n")


async def main() -> None:
    """Run all seed functions."""
    print("\n" + "=" * 50)
    print("  Seeding Kitchen Ops Data")
    print("=" * 50 + "\n")

    state_manager = StateManager()
    await state_manager.connect()
    try:
        await seed_stock(state_manager)
        await seed_kitchen(state_manager)
        await seed_sample_orders(state_manager)
    finally:
        await state_manager.disconnect()

    print("=" * 50)
    print("  ✓ All data seeded successfully!")
    print("=" * 50 + "\n")


if __name__ == "__main__":
    asyncio.run(main())
