"""Tests for order ingredient usage."""

from datetime import timedelta
from typing import Callable

import pytest

from kitchen_ops.models.inventory import UsageEntry
from kitchen_ops.models.order import Order, OrderStatus
from kitchen_ops.services.usage import (
    UsageCalculator,
    is_cooked,
    merge_usage,
    most_used,
    usage_by_category,
)


def _used(record: dict[str, UsageEntry]) -> dict[str, float]:
    return {ingredient: entry.used for ingredient, entry in record.items()}


def test_pizza_includes_base_ingredients(
    calculator: UsageCalculator, make_order: Callable[..., Order]
) -> None:
    usage = calculator.usage_for_order(make_order(("THE CHAMP", 1)))

    assert _used(usage) == {
        "sourdough_dough": 1,
        "tomato_sauce": 80,
        "shredded_mozzarella": 94,
        "pepperoni": 60,
        "red_onion": 20,
        "parmesan": 15,
    }
    assert usage["pepperoni"].cost == pytest.approx(12.0)
    assert usage["pepperoni"].category == "meat"


def test_quantity_scales_usage(calculator: UsageCalculator, sample_order: Order) -> None:
    usage = calculator.usage_for_order(sample_order)

    assert usage["shredded_mozzarella"].used == 282
    assert usage["sourdough_dough"].used == 3
    assert usage["pepperoni"].used == 120
    assert usage["fresh_basil"].used == 10


def test_excluded_base_ingredients(
    calculator: UsageCalculator, make_order: Callable[..., Order]
) -> None:
    """Test that cheese-free and sauce-free pizzas skip those base items."""
    lekker = calculator.usage_for_order(make_order(("LEKKER'IZZA", 1)))
    spud = calculator.usage_for_order(make_order(("SPUD", 1)))

    assert "shredded_mozzarella" not in lekker
    assert "tomato_sauce" in lekker
    assert "tomato_sauce" not in spud
    assert spud["potatoes"].used == 120


def test_aliased_recipe_keys_merge(
    calculator: UsageCalculator, make_order: Callable[..., Order]
) -> None:
    """Test that OWEN!'s mozzarella lands on the shared cheese key."""
    usage = calculator.usage_for_order(make_order(("OWEN!", 1), ("MARGIE", 1)))

    assert usage["shredded_mozzarella"].used == 140 + 94
    assert "mozzarella" not in usage


def test_sides_skip_base_ingredients(
    calculator: UsageCalculator, make_order: Callable[..., Order]
) -> None:
    usage = calculator.usage_for_order(make_order(("Garlic Doughballs", 2)))

    assert _used(usage) == {"sourdough_dough": 2, "garlic_butter": 40}


def test_drinks(calculator: UsageCalculator, make_order: Callable[..., Order]) -> None:
    order = make_order(cold_drinks=[{"drink_type": "Coke", "quantity": 2}])

    assert _used(calculator.usage_for_order(order)) == {
        "coke_syrup": 100,
        "carbonated_water": 560,
        "cups_330ml": 2,
    }


def test_unknown_drink_is_skipped(
    calculator: UsageCalculator, make_order: Callable[..., Order]
) -> None:
    order = make_order(cold_drinks=[{"drink_type": "Coke Light", "quantity": 1}])

    assert calculator.usage_for_order(order) == {}


@pytest.mark.parametrize("quantity", [0, -2])
def test_non_positive_quantity_is_rejected(
    calculator: UsageCalculator, make_order: Callable[..., Order], quantity: int
) -> None:
    assert calculator.usage_for_order(make_order(("THE CHAMP", quantity))) == {}


def test_raw_order_quantities_are_coerced(calculator: UsageCalculator) -> None:
    """Test that string and missing quantities are read as numbers."""
    usage = calculator.usage_for_order(
        {
            "pizzas": [
                {"pizzaType": "MARGIE", "quantity": "2"},
                {"pizzaType": "MARGIE"},
            ],
        }
    )

    assert usage["fresh_basil"].used == 30


def test_unresolved_pizza_is_skipped(
    calculator: UsageCalculator, make_order: Callable[..., Order]
) -> None:
    usage = calculator.usage_for_order(make_order(("Hawaiian", 1), ("MARGIE", 1)))

    assert usage["shredded_mozzarella"].used == 94


@pytest.mark.parametrize("raw", [{"pizzas": "nope"}, 42, None])
def test_malformed_order_yields_no_usage(calculator: UsageCalculator, raw: object) -> None:
    assert calculator.usage_for_order(raw) == {}


def test_usage_is_additive_across_orders(
    calculator: UsageCalculator, make_order: Callable[..., Order]
) -> None:
    first = make_order(("THE CHAMP", 1), ("SPUD", 2))
    second = make_order(("MEAT LOVERS MAYHEM", 1), cold_drinks=[{"type": "Sprite", "quantity": 1}])

    combined = calculator.usage_for_orders([first, second])
    separate = merge_usage(
        [calculator.usage_for_order(first), calculator.usage_for_order(second)]
    )

    assert _used(combined) == pytest.approx(_used(separate))


def test_only_cooked_filter(
    calculator: UsageCalculator, make_order: Callable[..., Order]
) -> None:
    waiting = make_order(("MARGIE", 1))
    ready = make_order(("MARGIE", 1), status=OrderStatus.READY)
    cooked = make_order(("MARGIE", 1), cooked=[True])

    assert not is_cooked(waiting)
    usage = calculator.usage_for_orders([waiting, ready, cooked], only_cooked=True)

    assert usage["shredded_mozzarella"].used == 94 * 2


def test_daily_estimate(
    calculator: UsageCalculator, make_order: Callable[..., Order]
) -> None:
    recent = make_order(("THE CHAMP", 7), status=OrderStatus.COMPLETED)
    stale = make_order(("THE CHAMP", 7), status=OrderStatus.COMPLETED)
    stale.created_at = recent.created_at - timedelta(days=10)

    estimates = calculator.daily_estimate(
        [recent, stale], days=7, now=recent.created_at + timedelta(hours=1)
    )

    assert estimates["pepperoni"].daily_average == 60
    assert estimates["pepperoni"].recommended_daily == 78
    assert estimates["pepperoni"].unit == "g"


def test_daily_estimate_rejects_non_positive_days(calculator: UsageCalculator) -> None:
    with pytest.raises(ValueError):
        calculator.daily_estimate([], days=0)


def test_usage_by_category_and_most_used(
    calculator: UsageCalculator, sample_order: Order
) -> None:
    usage = calculator.usage_for_order(sample_order)

    grouped = usage_by_category(usage)
    assert set(grouped["cheese"]) == {"shredded_mozzarella", "parmesan"}

    ranked = most_used(usage, limit=2)
    assert [name for name, _ in ranked] == ["shredded_mozzarella", "tomato_sauce"]


@pytest.mark.parametrize(("quantity", "balls"), [(0.5, 1), ("1.4", 1), (2.5, 3), ("abc", 1)])
def test_fractional_quantities_round_up_to_whole_pizzas(
    calculator: UsageCalculator, quantity: object, balls: int
) -> None:
    usage = calculator.usage_for_order({"pizzas": [{"pizzaType": "MARGIE", "quantity": quantity}]})

    assert usage["sourdough_dough"].used == balls
