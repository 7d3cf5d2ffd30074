"""Tests for ingredient and item name resolution."""

import pytest

from kitchen_ops.catalog import RecipeCatalog
from kitchen_ops.services.resolver import IngredientResolver, MatchStrategy


def test_alias_maps_to_canonical_key(resolver: IngredientResolver) -> None:
    """Test that recipe spellings land on inventory keys."""
    assert resolver.resolve("mozzarella") == "shredded_mozzarella"
    assert resolver.resolve("red_onions") == "red_onion"
    assert resolver.resolve("courgette") == "zucchini"


def test_unknown_key_is_unchanged(resolver: IngredientResolver) -> None:
    assert resolver.resolve("truffle_oil") == "truffle_oil"


def test_resolution_is_idempotent(resolver: IngredientResolver, catalog: RecipeCatalog) -> None:
    """Test that a canonical key resolves to itself."""
    for key in catalog.ingredient_aliases:
        once = resolver.resolve(key)
        assert resolver.resolve(once) == once


def test_audit_covers_every_recipe_key(
    resolver: IngredientResolver, catalog: RecipeCatalog
) -> None:
    mappings = resolver.audit_catalog()

    assert len(mappings) == len(catalog.ingredient_keys())
    assert all(m.canonical_key for m in mappings)
    owen = [m for m in mappings if m.recipe == "OWEN!"]
    assert owen[0].canonical_key == "shredded_mozzarella"
    assert owen[0].aliased


def test_analyze_mapping(resolver: IngredientResolver) -> None:
    analysis = resolver.analyze_mapping(["mozzarella", "feta", "shredded_mozzarella"])

    assert analysis.mapped == {"mozzarella": "shredded_mozzarella"}
    assert analysis.unchanged == ["feta", "shredded_mozzarella"]
    assert analysis.canonical_keys == ["feta", "shredded_mozzarella"]


@pytest.mark.parametrize(
    "query,expected,strategy",
    [
        ("THE CHAMP", "THE CHAMP", MatchStrategy.EXACT),
        ("Margherita", "MARGIE", MatchStrategy.ALIAS),
        ("the champ", "THE CHAMP", MatchStrategy.ALIAS),
        ("margie", "MARGIE", MatchStrategy.CASE_INSENSITIVE),
        ("Champ Pizza", "THE CHAMP", MatchStrategy.PARTIAL),
        ("Garlic Doughballs", "DOUGH BALLS", MatchStrategy.ALIAS),
    ],
)
def test_resolve_item_strategies(
    resolver: IngredientResolver,
    query: str,
    expected: str,
    strategy: MatchStrategy,
) -> None:
    resolution = resolver.resolve_item(query)

    assert resolution.resolved
    assert resolution.name == expected
    assert resolution.strategy == strategy
    assert resolution.query == query


@pytest.mark.parametrize("query", ["Hawaiian", "XY", "", "   ", None])
def test_resolve_item_unresolved(resolver: IngredientResolver, query: str | None) -> None:
    """Test that unknown, short and missing names are reported as unresolved."""
    resolution = resolver.resolve_item(query)

    assert not resolution.resolved
    assert resolution.strategy == MatchStrategy.UNRESOLVED


def test_resolve_drink_by_alias(resolver: IngredientResolver) -> None:
    resolution = resolver.resolve_item("Coke", kind="drink")

    assert resolution.name == "Coca-Cola 330ml"
    assert resolution.strategy == MatchStrategy.ALIAS


def test_pizza_names_do_not_resolve_as_drinks(resolver: IngredientResolver) -> None:
    assert not resolver.resolve_item("MARGIE", kind="drink").resolved
