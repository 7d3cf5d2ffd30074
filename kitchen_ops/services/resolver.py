"""Canonical names for ingredients and menu items."""

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from kitchen_ops.catalog import LineKind, RecipeCatalog
from kitchen_ops.utils.logging import get_logger

logger = get_logger(__name__)

# Shorter fragments match too many menu items to be useful
MIN_PARTIAL_LENGTH = 3


class MatchStrategy(str, Enum):
    """How an item name was matched to a recipe."""

    EXACT = "exact"
    ALIAS = "alias"
    CASE_INSENSITIVE = "case_insensitive"
    PARTIAL = "partial"
    UNRESOLVED = "unresolved"


class Resolution(BaseModel):
    """Result of resolving an order-supplied item name."""

    model_config = ConfigDict(frozen=True)

    query: str | None
    name: str | None = None
    strategy: MatchStrategy = MatchStrategy.UNRESOLVED

    @property
    def resolved(self) -> bool:
        """Check if a recipe was found."""
        return self.name is not None


class IngredientMapping(BaseModel):
    """Where one recipe ingredient key lands in inventory."""

    recipe: str
    raw_key: str
    canonical_key: str

    @property
    def aliased(self) -> bool:
        return self.raw_key != self.canonical_key


class MappingAnalysis(BaseModel):
    """Summary of how a set of ingredient keys map to inventory keys."""

    mapped: dict[str, str] = Field(default_factory=dict)
    unchanged: list[str] = Field(default_factory=list)
    canonical_keys: list[str] = Field(default_factory=list)


def _strip_pizza_suffix(name: str) -> str:
    if name.endswith(" PIZZA"):
        return name[: -len(" PIZZA")].rstrip()
    return name


class IngredientResolver:
    """Resolves ingredient keys and item names against a recipe catalog."""

    def __init__(self, catalog: RecipeCatalog):
        self.catalog = catalog

    def resolve(self, raw_key: str) -> str:
        """Map an ingredient key to its canonical inventory key.

        Unknown keys are returned unchanged, so canonical keys resolve to
        themselves.
        """
        return self.catalog.ingredient_aliases.get(raw_key, raw_key)

    def resolve_item(self, name: str | None, kind: LineKind = "pizza") -> Resolution:
        """Resolve an order-supplied item name to a canonical recipe name.

        Strategies are tried in order: exact name, alias table (exact then
        case-insensitive), case-insensitive name, then partial match. A name
        that matches nothing is reported as unresolved.
        """
        if name is None or not name.strip():
            logger.warning("item_name_missing", kind=kind)
            return Resolution(query=name)

        query = name.strip()
        names = self.catalog.names(kind)
        aliases = self.catalog.name_aliases(kind)

        if query in names:
            return Resolution(query=name, name=query, strategy=MatchStrategy.EXACT)

        target = aliases.get(query)
        if target is None:
            folded = query.casefold()
            target = next(
                (value for key, value in aliases.items() if key.casefold() == folded),
                None,
            )
        if target is not None and target in names:
            return Resolution(query=name, name=target, strategy=MatchStrategy.ALIAS)

        folded = query.casefold()
        for candidate in names:
            if candidate.casefold() == folded:
                return Resolution(
                    query=name, name=candidate, strategy=MatchStrategy.CASE_INSENSITIVE
                )

        cleaned = _strip_pizza_suffix(query.upper())
        if len(cleaned) >= MIN_PARTIAL_LENGTH:
            for candidate in names:
                upper = candidate.upper()
                if cleaned in upper or upper in cleaned:
                    logger.debug(
                        "item_partial_match", query=query, match=candidate, kind=kind
                    )
                    return Resolution(
                        query=name, name=candidate, strategy=MatchStrategy.PARTIAL
                    )

        logger.warning(f"{kind}_type_unresolved", name=query, known=len(names))
        return Resolution(query=name)

    def analyze_mapping(self, keys: Iterable[str]) -> MappingAnalysis:
        """Report which keys are rewritten by the alias table."""
        analysis = MappingAnalysis()
        canonical: set[str] = set()
        for key in keys:
            resolved = self.resolve(key)
            canonical.add(resolved)
            if resolved != key:
                analysis.mapped[key] = resolved
            else:
                analysis.unchanged.append(key)
        analysis.canonical_keys = sorted(canonical)
        return analysis

    def audit_catalog(self) -> list[IngredientMapping]:
        """Canonical key for every ingredient key used by any recipe."""
        return [
            IngredientMapping(recipe=recipe, raw_key=key, canonical_key=self.resolve(key))
            for recipe, key in self.catalog.ingredient_keys()
        ]
