"""Static menu data and lookups."""

from kitchen_ops.catalog.registry import LineKind, RecipeCatalog, default_catalog

__all__ = ["RecipeCatalog", "LineKind", "default_catalog"]
