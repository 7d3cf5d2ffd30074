"""Validate that the menu catalog and storage are properly set up."""

import asyncio
import sys

from redis.exceptions import RedisError

from kitchen_ops.catalog import default_catalog
from kitchen_ops.config import get_settings
from kitchen_ops.services.resolver import IngredientResolver
from kitchen_ops.state import RedisStockRepository, StateManager


async def check_python_version() -> bool:
    """Check if Python version is 3.11+."""
    print("Checking Python version...")

    version = sys.version_info
    if version.major < 3 or (version.major == 3 and version.minor < 11):
        print(f"  ❌ Python {version.major}.{version.minor} detected")
        print("  → Python 3.11+ required")
        return False

    print(f"  ✓ Python {version.major}.{version.minor} detected")
    return True


async def check_catalog() -> bool:
    """Check every recipe ingredient maps to a single inventory key."""
    print("\nChecking recipe catalog...")

    catalog = default_catalog()
    resolver = IngredientResolver(catalog)
    aliases = catalog.ingredient_aliases

    chained = [target for target in aliases.values() if target in aliases]
    if chained:
        print(f"  ❌ Alias targets that are aliases themselves: {', '.join(sorted(chained))}")
        return False

    mappings = resolver.audit_catalog()
    empty = [m for m in mappings if not m.canonical_key]
    if empty:
        print(f"  ❌ {len(empty)} ingredient keys resolve to nothing")
        return False

    aliased = sum(1 for m in mappings if m.aliased)
    keys = {m.canonical_key for m in mappings}
    print(f"  ✓ {len(mappings)} recipe ingredients map to {len(keys)} inventory keys")
    print(f"  ℹ️  {aliased} recipe keys go through the alias table")
    return True


async def check_storage() -> bool:
    """Check Redis answers and stock covers the menu."""
    settings = get_settings()
    print(f"\nChecking storage ({settings.storage_backend})...")

    if settings.storage_backend == "memory":
        print("  ℹ️  Memory backend, nothing to check")
        return True

    state_manager = StateManager(settings.redis_url)
    try:
        await state_manager.ping()
        snapshot = await RedisStockRepository(state_manager).load()
    except (RedisError, OSError) as e:
        print(f"  ❌ Redis not reachable: {e}")
        print("  → Start Redis or set STORAGE_BACKEND=memory")
        return False
    finally:
        await state_manager.disconnect()

    print("  ✓ Redis is responding")

    catalog = default_catalog()
    resolver = IngredientResolver(catalog)
    needed = {resolver.resolve(key) for _, key in catalog.ingredient_keys()}
    missing = sorted(needed - set(snapshot))
    if missing:
        print(f"  ⚠️  {len(missing)} menu ingredients have no stock entry yet")
        print("  → Run: python scripts/seed_data.py")
    else:
        print("  ✓ Stock covers every menu ingredient")
    return True


async def main() -> None:
    """Run all validation checks."""
    print("\n" + "=" * 60)
    print("  Kitchen Ops - Setup Validation")
    print("=" * 60 + "\n")

    checks = [
        ("Python Version", check_python_version),
        ("Recipe Catalog", check_catalog),
        ("Storage", check_storage),
    ]

    results = []
    for name, check in checks:
        results.append((name, await check()))

    print("\n" + "=" * 60)
    print("  Validation Summary")
    print("=" * 60)

    all_passed = True
    for name, passed in results:
        status = "✓" if passed else "❌"
        print(f"  {status} {name}")
        all_passed = all_passed and passed

    print()
    sys.exit(0 if all_passed else 1)


if __name__ == "__main__":
    asyncio.run(main())
