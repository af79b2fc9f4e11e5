"""Database seeding script - creates the default product category tree.

Run with: python -m product_mgmt.seed
"""
import asyncio

from product_mgmt.database import SessionLocal, init_db
from product_mgmt.schemas.category import CategoryCreate
from product_mgmt.services.cache import cache
from product_mgmt.services.categories import CategoryHierarchyManager
from product_mgmt.services.category_store import CategoryStore


# Root categories and their subcategories, nested to any depth
CATEGORY_TREE = {
    "Retail Banking": {
        "Current Accounts": {},
        "Savings Accounts": {
            "Instant Access Savings": {},
            "Fixed Term Deposits": {},
        },
    },
    "Lending": {
        "Personal Loans": {},
        "Mortgages": {
            "Fixed Rate Mortgages": {},
            "Variable Rate Mortgages": {},
        },
        "Credit Cards": {},
    },
    "Investments": {
        "Mutual Funds": {},
        "Pension Plans": {},
    },
    "Insurance": {
        "Life Insurance": {},
        "Home Insurance": {},
    },
}


async def _create_subtree(manager: CategoryHierarchyManager, children: dict, parent_id) -> int:
    created = 0
    for name, grandchildren in children.items():
        category = await manager.create(CategoryCreate(name=name, parent_id=parent_id))
        print(f"Added category: {'  ' * category.level}{name}")
        created += 1 + await _create_subtree(manager, grandchildren, category.id)
    return created


async def seed_categories(manager: CategoryHierarchyManager, tree: dict = CATEGORY_TREE) -> int:
    """Create each root and its subtree unless a root with that name exists.

    Cached category listings are invalidated when anything was created.
    """
    created = 0
    for name, children in tree.items():
        matches = await manager.search_categories(name, page=1, size=100)
        if any(c.name == name and c.parent_id is None for c in matches.items):
            print(f"Skipping existing category: {name}")
            continue
        created += await _create_subtree(manager, {name: children}, None)
    if created:
        await cache.invalidate_categories()
    return created


async def main():
    await init_db()
    await cache.connect()
    try:
        async with SessionLocal() as db:
            created = await seed_categories(CategoryHierarchyManager(CategoryStore(db)))
    finally:
        await cache.disconnect()
    print(f"Seeded {created} categories")


if __name__ == "__main__":
    asyncio.run(main())
