"""
Category Hierarchy Service

Maintains the product category tree: levels are computed from the parent on
create and update, re-parenting is checked for circular references, and
categories with children cannot be deleted.

Nothing is held between calls. Every check re-reads the store, and each
operation issues at most one write.
"""
import logging
from dataclasses import dataclass
from uuid import UUID

from product_mgmt.config import get_settings
from product_mgmt.models import ProductCategory
from product_mgmt.schemas.category import Category, CategoryCreate, CategoryUpdate, CategoryPage
from product_mgmt.services.category_store import CategoryStore
from product_mgmt.services.exceptions import CategoryNotFoundError, InvalidCategoryOperationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    """Ancestor lookup resolved to a stored category."""
    category: ProductCategory


@dataclass(frozen=True)
class Dangling:
    """Ancestor lookup pointed at a category that no longer exists."""
    category_id: UUID


AncestorLookup = Found | Dangling


def apply_category_update(category: ProductCategory, patch: CategoryUpdate) -> None:
    """Overwrite the caller-editable fields of a stored category.

    id, level and the timestamps are never taken from the caller.
    """
    category.name = patch.name
    category.description = patch.description
    category.parent_id = patch.parent_id


def to_page(items: list[ProductCategory], total: int, page: int, size: int) -> CategoryPage:
    return CategoryPage(
        items=[Category.model_validate(c) for c in items],
        total=total,
        page=page,
        size=size,
        has_more=page * size < total,
    )


class CategoryHierarchyManager:
    """Create, read, update and delete categories while keeping the tree valid."""

    def __init__(self, store: CategoryStore, max_depth: int | None = None):
        self.store = store
        self.max_depth = max_depth if max_depth is not None else get_settings().max_category_depth

    async def create(self, draft: CategoryCreate) -> Category:
        """Create a category, computing its level from the parent.

        Raises:
            CategoryNotFoundError: parent_id is set but does not exist.
            InvalidCategoryOperationError: the parent is already at the deepest level.
        """
        level = await self._calculate_level(draft.parent_id)
        category = ProductCategory(
            name=draft.name,
            description=draft.description,
            parent_id=draft.parent_id,
            level=level,
        )
        saved = await self.store.save(category)
        logger.info(f"Created category {saved.id} ({saved.name!r}) at level {level}")
        return Category.model_validate(saved)

    async def get_by_id(self, category_id: UUID) -> Category:
        """Get a category by ID."""
        return Category.model_validate(await self._get_existing(category_id))

    async def update(self, category_id: UUID, patch: CategoryUpdate) -> Category:
        """Replace a category's fields, re-validating its parent.

        Raises:
            CategoryNotFoundError: the category or the new parent does not exist.
            InvalidCategoryOperationError: the new parent is the category itself
                or one of its descendants, or the move would pass the deepest level.
        """
        existing = await self._get_existing(category_id)

        if patch.parent_id is not None and patch.parent_id == category_id:
            logger.warning(f"Rejected update of category {category_id}: self-parent")
            raise InvalidCategoryOperationError(
                "A category cannot be its own parent", category_id
            )

        await self._check_ancestors(category_id, patch.parent_id)
        level = await self._calculate_level(patch.parent_id)

        apply_category_update(existing, patch)
        existing.level = level
        saved = await self.store.save(existing)
        logger.info(f"Updated category {category_id} (parent={saved.parent_id}, level={level})")
        return Category.model_validate(saved)

    async def delete(self, category_id: UUID) -> None:
        """Delete a category that has no children.

        Raises:
            CategoryNotFoundError: the category does not exist.
            InvalidCategoryOperationError: the category has child categories.
        """
        await self._get_existing(category_id)

        children = await self.store.count_by_parent_id(category_id)
        if children > 0:
            logger.warning(f"Rejected delete of category {category_id}: {children} children")
            raise InvalidCategoryOperationError(
                f"Cannot delete category with ID {category_id} because it has child categories",
                category_id,
            )

        await self.store.delete_by_id(category_id)
        logger.info(f"Deleted category {category_id}")

    async def list_root_categories(self, page: int, size: int) -> CategoryPage:
        items, total = await self.store.find_roots(page, size)
        return to_page(items, total, page, size)

    async def list_child_categories(self, parent_id: UUID, page: int, size: int) -> CategoryPage:
        """List the direct children of an existing category."""
        await self._get_existing(parent_id, what="Parent category")
        items, total = await self.store.find_children(parent_id, page, size)
        return to_page(items, total, page, size)

    async def search_categories(self, name: str, page: int, size: int) -> CategoryPage:
        items, total = await self.store.find_by_name(name, page, size)
        return to_page(items, total, page, size)

    async def _get_existing(self, category_id: UUID, what: str = "Category") -> ProductCategory:
        category = await self.store.find_by_id(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id, what)
        return category

    async def _calculate_level(self, parent_id: UUID | None) -> int:
        """Root categories are level 0, children are parent level + 1.

        Levels stay below max_depth, so the ancestor walk of a valid tree
        always reaches a root before its step limit.
        """
        if parent_id is None:
            return 0
        parent = await self._get_existing(parent_id, what="Parent category")
        level = (parent.level or 0) + 1
        if level >= self.max_depth:
            logger.warning(f"Rejected category under {parent_id}: level {level} too deep")
            raise InvalidCategoryOperationError(
                f"Category hierarchy exceeds maximum depth of {self.max_depth}"
            )
        return level

    async def _lookup_ancestor(self, ancestor_id: UUID) -> AncestorLookup:
        ancestor = await self.store.find_by_id(ancestor_id)
        if ancestor is None:
            return Dangling(ancestor_id)
        return Found(ancestor)

    async def _check_ancestors(self, category_id: UUID, candidate_id: UUID | None) -> None:
        """Walk up from candidate_id and fail if category_id is on the path.

        A dangling parent reference ends the walk without a cycle. Running
        out of steps means the stored parents already loop.
        """
        steps = 0
        while candidate_id is not None:
            if candidate_id == category_id:
                logger.warning(f"Rejected update of category {category_id}: circular reference")
                raise InvalidCategoryOperationError(
                    "Circular reference detected: category cannot be an ancestor of itself",
                    category_id,
                )
            if steps >= self.max_depth:
                raise InvalidCategoryOperationError(
                    f"Category hierarchy exceeds maximum depth of {self.max_depth}",
                    category_id,
                )

            lookup = await self._lookup_ancestor(candidate_id)
            if isinstance(lookup, Dangling):
                logger.warning(
                    f"Ancestor walk for category {category_id} hit missing category "
                    f"{lookup.category_id}; treating as root"
                )
                return

            candidate_id = lookup.category.parent_id
            steps += 1
