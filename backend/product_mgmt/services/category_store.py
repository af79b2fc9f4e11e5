"""
Category Store

Async repository over the product_categories table. One store wraps one
AsyncSession, which is the transaction handle for the request using it.
Database errors are rolled back and re-raised as CategoryStoreError.
"""
import logging
from uuid import UUID

from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from product_mgmt.models import ProductCategory
from product_mgmt.services.exceptions import CategoryStoreError

logger = logging.getLogger(__name__)


class CategoryStore:
    """Persistence for ProductCategory rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, category_id: UUID) -> ProductCategory | None:
        """Get a category by ID, or None."""
        try:
            return await self.db.get(ProductCategory, category_id)
        except SQLAlchemyError as e:
            await self._fail(f"find_by_id({category_id})", e)

    async def save(self, category: ProductCategory) -> ProductCategory:
        """Insert or overwrite a category and commit."""
        try:
            self.db.add(category)
            await self.db.commit()
            await self.db.refresh(category)
            return category
        except SQLAlchemyError as e:
            await self._fail(f"save({category.id})", e)

    async def delete_by_id(self, category_id: UUID) -> None:
        """Delete a category by ID and commit."""
        try:
            await self.db.execute(
                delete(ProductCategory).where(ProductCategory.id == category_id)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._fail(f"delete_by_id({category_id})", e)

    async def count_by_parent_id(self, parent_id: UUID) -> int:
        """Count the direct children of a category."""
        try:
            result = await self.db.execute(
                select(func.count(ProductCategory.id)).where(ProductCategory.parent_id == parent_id)
            )
            return result.scalar_one()
        except SQLAlchemyError as e:
            await self._fail(f"count_by_parent_id({parent_id})", e)

    async def find_roots(self, page: int, size: int) -> tuple[list[ProductCategory], int]:
        """Page through categories without a parent."""
        query = select(ProductCategory).where(ProductCategory.parent_id.is_(None))
        return await self._paginate(query, page, size, "find_roots")

    async def find_children(
        self, parent_id: UUID, page: int, size: int
    ) -> tuple[list[ProductCategory], int]:
        """Page through the direct children of a category."""
        query = select(ProductCategory).where(ProductCategory.parent_id == parent_id)
        return await self._paginate(query, page, size, f"find_children({parent_id})")

    async def find_by_name(
        self, pattern: str, page: int, size: int
    ) -> tuple[list[ProductCategory], int]:
        """Page through categories whose name contains pattern (case-insensitive).

        % and _ in pattern match themselves, not any text.
        """
        query = select(ProductCategory).where(
            ProductCategory.name.icontains(pattern, autoescape=True)
        )
        return await self._paginate(query, page, size, f"find_by_name({pattern!r})")

    async def _paginate(self, query, page: int, size: int, op: str):
        try:
            total = (
                await self.db.execute(select(func.count()).select_from(query.subquery()))
            ).scalar_one()
            rows = await self.db.execute(
                query.order_by(ProductCategory.name, ProductCategory.id)
                .offset((page - 1) * size)
                .limit(size)
            )
            return list(rows.scalars().all()), total
        except SQLAlchemyError as e:
            await self._fail(op, e)

    async def _fail(self, op: str, error: SQLAlchemyError):
        logger.error(f"Category store {op} failed: {error}")
        try:
            await self.db.rollback()
        except SQLAlchemyError as rollback_error:
            logger.error(f"Category store rollback after {op} failed: {rollback_error}")
        raise CategoryStoreError(f"Category store operation failed: {op}") from error
