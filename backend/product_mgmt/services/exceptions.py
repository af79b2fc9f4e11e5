"""
Service-layer errors.

Routers translate these into HTTP responses; services and the store only
raise them.
"""
from uuid import UUID


class ProductMgmtError(Exception):
    """Base class for errors raised by the product management services."""


class CategoryNotFoundError(ProductMgmtError):
    """The identifier does not resolve to a stored category."""

    def __init__(self, category_id: UUID, what: str = "Category"):
        self.category_id = category_id
        super().__init__(f"{what} not found with ID: {category_id}")


class InvalidCategoryOperationError(ProductMgmtError):
    """The operation would break the category tree."""

    def __init__(self, message: str, category_id: UUID | None = None):
        self.category_id = category_id
        super().__init__(message)


class CategoryStoreError(ProductMgmtError):
    """The underlying persistence call failed."""
