from pydantic import BaseModel, Field
from datetime import datetime
from uuid import UUID


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    parent_id: UUID | None = None  # None makes the category a root


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    """Full replacement of the caller-editable fields."""
    pass


class Category(CategoryBase):
    id: UUID
    level: int
    date_created: datetime | None = None
    date_updated: datetime | None = None

    class Config:
        from_attributes = True


class CategoryPage(BaseModel):
    items: list[Category]
    total: int
    page: int
    size: int
    has_more: bool
