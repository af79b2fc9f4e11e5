from product_mgmt.schemas.category import Category, CategoryCreate, CategoryUpdate, CategoryPage

__all__ = [
    "Category", "CategoryCreate", "CategoryUpdate", "CategoryPage",
]
