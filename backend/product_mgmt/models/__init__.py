from product_mgmt.models.category import ProductCategory

__all__ = [
    "ProductCategory",
]
