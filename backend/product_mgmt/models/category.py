import uuid

from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Uuid
from sqlalchemy.sql import func
from product_mgmt.database import Base


class ProductCategory(Base):
    __tablename__ = "product_categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, index=True)  # 'Retail Banking', 'Credit Cards'
    description = Column(Text)
    # Weak reference: rows are never cascaded through it
    parent_id = Column(Uuid, ForeignKey("product_categories.id"), nullable=True, index=True)
    level = Column(Integer, nullable=False, default=0)  # Cached depth, root = 0
    date_created = Column(DateTime(timezone=True), server_default=func.now())
    date_updated = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<ProductCategory {self.id} {self.name!r} level={self.level}>"
