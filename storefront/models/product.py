from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.db.database import Base
from storefront.core.types import new_id, utcnow


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    # References categories.name, not the id
    category = Column(
        String(120),
        ForeignKey("categories.name", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
        index=True,
    )
    is_visible = Column(Boolean, nullable=False, default=True)
    image_url = Column(String(2048))
    last_updated = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_by = Column(String(64))

    # Relationships
    variants = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
