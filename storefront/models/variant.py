from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.db.database import Base
from storefront.core.types import VariantType, new_id, utcnow

_VARIANT_TYPES = ", ".join(f"'{value}'" for value in VariantType.values())


class ProductVariant(Base):
    __tablename__ = "product_variants"
    __table_args__ = (
        UniqueConstraint("product_id", "variant_type", "variant_value", name="uq_variant_per_product"),
        CheckConstraint(f"variant_type IN ({_VARIANT_TYPES})", name="ck_variant_type"),
        CheckConstraint("price >= 0", name="ck_variant_price_nonnegative"),
        CheckConstraint("quantity >= 0", name="ck_variant_quantity_nonnegative"),
    )

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    product_id = Column(
        String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sku = Column(String(120), unique=True, nullable=False)
    variant_type = Column(String(20), nullable=False)  # 'weight', 'pcs', 'price', 'flavor', 'size'
    variant_value = Column(String(255), nullable=False)  # '250g', '12pcs', 'Small Pack'
    price = Column(BigInteger, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_by = Column(String(64))

    # Relationships
    product = relationship("Product", back_populates="variants")
