from sqlalchemy import BigInteger, Column, String

from storefront.db.database import Base


class SkuCounter(Base):
    """Named monotonic counter backing generated SKUs."""
    __tablename__ = "sku_counters"

    name = Column(String(50), primary_key=True)
    value = Column(BigInteger, nullable=False, default=0)
