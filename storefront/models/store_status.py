from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func

from storefront.db.database import Base
from storefront.core.types import new_id, utcnow


class StoreStatus(Base):
    """Append-mostly log; the row with the latest updated_at is authoritative."""
    __tablename__ = "store_status"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    is_open = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), index=True)
    updated_by = Column(String(64))
