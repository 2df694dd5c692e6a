from sqlalchemy import Column, String

from storefront.db.database import Base
from storefront.core.types import new_id


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), unique=True, nullable=False, index=True)
