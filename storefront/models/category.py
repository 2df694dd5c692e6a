from sqlalchemy import Column, String, Text

from storefront.db.database import Base
from storefront.core.types import new_id


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    name = Column(String(120), unique=True, nullable=False)  # always lowercase
    description = Column(Text)
