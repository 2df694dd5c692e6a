from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from storefront.crud.base import CRUDBase
from storefront.models.category import Category
from storefront.schemas.category import CategoryCreate


class CategoryCRUD(CRUDBase[Category, CategoryCreate, CategoryCreate]):
    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[Category]:
        stmt = select(Category).where(Category.name == name.strip().lower())
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self, db: AsyncSession) -> List[Category]:
        result = await db.execute(select(Category).order_by(Category.name))
        return result.scalars().all()


category = CategoryCRUD(Category)
