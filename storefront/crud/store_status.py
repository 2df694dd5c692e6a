from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from storefront.crud.base import CRUDBase
from storefront.models.store_status import StoreStatus
from storefront.schemas.store_status import StoreStatusUpdate


class StoreStatusCRUD(CRUDBase[StoreStatus, StoreStatusUpdate, StoreStatusUpdate]):
    async def get_current(self, db: AsyncSession, *, for_update: bool = False) -> Optional[StoreStatus]:
        """The most recently updated status row, if any"""
        stmt = (
            select(StoreStatus)
            .order_by(StoreStatus.updated_at.desc(), StoreStatus.id.desc())
            .limit(1)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await db.execute(stmt)
        return result.scalar_one_or_none()


store_status = StoreStatusCRUD(StoreStatus)
