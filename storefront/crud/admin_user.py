from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from storefront.models.admin_user import AdminUser


async def is_member(db: AsyncSession, user_id: Optional[str]) -> bool:
    if not user_id:
        return False
    stmt = select(AdminUser.id).where(AdminUser.user_id == str(user_id)).limit(1)
    result = await db.execute(stmt)
    return result.scalar_one_or_none() is not None
