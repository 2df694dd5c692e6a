import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import NotAuthorized
from storefront.crud import admin_user

logger = logging.getLogger(__name__)


async def is_admin(db: AsyncSession, actor_id: Optional[str]) -> bool:
    """True when the actor is listed in admin_users"""
    return await admin_user.is_member(db, actor_id)


async def require_admin(db: AsyncSession, actor_id: Optional[str]) -> None:
    """Gate for every mutating catalog operation"""
    if not await is_admin(db, actor_id):
        logger.warning(f"Rejected mutation by non-admin actor {actor_id!r}")
        raise NotAuthorized("Admin privileges are required for this operation")
