import logging
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from storefront.core.config import settings
from storefront.db.database import engine as default_engine, Base
from storefront.models import *  # Import all models
from storefront.models.admin_user import AdminUser
from storefront.models.sku_counter import SkuCounter
from storefront.crud.sku import SKU_COUNTER_NAME

logger = logging.getLogger(__name__)


async def seed_sku_counter(session: AsyncSession) -> None:
    if await session.get(SkuCounter, SKU_COUNTER_NAME) is None:
        session.add(SkuCounter(name=SKU_COUNTER_NAME, value=0))


async def seed_admin_users(session: AsyncSession, user_ids: Iterable[str]) -> None:
    for user_id in user_ids:
        stmt = select(AdminUser.id).where(AdminUser.user_id == user_id)
        if (await session.execute(stmt)).scalar_one_or_none() is None:
            session.add(AdminUser(user_id=user_id))
            logger.info("Seeded admin user %s", user_id)


async def init_db(
    engine: Optional[AsyncEngine] = None,
    admin_user_ids: Optional[Iterable[str]] = None,
) -> None:
    """Create tables and seed the SKU counter and bootstrap admins"""
    engine = engine or default_engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        await seed_sku_counter(session)
        await seed_admin_users(
            session, settings.admin_user_ids if admin_user_ids is None else admin_user_ids
        )
        await session.commit()
