from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.database import get_db
from storefront.services.catalog_service import CatalogService


async def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)
