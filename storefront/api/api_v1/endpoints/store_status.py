from fastapi import APIRouter, Depends
from typing import Optional

from storefront.api.deps import get_catalog_service
from storefront.core.security import get_current_actor
from storefront.schemas.store_status import StoreStatus, StoreStatusUpdate
from storefront.services.catalog_service import CatalogService

router = APIRouter()


@router.get("/", response_model=StoreStatus)
async def get_store_status(service: CatalogService = Depends(get_catalog_service)):
    """Current store status; open until an admin sets it otherwise"""
    current = await service.get_store_status()
    if current is None:
        return StoreStatus()
    return current


@router.put("/", response_model=StoreStatus)
async def set_store_status(
    status_in: StoreStatusUpdate,
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Open or close the store"""
    return await service.set_store_status(status_in.is_open, actor_id)
