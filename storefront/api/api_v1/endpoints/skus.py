from fastapi import APIRouter, Depends
from typing import Optional

from storefront.api.deps import get_catalog_service
from storefront.core.security import get_current_actor
from storefront.schemas.sku import SKUResponse
from storefront.services.catalog_service import CatalogService

router = APIRouter()


@router.post("/generate", response_model=SKUResponse)
async def generate_sku(
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Reserve a fresh SKU for a variant being prepared by an admin"""
    await service.require_admin(actor_id)
    return SKUResponse(sku=await service.generate_sku())
