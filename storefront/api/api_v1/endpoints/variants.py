from fastapi import APIRouter, Depends
from typing import Optional

from storefront.api.deps import get_catalog_service
from storefront.core.security import get_current_actor
from storefront.schemas.variant import Variant, VariantUpdate
from storefront.services.catalog_service import CatalogService

router = APIRouter()


@router.put("/{variant_id}", response_model=Variant)
async def update_variant(
    variant_id: str,
    variant_update: VariantUpdate,
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Update a variant"""
    return await service.update_variant(variant_id, variant_update, actor_id)


@router.delete("/{variant_id}")
async def delete_variant(
    variant_id: str,
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Delete a variant; the last variant of a product cannot be deleted"""
    await service.delete_variant(variant_id, actor_id)
    return {"message": "Variant deleted successfully"}
