from fastapi import APIRouter, Depends, status
from typing import List, Optional

from storefront.api.deps import get_catalog_service
from storefront.core.security import get_current_actor
from storefront.schemas.category import Category, CategoryCreate
from storefront.services.catalog_service import CatalogService

router = APIRouter()


@router.get("/", response_model=List[Category])
async def get_categories(service: CatalogService = Depends(get_catalog_service)):
    """Get all categories ordered by name"""
    return await service.list_categories()


@router.post("/", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_in: CategoryCreate,
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Create a category; names are stored lowercase"""
    return await service.create_category(category_in, actor_id)


@router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Delete a category; its products are kept without a category"""
    await service.delete_category(category_id, actor_id)
    return {"message": "Category deleted successfully"}
