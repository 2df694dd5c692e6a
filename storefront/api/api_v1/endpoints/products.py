from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from storefront.api.deps import get_catalog_service
from storefront.core.security import get_current_actor
from storefront.schemas.product import ProductCreate, ProductUpdate, ProductResponse, ProductVisibilityUpdate
from storefront.schemas.variant import Variant, VariantCreate
from storefront.services.catalog_service import CatalogService
from storefront.services.variant_ordering import sort_variants

router = APIRouter()


@router.get("/", response_model=List[ProductResponse])
async def get_products(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    category: Optional[str] = Query(None, description="Filter by category name"),
    search: Optional[str] = Query(None, description="Match name, category, description or any variant field"),
    include_hidden: bool = Query(False, description="Admins only: include hidden products"),
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """List products with their variants in display order"""
    products = await service.list_products(
        actor_id=actor_id,
        include_hidden=include_hidden,
        category=category,
        search=search,
        skip=skip,
        limit=limit,
    )
    return [ProductResponse.from_product(p) for p in products]


@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_in: ProductCreate,
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Create a new product; a default variant is provisioned with it"""
    new_product = await service.create_product(product_in, actor_id)
    return ProductResponse.from_product(new_product)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    selected_variant_id: Optional[str] = Query(None, description="Variant previously selected by the viewer"),
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Get a specific product by ID"""
    db_product = await service.get_product(product_id, actor_id=actor_id, include_hidden=True)
    return ProductResponse.from_product(db_product, selected_variant_id)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    product_update: ProductUpdate,
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Update a product"""
    updated_product = await service.update_product(product_id, product_update, actor_id)
    return ProductResponse.from_product(updated_product)


@router.put("/{product_id}/visibility", response_model=ProductResponse)
async def set_product_visibility(
    product_id: str,
    visibility: ProductVisibilityUpdate,
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Show or hide a product from customers"""
    updated_product = await service.set_product_visibility(product_id, visibility.is_visible, actor_id)
    return ProductResponse.from_product(updated_product)


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Delete a product and all of its variants"""
    await service.delete_product(product_id, actor_id)
    return {"message": "Product deleted successfully"}


@router.get("/{product_id}/variants", response_model=List[Variant])
async def get_product_variants(
    product_id: str,
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Get all variants of a product in display order"""
    db_product = await service.get_product(product_id, actor_id=actor_id, include_hidden=True)
    return sort_variants(db_product.variants)


@router.post("/{product_id}/variants", response_model=Variant, status_code=status.HTTP_201_CREATED)
async def create_variant(
    product_id: str,
    variant_in: VariantCreate,
    actor_id: Optional[str] = Depends(get_current_actor),
    service: CatalogService = Depends(get_catalog_service)
):
    """Add a variant to a product; the SKU is generated when omitted"""
    return await service.create_variant(product_id, variant_in, actor_id)
