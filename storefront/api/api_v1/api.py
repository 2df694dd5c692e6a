from fastapi import APIRouter

from storefront.api.api_v1.endpoints import (
    products,
    variants,
    categories,
    store_status,
    skus,
)

api_router = APIRouter()

api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(variants.router, prefix="/variants", tags=["variants"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(store_status.router, prefix="/store-status", tags=["store-status"])
api_router.include_router(skus.router, prefix="/skus", tags=["skus"])
