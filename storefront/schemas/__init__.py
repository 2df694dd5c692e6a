from .product import Product, ProductCreate, ProductUpdate, ProductResponse, ProductVisibilityUpdate
from .variant import Variant, VariantCreate, VariantUpdate
from .category import Category, CategoryCreate
from .store_status import StoreStatus, StoreStatusUpdate
from .sku import SKUResponse

__all__ = [
    "Product", "ProductCreate", "ProductUpdate", "ProductResponse", "ProductVisibilityUpdate",
    "Variant", "VariantCreate", "VariantUpdate",
    "Category", "CategoryCreate",
    "StoreStatus", "StoreStatusUpdate",
    "SKUResponse",
]
