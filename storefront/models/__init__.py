from .admin_user import AdminUser
from .category import Category
from .product import Product
from .variant import ProductVariant
from .store_status import StoreStatus
from .sku_counter import SkuCounter

__all__ = [
    "AdminUser",
    "Category",
    "Product",
    "ProductVariant",
    "StoreStatus",
    "SkuCounter",
]
