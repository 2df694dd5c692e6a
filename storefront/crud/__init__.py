from .product import ProductCRUD
from .variant import VariantCRUD
from .category import CategoryCRUD
from .store_status import StoreStatusCRUD

__all__ = ["ProductCRUD", "VariantCRUD", "CategoryCRUD", "StoreStatusCRUD"]
