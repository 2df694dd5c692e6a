from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime

from storefront.schemas._validators import check_http_url, normalize_category_name, strip_or_none
from storefront.schemas.variant import Variant, VariantCreate
from storefront.services.variant_ordering import resolve_active_variant, sort_variants


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    description: Optional[str] = Field(None, max_length=1000, description="Product description")
    category: Optional[str] = Field(None, max_length=120, description="Category name, stored lowercase")
    is_visible: bool = Field(True, description="Whether customers can see the product")
    image_url: Optional[str] = Field(None, max_length=2048, description="http(s) image URL")

    @validator("name", pre=True)
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @validator("description", "image_url", pre=True)
    def blank_to_none(cls, v):
        return strip_or_none(v)

    @validator("category", pre=True)
    def normalize_category(cls, v):
        return normalize_category_name(v)

    @validator("image_url")
    def validate_image_url(cls, v):
        return check_http_url(v)


class ProductCreate(ProductBase):
    variants: List[VariantCreate] = Field(
        [], description="Optional initial variants; the first one replaces the default variant"
    )


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    category: Optional[str] = Field(None, max_length=120)
    is_visible: Optional[bool] = None
    image_url: Optional[str] = Field(None, max_length=2048)

    @validator("name", "is_visible", pre=True)
    def reject_null(cls, v):
        if v is None:
            raise ValueError("value cannot be null")
        return v.strip() if isinstance(v, str) else v

    @validator("description", "image_url", pre=True)
    def blank_to_none(cls, v):
        return strip_or_none(v)

    @validator("category", pre=True)
    def normalize_category(cls, v):
        return normalize_category_name(v)

    @validator("image_url")
    def validate_image_url(cls, v):
        return check_http_url(v)


class ProductVisibilityUpdate(BaseModel):
    is_visible: bool


class Product(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    is_visible: bool
    image_url: Optional[str] = None
    last_updated: datetime
    updated_by: Optional[str] = None

    class Config:
        from_attributes = True


class ProductResponse(Product):
    variants: List[Variant] = Field([], description="Variants in display order")
    active_variant_id: Optional[str] = Field(None, description="Variant shown by default")

    @classmethod
    def from_product(cls, product, selected_variant_id: Optional[str] = None) -> "ProductResponse":
        """Build the read model with variants ordered for display"""
        ordered = sort_variants(product.variants)
        active = resolve_active_variant(ordered, selected_variant_id)
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            category=product.category,
            is_visible=product.is_visible,
            image_url=product.image_url,
            last_updated=product.last_updated,
            updated_by=product.updated_by,
            variants=[Variant.model_validate(v) for v in ordered],
            active_variant_id=active.id if active is not None else None,
        )
