from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime

from storefront.core.types import VariantType
from storefront.schemas._validators import strip_or_none


class VariantBase(BaseModel):
    variant_type: VariantType = Field(..., description="One of weight, pcs, price, flavor, size")
    variant_value: str = Field(..., min_length=1, max_length=255, description="e.g. '250g', '12pcs', 'Small Pack'")
    price: int = Field(0, ge=0, description="Price in whole currency units")
    quantity: int = Field(0, ge=0, description="Stock level")

    @validator("variant_value", pre=True)
    def strip_value(cls, v):
        return v.strip() if isinstance(v, str) else v


class VariantCreate(VariantBase):
    sku: Optional[str] = Field(None, max_length=120, description="Generated when omitted")

    @validator("sku", pre=True)
    def blank_sku_is_generated(cls, v):
        return strip_or_none(v)


class VariantUpdate(BaseModel):
    sku: Optional[str] = Field(None, min_length=1, max_length=120)
    variant_type: Optional[VariantType] = None
    variant_value: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[int] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=0)

    @validator("sku", "variant_type", "variant_value", "price", "quantity", pre=True)
    def reject_null(cls, v):
        if v is None:
            raise ValueError("value cannot be null")
        return v.strip() if isinstance(v, str) else v


class Variant(VariantBase):
    id: str
    product_id: str
    sku: str
    last_updated: datetime
    updated_by: Optional[str] = None

    class Config:
        from_attributes = True
