from pydantic import BaseModel, Field, validator
from typing import Optional

from storefront.schemas._validators import normalize_category_name, strip_or_none


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Stored lowercase")
    description: Optional[str] = Field(None, max_length=500)

    @validator("name", pre=True)
    def normalize_name(cls, v):
        v = normalize_category_name(v)
        return "" if v is None else v

    @validator("description", pre=True)
    def blank_to_none(cls, v):
        return strip_or_none(v)


class Category(BaseModel):
    id: str
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True
