from pydantic import BaseModel, Field


class SKUResponse(BaseModel):
    sku: str = Field(..., description="Freshly generated SKU, e.g. SF-0007")
