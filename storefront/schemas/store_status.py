from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class StoreStatusUpdate(BaseModel):
    is_open: bool


class StoreStatus(BaseModel):
    # id is None until an admin has set the status for the first time
    id: Optional[str] = None
    is_open: bool = True
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    class Config:
        from_attributes = True
