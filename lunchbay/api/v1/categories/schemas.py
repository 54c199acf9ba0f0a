from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryDeleteResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    items_removed: int = 0
