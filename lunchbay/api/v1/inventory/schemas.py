from pydantic import BaseModel, ConfigDict, Field
from typing import Generic, List, Optional, TypeVar
from datetime import date, datetime

from lunchbay.domain.inventory.entities import ItemCondition
from lunchbay.domain.inventory.status import ItemStatus

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class InventoryItemCreate(BaseModel):
    """Request body for create and full-replace update"""
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    quantity: int = Field(..., ge=0)
    unit: str = Field(..., min_length=1, max_length=50)
    expiration_date: date
    condition: ItemCondition
    notes: Optional[str] = None


class InventoryItemUpdate(InventoryItemCreate):
    pass


class InventoryItemResponse(BaseModel):
    id: int
    name: str
    category_id: int
    category_name: str
    category_description: Optional[str] = None
    quantity: int
    unit: str
    expiration_date: date
    condition: ItemCondition
    notes: Optional[str] = None
    status: ItemStatus
    days_until_expiry: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InventoryListResponse(Envelope[List[InventoryItemResponse]]):
    total: int = 0


class StatusCounts(BaseModel):
    fresh: int = 0
    expiring: int = 0
    expired: int = 0
    total: int = 0


class ImpactSummary(BaseModel):
    cost_savings: int = 0
    meals_donated: int = 0


class CategoryCount(BaseModel):
    category: str
    description: Optional[str] = None
    count: int


class AlertResponse(BaseModel):
    severity: str
    title: str
    description: str
    status_filter: Optional[ItemStatus] = None

    model_config = ConfigDict(from_attributes=True)
