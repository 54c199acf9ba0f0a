from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from lunchbay.api.deps import get_inventory_service
from lunchbay.api.v1.inventory.schemas import (
    AlertResponse,
    CategoryCount,
    Envelope,
    ImpactSummary,
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
    InventoryListResponse,
    StatusCounts,
    SuccessResponse,
)
from lunchbay.domain.inventory.filters import ItemFilter
from lunchbay.domain.inventory.service import InventoryService
from lunchbay.domain.inventory.status import ItemStatus

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("", response_model=InventoryListResponse, status_code=status.HTTP_200_OK)
async def list_inventory(
    category: Optional[str] = Query(None, description="Category name"),
    item_status: Optional[ItemStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Case-insensitive match on item name"),
    service: InventoryService = Depends(get_inventory_service),
):
    """List inventory items, soonest expiration first"""
    items = await service.list_items(ItemFilter(category=category, status=item_status, search=search))
    return InventoryListResponse(
        data=[InventoryItemResponse.model_validate(item) for item in items],
        total=len(items),
    )


@router.get("/stats", response_model=Envelope[StatusCounts])
async def inventory_stats(service: InventoryService = Depends(get_inventory_service)):
    """Item counts per freshness status"""
    return Envelope(data=StatusCounts(**await service.aggregate_status_counts()))


@router.get("/timeline", response_model=Envelope[dict])
async def expiration_timeline(service: InventoryService = Depends(get_inventory_service)):
    """Item counts grouped by days until expiry"""
    return Envelope(data=await service.expiration_timeline())


@router.get("/by-category", response_model=Envelope[List[CategoryCount]])
async def items_by_category(service: InventoryService = Depends(get_inventory_service)):
    breakdown = await service.category_breakdown()
    return Envelope(data=[CategoryCount(**row) for row in breakdown])


@router.get("/alerts", response_model=Envelope[List[AlertResponse]])
async def inventory_alerts(service: InventoryService = Depends(get_inventory_service)):
    alerts = await service.alerts()
    return Envelope(data=[AlertResponse.model_validate(alert) for alert in alerts])


@router.get("/impact", response_model=Envelope[ImpactSummary])
async def waste_impact(service: InventoryService = Depends(get_inventory_service)):
    """Estimated cost savings and donatable meals"""
    return Envelope(data=ImpactSummary(**await service.impact_summary()))


@router.get("/{item_id}", response_model=Envelope[InventoryItemResponse])
async def get_inventory_item(item_id: int, service: InventoryService = Depends(get_inventory_service)):
    item = await service.get_item(item_id)
    return Envelope(data=InventoryItemResponse.model_validate(item))


@router.post("", response_model=Envelope[InventoryItemResponse], status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    item_in: InventoryItemCreate,
    service: InventoryService = Depends(get_inventory_service),
):
    item = await service.create_item(item_in.model_dump())
    return Envelope(
        data=InventoryItemResponse.model_validate(item),
        message="Inventory item created successfully",
    )


@router.put("/{item_id}", response_model=Envelope[InventoryItemResponse])
async def update_inventory_item(
    item_id: int,
    item_in: InventoryItemUpdate,
    service: InventoryService = Depends(get_inventory_service),
):
    """Replace every user-editable field of an item"""
    item = await service.update_item(item_id, item_in.model_dump())
    return Envelope(
        data=InventoryItemResponse.model_validate(item),
        message="Inventory item updated successfully",
    )


@router.delete("/{item_id}", response_model=SuccessResponse)
async def delete_inventory_item(item_id: int, service: InventoryService = Depends(get_inventory_service)):
    await service.delete_item(item_id)
    return SuccessResponse(message="Inventory item deleted successfully")
