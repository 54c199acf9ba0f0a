from fastapi import APIRouter, Depends, Query
from typing import List

from lunchbay.api.deps import get_inventory_service
from lunchbay.api.v1.categories.schemas import CategoryDeleteResponse, CategoryResponse
from lunchbay.api.v1.inventory.schemas import Envelope
from lunchbay.domain.inventory.service import InventoryService

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=Envelope[List[CategoryResponse]])
async def list_categories(service: InventoryService = Depends(get_inventory_service)):
    """All categories ordered by name"""
    categories = await service.list_categories()
    return Envelope(data=[CategoryResponse.model_validate(c) for c in categories])


@router.delete("/{name}", response_model=CategoryDeleteResponse)
async def delete_category(
    name: str,
    cascade: bool = Query(False, description="Also delete the items in this category"),
    service: InventoryService = Depends(get_inventory_service),
):
    """Delete a category.

    Refused with 409 while items still reference it, unless ``cascade`` is set.
    """
    removed = await service.delete_category(name, cascade=cascade)
    return CategoryDeleteResponse(message="Category deleted successfully", items_removed=removed)
