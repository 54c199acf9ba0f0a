from fastapi import APIRouter, Depends
from pydantic import BaseModel

from lunchbay.api.deps import get_inventory_service
from lunchbay.api.v1.inventory.schemas import Envelope
from lunchbay.domain.inventory.service import InventoryService

router = APIRouter(prefix="/admin", tags=["Admin"])


class SystemStats(BaseModel):
    total_inventory: int
    total_categories: int
    backend: str


@router.get("/stats", response_model=Envelope[SystemStats])
async def system_stats(service: InventoryService = Depends(get_inventory_service)):
    return Envelope(data=SystemStats(**await service.system_stats()))
