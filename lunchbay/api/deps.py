from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lunchbay.core.config import settings
from lunchbay.core.exceptions import ConfigurationError
from lunchbay.domain.inventory.memory import InMemoryInventoryStore
from lunchbay.domain.inventory.repository import InventoryStore, SqlInventoryStore
from lunchbay.domain.inventory.service import InventoryService
from lunchbay.infrastructure.database import get_db

# Lives for the whole process when INVENTORY_BACKEND=memory
memory_store = InMemoryInventoryStore()


async def get_inventory_store(
    db: AsyncSession = Depends(get_db),
) -> AsyncGenerator[InventoryStore, None]:
    if settings.INVENTORY_BACKEND == "sql":
        yield SqlInventoryStore(db)
    elif settings.INVENTORY_BACKEND == "memory":
        yield memory_store
    else:
        raise ConfigurationError(message=f"Unknown inventory backend: {settings.INVENTORY_BACKEND}")


def get_inventory_service(
    store: InventoryStore = Depends(get_inventory_store),
) -> InventoryService:
    return InventoryService(store)
