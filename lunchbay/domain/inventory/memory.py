import asyncio
from datetime import date, datetime, timezone
from itertools import count
from typing import Dict, List, Optional

from loguru import logger

from lunchbay.core.exceptions import ConflictError
from lunchbay.domain.inventory.entities import Category, Item, ItemFields
from lunchbay.domain.inventory.filters import ItemFilter, annotate_all, sort_key
from lunchbay.domain.inventory.repository import (
    InventoryStore,
    category_not_found,
    invalid_category,
    item_not_found,
)
from lunchbay.domain.inventory.status import StatusPolicy, DEFAULT_POLICY


class InMemoryInventoryStore(InventoryStore):
    """Process-local store with the same contract as the SQL store.

    Used by tests and by ``INVENTORY_BACKEND=memory`` demo runs. Contents are
    lost on restart.
    """

    backend_name = "memory"

    def __init__(self):
        self._categories: Dict[int, Category] = {}
        self._items: Dict[int, Item] = {}
        self._category_ids = count(1)
        self._item_ids = count(1)
        self._lock = asyncio.Lock()

    def _category_by_name(self, name: str) -> Optional[Category]:
        return next((c for c in self._categories.values() if c.name == name), None)

    def _build_item(self, item_id: int, fields: ItemFields, category: Category, created_at: datetime) -> Item:
        return Item(
            id=item_id,
            name=fields.name,
            category_id=category.id,
            category_name=category.name,
            category_description=category.description,
            quantity=fields.quantity,
            unit=fields.unit,
            expiration_date=fields.expiration_date,
            condition=fields.condition,
            notes=fields.notes,
            created_at=created_at,
            updated_at=datetime.now(timezone.utc),
        )

    async def list_items(
        self,
        item_filter: ItemFilter,
        today: date,
        policy: StatusPolicy = DEFAULT_POLICY,
    ) -> List[Item]:
        items = annotate_all(self._items.values(), today, policy)
        return sorted((item for item in items if item_filter.matches(item)), key=sort_key)

    async def get_item(self, item_id: int) -> Item:
        item = self._items.get(item_id)
        if item is None:
            raise item_not_found(item_id)
        return item

    async def create_item(self, fields: ItemFields) -> Item:
        async with self._lock:
            category = self._category_by_name(fields.category)
            if category is None:
                raise invalid_category(fields.category)

            item = self._build_item(next(self._item_ids), fields, category, datetime.now(timezone.utc))
            self._items[item.id] = item

        logger.info(f"Created inventory item {item.id} ({item.name})")
        return item

    async def update_item(self, item_id: int, fields: ItemFields) -> Item:
        async with self._lock:
            existing = self._items.get(item_id)
            if existing is None:
                raise item_not_found(item_id)

            category = self._category_by_name(fields.category)
            if category is None:
                raise invalid_category(fields.category)

            item = self._build_item(item_id, fields, category, existing.created_at)
            self._items[item_id] = item

        logger.info(f"Updated inventory item {item_id}")
        return item

    async def delete_item(self, item_id: int) -> None:
        async with self._lock:
            if self._items.pop(item_id, None) is None:
                raise item_not_found(item_id)
        logger.info(f"Deleted inventory item {item_id}")

    async def list_categories(self) -> List[Category]:
        return sorted(self._categories.values(), key=lambda c: c.name)

    async def get_category(self, name: str) -> Optional[Category]:
        return self._category_by_name(name)

    async def create_category(self, name: str, description: Optional[str] = None) -> Category:
        async with self._lock:
            if self._category_by_name(name) is not None:
                raise ConflictError(message="Category already exists", details={"name": name})
            category = Category(
                id=next(self._category_ids),
                name=name,
                description=description,
                created_at=datetime.now(timezone.utc),
            )
            self._categories[category.id] = category
        return category

    async def delete_category(self, name: str, cascade: bool = False) -> int:
        async with self._lock:
            category = self._category_by_name(name)
            if category is None:
                raise category_not_found(name)

            referencing = [item_id for item_id, item in self._items.items() if item.category_id == category.id]
            if referencing and not cascade:
                raise ConflictError(
                    message="Category is still referenced by inventory items",
                    details={"name": name, "item_count": len(referencing)},
                    error_code="CATEGORY_IN_USE",
                )

            for item_id in referencing:
                del self._items[item_id]
            del self._categories[category.id]

        logger.info(f"Deleted category {name} with {len(referencing)} item(s)")
        return len(referencing)

    async def count_items(self) -> int:
        return len(self._items)

    async def count_categories(self) -> int:
        return len(self._categories)

    def clear(self) -> None:
        self._categories.clear()
        self._items.clear()
        self._category_ids = count(1)
        self._item_ids = count(1)
