from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from loguru import logger
from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lunchbay.core.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
    handle_database_error,
)
from lunchbay.domain.inventory.entities import Category, Item, ItemFields
from lunchbay.domain.inventory.filters import ItemFilter, annotate_all
from lunchbay.domain.inventory.models import CategoryModel, InventoryItemModel
from lunchbay.domain.inventory.status import StatusPolicy, DEFAULT_POLICY


class InventoryStore(ABC):
    """Persistence contract shared by the SQL and in-memory stores"""

    backend_name: str = "abstract"

    @abstractmethod
    async def list_items(
        self,
        item_filter: ItemFilter,
        today: date,
        policy: StatusPolicy = DEFAULT_POLICY,
    ) -> List[Item]:
        """Classified items matching the filter, in listing order"""

    @abstractmethod
    async def get_item(self, item_id: int) -> Item:
        ...

    @abstractmethod
    async def create_item(self, fields: ItemFields) -> Item:
        ...

    @abstractmethod
    async def update_item(self, item_id: int, fields: ItemFields) -> Item:
        ...

    @abstractmethod
    async def delete_item(self, item_id: int) -> None:
        ...

    @abstractmethod
    async def list_categories(self) -> List[Category]:
        ...

    @abstractmethod
    async def get_category(self, name: str) -> Optional[Category]:
        ...

    @abstractmethod
    async def create_category(self, name: str, description: Optional[str] = None) -> Category:
        ...

    @abstractmethod
    async def delete_category(self, name: str, cascade: bool = False) -> int:
        """Delete a category and return how many items went with it"""

    @abstractmethod
    async def count_items(self) -> int:
        ...

    @abstractmethod
    async def count_categories(self) -> int:
        ...


def invalid_category(name: str) -> ValidationError:
    return ValidationError(
        message="Invalid category",
        details={"field": "category", "value": name},
        error_code="INVALID_CATEGORY",
    )


def item_not_found(item_id: int) -> NotFoundError:
    return NotFoundError(message="Inventory item not found", details={"id": item_id})


def category_not_found(name: str) -> NotFoundError:
    return NotFoundError(message="Category not found", details={"name": name})


class SqlInventoryStore(InventoryStore):
    """Repository for inventory data access operations"""

    backend_name = "sql"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self, operation: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise handle_database_error(e, operation) from e

    async def _get_item_model(self, item_id: int) -> Optional[InventoryItemModel]:
        result = await self.db.execute(
            select(InventoryItemModel).where(InventoryItemModel.id == item_id)
        )
        return result.scalar_one_or_none()

    async def _get_category_model(self, name: str) -> Optional[CategoryModel]:
        result = await self.db.execute(
            select(CategoryModel).where(CategoryModel.name == name)
        )
        return result.scalar_one_or_none()

    async def list_items(
        self,
        item_filter: ItemFilter,
        today: date,
        policy: StatusPolicy = DEFAULT_POLICY,
    ) -> List[Item]:
        query = select(InventoryItemModel).join(
            CategoryModel, InventoryItemModel.category_id == CategoryModel.id
        )

        if item_filter.category:
            query = query.where(CategoryModel.name == item_filter.category)

        if item_filter.search:
            query = query.where(InventoryItemModel.name.icontains(item_filter.search, autoescape=True))

        query = query.order_by(
            InventoryItemModel.expiration_date.asc(),
            InventoryItemModel.created_at.desc(),
            InventoryItemModel.id.desc(),
        )

        result = await self.db.execute(query)
        items = annotate_all((row.to_entity() for row in result.scalars().all()), today, policy)

        # Status is derived, so it is filtered after classification
        return [item for item in items if item_filter.matches_status(item)]

    async def get_item(self, item_id: int) -> Item:
        model = await self._get_item_model(item_id)
        if model is None:
            raise item_not_found(item_id)
        return model.to_entity()

    async def create_item(self, fields: ItemFields) -> Item:
        category = await self._get_category_model(fields.category)
        if category is None:
            raise invalid_category(fields.category)

        model = InventoryItemModel(
            name=fields.name,
            category=category,
            quantity=fields.quantity,
            unit=fields.unit,
            expiration_date=fields.expiration_date,
            condition=fields.condition,
            notes=fields.notes,
        )
        self.db.add(model)
        await self._commit("create inventory item")
        await self.db.refresh(model, attribute_names=["created_at", "updated_at"])

        logger.info(f"Created inventory item {model.id} ({model.name})")
        return model.to_entity()

    async def update_item(self, item_id: int, fields: ItemFields) -> Item:
        model = await self._get_item_model(item_id)
        if model is None:
            raise item_not_found(item_id)

        category = await self._get_category_model(fields.category)
        if category is None:
            raise invalid_category(fields.category)

        model.name = fields.name
        model.category = category
        model.quantity = fields.quantity
        model.unit = fields.unit
        model.expiration_date = fields.expiration_date
        model.condition = fields.condition
        model.notes = fields.notes

        await self._commit("update inventory item")
        await self.db.refresh(model, attribute_names=["updated_at"])

        logger.info(f"Updated inventory item {item_id}")
        return model.to_entity()

    async def delete_item(self, item_id: int) -> None:
        result = await self.db.execute(
            delete(InventoryItemModel).where(InventoryItemModel.id == item_id)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise item_not_found(item_id)

        await self._commit("delete inventory item")
        logger.info(f"Deleted inventory item {item_id}")

    async def list_categories(self) -> List[Category]:
        result = await self.db.execute(select(CategoryModel).order_by(CategoryModel.name.asc()))
        return [row.to_entity() for row in result.scalars().all()]

    async def get_category(self, name: str) -> Optional[Category]:
        model = await self._get_category_model(name)
        return model.to_entity() if model else None

    async def create_category(self, name: str, description: Optional[str] = None) -> Category:
        if await self._get_category_model(name) is not None:
            raise ConflictError(message="Category already exists", details={"name": name})

        model = CategoryModel(name=name, description=description)
        self.db.add(model)
        await self._commit("create category")
        await self.db.refresh(model)
        return model.to_entity()

    async def delete_category(self, name: str, cascade: bool = False) -> int:
        category = await self._get_category_model(name)
        if category is None:
            raise category_not_found(name)

        item_count = await self.db.scalar(
            select(func.count(InventoryItemModel.id)).where(InventoryItemModel.category_id == category.id)
        )
        if item_count and not cascade:
            raise ConflictError(
                message="Category is still referenced by inventory items",
                details={"name": name, "item_count": item_count},
                error_code="CATEGORY_IN_USE",
            )

        if item_count:
            await self.db.execute(
                delete(InventoryItemModel).where(InventoryItemModel.category_id == category.id)
            )
        await self.db.execute(delete(CategoryModel).where(CategoryModel.id == category.id))
        await self._commit("delete category")

        logger.info(f"Deleted category {name} with {item_count or 0} item(s)")
        return item_count or 0

    async def count_items(self) -> int:
        return await self.db.scalar(select(func.count(InventoryItemModel.id))) or 0

    async def count_categories(self) -> int:
        return await self.db.scalar(select(func.count(CategoryModel.id))) or 0
