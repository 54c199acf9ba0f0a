from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from lunchbay.core.config import settings
from lunchbay.domain.inventory.entities import Category, Item, ItemFields
from lunchbay.domain.inventory.filters import ItemFilter, annotate
from lunchbay.domain.inventory.repository import InventoryStore
from lunchbay.domain.inventory.status import (
    ExpiryBucket,
    ItemStatus,
    StatusPolicy,
    expiry_bucket,
)


@dataclass(frozen=True)
class Alert:
    severity: str
    title: str
    description: str
    status_filter: Optional[ItemStatus] = None


class InventoryService:
    """Service layer for inventory operations.

    Every public call reads the clock once, so all items in one response
    are classified against the same day.
    """

    def __init__(
        self,
        store: InventoryStore,
        policy: Optional[StatusPolicy] = None,
        clock: Callable[[], date] = date.today,
        low_stock_quantity: Optional[int] = None,
        low_stock_alert_min_items: Optional[int] = None,
        average_item_cost: Optional[float] = None,
        waste_reduction_rate: Optional[float] = None,
    ):
        self.store = store
        self.policy = policy or StatusPolicy.from_settings()
        self.clock = clock
        self.low_stock_quantity = (
            settings.LOW_STOCK_QUANTITY if low_stock_quantity is None else low_stock_quantity
        )
        self.low_stock_alert_min_items = (
            settings.LOW_STOCK_ALERT_MIN_ITEMS if low_stock_alert_min_items is None else low_stock_alert_min_items
        )
        self.average_item_cost = (
            settings.AVERAGE_ITEM_COST if average_item_cost is None else average_item_cost
        )
        self.waste_reduction_rate = (
            settings.WASTE_REDUCTION_RATE if waste_reduction_rate is None else waste_reduction_rate
        )

    def _classify(self, item: Item) -> Item:
        return annotate(item, self.clock(), self.policy)

    async def _all_items(self) -> List[Item]:
        return await self.store.list_items(ItemFilter(), self.clock(), self.policy)

    # Items
    async def list_items(self, item_filter: Optional[ItemFilter] = None) -> List[Item]:
        return await self.store.list_items(item_filter or ItemFilter(), self.clock(), self.policy)

    async def get_item(self, item_id: int) -> Item:
        return self._classify(await self.store.get_item(item_id))

    async def create_item(self, data: Dict[str, Any]) -> Item:
        fields = ItemFields.from_dict(data)
        return self._classify(await self.store.create_item(fields))

    async def update_item(self, item_id: int, data: Dict[str, Any]) -> Item:
        # Unknown id wins over a bad payload
        await self.store.get_item(item_id)
        fields = ItemFields.from_dict(data)
        return self._classify(await self.store.update_item(item_id, fields))

    async def delete_item(self, item_id: int) -> None:
        await self.store.delete_item(item_id)

    # Categories
    async def list_categories(self) -> List[Category]:
        return await self.store.list_categories()

    async def delete_category(self, name: str, cascade: bool = False) -> int:
        removed = await self.store.delete_category(name.strip().lower(), cascade=cascade)
        if removed:
            logger.warning(f"Category {name} removed together with {removed} inventory item(s)")
        return removed

    # Reports
    async def aggregate_status_counts(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in ItemStatus}
        items = await self._all_items()
        for item in items:
            counts[item.status.value] += 1
        counts["total"] = len(items)
        return counts

    async def category_breakdown(self) -> List[Dict[str, Any]]:
        categories = await self.store.list_categories()
        counts = {category.name: 0 for category in categories}
        for item in await self._all_items():
            if item.category_name in counts:
                counts[item.category_name] += 1
        return [
            {"category": category.name, "description": category.description, "count": counts[category.name]}
            for category in categories
        ]

    async def expiration_timeline(self) -> Dict[str, int]:
        timeline = {bucket.value: 0 for bucket in ExpiryBucket}
        for item in await self._all_items():
            timeline[expiry_bucket(item.days_until_expiry).value] += 1
        return timeline

    async def alerts(self) -> List[Alert]:
        items = await self._all_items()
        alerts = []

        expired = [item for item in items if item.status == ItemStatus.EXPIRED]
        if expired:
            alerts.append(Alert(
                severity="critical",
                title=f"{len(expired)} Expired Items",
                description="These items need immediate attention and should be disposed of properly.",
                status_filter=ItemStatus.EXPIRED,
            ))

        expiring_today = [item for item in items if item.days_until_expiry == 0]
        if expiring_today:
            alerts.append(Alert(
                severity="warning",
                title=f"{len(expiring_today)} Items Expire Today",
                description="Consider donating these items or using them immediately.",
                status_filter=ItemStatus.EXPIRING,
            ))

        low_stock = [item for item in items if item.quantity < self.low_stock_quantity]
        if len(low_stock) > self.low_stock_alert_min_items:
            alerts.append(Alert(
                severity="info",
                title="Low Stock Alert",
                description=f"{len(low_stock)} items are running low. Consider restocking.",
            ))

        return alerts

    async def impact_summary(self) -> Dict[str, int]:
        """Dashboard estimates of money saved and meals available to donate.

        Savings assume a share of the expired items' value is recovered.
        Meals count one per unit of expiring items stocked in ``MEAL_UNIT``.
        """
        items = await self._all_items()
        expired = sum(1 for item in items if item.status == ItemStatus.EXPIRED)
        meals = sum(
            item.quantity for item in items
            if item.status == ItemStatus.EXPIRING and item.unit == settings.MEAL_UNIT
        )
        return {
            "cost_savings": round(expired * self.average_item_cost * self.waste_reduction_rate),
            "meals_donated": meals,
        }

    async def system_stats(self) -> Dict[str, Any]:
        return {
            "total_inventory": await self.store.count_items(),
            "total_categories": await self.store.count_categories(),
            "backend": self.store.backend_name,
        }
