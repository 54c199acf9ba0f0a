from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, List, Optional

from lunchbay.domain.inventory.entities import Item
from lunchbay.domain.inventory.status import (
    ItemStatus,
    StatusPolicy,
    DEFAULT_POLICY,
    classify,
    days_until_expiry,
)


@dataclass(frozen=True)
class ItemFilter:
    """Conjunction of optional item predicates. ``None`` matches everything."""

    category: Optional[str] = None
    status: Optional[ItemStatus] = None
    search: Optional[str] = None

    def __post_init__(self):
        category = self.category.strip().lower() if self.category else None
        search = self.search.strip() if self.search else None
        object.__setattr__(self, "category", category or None)
        object.__setattr__(self, "search", search or None)
        if self.status is not None and not isinstance(self.status, ItemStatus):
            object.__setattr__(self, "status", ItemStatus(self.status))

    def matches_category(self, item: Item) -> bool:
        return self.category is None or item.category_name == self.category

    def matches_search(self, item: Item) -> bool:
        return self.search is None or self.search.lower() in item.name.lower()

    def matches_status(self, item: Item) -> bool:
        # item must already be classified
        return self.status is None or item.status == self.status

    def matches(self, item: Item) -> bool:
        return self.matches_category(item) and self.matches_search(item) and self.matches_status(item)


def annotate(item: Item, today: date, policy: StatusPolicy = DEFAULT_POLICY) -> Item:
    """Attach the derived status and day count for ``today``."""
    return replace(
        item,
        status=classify(item.expiration_date, today, policy),
        days_until_expiry=days_until_expiry(item.expiration_date, today),
    )


def annotate_all(items: Iterable[Item], today: date, policy: StatusPolicy = DEFAULT_POLICY) -> List[Item]:
    return [annotate(item, today, policy) for item in items]


def sort_key(item: Item):
    """Expiration ascending, newest first within a date, id as the final tiebreak."""
    created = item.created_at.timestamp() if item.created_at else 0.0
    return (item.expiration_date, -created, -item.id)
