# Inventory domain module
from lunchbay.domain.inventory.entities import Category, Item, ItemCondition, ItemFields
from lunchbay.domain.inventory.filters import ItemFilter
from lunchbay.domain.inventory.status import (
    ExpiryBucket,
    ItemStatus,
    StatusPolicy,
    classify,
    days_until_expiry,
)

__all__ = [
    "Category",
    "ExpiryBucket",
    "Item",
    "ItemCondition",
    "ItemFields",
    "ItemFilter",
    "ItemStatus",
    "StatusPolicy",
    "classify",
    "days_until_expiry",
]
