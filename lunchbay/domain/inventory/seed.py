from datetime import date, timedelta
from typing import Optional

from loguru import logger

from lunchbay.domain.inventory.entities import ItemFields
from lunchbay.domain.inventory.repository import InventoryStore

DEFAULT_CATEGORIES = [
    ("fruits", "Fruits and Vegetables"),
    ("dairy", "Dairy Products"),
    ("meat", "Meat and Poultry"),
    ("bakery", "Bakery Items"),
    ("prepared", "Prepared Foods"),
    ("beverages", "Beverages"),
    ("other", "Other Food Items"),
]

# (name, category, quantity, unit, days from seeding day, condition, notes)
SAMPLE_ITEMS = [
    ("Organic Apples", "fruits", 25, "pieces", 7, "excellent", "Fresh from local farm"),
    ("Whole Milk", "dairy", 3, "gallons", 5, "good", "Organic whole milk"),
    ("Chicken Breast", "meat", 8, "lbs", 3, "excellent", "Boneless skinless"),
    ("Artisan Bread", "bakery", 12, "loaves", 2, "good", "Sourdough"),
    ("Vegetable Soup", "prepared", 15, "servings", 1, "good", "Homemade"),
    ("Expired Yogurt", "dairy", 5, "containers", -2, "fair", "Needs disposal"),
    ("Fresh Salad", "fruits", 10, "lbs", 10, "excellent", "Mixed greens"),
]


async def seed_default_categories(store: InventoryStore) -> int:
    """Insert any default category that is missing"""
    created = 0
    for name, description in DEFAULT_CATEGORIES:
        if await store.get_category(name) is None:
            await store.create_category(name, description)
            created += 1
    if created:
        logger.info(f"Inserted {created} default categories")
    return created


async def seed_sample_items(store: InventoryStore, today: Optional[date] = None) -> int:
    """Insert the sample items, only into an empty inventory"""
    if await store.count_items() > 0:
        return 0

    today = today or date.today()
    for name, category, quantity, unit, offset, condition, notes in SAMPLE_ITEMS:
        await store.create_item(ItemFields.from_dict({
            "name": name,
            "category": category,
            "quantity": quantity,
            "unit": unit,
            "expiration_date": today + timedelta(days=offset),
            "condition": condition,
            "notes": notes,
        }))
    logger.info(f"Inserted {len(SAMPLE_ITEMS)} sample inventory items")
    return len(SAMPLE_ITEMS)
