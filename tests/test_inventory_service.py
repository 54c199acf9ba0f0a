import pytest
from datetime import date

from lunchbay.core.exceptions import NotFoundError, ValidationError
from lunchbay.domain.inventory.filters import ItemFilter
from lunchbay.domain.inventory.memory import InMemoryInventoryStore
from lunchbay.domain.inventory.seed import (
    DEFAULT_CATEGORIES,
    SAMPLE_ITEMS,
    seed_default_categories,
    seed_sample_items,
)
from lunchbay.domain.inventory.service import InventoryService
from lunchbay.domain.inventory.status import ItemStatus, StatusPolicy

from conftest import TODAY, days_from_today


def payload(name="Milk", category="dairy", quantity=3, offset=2, **overrides):
    data = {
        "name": name,
        "category": category,
        "quantity": quantity,
        "unit": "gallons",
        "expiration_date": days_from_today(offset),
        "condition": "good",
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_milk_scenario(service: InventoryService):
    """Expiring dairy item shows up in the status counts"""
    item = await service.create_item(payload())

    assert item.category_name == "dairy"
    assert item.status == ItemStatus.EXPIRING
    assert item.days_until_expiry == 2
    assert await service.aggregate_status_counts() == {
        "fresh": 0,
        "expiring": 1,
        "expired": 0,
        "total": 1,
    }


@pytest.mark.asyncio
async def test_status_counts_match_filtered_listings(service: InventoryService):
    for offset in (-4, -1, 0, 1, 3, 4, 20):
        await service.create_item(payload(name=f"Item {offset}", offset=offset))

    counts = await service.aggregate_status_counts()
    per_status = {
        status.value: len(await service.list_items(ItemFilter(status=status)))
        for status in ItemStatus
    }

    assert counts["total"] == counts["fresh"] + counts["expiring"] + counts["expired"]
    assert counts["total"] == len(await service.list_items())
    assert {k: counts[k] for k in per_status} == per_status
    assert per_status == {"expired": 2, "expiring": 3, "fresh": 2}


@pytest.mark.asyncio
async def test_empty_inventory_counts(service: InventoryService):
    assert await service.aggregate_status_counts() == {"fresh": 0, "expiring": 0, "expired": 0, "total": 0}


@pytest.mark.asyncio
async def test_negative_quantity_never_persisted(service: InventoryService):
    with pytest.raises(ValidationError):
        await service.create_item(payload(quantity=-1))
    assert await service.store.count_items() == 0


@pytest.mark.asyncio
async def test_missing_fields(service: InventoryService):
    data = payload()
    del data["unit"]
    with pytest.raises(ValidationError) as exc_info:
        await service.create_item(data)
    assert "unit" in exc_info.value.message


@pytest.mark.asyncio
async def test_update_unknown_id_reported_before_bad_payload(service: InventoryService):
    with pytest.raises(NotFoundError):
        await service.update_item(404, {"name": "no other fields"})


@pytest.mark.asyncio
async def test_get_item_is_classified(service: InventoryService):
    created = await service.create_item(payload(offset=-1))
    fetched = await service.get_item(created.id)
    assert fetched.status == ItemStatus.EXPIRED
    assert fetched.days_until_expiry == -1


@pytest.mark.asyncio
async def test_threshold_comes_from_policy(store):
    service = InventoryService(store, policy=StatusPolicy(expiring_threshold_days=1), clock=lambda: TODAY)
    item = await service.create_item(payload(offset=2))
    assert item.status == ItemStatus.FRESH


@pytest.mark.asyncio
async def test_expiration_timeline(service: InventoryService):
    for offset in (-2, 0, 2, 5, 10, 30):
        await service.create_item(payload(name=f"Item {offset}", offset=offset))

    assert await service.expiration_timeline() == {
        "expired": 1,
        "today": 1,
        "1-3 days": 1,
        "4-7 days": 1,
        "1-2 weeks": 1,
        "2+ weeks": 1,
    }


@pytest.mark.asyncio
async def test_category_breakdown_includes_empty_categories(service: InventoryService):
    await service.create_item(payload())
    await service.create_item(payload(name="Cheese"))

    assert await service.category_breakdown() == [
        {"category": "dairy", "description": "Dairy Products", "count": 2},
        {"category": "fruits", "description": "Fruits and Vegetables", "count": 0},
    ]


@pytest.mark.asyncio
async def test_alerts(service: InventoryService):
    await service.create_item(payload(name="Yogurt", offset=-1, quantity=1))
    await service.create_item(payload(name="Soup", offset=0, quantity=1))
    await service.create_item(payload(name="Bread", offset=2, quantity=2))
    await service.create_item(payload(name="Cheese", offset=9, quantity=4))

    alerts = await service.alerts()

    assert [a.severity for a in alerts] == ["critical", "warning", "info"]
    assert alerts[0].title == "1 Expired Items"
    assert alerts[0].status_filter == ItemStatus.EXPIRED
    assert alerts[1].title == "1 Items Expire Today"
    assert "4 items are running low" in alerts[2].description


@pytest.mark.asyncio
async def test_no_alerts_for_healthy_stock(service: InventoryService):
    await service.create_item(payload(offset=10, quantity=40))
    assert await service.alerts() == []


@pytest.mark.asyncio
async def test_system_stats(service: InventoryService):
    await service.create_item(payload())
    stats = await service.system_stats()
    assert stats["total_inventory"] == 1
    assert stats["total_categories"] == 2
    assert stats["backend"] in ("sql", "memory")


@pytest.mark.asyncio
async def test_delete_category_normalizes_name(service: InventoryService):
    assert await service.delete_category(" Fruits ") == 0
    assert [c.name for c in await service.list_categories()] == ["dairy"]


@pytest.mark.asyncio
async def test_seed_is_idempotent(empty_store):
    assert await seed_default_categories(empty_store) == len(DEFAULT_CATEGORIES)
    assert await seed_default_categories(empty_store) == 0

    assert await seed_sample_items(empty_store, today=date(2025, 10, 16)) == len(SAMPLE_ITEMS)
    assert await seed_sample_items(empty_store) == 0
    assert await empty_store.count_items() == len(SAMPLE_ITEMS)


@pytest.mark.asyncio
async def test_seeded_sample_statuses():
    store = InMemoryInventoryStore()
    await seed_default_categories(store)
    await seed_sample_items(store, today=TODAY)

    service = InventoryService(store, policy=StatusPolicy(), clock=lambda: TODAY)

    assert await service.aggregate_status_counts() == {"fresh": 3, "expiring": 3, "expired": 1, "total": 7}


@pytest.mark.asyncio
async def test_timeline_buckets_ignore_expiring_threshold(store):
    service = InventoryService(store, policy=StatusPolicy(expiring_threshold_days=1), clock=lambda: TODAY)
    item = await service.create_item(payload(offset=3))

    assert item.status == ItemStatus.FRESH
    assert (await service.expiration_timeline())["1-3 days"] == 1


@pytest.mark.asyncio
async def test_non_string_name_is_a_validation_error(service: InventoryService):
    with pytest.raises(ValidationError):
        await service.create_item(payload(name=42))
    assert await service.store.count_items() == 0


@pytest.mark.asyncio
async def test_impact_summary(service: InventoryService):
    await service.create_item(payload(name="Yogurt", offset=-1))
    await service.create_item(payload(name="Bread", offset=-3))
    await service.create_item(payload(name="Soup", offset=1, quantity=4, unit="servings"))
    await service.create_item(payload(name="Stew", offset=3, quantity=6, unit="servings"))
    await service.create_item(payload(name="Chili", offset=10, quantity=8, unit="servings"))
    await service.create_item(payload(name="Milk", offset=2, quantity=3))

    assert await service.impact_summary() == {"cost_savings": 7, "meals_donated": 10}


@pytest.mark.asyncio
async def test_impact_summary_empty(service: InventoryService):
    assert await service.impact_summary() == {"cost_savings": 0, "meals_donated": 0}
