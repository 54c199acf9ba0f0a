import pytest
from datetime import date, timedelta
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from lunchbay.main import app
from lunchbay.api.deps import get_inventory_service
from lunchbay.domain.inventory.memory import InMemoryInventoryStore
from lunchbay.domain.inventory.repository import InventoryStore, SqlInventoryStore
from lunchbay.domain.inventory.service import InventoryService
from lunchbay.domain.inventory.status import StatusPolicy
from lunchbay.infrastructure.database import Base, build_engine
from lunchbay.domain.inventory import models  # noqa: F401


# Fixed evaluation day so status buckets never depend on when the suite runs
TODAY = date(2025, 10, 16)

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite://"


def days_from_today(days: int) -> date:
    return TODAY + timedelta(days=days)


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh in-memory database session for each test."""
    test_engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()

    await test_engine.dispose()


@pytest.fixture(params=["sql", "memory"])
async def empty_store(request, db_session: AsyncSession) -> InventoryStore:
    """Each store implementation with no categories and no items."""
    if request.param == "sql":
        return SqlInventoryStore(db_session)
    return InMemoryInventoryStore()


@pytest.fixture(scope="function")
async def store(empty_store: InventoryStore) -> InventoryStore:
    """Store with the fruits and dairy categories."""
    await empty_store.create_category("fruits", "Fruits and Vegetables")
    await empty_store.create_category("dairy", "Dairy Products")
    return empty_store


@pytest.fixture(scope="function")
def service(store: InventoryStore) -> InventoryService:
    return InventoryService(
        store,
        policy=StatusPolicy(expiring_threshold_days=3),
        clock=lambda: TODAY,
        low_stock_quantity=5,
        low_stock_alert_min_items=3,
        average_item_cost=5.0,
        waste_reduction_rate=0.7,
    )


@pytest.fixture(scope="function")
async def client(service: InventoryService) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with the inventory service dependency overridden."""
    app.dependency_overrides[get_inventory_service] = lambda: service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def sample_item_data() -> dict:
    """Sample inventory item payload."""
    return {
        "name": "Milk",
        "category": "dairy",
        "quantity": 3,
        "unit": "gallons",
        "expiration_date": days_from_today(2).isoformat(),
        "condition": "good",
        "notes": "Organic whole milk",
    }


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
