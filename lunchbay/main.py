from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from lunchbay.core.config import settings
from lunchbay.core.exceptions import register_exception_handlers
from lunchbay.core.logging import setup_logging
from lunchbay.api.deps import memory_store
from lunchbay.api.v1.api import api_router
from lunchbay.domain.inventory.repository import InventoryStore, SqlInventoryStore
from lunchbay.domain.inventory.seed import seed_default_categories, seed_sample_items
from lunchbay.infrastructure import database


async def seed(store: InventoryStore) -> None:
    if settings.SEED_DEFAULT_CATEGORIES:
        await seed_default_categories(store)
    if settings.SEED_SAMPLE_ITEMS:
        await seed_sample_items(store)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting {settings.PROJECT_NAME} with {settings.INVENTORY_BACKEND} backend")

    if settings.INVENTORY_BACKEND == "sql":
        await database.init_db()
        async with database.AsyncSessionLocal() as session:
            await seed(SqlInventoryStore(session))
    else:
        await seed(memory_store)

    yield

    if settings.INVENTORY_BACKEND == "sql":
        await database.close_db()
    logger.info(f"{settings.PROJECT_NAME} stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Set all CORS enabled origins
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get(f"{settings.API_PREFIX}/health")
def health_check():
    return {
        "success": True,
        "status": "OK",
        "message": f"{settings.PROJECT_NAME} is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
