from fastapi import APIRouter

from lunchbay.api.v1.admin import routes as admin
from lunchbay.api.v1.categories import routes as categories
from lunchbay.api.v1.inventory import routes as inventory

api_router = APIRouter()
api_router.include_router(inventory.router)
api_router.include_router(categories.router)
api_router.include_router(admin.router)
