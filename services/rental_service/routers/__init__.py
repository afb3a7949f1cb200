"""Rental service routers package."""

from services.rental_service.routers.account import router as account_router
from services.rental_service.routers.admin_catalog import router as admin_catalog_router
from services.rental_service.routers.admin_orders import router as admin_orders_router
from services.rental_service.routers.admin_users import router as admin_users_router
from services.rental_service.routers.catalog import router as catalog_router
from services.rental_service.routers.internal import router as internal_router
from services.rental_service.routers.orders import router as orders_router

__all__ = [
    "account_router",
    "admin_catalog_router",
    "admin_orders_router",
    "admin_users_router",
    "catalog_router",
    "internal_router",
    "orders_router",
]
