"""FastAPI application for the Rental Service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.rental_service.errors import register_exception_handlers
from services.rental_service.routers import (
    account_router,
    admin_catalog_router,
    admin_orders_router,
    admin_users_router,
    catalog_router,
    internal_router,
    orders_router,
)
from slowapi.errors import RateLimitExceeded


def create_app() -> FastAPI:
    """Create and configure the Rental Service FastAPI app."""
    app = FastAPI(
        title="RentRide Rental Service",
        version="0.1.0",
        description="Bike and scooter rentals - stores, availability search, bookings.",
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "https://rentride.in",
            "https://www.rentride.in",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_observability_middleware(app)
    register_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "rental"}

    # Public and customer routes
    app.include_router(catalog_router, prefix="/rental")
    app.include_router(orders_router, prefix="/rental")
    app.include_router(account_router, prefix="/rental")

    # Admin back-office
    app.include_router(admin_catalog_router, prefix="/admin/rental")
    app.include_router(admin_orders_router, prefix="/admin/rental")
    app.include_router(admin_users_router, prefix="/admin/rental")

    # Service-to-service (payments integration)
    app.include_router(internal_router, prefix="/internal/rental")

    return app


app = create_app()
