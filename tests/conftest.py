import os
from contextlib import contextmanager
from typing import AsyncGenerator, Optional

# Settings are read at import time by libs.db and libs.auth
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.db.base import Base
from libs.db.session import get_async_db
from services.rental_service import models as _rental_models  # noqa: F401
from services.rental_service.app.main import app

get_settings.cache_clear()
settings = get_settings()

CUSTOMER_AUTH_ID = "auth-customer"
CUSTOMER_PHONE = "+919811111111"


def make_auth_user(
    user_id: Optional[str] = None,
    phone: Optional[str] = None,
    role: str = "client",
) -> AuthUser:
    return AuthUser(
        sub=user_id or CUSTOMER_AUTH_ID,
        phone=phone if phone is not None else CUSTOMER_PHONE,
        role=role,
    )


def make_admin_user() -> AuthUser:
    return make_auth_user(user_id="auth-admin", phone="+919822222222", role="admin")


def make_service_user() -> AuthUser:
    return make_auth_user(user_id="payments-service", phone="", role=settings.SERVICE_ROLE)


@contextmanager
def override_auth(target_app, user: AuthUser):
    """Temporarily authenticate every request as ``user``."""
    previous = target_app.dependency_overrides.get(get_current_user)
    target_app.dependency_overrides[get_current_user] = lambda: user
    try:
        yield
    finally:
        if previous is None:
            target_app.dependency_overrides.pop(get_current_user, None)
        else:
            target_app.dependency_overrides[get_current_user] = previous


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive so every session sees the
    same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the rental app, authenticated as a customer."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_async_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: make_auth_user()

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
