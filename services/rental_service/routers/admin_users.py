"""Admin user router: search and blocking."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.rental_service.errors import NotFound
from services.rental_service.models import User
from services.rental_service.routers._helpers import page_response, paginate_query
from services.rental_service.schemas import AdminUserResponse, PaginatedResponse
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["admin-rental"])


@router.get("", response_model=PaginatedResponse[AdminUserResponse])
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    search: Optional[str] = Query(None),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List accounts, newest first. ``search`` matches phone, name or email."""
    query = select(User).order_by(User.created_at.desc())
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                User.phone.ilike(pattern),
                User.name.ilike(pattern),
                User.email.ilike(pattern),
            )
        )
    result = await paginate_query(db, query, page, limit)
    return page_response(
        result, [AdminUserResponse.model_validate(u) for u in result.items]
    )


@router.post("/{user_id}/block", response_model=AdminUserResponse)
async def block_user(
    user_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await _set_blocked(db, user_id, True, current_user)


@router.post("/{user_id}/unblock", response_model=AdminUserResponse)
async def unblock_user(
    user_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await _set_blocked(db, user_id, False, current_user)


async def _set_blocked(
    db: AsyncSession, user_id: uuid.UUID, blocked: bool, current_user: AuthUser
) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    user.is_blocked = blocked
    await db.commit()
    await db.refresh(user)

    logger.info(
        "User %s %s by %s",
        user.id,
        "blocked" if blocked else "unblocked",
        current_user.user_id,
    )
    return user
