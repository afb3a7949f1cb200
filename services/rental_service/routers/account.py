"""Customer account router: profile and favourite vehicles."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.db.session import get_async_db
from services.rental_service.errors import NotFound
from services.rental_service.models import Favorite, User, Vehicle
from services.rental_service.routers._helpers import (
    get_current_account,
    page_response,
    paginate_query,
)
from services.rental_service.schemas import (
    FavoriteResponse,
    PaginatedResponse,
    ProfileResponse,
    ProfileUpdate,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(prefix="/user", tags=["rental-account"])


# ============================================================================
# PROFILE
# ============================================================================


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(account: User = Depends(get_current_account)):
    return account


@router.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    profile_in: ProfileUpdate,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    """Update name and/or email."""
    for field, value in profile_in.model_dump(exclude_unset=True).items():
        setattr(account, field, value)
    await db.commit()
    await db.refresh(account)
    return account


# ============================================================================
# FAVORITES
# ============================================================================


@router.get("/favorites", response_model=PaginatedResponse[FavoriteResponse])
async def list_favorites(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    """List the caller's favourite vehicles, newest first."""
    query = (
        select(Favorite)
        .where(Favorite.user_id == account.id)
        .options(selectinload(Favorite.vehicle))
        .order_by(Favorite.created_at.desc())
    )
    result = await paginate_query(db, query, page, limit)
    return page_response(
        result, [FavoriteResponse.model_validate(f) for f in result.items]
    )


@router.post(
    "/favorites/{vehicle_id}",
    response_model=FavoriteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_favorite(
    vehicle_id: uuid.UUID,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    """Favourite a vehicle. Adding it twice returns the existing entry."""
    vehicle = await db.get(Vehicle, vehicle_id)
    if vehicle is None or not vehicle.is_active:
        raise NotFound("Vehicle not found")

    favorite = await _get_favorite(db, account.id, vehicle_id)
    if favorite is None:
        db.add(Favorite(user_id=account.id, vehicle_id=vehicle_id))
        await db.commit()
        favorite = await _get_favorite(db, account.id, vehicle_id)
    return favorite


@router.delete("/favorites/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    vehicle_id: uuid.UUID,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    favorite = await _get_favorite(db, account.id, vehicle_id)
    if favorite is None:
        raise NotFound("Favorite not found")
    await db.delete(favorite)
    await db.commit()


async def _get_favorite(
    db: AsyncSession, user_id: uuid.UUID, vehicle_id: uuid.UUID
) -> Optional[Favorite]:
    query = (
        select(Favorite)
        .where(Favorite.user_id == user_id, Favorite.vehicle_id == vehicle_id)
        .options(selectinload(Favorite.vehicle))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()
