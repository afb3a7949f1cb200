"""Customer order router: booking, order history, cancellation."""

import uuid

from fastapi import APIRouter, Depends, Query, Request, status
from libs.common.rate_limit import booking_limit
from libs.db.session import get_async_db
from services.rental_service.models import Order, User
from services.rental_service.routers._helpers import (
    get_current_account,
    page_response,
    paginate_query,
)
from services.rental_service.schemas import (
    OrderCancel,
    OrderCreate,
    OrderResponse,
    PaginatedResponse,
)
from services.rental_service.services import orders as order_service
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["rental-orders"])


@router.post(
    "/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED
)
@booking_limit
async def create_order(
    request: Request,
    order_in: OrderCreate,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    """Book a vehicle. The order starts pending until payment is recorded."""
    return await order_service.create_order(
        db,
        user=account,
        vehicle_id=order_in.vehicle_id,
        start_time=order_in.start_time,
        end_time=order_in.end_time,
    )


@router.get("/user/orders", response_model=PaginatedResponse[OrderResponse])
async def list_my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    """List the caller's orders, newest first."""
    query = (
        select(Order)
        .where(Order.user_id == account.id)
        .order_by(Order.created_at.desc())
    )
    result = await paginate_query(db, query, page, limit)
    return page_response(
        result, [OrderResponse.model_validate(o) for o in result.items]
    )


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_my_order(
    order_id: uuid.UUID,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    return await order_service.get_order(db, order_id, user_id=account.id)


@router.post("/orders/{order_id}/cancel", response_model=OrderResponse)
async def cancel_my_order(
    order_id: uuid.UUID,
    cancel_in: OrderCancel,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    """Cancel an order that has not been picked up yet."""
    order = await order_service.get_order(db, order_id, user_id=account.id)
    return await order_service.cancel_own_order(db, order, reason=cancel_in.reason)
