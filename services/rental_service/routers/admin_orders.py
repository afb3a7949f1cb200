"""Admin order router: review queue and lifecycle actions."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.rental_service.models import Order, OrderStatus, PaymentStatus
from services.rental_service.routers._helpers import page_response, paginate_query
from services.rental_service.schemas import (
    OrderCancel,
    OrderReject,
    OrderResponse,
    PaginatedResponse,
)
from services.rental_service.services import orders as order_service
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/orders", tags=["admin-rental"])


@router.get("", response_model=PaginatedResponse[OrderResponse])
async def list_all_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    status: Optional[OrderStatus] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None),
    store_id: Optional[uuid.UUID] = Query(None),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List orders, newest first.

    ``status=pending&payment_status=paid`` is the review queue.
    """
    query = select(Order).order_by(Order.created_at.desc())
    if status:
        query = query.where(Order.status == status)
    if payment_status:
        query = query.where(Order.payment_status == payment_status)
    if store_id:
        query = query.where(Order.store_id == store_id)

    result = await paginate_query(db, query, page, limit)
    return page_response(
        result, [OrderResponse.model_validate(o) for o in result.items]
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await order_service.get_order(db, order_id)


@router.post("/{order_id}/confirm", response_model=OrderResponse)
async def confirm_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Accept a paid booking."""
    order = await order_service.get_order(db, order_id)
    return await order_service.transition_order(
        db, order, "confirm", performed_by=current_user.user_id
    )


@router.post("/{order_id}/reject", response_model=OrderResponse)
async def reject_order(
    order_id: uuid.UUID,
    reject_in: OrderReject,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Turn down a paid booking. A refund is then reported by payments."""
    order = await order_service.get_order(db, order_id)
    return await order_service.transition_order(
        db, order, "reject", reason=reject_in.reason, performed_by=current_user.user_id
    )


@router.post("/{order_id}/start", response_model=OrderResponse)
async def start_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Mark the vehicle as picked up."""
    order = await order_service.get_order(db, order_id)
    return await order_service.transition_order(
        db, order, "start", performed_by=current_user.user_id
    )


@router.post("/{order_id}/complete", response_model=OrderResponse)
async def complete_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Mark the vehicle as returned."""
    order = await order_service.get_order(db, order_id)
    return await order_service.transition_order(
        db, order, "complete", performed_by=current_user.user_id
    )


@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: uuid.UUID,
    cancel_in: OrderCancel,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    order = await order_service.get_order(db, order_id)
    return await order_service.transition_order(
        db, order, "cancel", reason=cancel_in.reason, performed_by=current_user.user_id
    )
