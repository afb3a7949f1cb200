"""Internal router for the payments integration (service-role tokens only)."""

import uuid

from fastapi import APIRouter, Depends
from libs.auth.dependencies import require_service_role
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.rental_service.schemas import OrderResponse, PaymentRecord
from services.rental_service.services import orders as order_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/orders", tags=["internal-rental"])


@router.post("/{order_id}/payment", response_model=OrderResponse)
async def record_payment(
    order_id: uuid.UUID,
    payment_in: PaymentRecord,
    caller: AuthUser = Depends(require_service_role),
    db: AsyncSession = Depends(get_async_db),
):
    """Record a successful payment. The order then waits for admin review."""
    order = await order_service.get_order(db, order_id)
    return await order_service.record_payment(
        db, order, payment_reference=payment_in.payment_reference
    )


@router.post("/{order_id}/refund", response_model=OrderResponse)
async def record_refund(
    order_id: uuid.UUID,
    caller: AuthUser = Depends(require_service_role),
    db: AsyncSession = Depends(get_async_db),
):
    order = await order_service.get_order(db, order_id)
    return await order_service.record_refund(db, order)
