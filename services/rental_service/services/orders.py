"""Order lifecycle: booking creation, pricing and status transitions."""

import math
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import ensure_utc, utc_now
from libs.common.logging import get_logger
from services.rental_service.errors import Conflict, NotFound, ValidationFailed
from services.rental_service.models import (
    Order,
    OrderStatus,
    PaymentStatus,
    User,
    Vehicle,
)
from services.rental_service.repository import SqlRentalRepository
from services.rental_service.services.availability import (
    is_vehicle_available,
    window_errors,
)
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

HOUR = timedelta(hours=1)


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


def calculate_total(vehicle: Vehicle, start: datetime, end: datetime) -> Decimal:
    """Price a rental window.

    Partial hours round up. With a day rate, each full 24h is billed at the
    day rate and the leftover hours are capped at one day's price.
    """
    hours = math.ceil((ensure_utc(end) - ensure_utc(start)) / HOUR)
    per_hour = Decimal(vehicle.price_per_hour)
    if vehicle.price_per_day is None:
        return per_hour * hours

    per_day = Decimal(vehicle.price_per_day)
    days, leftover = divmod(hours, 24)
    return per_day * days + min(per_hour * leftover, per_day)


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


async def create_order(
    db: AsyncSession,
    *,
    user: User,
    vehicle_id: uuid.UUID,
    start_time: datetime,
    end_time: datetime,
) -> Order:
    """Create a pending, unpaid order after re-checking the window.

    The search result the client saw may be stale, so the conflict check runs
    again here before insert.
    """
    start, end = ensure_utc(start_time), ensure_utc(end_time)
    errors = window_errors(start, end)
    if start < utc_now():
        errors.append({"field": "start_time", "message": "start_time is in the past"})
    if errors:
        raise ValidationFailed(errors)

    repo = SqlRentalRepository(db)
    vehicle = await repo.get_vehicle(vehicle_id)
    if vehicle is None or not vehicle.is_active:
        raise NotFound("Vehicle not found")
    if not vehicle.availability:
        raise Conflict("Vehicle is not accepting bookings")

    if not await is_vehicle_available(repo, vehicle.id, start, end):
        raise Conflict("Vehicle not available in this time slot")

    order = Order(
        user_id=user.id,
        vehicle_id=vehicle.id,
        store_id=vehicle.store_id,
        start_time=start,
        end_time=end,
        total_amount=calculate_total(vehicle, start, end),
        status=OrderStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
    )
    db.add(order)
    await db.commit()
    await db.refresh(order)

    logger.info(
        "Created order %s for vehicle %s (%s -> %s, amount=%s)",
        order.id,
        vehicle.id,
        start.isoformat(),
        end.isoformat(),
        order.total_amount,
    )
    return order


async def get_order(
    db: AsyncSession, order_id: uuid.UUID, *, user_id: Optional[uuid.UUID] = None
) -> Order:
    """Fetch an order, optionally scoped to its owner."""
    order = await db.get(Order, order_id)
    if order is None or (user_id is not None and order.user_id != user_id):
        raise NotFound("Order not found")
    return order


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

# action -> (statuses it may start from, resulting status)
TRANSITIONS: dict[str, tuple[tuple[OrderStatus, ...], OrderStatus]] = {
    "confirm": ((OrderStatus.PENDING,), OrderStatus.CONFIRMED),
    "reject": ((OrderStatus.PENDING,), OrderStatus.CANCELLED),
    "start": ((OrderStatus.CONFIRMED,), OrderStatus.ONGOING),
    "complete": ((OrderStatus.ONGOING,), OrderStatus.COMPLETED),
    "cancel": (
        (OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.ONGOING),
        OrderStatus.CANCELLED,
    ),
}

# Customers may only back out before pickup.
CUSTOMER_CANCELLABLE = (OrderStatus.PENDING, OrderStatus.CONFIRMED)


async def transition_order(
    db: AsyncSession,
    order: Order,
    action: str,
    *,
    reason: Optional[str] = None,
    performed_by: str = "system",
) -> Order:
    """Apply a lifecycle action to an order or raise ``Conflict``."""
    allowed_from, target = TRANSITIONS[action]
    if order.status not in allowed_from:
        raise Conflict(f"Cannot {action} an order that is {order.status.value}")

    if action in ("confirm", "reject") and order.payment_status != PaymentStatus.PAID:
        raise Conflict(f"Cannot {action} an order before payment is recorded")
    if action == "reject":
        if not reason:
            raise ValidationFailed.single("reason", "A rejection reason is required")
        order.rejection_reason = reason
    if action == "cancel":
        order.cancellation_reason = reason

    previous = order.status
    order.status = target
    await db.commit()
    await db.refresh(order)

    logger.info(
        "Order %s %s -> %s by %s", order.id, previous.value, target.value, performed_by
    )
    return order


async def cancel_own_order(
    db: AsyncSession, order: Order, *, reason: Optional[str] = None
) -> Order:
    if order.status not in CUSTOMER_CANCELLABLE:
        raise Conflict(f"Cannot cancel an order that is {order.status.value}")
    return await transition_order(
        db, order, "cancel", reason=reason, performed_by=str(order.user_id)
    )


# ---------------------------------------------------------------------------
# Payment outcomes (reported by the payments integration)
# ---------------------------------------------------------------------------


async def record_payment(
    db: AsyncSession, order: Order, *, payment_reference: str
) -> Order:
    """Mark an order paid. The order stays pending for admin review.

    Idempotent: an order that is already paid is returned unchanged.
    """
    if order.payment_status == PaymentStatus.PAID:
        return order
    if order.payment_status != PaymentStatus.PENDING:
        raise Conflict(f"Payment already {order.payment_status.value}")
    if order.status != OrderStatus.PENDING:
        raise Conflict(f"Cannot take payment for an order that is {order.status.value}")

    order.payment_status = PaymentStatus.PAID
    order.payment_reference = payment_reference
    await db.commit()
    await db.refresh(order)
    logger.info("Recorded payment %s for order %s", payment_reference, order.id)
    return order


async def record_refund(db: AsyncSession, order: Order) -> Order:
    if order.payment_status == PaymentStatus.REFUNDED:
        return order
    if order.payment_status != PaymentStatus.PAID:
        raise Conflict("Only paid orders can be refunded")
    if order.status != OrderStatus.CANCELLED:
        raise Conflict("Only cancelled orders can be refunded")

    order.payment_status = PaymentStatus.REFUNDED
    await db.commit()
    await db.refresh(order)
    logger.info("Recorded refund for order %s", order.id)
    return order
