"""Shared helpers for rental routers."""

from fastapi import Depends, HTTPException, Request, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.rental_service.models import User, UserRole
from services.rental_service.services.availability import Page
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def get_current_account(
    request: Request,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> User:
    """Resolve the caller's ``User`` row, creating it on first use.

    Login happens elsewhere; the first authenticated call from a new token
    subject provisions the account from its phone claim.
    """
    result = await db.execute(select(User).where(User.auth_id == current_user.user_id))
    account = result.scalar_one_or_none()

    if account is None:
        if not current_user.phone:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has no phone claim",
            )
        result = await db.execute(select(User).where(User.phone == current_user.phone))
        account = result.scalar_one_or_none()
        if account is None:
            account = User(
                auth_id=current_user.user_id,
                phone=current_user.phone,
                role=UserRole.ADMIN if current_user.is_admin else UserRole.CLIENT,
            )
            db.add(account)
            logger.info("Provisioned rental account for %s", current_user.phone)
        else:
            # Same phone, new identity provider subject
            account.auth_id = current_user.user_id
        await db.commit()
        await db.refresh(account)

    if account.is_blocked:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Account is blocked"
        )

    request.state.account = account
    return account


async def paginate_query(db: AsyncSession, query, page: int, limit: int) -> Page:
    """Run ``query`` for one page and count the full result set."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar_one()

    result = await db.execute(query.offset((page - 1) * limit).limit(limit))
    return Page(items=list(result.scalars().all()), total=total, page=page, limit=limit)


def page_response(page: Page, items: list) -> dict:
    return {
        "items": items,
        "total": page.total,
        "page": page.page,
        "limit": page.limit,
        "total_pages": page.total_pages,
        "has_next": page.has_next,
        "has_prev": page.has_prev,
    }
