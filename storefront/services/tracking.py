"""Per-user trackers: activity log, wishlist and recently viewed products."""
import logging
from datetime import datetime
from typing import Optional, Any

from fastapi import HTTPException, Request, status
from sqlalchemy import select, delete, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.config import settings
from storefront.models.activity import UserActivity
from storefront.models.product import Product
from storefront.models.wishlist import WishlistItem, RecentlyViewed

logger = logging.getLogger(__name__)

ACTIVITY_HISTORY_LIMIT = 100


async def log_activity(
    db: AsyncSession,
    user_id: Optional[str],
    action: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> UserActivity:
    """Add an activity row to the session. The caller commits."""
    activity = UserActivity(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details,
        ip_address=request.client.host if request is not None and request.client else None,
        user_agent=request.headers.get("user-agent") if request is not None else None,
    )
    db.add(activity)
    return activity


async def list_activity(db: AsyncSession, user_id: str) -> list[UserActivity]:
    result = await db.execute(
        select(UserActivity)
        .where(UserActivity.user_id == user_id)
        .order_by(desc(UserActivity.created_at))
        .limit(ACTIVITY_HISTORY_LIMIT)
    )
    return list(result.scalars().all())


# Wishlist

async def is_in_wishlist(db: AsyncSession, user_id: str, product_id: str) -> bool:
    result = await db.execute(
        select(WishlistItem.uuid).where(
            (WishlistItem.user_id == user_id) &
            (WishlistItem.product_id == product_id)
        ).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def add_to_wishlist(db: AsyncSession, user_id: str, product_id: str) -> WishlistItem:
    """Add a product. Adding one that is already present is an error, not a no-op."""
    already_present = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Product is already in wishlist"
    )
    if await is_in_wishlist(db, user_id, product_id):
        raise already_present

    item = WishlistItem(user_id=user_id, product_id=product_id)
    db.add(item)
    try:
        await db.commit()
    except IntegrityError:
        # Concurrent add won the race
        await db.rollback()
        raise already_present
    await db.refresh(item)
    return item


async def remove_from_wishlist(db: AsyncSession, user_id: str, product_id: str) -> None:
    result = await db.execute(
        delete(WishlistItem).where(
            (WishlistItem.user_id == user_id) &
            (WishlistItem.product_id == product_id)
        )
    )
    if result.rowcount == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found in wishlist"
        )
    await db.commit()


async def list_wishlist_products(db: AsyncSession, user_id: str) -> list[Product]:
    result = await db.execute(
        select(Product)
        .join(WishlistItem, WishlistItem.product_id == Product.uuid)
        .where(WishlistItem.user_id == user_id)
        .order_by(desc(WishlistItem.created_at))
    )
    return list(result.scalars().all())


# Recently viewed

async def _find_view(db: AsyncSession, user_id: str, product_id: str) -> Optional[RecentlyViewed]:
    result = await db.execute(
        select(RecentlyViewed).where(
            (RecentlyViewed.user_id == user_id) &
            (RecentlyViewed.product_id == product_id)
        )
    )
    return result.scalar_one_or_none()


async def track_view(db: AsyncSession, user_id: str, product_id: str) -> None:
    """
    Record that a user viewed a product, then keep only the most recent
    RECENTLY_VIEWED_LIMIT rows for that user.
    """
    now = datetime.utcnow()
    existing = await _find_view(db, user_id, product_id)
    if existing is None:
        try:
            async with db.begin_nested():
                db.add(RecentlyViewed(user_id=user_id, product_id=product_id, viewed_at=now))
        except IntegrityError:
            # A concurrent view inserted the row first
            existing = await _find_view(db, user_id, product_id)
    if existing is not None:
        existing.viewed_at = now
    await db.flush()

    result = await db.execute(
        select(RecentlyViewed.uuid)
        .where(RecentlyViewed.user_id == user_id)
        .order_by(desc(RecentlyViewed.viewed_at))
    )
    stale_ids = list(result.scalars().all())[settings.RECENTLY_VIEWED_LIMIT:]
    if stale_ids:
        await db.execute(delete(RecentlyViewed).where(RecentlyViewed.uuid.in_(stale_ids)))
        logger.debug(f"Evicted {len(stale_ids)} recently viewed rows for user {user_id}")


async def list_recently_viewed(db: AsyncSession, user_id: str, limit: int) -> list[Product]:
    """Products most-recently-viewed first."""
    result = await db.execute(
        select(Product)
        .join(RecentlyViewed, RecentlyViewed.product_id == Product.uuid)
        .where(RecentlyViewed.user_id == user_id)
        .order_by(desc(RecentlyViewed.viewed_at))
        .limit(limit)
    )
    return list(result.scalars().all())
