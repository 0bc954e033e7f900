"""Wishlist and recently-viewed routers for the logged-in user."""
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db
from storefront.config import settings
from storefront.models.user import User
from storefront.auth.dependencies import get_current_user
from storefront.schemas.auth import MessageResponse
from storefront.schemas.products import ProductResponse
from storefront.schemas.wishlist import WishlistItemResponse, WishlistCheckResponse
from storefront.services import tracking
from storefront.services.catalog import get_product_or_404

router = APIRouter()


@router.get("/api/wishlist", response_model=list[ProductResponse])
async def get_wishlist(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Wishlisted products, most recently added first."""
    return await tracking.list_wishlist_products(db, current_user.uuid)


@router.post("/api/wishlist/{product_id}", response_model=WishlistItemResponse, status_code=status.HTTP_201_CREATED)
async def add_to_wishlist(
    product_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await get_product_or_404(db, product_id)
    return await tracking.add_to_wishlist(db, current_user.uuid, product_id)


@router.delete("/api/wishlist/{product_id}", response_model=MessageResponse)
async def remove_from_wishlist(
    product_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await tracking.remove_from_wishlist(db, current_user.uuid, product_id)
    return MessageResponse(message="Removed from wishlist")


@router.get("/api/wishlist/check/{product_id}", response_model=WishlistCheckResponse)
async def check_wishlist(
    product_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return WishlistCheckResponse(
        product_id=product_id,
        in_wishlist=await tracking.is_in_wishlist(db, current_user.uuid, product_id),
    )


@router.post("/api/recently-viewed/{product_id}", response_model=MessageResponse)
async def track_product_view(
    product_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Record a product view and log it as activity."""
    await get_product_or_404(db, product_id)
    await tracking.track_view(db, current_user.uuid, product_id)
    await tracking.log_activity(
        db, current_user.uuid, "view_product",
        entity_type="product", entity_id=product_id, request=request,
    )
    await db.commit()
    return MessageResponse(message="View recorded")


@router.get("/api/recently-viewed", response_model=list[ProductResponse])
async def get_recently_viewed(
    limit: int = Query(10, ge=1, le=settings.RECENTLY_VIEWED_LIMIT),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Recently viewed products, most recent first."""
    return await tracking.list_recently_viewed(db, current_user.uuid, limit)
