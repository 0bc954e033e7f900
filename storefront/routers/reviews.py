"""Reviews router for product reviews and helpful votes."""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db
from storefront.models.user import User
from storefront.auth.dependencies import get_current_user
from storefront.schemas.auth import MessageResponse
from storefront.schemas.reviews import ReviewCreate, ReviewUpdate, ReviewResponse
from storefront.services import reviews as review_service
from storefront.services.catalog import get_product_or_404
from storefront.services.tracking import log_activity

router = APIRouter()


@router.get("/api/products/{product_id}/reviews", response_model=list[ReviewResponse])
async def list_reviews(product_id: str, db: AsyncSession = Depends(get_db)):
    """Reviews for a product, newest first (public)."""
    return await review_service.list_product_reviews(db, product_id)


@router.post(
    "/api/products/{product_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_review(
    product_id: str,
    review_data: ReviewCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Review a product (rating 1-5, optional title, comment and up to 3 images).
    One review per user per product.
    """
    await get_product_or_404(db, product_id)
    review = await review_service.create_review(db, current_user, product_id, review_data)

    await log_activity(
        db, current_user.uuid, "review_product",
        entity_type="product", entity_id=product_id,
        details={"rating": review.rating}, request=request,
    )
    await db.commit()
    return review


@router.patch("/api/reviews/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: str,
    review_data: ReviewUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update your own review."""
    return await review_service.update_review(db, review_id, current_user.uuid, review_data)


@router.delete("/api/reviews/{review_id}", response_model=MessageResponse)
async def delete_review(
    review_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete your own review."""
    await review_service.delete_review(db, review_id, current_user.uuid)
    return MessageResponse(message="Review deleted")


@router.post("/api/reviews/{review_id}/helpful", response_model=MessageResponse)
async def mark_review_helpful(review_id: str, db: AsyncSession = Depends(get_db)):
    """Count a helpful vote. Anyone may vote, repeatedly."""
    await review_service.mark_helpful(db, review_id)
    return MessageResponse(message="Marked as helpful")
