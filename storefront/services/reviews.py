"""Product review operations and rating aggregate maintenance."""
import logging

from fastapi import HTTPException, status
from sqlalchemy import select, update, func, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.order import Order, ORDER_COMPLETED
from storefront.models.product import Product
from storefront.models.review import ProductReview
from storefront.models.user import User
from storefront.schemas.reviews import ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)


async def update_product_rating_stats(db: AsyncSession, product_id: str) -> None:
    """
    Recalculate a product's average rating and review count from its reviews.

    Args:
        db: Database session
        product_id: Product UUID
    """
    result = await db.execute(
        select(func.avg(ProductReview.rating), func.count(ProductReview.uuid))
        .where(ProductReview.product_id == product_id)
    )
    avg_rating, review_count = result.one()

    await db.execute(
        update(Product)
        .where(Product.uuid == product_id)
        .values(
            average_rating=round(float(avg_rating), 2) if avg_rating is not None else 0.0,
            review_count=review_count or 0,
        )
    )


async def has_user_reviewed(db: AsyncSession, user_id: str, product_id: str) -> bool:
    result = await db.execute(
        select(ProductReview.uuid).where(
            (ProductReview.user_id == user_id) &
            (ProductReview.product_id == product_id)
        ).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def has_completed_purchase(db: AsyncSession, user_id: str, product_id: str) -> bool:
    result = await db.execute(
        select(Order.uuid).where(
            (Order.user_id == user_id) &
            (Order.product_id == product_id) &
            (Order.status == ORDER_COMPLETED)
        ).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def list_product_reviews(db: AsyncSession, product_id: str) -> list[ProductReview]:
    result = await db.execute(
        select(ProductReview)
        .where(ProductReview.product_id == product_id)
        .order_by(desc(ProductReview.created_at))
    )
    return list(result.scalars().all())


async def create_review(db: AsyncSession, user: User, product_id: str, data: ReviewCreate) -> ProductReview:
    """
    Create a review. One review per user per product.

    The verified-purchase flag is computed here from completed orders and
    never recomputed afterwards.
    """
    already_reviewed = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="You have already reviewed this product"
    )
    if await has_user_reviewed(db, user.uuid, product_id):
        raise already_reviewed

    review = ProductReview(
        product_id=product_id,
        user_id=user.uuid,
        rating=data.rating,
        title=data.title,
        comment=data.comment,
        images=list(data.images),
        is_verified_purchase=await has_completed_purchase(db, user.uuid, product_id),
    )
    db.add(review)
    try:
        await db.flush()
    except IntegrityError:
        # The unique constraint caught a concurrent submission
        await db.rollback()
        raise already_reviewed

    await update_product_rating_stats(db, product_id)
    await db.commit()
    await db.refresh(review)
    return review


async def get_owned_review_or_404(db: AsyncSession, review_id: str, user_id: str) -> ProductReview:
    """Someone else's review is reported as not found."""
    result = await db.execute(
        select(ProductReview).where(
            (ProductReview.uuid == review_id) &
            (ProductReview.user_id == user_id)
        )
    )
    review = result.scalar_one_or_none()
    if not review:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found or unauthorized"
        )
    return review


async def update_review(db: AsyncSession, review_id: str, user_id: str, data: ReviewUpdate) -> ProductReview:
    review = await get_owned_review_or_404(db, review_id, user_id)

    if data.rating is not None:
        review.rating = data.rating
    if data.title is not None:
        review.title = data.title
    if data.comment is not None:
        review.comment = data.comment
    if data.images is not None:
        review.images = list(data.images)

    await db.flush()
    await update_product_rating_stats(db, review.product_id)
    await db.commit()
    await db.refresh(review)
    return review


async def delete_review(db: AsyncSession, review_id: str, user_id: str) -> None:
    review = await get_owned_review_or_404(db, review_id, user_id)
    product_id = review.product_id

    await db.delete(review)
    await db.flush()
    await update_product_rating_stats(db, product_id)
    await db.commit()


async def mark_helpful(db: AsyncSession, review_id: str) -> None:
    """
    Increment a review's helpful count.

    There is no per-user dedup: repeated calls keep incrementing.
    """
    result = await db.execute(
        update(ProductReview)
        .where(ProductReview.uuid == review_id)
        .values(helpful_count=ProductReview.helpful_count + 1)
    )
    if result.rowcount == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found"
        )
    await db.commit()
