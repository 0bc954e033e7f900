"""Recommendation slots: similar to a product, personalized from purchases, popular."""
import logging
from typing import Optional

from sqlalchemy import select, or_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.order import Order, ORDER_COMPLETED
from storefront.models.product import Product
from storefront.services.catalog import get_product

logger = logging.getLogger(__name__)

DEFAULT_RECOMMENDATION_LIMIT = 5


def _ranked(stmt, limit: int):
    return (
        stmt.where(Product.in_stock.is_(True))
        .order_by(desc(Product.average_rating), desc(Product.review_count))
        .limit(limit)
    )


async def popular_products(db: AsyncSession, limit: int = DEFAULT_RECOMMENDATION_LIMIT) -> list[Product]:
    result = await db.execute(_ranked(select(Product), limit))
    return list(result.scalars().all())


async def similar_products(db: AsyncSession, product: Product, limit: int = DEFAULT_RECOMMENDATION_LIMIT) -> list[Product]:
    """In-stock products sharing the category or the game, the source excluded."""
    stmt = select(Product).where(
        (Product.uuid != product.uuid) &
        or_(Product.category == product.category, Product.game == product.game)
    )
    result = await db.execute(_ranked(stmt, limit))
    return list(result.scalars().all())


async def personalized_products(db: AsyncSession, user_id: str, limit: int = DEFAULT_RECOMMENDATION_LIMIT) -> list[Product]:
    """
    Products in the categories or games of the user's completed purchases,
    excluding what they already bought. Falls back to popular products when
    the user has nothing completed.
    """
    result = await db.execute(
        select(Product.uuid, Product.category, Product.game)
        .join(Order, Order.product_id == Product.uuid)
        .where((Order.user_id == user_id) & (Order.status == ORDER_COMPLETED))
    )
    purchased = result.all()
    if not purchased:
        return await popular_products(db, limit)

    purchased_ids = {row.uuid for row in purchased}
    categories = {row.category for row in purchased}
    games = {row.game for row in purchased}

    stmt = select(Product).where(
        Product.uuid.not_in(purchased_ids) &
        or_(Product.category.in_(categories), Product.game.in_(games))
    )
    result = await db.execute(_ranked(stmt, limit))
    return list(result.scalars().all())


async def get_recommendations(
    db: AsyncSession,
    product_id: Optional[str] = None,
    user_id: Optional[str] = None,
    limit: int = DEFAULT_RECOMMENDATION_LIMIT
) -> list[Product]:
    """Pick the slot: a product id wins over the user; an unknown product gets popular."""
    if product_id:
        product = await get_product(db, product_id)
        if product is None:
            logger.debug(f"Recommendations requested for unknown product {product_id}, using popular")
            return await popular_products(db, limit)
        return await similar_products(db, product, limit)

    if user_id:
        return await personalized_products(db, user_id, limit)

    return await popular_products(db, limit)
