"""Catalog queries: lookup, text search, structured filter, sort and product grouping."""
from __future__ import annotations

import logging
import re
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select, delete, or_, and_, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.order import Order
from storefront.models.product import Product
from storefront.models.review import ProductReview
from storefront.models.wishlist import WishlistItem, RecentlyViewed
from storefront.schemas.products import ProductCreate, ProductUpdate, ProductFilters, AdvancedSearchFilters

logger = logging.getLogger(__name__)

GROUP_SEPARATOR = " - "
DEFAULT_VARIANT_NAME = "Standard"

# Columns an update may clear; every other field ignores an explicit null
NULLABLE_UPDATE_FIELDS = {"original_price", "delivery_url", "license_key"}

_SORT_COLUMNS = {
    "price": Product.price,
    "rating": Product.average_rating,
    "newest": Product.created_at,
}


def slugify(value: str) -> str:
    """Lower-case and collapse whitespace to single dashes."""
    return re.sub(r"\s+", "-", value.strip().lower())


def derive_grouping(name: str) -> tuple[str, str, str]:
    """Split a display name like ``"Aimbot - 30 Days"`` into
    ``("aimbot", "Aimbot", "30 Days")`` (group key, group name, variant name).

    Only used when a product is authored without an explicit group key
    (admin creation, seed/import). Grouping at read time uses the stored key.
    """
    if GROUP_SEPARATOR in name:
        base, variant = name.split(GROUP_SEPARATOR, 1)
        base = base.strip()
        return slugify(base), base, variant.strip() or DEFAULT_VARIANT_NAME
    return slugify(name), name.strip(), DEFAULT_VARIANT_NAME


def resolve_grouping(
    name: str,
    group_key: Optional[str] = None,
    group_name: Optional[str] = None,
    variant_name: Optional[str] = None,
) -> tuple[str, str, str]:
    """Explicit grouping fields win; missing ones fall back to the name split."""
    derived_key, derived_name, derived_variant = derive_grouping(name)
    return (
        slugify(group_key) if group_key else derived_key,
        group_name or derived_name,
        variant_name or derived_variant,
    )


async def get_product(db: AsyncSession, product_id: str) -> Optional[Product]:
    result = await db.execute(select(Product).where(Product.uuid == product_id))
    return result.scalar_one_or_none()


async def get_product_or_404(db: AsyncSession, product_id: str) -> Product:
    product = await get_product(db, product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )
    return product


async def list_products(db: AsyncSession) -> list[Product]:
    result = await db.execute(select(Product).order_by(Product.created_at))
    return list(result.scalars().all())


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _search_condition(query: str):
    pattern = f"%{escape_like(query.strip())}%"
    return or_(
        Product.name.ilike(pattern, escape="\\"),
        Product.description.ilike(pattern, escape="\\"),
        Product.game.ilike(pattern, escape="\\"),
        Product.category.ilike(pattern, escape="\\"),
    )


def _filter_conditions(filters: ProductFilters) -> list:
    conditions = []
    if filters.categories:
        conditions.append(Product.category.in_(filters.categories))
    if filters.games:
        conditions.append(Product.game.in_(filters.games))
    if filters.price_range:
        if filters.price_range.min is not None:
            conditions.append(Product.price >= filters.price_range.min)
        if filters.price_range.max is not None:
            conditions.append(Product.price <= filters.price_range.max)
    if filters.in_stock is not None:
        conditions.append(Product.in_stock == filters.in_stock)
    return conditions


async def search_products(db: AsyncSession, query: str) -> list[Product]:
    """Case-insensitive substring match on name, description, game or category."""
    result = await db.execute(select(Product).where(_search_condition(query)))
    return list(result.scalars().all())


async def filter_products(db: AsyncSession, filters: ProductFilters) -> list[Product]:
    """AND across the provided filter dimensions."""
    conditions = _filter_conditions(filters)
    stmt = select(Product)
    if conditions:
        stmt = stmt.where(and_(*conditions))
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def advanced_search(db: AsyncSession, query: str, filters: AdvancedSearchFilters) -> list[Product]:
    """Text search AND structured filter, then sort (default newest first)."""
    conditions = _filter_conditions(filters)
    if query and query.strip():
        conditions.append(_search_condition(query))

    stmt = select(Product)
    if conditions:
        stmt = stmt.where(and_(*conditions))

    column = _SORT_COLUMNS[filters.sort_by]
    direction = asc if filters.sort_order == "asc" else desc
    stmt = stmt.order_by(direction(column), direction(Product.created_at))

    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_product_groups(db: AsyncSession) -> list[dict]:
    """Coalesce products by their stored group key, keeping catalog order.

    The first product of a group supplies the shared fields; every product
    becomes a variant.
    """
    products = await list_products(db)

    groups: dict[str, dict] = {}
    for product in products:
        group = groups.get(product.group_key)
        if group is None:
            group = {
                "id": product.group_key,
                "name": product.group_name,
                "description": product.description,
                "category": product.category,
                "game": product.game,
                "image_url": product.image_url,
                "delivery_type": product.delivery_type,
                "variants": [],
            }
            groups[product.group_key] = group
        group["variants"].append({
            "uuid": product.uuid,
            "name": product.variant_name,
            "price": product.price,
            "original_price": product.original_price,
            "stock_quantity": product.stock_quantity,
            "in_stock": product.in_stock,
        })

    return list(groups.values())


async def create_product(db: AsyncSession, data: ProductCreate) -> Product:
    """Create a product, fixing its grouping once at authoring time."""
    fields = data.model_dump(exclude={"group_key", "group_name", "variant_name"})
    group_key, group_name, variant_name = resolve_grouping(
        data.name, data.group_key, data.group_name, data.variant_name
    )
    product = Product(**fields, group_key=group_key, group_name=group_name, variant_name=variant_name)
    db.add(product)
    await db.commit()
    await db.refresh(product)
    logger.info(f"Product created: {product.name} ({product.uuid}) in group {group_key}")
    return product


async def update_product(db: AsyncSession, product_id: str, data: ProductUpdate) -> Product:
    """Partial update. Renaming does not regroup; grouping changes only when given explicitly."""
    product = await get_product_or_404(db, product_id)

    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_UPDATE_FIELDS
    }
    if changes.get("group_key"):
        changes["group_key"] = slugify(changes["group_key"])
    for field, value in changes.items():
        setattr(product, field, value)

    await db.commit()
    await db.refresh(product)
    return product


async def delete_product(db: AsyncSession, product_id: str) -> None:
    """Delete a product with its reviews and tracker rows. Products with orders are kept."""
    product = await get_product_or_404(db, product_id)

    result = await db.execute(select(Order.uuid).where(Order.product_id == product_id).limit(1))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Product has orders and cannot be deleted"
        )

    for model in (ProductReview, WishlistItem, RecentlyViewed):
        await db.execute(delete(model).where(model.product_id == product_id))
    await db.delete(product)
    await db.commit()
    logger.info(f"Product deleted: {product_id}")
