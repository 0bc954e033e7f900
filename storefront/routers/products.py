"""Products router: public catalog browsing, search, grouping, recommendations and admin CRUD."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db
from storefront.models.user import User
from storefront.auth.dependencies import get_optional_user, admin_session_required
from storefront.schemas.products import (
    ProductCreate, ProductUpdate, ProductResponse, AdminProductResponse, ProductGroupResponse,
    ProductFilters, AdvancedSearchRequest,
)
from storefront.services import catalog
from storefront.services.recommendations import get_recommendations, DEFAULT_RECOMMENDATION_LIMIT

router = APIRouter()


@router.get("/api/products", response_model=list[ProductResponse])
async def list_products(db: AsyncSession = Depends(get_db)):
    """List all products (public, no auth required)."""
    return await catalog.list_products(db)


@router.get("/api/products/recommendations", response_model=list[ProductResponse])
async def recommendations(
    product_id: Optional[str] = Query(None),
    limit: int = Query(DEFAULT_RECOMMENDATION_LIMIT, ge=1, le=50),
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Recommended products.

    - With product_id: similar products (same category or game)
    - Logged in without product_id: based on completed purchases
    - Otherwise: popular products
    """
    return await get_recommendations(
        db,
        product_id=product_id,
        user_id=current_user.uuid if current_user else None,
        limit=limit,
    )


@router.get("/api/products/search/{query}", response_model=list[ProductResponse])
async def search_products(query: str, db: AsyncSession = Depends(get_db)):
    """Case-insensitive search on name, description, game and category."""
    return await catalog.search_products(db, query)


@router.post("/api/products/filter", response_model=list[ProductResponse])
async def filter_products(filters: ProductFilters, db: AsyncSession = Depends(get_db)):
    return await catalog.filter_products(db, filters)


@router.post("/api/products/search/advanced", response_model=list[ProductResponse])
async def advanced_search(search: AdvancedSearchRequest, db: AsyncSession = Depends(get_db)):
    """Search text combined with filters, sorted by price, rating or newest."""
    return await catalog.advanced_search(db, search.query, search.filters)


@router.get("/api/products/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, db: AsyncSession = Depends(get_db)):
    return await catalog.get_product_or_404(db, product_id)


@router.get("/api/product-groups", response_model=list[ProductGroupResponse])
async def product_groups(db: AsyncSession = Depends(get_db)):
    """Products coalesced into groups of variants (e.g. duration tiers)."""
    return await catalog.get_product_groups(db)


# Admin catalog management

@router.get("/api/admin/products", response_model=list[AdminProductResponse])
async def admin_list_products(
    _admin=Depends(admin_session_required),
    db: AsyncSession = Depends(get_db)
):
    """All products including delivery data. Admin only."""
    return await catalog.list_products(db)


@router.post("/api/admin/products", response_model=AdminProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    _admin=Depends(admin_session_required),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a new product. Admin only.
    Group key and variant name are derived from the name when omitted.
    """
    return await catalog.create_product(db, product_data)


@router.put("/api/admin/products/{product_id}", response_model=AdminProductResponse)
async def update_product(
    product_id: str,
    product_data: ProductUpdate,
    _admin=Depends(admin_session_required),
    db: AsyncSession = Depends(get_db)
):
    """Update a product. Admin only."""
    return await catalog.update_product(db, product_id, product_data)


@router.delete("/api/admin/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    _admin=Depends(admin_session_required),
    db: AsyncSession = Depends(get_db)
):
    """Delete a product that has no orders. Admin only."""
    await catalog.delete_product(db, product_id)
