"""Orders router for checkout, order history and downloads."""
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db
from storefront.models.user import User
from storefront.auth.dependencies import get_current_user
from storefront.schemas.orders import OrderCreate, OrderResponse, OrderDownloadResponse
from storefront.services import orders as order_service
from storefront.services.tracking import log_activity

router = APIRouter()


@router.post("/api/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_data: OrderCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Place an order for a product.

    - Always starts as pending; an admin confirms payment manually
    - Product name and price are taken from the catalog, not the client
    - An optional discount code is validated against the product price
    """
    order = await order_service.create_order(db, current_user, order_data)
    await log_activity(
        db, current_user.uuid, "purchase",
        entity_type="order", entity_id=order.uuid,
        details={"product_id": order.product_id, "amount": str(order.total_amount)},
        request=request,
    )
    await db.commit()
    await db.refresh(order)
    return order


@router.get("/api/orders", response_model=Union[OrderResponse, list[OrderResponse]])
async def get_orders(
    order_id: Optional[str] = Query(None, alias="orderId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """The caller's orders, newest first, or a single one with ?orderId=."""
    if order_id:
        order = await order_service.get_user_order_or_404(db, order_id, current_user.uuid)
        return OrderResponse.model_validate(order)
    orders = await order_service.list_user_orders(db, current_user.uuid)
    return [OrderResponse.model_validate(o) for o in orders]


@router.get("/api/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Another user's order is reported as not found."""
    return await order_service.get_user_order_or_404(db, order_id, current_user.uuid)


@router.get("/api/orders/{order_id}/download", response_model=OrderDownloadResponse)
async def download_order(
    order_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """License key and download link of a completed order."""
    order = await order_service.record_download(db, order_id, current_user.uuid)
    await log_activity(
        db, current_user.uuid, "download",
        entity_type="order", entity_id=order.uuid, request=request,
    )
    await db.commit()
    return OrderDownloadResponse(
        order_id=order.uuid,
        product_name=order.product_name,
        license_key=order.license_key,
        download_url=order.download_url,
        download_count=order.download_count,
    )
