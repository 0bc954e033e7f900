"""Order lifecycle: checkout, admin status transitions, fulfillment and downloads.

Status machine::

    pending ──► confirmed ──► completed
       │            │
       └────────────┴──► cancelled

``completed`` and ``cancelled`` are terminal. Fulfillment data (license key,
optional download URL) is assigned in its own call and does not move the
status; entering ``completed`` requires it to be present. Re-sending the
current status is a no-op.
"""
import logging
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.order import (
    Order, ORDER_PENDING, ORDER_CONFIRMED, ORDER_COMPLETED, ORDER_CANCELLED,
)
from storefront.models.user import User
from storefront.schemas.orders import OrderCreate
from storefront.services.catalog import get_product_or_404
from storefront.services.discounts import validate_discount, redeem_discount, normalize_code

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    ORDER_PENDING: frozenset({ORDER_CONFIRMED, ORDER_CANCELLED}),
    ORDER_CONFIRMED: frozenset({ORDER_COMPLETED, ORDER_CANCELLED}),
    ORDER_COMPLETED: frozenset(),
    ORDER_CANCELLED: frozenset(),
}


def can_transition(current: str, new: str) -> bool:
    return new in ALLOWED_TRANSITIONS.get(current, frozenset())


async def create_order(db: AsyncSession, user: User, data: OrderCreate) -> Order:
    """
    Create a pending order for the caller.

    Name and price are snapshotted from the catalog. No stock check and no
    idempotency key: repeated submissions create separate pending orders.
    A discount code is validated against the product price; the recorded
    discount never exceeds the price.
    """
    product = await get_product_or_404(db, data.product_id)

    discount_code: Optional[str] = None
    discount_amount = Decimal("0.00")
    if data.discount_code:
        discount, amount = await validate_discount(db, data.discount_code, product.price)
        discount_code = discount.code
        discount_amount = min(amount, product.price)

    order = Order(
        user_id=user.uuid,
        product_id=product.uuid,
        product_name=product.name,
        product_price=product.price,
        payment_method=data.payment_method,
        wallet_address=data.wallet_address,
        status=ORDER_PENDING,
        discount_code=discount_code,
        discount_amount=discount_amount,
    )
    db.add(order)
    await db.flush()

    logger.info(f"Order {order.uuid} created for user {user.uuid}: {product.name} ({product.price})")
    return order


async def list_user_orders(db: AsyncSession, user_id: str) -> list[Order]:
    result = await db.execute(
        select(Order).where(Order.user_id == user_id).order_by(desc(Order.created_at))
    )
    return list(result.scalars().all())


async def list_all_orders(db: AsyncSession) -> list[Order]:
    result = await db.execute(select(Order).order_by(desc(Order.created_at)))
    return list(result.scalars().all())


async def get_user_order(db: AsyncSession, order_id: str, user_id: str) -> Optional[Order]:
    """Only returns the order when it belongs to user_id."""
    result = await db.execute(
        select(Order).where(
            (Order.uuid == order_id) &
            (Order.user_id == user_id)
        )
    )
    return result.scalar_one_or_none()


async def get_user_order_or_404(db: AsyncSession, order_id: str, user_id: str) -> Order:
    order = await get_user_order(db, order_id, user_id)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )
    return order


async def get_order_or_404(db: AsyncSession, order_id: str, for_update: bool = False) -> Order:
    stmt = select(Order).where(Order.uuid == order_id)
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )
    return order


async def transition_status(
    db: AsyncSession,
    order_id: str,
    new_status: str,
    transaction_id: Optional[str] = None
) -> Order:
    """
    Move an order along the status machine. Admin only (enforced by the router).

    Raises HTTPException 409 for transitions the machine does not allow and for
    completing an order that has no license key. Completing an order that used
    a discount code counts one redemption, at most once per order.
    """
    order = await get_order_or_404(db, order_id, for_update=True)

    if transaction_id:
        order.transaction_id = transaction_id

    if order.status == new_status:
        await db.commit()
        await db.refresh(order)
        return order

    if not can_transition(order.status, new_status):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot change order status from {order.status} to {new_status}"
        )

    if new_status == ORDER_COMPLETED:
        if not order.has_fulfillment:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Assign a license key before completing the order"
            )
        if order.discount_code and not order.discount_redeemed:
            await redeem_discount(db, normalize_code(order.discount_code))
            order.discount_redeemed = True

    previous = order.status
    order.status = new_status
    await db.commit()
    await db.refresh(order)

    logger.info(f"Order {order.uuid} status {previous} -> {new_status}")
    return order


async def assign_fulfillment(
    db: AsyncSession,
    order_id: str,
    license_key: str,
    download_url: Optional[str] = None
) -> Order:
    """
    Attach fulfillment data without touching the status.

    The status is advanced separately; until then the order is logged as
    awaiting completion so the half-done state is visible.
    """
    order = await get_order_or_404(db, order_id, for_update=True)

    if order.status == ORDER_CANCELLED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot fulfill a cancelled order"
        )

    order.license_key = license_key
    order.download_url = download_url
    await db.commit()
    await db.refresh(order)

    if order.status != ORDER_COMPLETED:
        logger.warning(
            f"Order {order.uuid} has fulfillment data but status is {order.status}; "
            f"awaiting status update to completed"
        )
    else:
        logger.info(f"Order {order.uuid} fulfillment data replaced")
    return order


async def list_stalled_orders(db: AsyncSession) -> list[Order]:
    """Orders carrying a license key whose status was never advanced to completed."""
    result = await db.execute(
        select(Order)
        .where(
            Order.license_key.is_not(None) &
            Order.status.in_([ORDER_PENDING, ORDER_CONFIRMED])
        )
        .order_by(Order.updated_at)
    )
    orders = list(result.scalars().all())
    if orders:
        logger.warning(f"{len(orders)} order(s) have a license key but are not completed")
    return orders


async def record_download(db: AsyncSession, order_id: str, user_id: str) -> Order:
    """Return a completed order's delivery data to its owner and count the download."""
    order = await get_user_order_or_404(db, order_id, user_id)

    if order.status != ORDER_COMPLETED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Order has not been completed yet"
        )

    order.download_count += 1
    await db.flush()
    return order
