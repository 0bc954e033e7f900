"""Admin panel endpoints: session login, order management and support tickets.

The admin panel session is separate from catalog user accounts; all routes
here except login/logout require the admin session cookie.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db
from storefront.config import settings
from storefront.limiter import limiter
from storefront.auth.dependencies import admin_session_required
from storefront.auth.security import verify_admin_credentials, create_session_token, ADMIN_SCOPE
from storefront.auth.cookies import set_session_cookie, clear_session_cookie
from storefront.schemas.auth import AdminLogin, MessageResponse
from storefront.schemas.orders import OrderResponse, OrderStatusUpdate, OrderFulfillmentUpdate
from storefront.schemas.support import SupportTicketResponse
from storefront.services import orders as order_service
from storefront.services import support as support_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=MessageResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def admin_login(request: Request, response: Response, credentials: AdminLogin):
    """Open an admin panel session. Does not log in as any catalog user."""
    if not verify_admin_credentials(credentials.username, credentials.password):
        logger.warning(f"Failed admin login attempt from {request.client.host if request.client else 'unknown'}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    set_session_cookie(response, settings.ADMIN_SESSION_COOKIE_NAME, create_session_token("admin", ADMIN_SCOPE))
    logger.info("Admin panel login")
    return MessageResponse(message="Login successful")


@router.post("/logout", response_model=MessageResponse)
async def admin_logout(response: Response):
    clear_session_cookie(response, settings.ADMIN_SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out")


@router.get("/check")
async def admin_check(_admin=Depends(admin_session_required)):
    return {"authenticated": True}


@router.get("/orders", response_model=list[OrderResponse])
async def list_orders(
    _admin=Depends(admin_session_required),
    db: AsyncSession = Depends(get_db)
):
    """All orders, newest first."""
    return await order_service.list_all_orders(db)


@router.get("/orders/stalled", response_model=list[OrderResponse])
async def list_stalled_orders(
    _admin=Depends(admin_session_required),
    db: AsyncSession = Depends(get_db)
):
    """Orders that have a license key but were never marked completed."""
    return await order_service.list_stalled_orders(db)


@router.patch("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    status_update: OrderStatusUpdate,
    _admin=Depends(admin_session_required),
    db: AsyncSession = Depends(get_db)
):
    """
    Move an order to a new status.

    - pending -> confirmed | cancelled
    - confirmed -> completed | cancelled
    - completed requires a license key to have been assigned
    """
    return await order_service.transition_status(
        db, order_id, status_update.status, transaction_id=status_update.transaction_id
    )


@router.patch("/orders/{order_id}/license", response_model=OrderResponse)
async def assign_order_license(
    order_id: str,
    fulfillment: OrderFulfillmentUpdate,
    _admin=Depends(admin_session_required),
    db: AsyncSession = Depends(get_db)
):
    """Attach a license key and optional download URL. The status is not changed."""
    return await order_service.assign_fulfillment(
        db, order_id, fulfillment.license_key, download_url=fulfillment.download_url
    )


@router.get("/support-tickets", response_model=list[SupportTicketResponse])
async def list_support_tickets(
    ticket_status: Optional[str] = Query(None, alias="status"),
    _admin=Depends(admin_session_required),
    db: AsyncSession = Depends(get_db)
):
    return await support_service.list_tickets(db, ticket_status)
