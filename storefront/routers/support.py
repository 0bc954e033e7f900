"""Support router: public ticket submission and FAQ."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db
from storefront.models.user import User
from storefront.auth.dependencies import get_optional_user
from storefront.schemas.support import SupportTicketCreate, SupportTicketCreated, FaqItemResponse
from storefront.services import support as support_service

router = APIRouter()


@router.post("/api/support", response_model=SupportTicketCreated, status_code=status.HTTP_201_CREATED)
async def submit_ticket(
    ticket_data: SupportTicketCreate,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Open a support ticket. Logged-in users have it linked to their account."""
    ticket = await support_service.create_ticket(
        db, ticket_data, user_id=current_user.uuid if current_user else None
    )
    return SupportTicketCreated(
        message="Support ticket created successfully",
        ticket_id=ticket.uuid,
        status=ticket.status,
        created_at=ticket.created_at,
    )


@router.get("/api/faq", response_model=list[FaqItemResponse])
async def list_faq(
    category: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    return await support_service.list_faq_items(db, category)
