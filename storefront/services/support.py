"""Support desk: ticket intake and FAQ listing."""
import logging
from typing import Optional

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.support import SupportTicket, FaqItem
from storefront.schemas.support import SupportTicketCreate

logger = logging.getLogger(__name__)


async def create_ticket(db: AsyncSession, data: SupportTicketCreate, user_id: Optional[str] = None) -> SupportTicket:
    ticket = SupportTicket(**data.model_dump(), user_id=user_id, status="open")
    db.add(ticket)
    await db.commit()
    await db.refresh(ticket)
    logger.info(f"Support ticket {ticket.uuid} opened ({ticket.category}/{ticket.priority})")
    return ticket


async def list_tickets(db: AsyncSession, ticket_status: Optional[str] = None) -> list[SupportTicket]:
    stmt = select(SupportTicket).order_by(desc(SupportTicket.created_at))
    if ticket_status:
        stmt = stmt.where(SupportTicket.status == ticket_status)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_faq_items(db: AsyncSession, category: Optional[str] = None) -> list[FaqItem]:
    """Published entries in display order."""
    stmt = select(FaqItem).where(FaqItem.is_published.is_(True))
    if category:
        stmt = stmt.where(FaqItem.category == category)
    result = await db.execute(stmt.order_by(FaqItem.sort_order, FaqItem.created_at))
    return list(result.scalars().all())
