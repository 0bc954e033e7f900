"""Discount code validation, amount calculation and redemption counting."""
import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.discount_code import DiscountCode, DISCOUNT_PERCENTAGE
from storefront.schemas.discounts import DiscountCodeCreate, DiscountCodeUpdate

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def normalize_code(code: str) -> str:
    return code.strip().upper()


def compute_discount_amount(discount: DiscountCode, order_amount: Decimal) -> Decimal:
    """
    Percentage codes take value% of the order amount, rounded to cents.
    Fixed codes return their value verbatim, even when it exceeds the order amount.
    """
    if discount.discount_type == DISCOUNT_PERCENTAGE:
        return (Decimal(order_amount) * discount.value / Decimal(100)).quantize(CENTS, rounding=ROUND_HALF_UP)
    return Decimal(discount.value).quantize(CENTS, rounding=ROUND_HALF_UP)


async def get_usable_code(db: AsyncSession, code: str, now: Optional[datetime] = None) -> Optional[DiscountCode]:
    """Return the code if it is active, inside its window and below its usage cap."""
    result = await db.execute(
        select(DiscountCode).where(DiscountCode.code == normalize_code(code))
    )
    discount = result.scalar_one_or_none()
    if discount is None or not discount.is_usable(now or datetime.utcnow()):
        return None
    return discount


async def validate_discount(
    db: AsyncSession,
    code: str,
    order_amount: Decimal
) -> tuple[DiscountCode, Decimal]:
    """
    Validate a code for an order amount.

    Raises HTTPException 404 without giving a reason when the code is unknown,
    inactive, out of its window or used up. Raises 400 naming the minimum when
    the order amount is too small.
    """
    discount = await get_usable_code(db, code)
    if discount is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid or expired discount code"
        )

    minimum = discount.min_order_amount or Decimal("0")
    if Decimal(order_amount) < minimum:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Minimum order amount of ${minimum:.2f} required"
        )

    return discount, compute_discount_amount(discount, order_amount)


async def redeem_discount(db: AsyncSession, code: str) -> bool:
    """
    Count one use of a code.

    Locks the code row so concurrent completions cannot both take the last
    use. Returns False (and logs) when the code no longer exists or is
    already at its cap. Does not commit.
    """
    result = await db.execute(
        select(DiscountCode)
        .where(DiscountCode.code == normalize_code(code))
        .with_for_update()
    )
    discount = result.scalar_one_or_none()

    if discount is None:
        logger.warning(f"Discount code {code} no longer exists, redemption not counted")
        return False

    if discount.max_uses is not None and discount.used_count >= discount.max_uses:
        logger.warning(f"Discount code {discount.code} reached max uses ({discount.max_uses}), redemption not counted")
        return False

    discount.used_count += 1
    await db.flush()
    logger.info(f"Discount code {discount.code} redeemed ({discount.used_count}/{discount.max_uses or 'unlimited'})")
    return True


async def list_discount_codes(db: AsyncSession) -> list[DiscountCode]:
    result = await db.execute(select(DiscountCode).order_by(desc(DiscountCode.created_at)))
    return list(result.scalars().all())


async def get_discount_code_or_404(db: AsyncSession, code_id: str) -> DiscountCode:
    result = await db.execute(select(DiscountCode).where(DiscountCode.uuid == code_id))
    discount = result.scalar_one_or_none()
    if not discount:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Discount code not found"
        )
    return discount


def _check_terms(discount_type: str, value: Decimal, valid_from: datetime, valid_to: datetime) -> None:
    if valid_to < valid_from:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="valid_to must not be earlier than valid_from"
        )
    if discount_type == DISCOUNT_PERCENTAGE and value > 100:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Percentage discount cannot exceed 100"
        )


async def _commit_unique(db: AsyncSession) -> None:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Discount code already exists"
        )


async def create_discount_code(db: AsyncSession, data: DiscountCodeCreate, created_by: str) -> DiscountCode:
    """Create a code, stored upper-cased. A duplicate code is rejected with 400."""
    code = normalize_code(data.code)
    result = await db.execute(select(DiscountCode.uuid).where(DiscountCode.code == code))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Discount code already exists"
        )

    discount = DiscountCode(**data.model_dump(exclude={"code"}), code=code, created_by=created_by)
    db.add(discount)
    await _commit_unique(db)
    await db.refresh(discount)

    logger.info(f"Discount code {discount.code} created by {created_by}")
    return discount


async def update_discount_code(db: AsyncSession, code_id: str, data: DiscountCodeUpdate) -> DiscountCode:
    """Partial update. A new code is upper-cased and must stay unique."""
    discount = await get_discount_code_or_404(db, code_id)

    changes = data.model_dump(exclude_unset=True)
    if changes.get("code"):
        changes["code"] = normalize_code(changes["code"])
    # max_uses may be cleared to mean unlimited; other fields ignore explicit nulls
    changes = {field: value for field, value in changes.items() if value is not None or field == "max_uses"}
    merged = {
        field: changes.get(field, getattr(discount, field))
        for field in ("discount_type", "value", "valid_from", "valid_to")
    }
    _check_terms(**merged)

    for field, value in changes.items():
        setattr(discount, field, value)
    await _commit_unique(db)
    await db.refresh(discount)
    return discount


async def delete_discount_code(db: AsyncSession, code_id: str) -> None:
    discount = await get_discount_code_or_404(db, code_id)
    await db.delete(discount)
    await db.commit()
    logger.info(f"Discount code {discount.code} deleted")
