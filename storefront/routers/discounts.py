"""Discount codes router: public checkout validation and admin-role management."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db
from storefront.models.user import User
from storefront.auth.dependencies import admin_role_required
from storefront.schemas.auth import MessageResponse
from storefront.schemas.discounts import (
    DiscountValidateRequest, DiscountValidateResponse,
    DiscountCodeCreate, DiscountCodeUpdate, DiscountCodeResponse,
)
from storefront.services import discounts as discount_service

router = APIRouter()


@router.post("/api/discount-codes/validate", response_model=DiscountValidateResponse)
async def validate_discount_code(
    request_data: DiscountValidateRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Check a code at checkout (public).

    - 404 when the code is unknown, inactive, expired or used up
    - 400 when the order amount is below the code's minimum
    """
    discount, amount = await discount_service.validate_discount(db, request_data.code, request_data.order_amount)
    return DiscountValidateResponse(
        code=discount.code,
        discount_type=discount.discount_type,
        value=discount.value,
        discount_amount=amount,
        min_order_amount=discount.min_order_amount,
    )


@router.get("/api/admin/discount-codes", response_model=list[DiscountCodeResponse])
async def list_discount_codes(
    admin_user: User = Depends(admin_role_required),
    db: AsyncSession = Depends(get_db)
):
    return await discount_service.list_discount_codes(db)


@router.post("/api/admin/discount-codes", response_model=DiscountCodeResponse, status_code=status.HTTP_201_CREATED)
async def create_discount_code(
    code_data: DiscountCodeCreate,
    admin_user: User = Depends(admin_role_required),
    db: AsyncSession = Depends(get_db)
):
    """Create a discount code. The code is stored upper-cased."""
    return await discount_service.create_discount_code(db, code_data, created_by=admin_user.uuid)


@router.put("/api/admin/discount-codes/{code_id}", response_model=DiscountCodeResponse)
async def update_discount_code(
    code_id: str,
    code_data: DiscountCodeUpdate,
    admin_user: User = Depends(admin_role_required),
    db: AsyncSession = Depends(get_db)
):
    return await discount_service.update_discount_code(db, code_id, code_data)


@router.delete("/api/admin/discount-codes/{code_id}", response_model=MessageResponse)
async def delete_discount_code(
    code_id: str,
    admin_user: User = Depends(admin_role_required),
    db: AsyncSession = Depends(get_db)
):
    await discount_service.delete_discount_code(db, code_id)
    return MessageResponse(message="Discount code deleted")
