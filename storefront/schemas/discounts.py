"""Schemas for discount code endpoints."""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator, model_validator

DiscountType = Literal["percentage", "fixed"]


def to_naive_utc(v: Optional[datetime]) -> Optional[datetime]:
    """Validity windows are stored as naive UTC."""
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


class DiscountValidateRequest(BaseModel):
    """Schema for validating a code at checkout."""

    code: str = Field(..., min_length=1, max_length=64)
    order_amount: Decimal = Field(Decimal("0"), ge=0)


class DiscountValidateResponse(BaseModel):
    code: str
    discount_type: str
    value: Decimal
    discount_amount: Decimal
    min_order_amount: Decimal
    valid: bool = True


class DiscountCodeCreate(BaseModel):
    """Schema for creating a discount code."""

    code: str = Field(..., min_length=1, max_length=64)
    discount_type: DiscountType
    value: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    min_order_amount: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    max_uses: Optional[int] = Field(None, gt=0)
    is_active: bool = True
    valid_from: datetime
    valid_to: datetime

    @field_validator("valid_from", "valid_to")
    @classmethod
    def normalize_window(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_window(self) -> "DiscountCodeCreate":
        if self.valid_to < self.valid_from:
            raise ValueError("valid_to must not be earlier than valid_from")
        if self.discount_type == "percentage" and self.value > 100:
            raise ValueError("Percentage discount cannot exceed 100")
        return self


class DiscountCodeUpdate(BaseModel):
    """Schema for updating a discount code. Only provided fields change."""

    code: Optional[str] = Field(None, min_length=1, max_length=64)
    discount_type: Optional[DiscountType] = None
    value: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    min_order_amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    max_uses: Optional[int] = Field(None, gt=0)
    is_active: Optional[bool] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None

    @field_validator("valid_from", "valid_to")
    @classmethod
    def normalize_window(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class DiscountCodeResponse(BaseModel):
    uuid: str
    code: str
    discount_type: str
    value: Decimal
    min_order_amount: Decimal
    max_uses: Optional[int] = None
    used_count: int
    is_active: bool
    valid_from: datetime
    valid_to: datetime
    created_by: str
    created_at: datetime

    class Config:
        from_attributes = True
