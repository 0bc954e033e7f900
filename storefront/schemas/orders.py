"""Pydantic schemas for order endpoints."""
from datetime import datetime
from decimal import Decimal
from typing import Optional, Literal
from pydantic import BaseModel, Field

OrderStatus = Literal["pending", "confirmed", "completed", "cancelled"]


class OrderCreate(BaseModel):
    """Checkout submission. Name and price are snapshotted from the catalog server-side."""

    product_id: str = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1, max_length=50)
    wallet_address: str = Field(..., min_length=1, max_length=255)
    discount_code: Optional[str] = Field(None, min_length=1, max_length=64)


class OrderStatusUpdate(BaseModel):
    """Admin status transition."""

    status: OrderStatus
    transaction_id: Optional[str] = Field(None, max_length=255)


class OrderFulfillmentUpdate(BaseModel):
    """Admin fulfillment assignment. Does not change status."""

    license_key: str = Field(..., min_length=1, max_length=255)
    download_url: Optional[str] = Field(None, max_length=500)


class OrderResponse(BaseModel):
    """Schema for order detail response."""

    uuid: str
    user_id: str
    product_id: str
    product_name: str
    product_price: Decimal
    payment_method: str
    wallet_address: str
    transaction_id: Optional[str] = None
    status: str
    license_key: Optional[str] = None
    download_url: Optional[str] = None
    download_count: int
    discount_code: Optional[str] = None
    discount_amount: Decimal
    total_amount: Decimal
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderDownloadResponse(BaseModel):
    """Delivery data for a completed order."""

    order_id: str
    product_name: str
    license_key: Optional[str] = None
    download_url: Optional[str] = None
    download_count: int
