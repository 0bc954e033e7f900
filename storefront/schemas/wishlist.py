"""Schemas for wishlist and recently-viewed endpoints."""
from datetime import datetime
from pydantic import BaseModel


class WishlistItemResponse(BaseModel):
    uuid: str
    user_id: str
    product_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class WishlistCheckResponse(BaseModel):
    product_id: str
    in_wishlist: bool
