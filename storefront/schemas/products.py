"""Schemas for catalog endpoints."""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Literal
from pydantic import BaseModel, Field

DeliveryType = Literal["download", "key", "account"]


class ProductCreate(BaseModel):
    """Schema for creating a product. group_key/variant_name are derived from the name when omitted."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    category: str = Field(..., min_length=1, max_length=100)
    game: str = Field(..., min_length=1, max_length=100)
    image_url: str = Field(..., min_length=1, max_length=500)
    group_key: Optional[str] = Field(None, min_length=1, max_length=255)
    group_name: Optional[str] = Field(None, min_length=1, max_length=255)
    variant_name: Optional[str] = Field(None, min_length=1, max_length=255)
    stock_quantity: int = Field(0, ge=0)
    in_stock: bool = True
    delivery_url: Optional[str] = Field(None, max_length=500)
    license_key: Optional[str] = Field(None, max_length=255)
    delivery_type: DeliveryType = "download"


class ProductUpdate(BaseModel):
    """Schema for updating a product."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    game: Optional[str] = Field(None, min_length=1, max_length=100)
    image_url: Optional[str] = Field(None, min_length=1, max_length=500)
    group_key: Optional[str] = Field(None, min_length=1, max_length=255)
    group_name: Optional[str] = Field(None, min_length=1, max_length=255)
    variant_name: Optional[str] = Field(None, min_length=1, max_length=255)
    stock_quantity: Optional[int] = Field(None, ge=0)
    in_stock: Optional[bool] = None
    delivery_url: Optional[str] = Field(None, max_length=500)
    license_key: Optional[str] = Field(None, max_length=255)
    delivery_type: Optional[DeliveryType] = None


class ProductResponse(BaseModel):
    """Schema for product response."""

    uuid: str
    name: str
    description: str
    price: Decimal
    original_price: Optional[Decimal] = None
    category: str
    game: str
    image_url: str
    group_key: str
    group_name: str
    variant_name: str
    stock_quantity: int
    in_stock: bool
    delivery_type: str
    average_rating: float
    review_count: int
    created_at: datetime

    class Config:
        from_attributes = True


class AdminProductResponse(ProductResponse):
    """Product including delivery data, for the admin catalog views."""

    delivery_url: Optional[str] = None
    license_key: Optional[str] = None


class ProductVariantResponse(BaseModel):
    """One variant (duration tier) inside a product group."""

    uuid: str
    name: str
    price: Decimal
    original_price: Optional[Decimal] = None
    stock_quantity: int
    in_stock: bool


class ProductGroupResponse(BaseModel):
    """Products sharing a group key, presented as one listing."""

    id: str
    name: str
    description: str
    category: str
    game: str
    image_url: str
    delivery_type: str
    variants: List[ProductVariantResponse]


class PriceRange(BaseModel):
    min: Optional[Decimal] = Field(None, ge=0)
    max: Optional[Decimal] = Field(None, ge=0)


class ProductFilters(BaseModel):
    """Structured catalog filter. Absent dimensions impose no constraint."""

    categories: Optional[List[str]] = None
    games: Optional[List[str]] = None
    price_range: Optional[PriceRange] = None
    in_stock: Optional[bool] = None


class AdvancedSearchFilters(ProductFilters):
    sort_by: Literal["price", "rating", "newest"] = "newest"
    sort_order: Literal["asc", "desc"] = "desc"


class AdvancedSearchRequest(BaseModel):
    query: str = ""
    filters: AdvancedSearchFilters = Field(default_factory=AdvancedSearchFilters)
