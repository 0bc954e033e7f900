"""Product model for the storefront catalog."""
from datetime import datetime
from decimal import Decimal
from uuid import uuid4
from sqlalchemy import String, Text, Integer, Float, Boolean, Numeric, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column
from storefront.database import Base

DELIVERY_TYPES = ("download", "key", "account")


class Product(Base):
    """A purchasable catalog entry. Products sharing a group_key are variants of one group."""

    __tablename__ = "products"

    # Primary key
    uuid: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    # Product info
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    original_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    game: Mapped[str] = mapped_column(String(100), nullable=False)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)

    # Grouping, set when the product is authored
    group_key: Mapped[str] = mapped_column(String(255), nullable=False)
    group_name: Mapped[str] = mapped_column(String(255), nullable=False)
    variant_name: Mapped[str] = mapped_column(String(255), nullable=False, default="Standard")

    # Inventory (advisory, never decremented by checkout)
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    in_stock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Delivery
    delivery_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    license_key: Mapped[str | None] = mapped_column(String(255), nullable=True)  # static pre-assigned key
    delivery_type: Mapped[str] = mapped_column(String(20), nullable=False, default="download")

    # Review aggregates
    average_rating: Mapped[float] = mapped_column(Float, default=0.0)
    review_count: Mapped[int] = mapped_column(Integer, default=0)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_product_category", "category"),
        Index("idx_product_game", "game"),
        Index("idx_product_group_key", "group_key"),
    )

    def __repr__(self) -> str:
        return f"<Product(uuid={self.uuid}, name={self.name}, price={self.price})>"
