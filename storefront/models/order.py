"""Order model for the storefront checkout flow."""
from datetime import datetime
from decimal import Decimal
from uuid import uuid4
from sqlalchemy import String, Integer, Boolean, Numeric, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from storefront.database import Base

ORDER_PENDING = "pending"
ORDER_CONFIRMED = "confirmed"
ORDER_COMPLETED = "completed"
ORDER_CANCELLED = "cancelled"

ORDER_STATUSES = (ORDER_PENDING, ORDER_CONFIRMED, ORDER_COMPLETED, ORDER_CANCELLED)


class Order(Base):
    """A payment-intent record created at checkout and fulfilled by an admin."""

    __tablename__ = "orders"

    # Primary key
    uuid: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    # Ownership, set once at creation
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.uuid"), nullable=False)

    # Product snapshot
    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.uuid"), nullable=False)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Payment
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)  # "BTC", "ETH", "LTC", ...
    wallet_address: Mapped[str] = mapped_column(String(255), nullable=False)
    transaction_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ORDER_PENDING)

    # Fulfillment
    license_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    download_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    download_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Discount
    discount_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    discount_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    discount_redeemed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user: Mapped["User"] = relationship("User", foreign_keys=[user_id])
    product: Mapped["Product"] = relationship("Product", foreign_keys=[product_id])

    __table_args__ = (
        Index("idx_order_user_id", "user_id"),
        Index("idx_order_product_id", "product_id"),
        Index("idx_order_status", "status"),
    )

    @property
    def has_fulfillment(self) -> bool:
        return bool(self.license_key)

    @property
    def total_amount(self) -> Decimal:
        return self.product_price - (self.discount_amount or Decimal("0.00"))

    def __repr__(self) -> str:
        return f"<Order(uuid={self.uuid}, user_id={self.user_id}, status={self.status})>"
