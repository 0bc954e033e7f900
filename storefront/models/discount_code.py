"""Discount code model."""
from datetime import datetime
from decimal import Decimal
from uuid import uuid4
from sqlalchemy import String, Integer, Boolean, Numeric, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from storefront.database import Base

DISCOUNT_PERCENTAGE = "percentage"
DISCOUNT_FIXED = "fixed"


class DiscountCode(Base):
    """Checkout discount code. Codes are stored upper-cased."""

    __tablename__ = "discount_codes"

    # Primary key
    uuid: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    # Code info
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    discount_type: Mapped[str] = mapped_column(String(20), nullable=False)  # "percentage", "fixed"
    value: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    min_order_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    # Usage
    max_uses: Mapped[int | None] = mapped_column(Integer, nullable=True)  # None means unlimited
    used_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Validity window (UTC)
    valid_from: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    valid_to: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    # Foreign keys
    created_by: Mapped[str] = mapped_column(String(36), ForeignKey("users.uuid"), nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_discount_code_active", "is_active"),
    )

    def is_usable(self, now: datetime) -> bool:
        """Active, inside the validity window and below the usage cap."""
        if not self.is_active:
            return False
        if not (self.valid_from <= now <= self.valid_to):
            return False
        return self.max_uses is None or self.used_count < self.max_uses

    def __repr__(self) -> str:
        return f"<DiscountCode(uuid={self.uuid}, code={self.code}, type={self.discount_type})>"
