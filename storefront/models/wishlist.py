"""Wishlist and recently-viewed models."""
from datetime import datetime
from uuid import uuid4
from sqlalchemy import String, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from storefront.database import Base


class WishlistItem(Base):
    """A product saved to a user's wishlist."""

    __tablename__ = "wishlists"

    uuid: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.uuid"), nullable=False)
    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.uuid", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_wishlist_user_product"),
        Index("idx_wishlist_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<WishlistItem(user_id={self.user_id}, product_id={self.product_id})>"


class RecentlyViewed(Base):
    """Last time a user viewed a product. Trimmed to the most recent rows per user."""

    __tablename__ = "recently_viewed"

    uuid: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.uuid"), nullable=False)
    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.uuid", ondelete="CASCADE"), nullable=False)
    viewed_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_recently_viewed_user_product"),
        Index("idx_recently_viewed_user_viewed_at", "user_id", "viewed_at"),
    )

    def __repr__(self) -> str:
        return f"<RecentlyViewed(user_id={self.user_id}, product_id={self.product_id}, viewed_at={self.viewed_at})>"
