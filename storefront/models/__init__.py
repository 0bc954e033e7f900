"""Database models for the storefront API."""
from storefront.models.user import User
from storefront.models.product import Product
from storefront.models.order import Order
from storefront.models.discount_code import DiscountCode
from storefront.models.review import ProductReview
from storefront.models.wishlist import WishlistItem, RecentlyViewed
from storefront.models.activity import UserActivity
from storefront.models.support import SupportTicket, FaqItem

__all__ = [
    "User",
    "Product",
    "Order",
    "DiscountCode",
    "ProductReview",
    "WishlistItem",
    "RecentlyViewed",
    "UserActivity",
    "SupportTicket",
    "FaqItem",
]
