"""Seed script for the Storefront API.

Creates the starter catalog, an admin-role user (for discount code
management) and the published FAQ. It is idempotent and safe to run on
every container start: rows that already exist are skipped.
"""

import asyncio
import logging
from decimal import Decimal
from sqlalchemy import select

from storefront.database import AsyncSessionLocal
from storefront.models.user import User
from storefront.models.product import Product
from storefront.models.support import FaqItem
from storefront.auth.security import hash_password
from storefront.config import settings
from storefront.services.catalog import resolve_grouping

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# name, price, category, game, stock, delivery type, image
CATALOG = [
    ("Rust MEK - 1 Day", "7.99", "Game Cheats", "Rust", 15, "download", "/assets/rust-mek.png"),
    ("Rust MEK - 3 Day", "15.99", "Game Cheats", "Rust", 12, "download", "/assets/rust-mek.png"),
    ("Rust MEK - 7 Day", "29.99", "Game Cheats", "Rust", 10, "download", "/assets/rust-mek.png"),
    ("Rust MEK - 30 Day", "69.99", "Game Cheats", "Rust", 8, "download", "/assets/rust-mek.png"),
    ("Rust MEK - Lifetime", "199.99", "Game Cheats", "Rust", 3, "download", "/assets/rust-mek.png"),
    ("Temp Spoofer - 1 Day", "4.99", "Spoofers", "Multi-Game", 20, "key", "/assets/temp-spoofer.png"),
    ("Temp Spoofer - 7 Day", "14.99", "Spoofers", "Multi-Game", 15, "key", "/assets/temp-spoofer.png"),
    ("Temp Spoofer - 30 Day", "34.99", "Spoofers", "Multi-Game", 10, "key", "/assets/temp-spoofer.png"),
    ("Temp Spoofer - Lifetime", "89.99", "Spoofers", "Multi-Game", 5, "key", "/assets/temp-spoofer.png"),
    ("Rust FA", "7.99", "Game Accounts", "Rust", 8, "account", "/assets/rust-fa.png"),
    ("Apex External - 1 Day", "6.99", "Game Cheats", "Apex Legends", 15, "download", "/assets/apex-external.png"),
    ("Apex External - 7 Day", "24.99", "Game Cheats", "Apex Legends", 10, "download", "/assets/apex-external.png"),
    ("Apex External - 30 Day", "59.99", "Game Cheats", "Apex Legends", 6, "download", "/assets/apex-external.png"),
    ("DMA Bundle Firmware Included", "659.99", "DMA Hardware", "Multi-Game", 2, "download", "/assets/dma-bundle.png"),
]

FAQ = [
    ("How do I pay for an order?", "Checkout shows a wallet address for the coin you pick. Send the exact amount and keep the transaction id.", "payment"),
    ("When will I receive my product?", "An admin confirms your payment manually. Your license key appears in your order history once the order is completed.", "delivery"),
    ("Can I use a discount code?", "Yes, enter it at checkout. Codes have a validity window, may require a minimum order amount and can run out.", "payment"),
    ("How do I contact support?", "Use the support form. Logged-in users have tickets linked to their account.", "general"),
]


async def seed_catalog(session) -> int:
    created = 0
    for name, price, category, game, stock, delivery_type, image_url in CATALOG:
        result = await session.execute(select(Product.uuid).where(Product.name == name))
        if result.scalar_one_or_none():
            continue
        group_key, group_name, variant_name = resolve_grouping(name)
        session.add(Product(
            name=name,
            description=f"{group_name} ({variant_name})",
            price=Decimal(price),
            category=category,
            game=game,
            image_url=image_url,
            group_key=group_key,
            group_name=group_name,
            variant_name=variant_name,
            stock_quantity=stock,
            in_stock=stock > 0,
            delivery_type=delivery_type,
        ))
        created += 1
    return created


async def seed_admin_user(session) -> bool:
    """Create the admin-role catalog user if it doesn't exist."""
    result = await session.execute(select(User).where(User.username == settings.SEED_ADMIN_USERNAME))
    if result.scalar_one_or_none():
        return False
    session.add(User(
        username=settings.SEED_ADMIN_USERNAME,
        email=settings.SEED_ADMIN_EMAIL,
        password_hash=hash_password(settings.SEED_ADMIN_PASSWORD),
        role="admin",
        is_active=True,
    ))
    return True


async def seed_faq(session) -> int:
    created = 0
    for position, (question, answer, category) in enumerate(FAQ):
        result = await session.execute(select(FaqItem.uuid).where(FaqItem.question == question))
        if result.scalar_one_or_none():
            continue
        session.add(FaqItem(question=question, answer=answer, category=category, sort_order=position))
        created += 1
    return created


async def seed():
    async with AsyncSessionLocal() as session:
        products = await seed_catalog(session)
        admin_created = await seed_admin_user(session)
        faq = await seed_faq(session)
        await session.commit()

    logger.info(f"Seeded {products} product(s), {faq} FAQ item(s)")
    if admin_created:
        logger.info(f"Admin user created: {settings.SEED_ADMIN_USERNAME}")
    else:
        logger.info("Admin user already exists, skipping")


def main():
    """Entry point for the seed script."""
    asyncio.run(seed())


if __name__ == "__main__":
    main()
