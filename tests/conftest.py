"""Pytest configuration and fixtures."""
import os

# Must be set before the app (and its limiter) is imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from storefront.config import settings
from storefront.database import Base, get_db
from storefront.models.user import User
from storefront.models.product import Product
from storefront.models.discount_code import DiscountCode
from storefront.auth.security import hash_password, create_session_token, ADMIN_SCOPE
from storefront.services.catalog import resolve_grouping
from main import app

TEST_PASSWORD = "TestPass123"


@pytest.fixture
async def test_db():
    """Create test database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with TestSessionLocal() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def client(test_db):
    """HTTP client bound to the app, with get_db pointing at the test database."""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def create_user(db, username: str, role: str = "user", **kwargs) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(TEST_PASSWORD),
        role=role,
        **kwargs
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def create_product(db, name: str, price: str = "10.00", **kwargs) -> Product:
    group_key, group_name, variant_name = resolve_grouping(
        name, kwargs.pop("group_key", None), kwargs.pop("group_name", None), kwargs.pop("variant_name", None)
    )
    fields = {
        "description": f"{name} description",
        "category": "Game Cheats",
        "game": "Rust",
        "image_url": "/assets/product.png",
        "stock_quantity": 10,
        "in_stock": True,
    }
    fields.update(kwargs)
    product = Product(
        name=name,
        price=Decimal(price),
        group_key=group_key,
        group_name=group_name,
        variant_name=variant_name,
        **fields
    )
    db.add(product)
    await db.commit()
    await db.refresh(product)
    return product


async def create_discount(db, code: str, created_by: str, discount_type: str = "percentage",
                          value: str = "10", **kwargs) -> DiscountCode:
    now = datetime.utcnow()
    fields = {
        "min_order_amount": Decimal("0"),
        "valid_from": now - timedelta(days=1),
        "valid_to": now + timedelta(days=1),
    }
    fields.update(kwargs)
    discount = DiscountCode(
        code=code,
        discount_type=discount_type,
        value=Decimal(value),
        created_by=created_by,
        **fields
    )
    db.add(discount)
    await db.commit()
    await db.refresh(discount)
    return discount


def login_as(client: AsyncClient, user: User) -> None:
    """Replace the client's user session cookie with one for user."""
    client.cookies.set(settings.SESSION_COOKIE_NAME, create_session_token(user.uuid))


def logout(client: AsyncClient) -> None:
    client.cookies.clear()


def admin_login(client: AsyncClient) -> None:
    """Give the client an admin panel session cookie."""
    client.cookies.set(settings.ADMIN_SESSION_COOKIE_NAME, create_session_token("admin", ADMIN_SCOPE))


@pytest.fixture
async def user(test_db):
    return await create_user(test_db, "alice")


@pytest.fixture
async def other_user(test_db):
    return await create_user(test_db, "bob")


@pytest.fixture
async def staff_user(test_db):
    """Catalog user with the admin role (manages discount codes)."""
    return await create_user(test_db, "staff", role="admin")


@pytest.fixture
async def product(test_db):
    return await create_product(test_db, "Rust MEK - 1 Day", price="100.00")
