"""Tests for discount code validation and admin management."""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from storefront.models.discount_code import DiscountCode
from storefront.services.discounts import compute_discount_amount, redeem_discount
from conftest import login_as, admin_login, create_discount


async def validate(client, code, amount):
    return await client.post("/api/discount-codes/validate", json={"code": code, "order_amount": amount})


async def test_validate_percentage_code(client, test_db, staff_user):
    await create_discount(test_db, "SAVE10", staff_user.uuid, value="10", min_order_amount=Decimal("20"))

    response = await validate(client, "save10", "50.00")

    assert response.status_code == 200
    data = response.json()
    assert data["code"] == "SAVE10"
    assert data["discount_type"] == "percentage"
    assert data["discount_amount"] == "5.00"
    assert data["valid"] is True


async def test_validate_below_minimum(client, test_db, staff_user):
    await create_discount(test_db, "SAVE10", staff_user.uuid, value="10", min_order_amount=Decimal("20"))

    response = await validate(client, "SAVE10", "15.00")

    assert response.status_code == 400
    assert response.json()["detail"] == "Minimum order amount of $20.00 required"


async def test_validate_fixed_code_may_exceed_amount(client, test_db, staff_user):
    await create_discount(test_db, "FLAT25", staff_user.uuid, discount_type="fixed", value="25")

    response = await validate(client, "FLAT25", "10.00")

    assert response.status_code == 200
    assert response.json()["discount_amount"] == "25.00"


@pytest.mark.parametrize("overrides", [
    {"is_active": False},
    {"valid_from": datetime.utcnow() + timedelta(days=1), "valid_to": datetime.utcnow() + timedelta(days=2)},
    {"valid_from": datetime.utcnow() - timedelta(days=2), "valid_to": datetime.utcnow() - timedelta(days=1)},
    {"max_uses": 3, "used_count": 3},
])
async def test_unusable_codes_are_not_found(client, test_db, staff_user, overrides):
    await create_discount(test_db, "DEAD", staff_user.uuid, **overrides)

    response = await validate(client, "DEAD", "100.00")

    assert response.status_code == 404
    assert response.json()["detail"] == "Invalid or expired discount code"


async def test_validate_unknown_code(client):
    response = await validate(client, "UNKNOWN", "100.00")

    assert response.status_code == 404


def test_percentage_rounds_half_up():
    discount = DiscountCode(discount_type="percentage", value=Decimal("15"))

    assert compute_discount_amount(discount, Decimal("9.99")) == Decimal("1.50")
    assert compute_discount_amount(discount, Decimal("0.10")) == Decimal("0.02")


def test_fixed_returns_value_verbatim():
    discount = DiscountCode(discount_type="fixed", value=Decimal("12.5"))

    assert compute_discount_amount(discount, Decimal("3.00")) == Decimal("12.50")


async def test_redeem_respects_max_uses(test_db, staff_user):
    discount = await create_discount(test_db, "LAST", staff_user.uuid, max_uses=1)

    assert await redeem_discount(test_db, "last") is True
    assert await redeem_discount(test_db, "LAST") is False
    await test_db.commit()

    await test_db.refresh(discount)
    assert discount.used_count == 1


DISCOUNT_PAYLOAD = {
    "code": "summer",
    "discount_type": "percentage",
    "value": "20",
    "min_order_amount": "0",
    "max_uses": 100,
    "valid_from": "2026-01-01T00:00:00Z",
    "valid_to": "2026-12-31T23:59:59Z",
}


async def test_admin_creates_code_uppercased(client, staff_user):
    login_as(client, staff_user)

    response = await client.post("/api/admin/discount-codes", json=DISCOUNT_PAYLOAD)

    assert response.status_code == 201
    data = response.json()
    assert data["code"] == "SUMMER"
    assert data["used_count"] == 0
    assert data["created_by"] == staff_user.uuid


async def test_admin_duplicate_code(client, staff_user):
    login_as(client, staff_user)
    await client.post("/api/admin/discount-codes", json=DISCOUNT_PAYLOAD)

    response = await client.post("/api/admin/discount-codes", json={**DISCOUNT_PAYLOAD, "code": "SUMMER"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Discount code already exists"


async def test_create_rejects_inverted_window(client, staff_user):
    login_as(client, staff_user)

    response = await client.post(
        "/api/admin/discount-codes",
        json={**DISCOUNT_PAYLOAD, "valid_from": "2026-12-31T00:00:00Z", "valid_to": "2026-01-01T00:00:00Z"}
    )

    assert response.status_code == 400


async def test_admin_update_and_delete(client, staff_user):
    login_as(client, staff_user)
    created = (await client.post("/api/admin/discount-codes", json=DISCOUNT_PAYLOAD)).json()

    updated = await client.put(
        f"/api/admin/discount-codes/{created['uuid']}",
        json={"code": "autumn", "is_active": False}
    )
    assert updated.status_code == 200
    assert updated.json()["code"] == "AUTUMN"
    assert updated.json()["is_active"] is False
    assert updated.json()["value"] == "20.00"

    listed = await client.get("/api/admin/discount-codes")
    assert [c["code"] for c in listed.json()] == ["AUTUMN"]

    deleted = await client.delete(f"/api/admin/discount-codes/{created['uuid']}")
    assert deleted.status_code == 200
    assert (await client.get("/api/admin/discount-codes")).json() == []


async def test_update_percentage_over_100_rejected(client, staff_user):
    login_as(client, staff_user)
    created = (await client.post("/api/admin/discount-codes", json=DISCOUNT_PAYLOAD)).json()

    response = await client.put(f"/api/admin/discount-codes/{created['uuid']}", json={"value": "150"})

    assert response.status_code == 400


async def test_discount_admin_requires_admin_role(client, user):
    login_as(client, user)

    response = await client.get("/api/admin/discount-codes")

    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"


async def test_discount_admin_not_open_to_admin_panel_session(client):
    admin_login(client)

    response = await client.get("/api/admin/discount-codes")

    assert response.status_code == 401
