"""Tests for checkout, ownership and the admin order lifecycle."""
from decimal import Decimal

import pytest
from fastapi import HTTPException
from sqlalchemy import select

from storefront.models.activity import UserActivity
from storefront.models.order import ORDER_CONFIRMED, ORDER_COMPLETED
from storefront.services import orders as order_service
from conftest import login_as, logout, admin_login, create_discount, create_product

ORDER_PAYLOAD = {"payment_method": "BTC", "wallet_address": "bc1qexampleaddress"}


async def place_order(client, product, **extra):
    response = await client.post("/api/orders", json={"product_id": product.uuid, **ORDER_PAYLOAD, **extra})
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_order_snapshots_product(client, test_db, user, product):
    login_as(client, user)

    data = await place_order(client, product)

    assert data["status"] == "pending"
    assert data["user_id"] == user.uuid
    assert data["product_name"] == "Rust MEK - 1 Day"
    assert data["product_price"] == "100.00"
    assert data["license_key"] is None
    assert data["download_count"] == 0

    result = await test_db.execute(select(UserActivity).where(UserActivity.action == "purchase"))
    assert result.scalar_one().entity_id == data["uuid"]


async def test_create_order_ignores_client_price(client, user, product):
    login_as(client, user)

    data = await place_order(client, product, product_price="0.01", product_name="Free")

    assert data["product_price"] == "100.00"
    assert data["product_name"] == product.name


async def test_create_order_unknown_product(client, user):
    login_as(client, user)

    response = await client.post("/api/orders", json={"product_id": "missing", **ORDER_PAYLOAD})

    assert response.status_code == 404
    assert response.json()["detail"] == "Product not found"


async def test_create_order_requires_login(client, product):
    response = await client.post("/api/orders", json={"product_id": product.uuid, **ORDER_PAYLOAD})

    assert response.status_code == 401


async def test_duplicate_submissions_create_separate_orders(client, user, product):
    login_as(client, user)

    first = await place_order(client, product)
    second = await place_order(client, product)

    assert first["uuid"] != second["uuid"]
    orders = (await client.get("/api/orders")).json()
    assert len(orders) == 2


async def test_stock_is_not_decremented(client, test_db, user, product):
    login_as(client, user)
    await place_order(client, product)

    await test_db.refresh(product)
    assert product.stock_quantity == 10


async def test_order_ownership_is_masked_as_not_found(client, user, other_user, product):
    login_as(client, user)
    order = await place_order(client, product)

    login_as(client, other_user)
    single = await client.get("/api/orders", params={"orderId": order["uuid"]})
    by_path = await client.get(f"/api/orders/{order['uuid']}")
    listed = await client.get("/api/orders")

    assert single.status_code == 404
    assert single.json()["detail"] == "Order not found"
    assert by_path.status_code == 404
    assert listed.json() == []

    login_as(client, user)
    own = await client.get("/api/orders", params={"orderId": order["uuid"]})
    assert own.status_code == 200
    assert own.json()["uuid"] == order["uuid"]


async def test_full_lifecycle(client, user, product):
    login_as(client, user)
    order = await place_order(client, product)
    order_id = order["uuid"]

    admin_login(client)
    confirmed = await client.patch(
        f"/api/admin/orders/{order_id}/status",
        json={"status": "confirmed", "transaction_id": "tx-123"}
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "confirmed"
    assert confirmed.json()["transaction_id"] == "tx-123"

    fulfilled = await client.patch(
        f"/api/admin/orders/{order_id}/license",
        json={"license_key": "KEY-AAAA", "download_url": "https://example.com/file.zip"}
    )
    assert fulfilled.status_code == 200
    assert fulfilled.json()["status"] == "confirmed"
    assert fulfilled.json()["license_key"] == "KEY-AAAA"

    completed = await client.patch(f"/api/admin/orders/{order_id}/status", json={"status": "completed"})
    assert completed.status_code == 200
    assert completed.json()["status"] == "completed"

    history = await client.get("/api/orders", params={"orderId": order_id})
    assert history.json()["license_key"] == "KEY-AAAA"

    download = await client.get(f"/api/orders/{order_id}/download")
    assert download.status_code == 200
    assert download.json()["license_key"] == "KEY-AAAA"
    assert download.json()["download_url"] == "https://example.com/file.zip"
    assert download.json()["download_count"] == 1


async def test_complete_requires_license_key(client, user, product):
    login_as(client, user)
    order = await place_order(client, product)

    admin_login(client)
    await client.patch(f"/api/admin/orders/{order['uuid']}/status", json={"status": "confirmed"})
    response = await client.patch(f"/api/admin/orders/{order['uuid']}/status", json={"status": "completed"})

    assert response.status_code == 409


async def test_pending_cannot_skip_to_completed(client, user, product):
    login_as(client, user)
    order = await place_order(client, product)

    admin_login(client)
    await client.patch(f"/api/admin/orders/{order['uuid']}/license", json={"license_key": "KEY"})
    response = await client.patch(f"/api/admin/orders/{order['uuid']}/status", json={"status": "completed"})

    assert response.status_code == 409


@pytest.mark.parametrize("terminal", ["cancelled", "completed"])
async def test_terminal_states_reject_changes(client, user, product, terminal):
    login_as(client, user)
    order = await place_order(client, product)
    order_id = order["uuid"]

    admin_login(client)
    if terminal == "completed":
        await client.patch(f"/api/admin/orders/{order_id}/status", json={"status": "confirmed"})
        await client.patch(f"/api/admin/orders/{order_id}/license", json={"license_key": "KEY"})
    await client.patch(f"/api/admin/orders/{order_id}/status", json={"status": terminal})

    for new_status in ("pending", "confirmed"):
        response = await client.patch(f"/api/admin/orders/{order_id}/status", json={"status": new_status})
        assert response.status_code == 409

    # Same status again is a no-op
    again = await client.patch(f"/api/admin/orders/{order_id}/status", json={"status": terminal})
    assert again.status_code == 200
    assert again.json()["status"] == terminal


async def test_cancelled_order_cannot_be_fulfilled(client, user, product):
    login_as(client, user)
    order = await place_order(client, product)

    admin_login(client)
    await client.patch(f"/api/admin/orders/{order['uuid']}/status", json={"status": "cancelled"})
    response = await client.patch(f"/api/admin/orders/{order['uuid']}/license", json={"license_key": "KEY"})

    assert response.status_code == 409


async def test_invalid_status_value(client, user, product):
    login_as(client, user)
    order = await place_order(client, product)

    admin_login(client)
    response = await client.patch(f"/api/admin/orders/{order['uuid']}/status", json={"status": "shipped"})

    assert response.status_code == 400


async def test_unknown_order_admin_routes(client):
    admin_login(client)

    status_response = await client.patch("/api/admin/orders/missing/status", json={"status": "confirmed"})
    license_response = await client.patch("/api/admin/orders/missing/license", json={"license_key": "KEY"})

    assert status_response.status_code == 404
    assert license_response.status_code == 404


async def test_admin_routes_require_admin_session(client, user, product):
    login_as(client, user)
    order = await place_order(client, product)

    response = await client.patch(f"/api/admin/orders/{order['uuid']}/status", json={"status": "confirmed"})
    assert response.status_code == 401

    logout(client)
    assert (await client.get("/api/admin/orders")).status_code == 401


async def test_admin_lists_all_orders_newest_first(client, user, other_user, product):
    login_as(client, user)
    first = await place_order(client, product)
    login_as(client, other_user)
    second = await place_order(client, product)

    admin_login(client)
    response = await client.get("/api/admin/orders")

    assert response.status_code == 200
    assert [o["uuid"] for o in response.json()] == [second["uuid"], first["uuid"]]


async def test_stalled_orders_lists_fulfilled_but_incomplete(client, user, product):
    login_as(client, user)
    stalled = await place_order(client, product)
    untouched = await place_order(client, product)

    admin_login(client)
    await client.patch(f"/api/admin/orders/{stalled['uuid']}/license", json={"license_key": "KEY"})

    response = await client.get("/api/admin/orders/stalled")

    ids = [o["uuid"] for o in response.json()]
    assert ids == [stalled["uuid"]]
    assert untouched["uuid"] not in ids


async def test_download_requires_completed_order(client, user, product):
    login_as(client, user)
    order = await place_order(client, product)

    response = await client.get(f"/api/orders/{order['uuid']}/download")

    assert response.status_code == 409


async def test_order_with_discount_code(client, test_db, user, staff_user, product):
    await create_discount(test_db, "SAVE10", staff_user.uuid, value="10")
    login_as(client, user)

    data = await place_order(client, product, discount_code="save10")

    assert data["discount_code"] == "SAVE10"
    assert data["discount_amount"] == "10.00"
    assert data["total_amount"] == "90.00"


async def test_fixed_discount_is_clamped_to_price(client, test_db, user, staff_user):
    cheap = await create_product(test_db, "Rust FA", price="7.99")
    await create_discount(test_db, "BIG50", staff_user.uuid, discount_type="fixed", value="50")
    login_as(client, user)

    data = await place_order(client, cheap, discount_code="BIG50")

    assert data["discount_amount"] == "7.99"
    assert data["total_amount"] == "0.00"


async def test_order_with_invalid_discount_code(client, user, product):
    login_as(client, user)

    response = await client.post(
        "/api/orders",
        json={"product_id": product.uuid, **ORDER_PAYLOAD, "discount_code": "NOPE"}
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Invalid or expired discount code"


async def test_discount_redeemed_once_on_completion(test_db, user, staff_user, product):
    from storefront.schemas.orders import OrderCreate

    discount = await create_discount(test_db, "ONCE", staff_user.uuid, max_uses=5)
    order = await order_service.create_order(
        test_db, user, OrderCreate(product_id=product.uuid, discount_code="once", **ORDER_PAYLOAD)
    )
    await test_db.commit()

    await order_service.transition_status(test_db, order.uuid, ORDER_CONFIRMED)
    await order_service.assign_fulfillment(test_db, order.uuid, "KEY-1")
    await order_service.transition_status(test_db, order.uuid, ORDER_COMPLETED)
    # Repeating the completed status does not count a second use
    await order_service.transition_status(test_db, order.uuid, ORDER_COMPLETED)

    await test_db.refresh(discount)
    await test_db.refresh(order)
    assert discount.used_count == 1
    assert order.discount_redeemed is True


async def test_cancelled_order_does_not_redeem(test_db, user, staff_user, product):
    from storefront.schemas.orders import OrderCreate

    discount = await create_discount(test_db, "KEEP", staff_user.uuid)
    order = await order_service.create_order(
        test_db, user, OrderCreate(product_id=product.uuid, discount_code="KEEP", **ORDER_PAYLOAD)
    )
    await test_db.commit()

    await order_service.transition_status(test_db, order.uuid, "cancelled")

    await test_db.refresh(discount)
    assert discount.used_count == 0


async def test_transition_service_raises_conflict(test_db, user, product):
    from storefront.schemas.orders import OrderCreate

    order = await order_service.create_order(test_db, user, OrderCreate(product_id=product.uuid, **ORDER_PAYLOAD))
    await test_db.commit()

    with pytest.raises(HTTPException) as exc_info:
        await order_service.transition_status(test_db, order.uuid, ORDER_COMPLETED)

    assert exc_info.value.status_code == 409


def test_allowed_transitions():
    assert order_service.can_transition("pending", "confirmed")
    assert order_service.can_transition("pending", "cancelled")
    assert order_service.can_transition("confirmed", "completed")
    assert order_service.can_transition("confirmed", "cancelled")
    assert not order_service.can_transition("pending", "completed")
    assert not order_service.can_transition("completed", "pending")
    assert not order_service.can_transition("cancelled", "confirmed")
    assert not order_service.can_transition("completed", "cancelled")


def test_total_amount_uses_discount():
    from storefront.models.order import Order

    order = Order(product_price=Decimal("25.00"), discount_amount=Decimal("2.50"))

    assert order.total_amount == Decimal("22.50")
