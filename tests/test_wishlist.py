"""Tests for the wishlist and recently viewed trackers."""
from datetime import datetime

from sqlalchemy import select, func

from storefront.models.activity import UserActivity
from storefront.models.wishlist import RecentlyViewed
from storefront.services import tracking
from conftest import login_as, create_product


async def test_wishlist_add_check_remove(client, user, product):
    login_as(client, user)

    added = await client.post(f"/api/wishlist/{product.uuid}")
    assert added.status_code == 201

    check = await client.get(f"/api/wishlist/check/{product.uuid}")
    assert check.json() == {"product_id": product.uuid, "in_wishlist": True}

    listed = await client.get("/api/wishlist")
    assert [p["uuid"] for p in listed.json()] == [product.uuid]

    removed = await client.delete(f"/api/wishlist/{product.uuid}")
    assert removed.status_code == 200
    assert (await client.get(f"/api/wishlist/check/{product.uuid}")).json()["in_wishlist"] is False


async def test_wishlist_double_add_rejected(client, user, product):
    login_as(client, user)
    await client.post(f"/api/wishlist/{product.uuid}")

    response = await client.post(f"/api/wishlist/{product.uuid}")

    assert response.status_code == 400
    assert response.json()["detail"] == "Product is already in wishlist"
    assert len((await client.get("/api/wishlist")).json()) == 1


async def test_wishlist_remove_absent(client, user, product):
    login_as(client, user)

    response = await client.delete(f"/api/wishlist/{product.uuid}")

    assert response.status_code == 404


async def test_wishlist_unknown_product(client, user):
    login_as(client, user)

    response = await client.post("/api/wishlist/missing")

    assert response.status_code == 404


async def test_wishlists_are_per_user(client, user, other_user, product):
    login_as(client, user)
    await client.post(f"/api/wishlist/{product.uuid}")

    login_as(client, other_user)
    assert (await client.get("/api/wishlist")).json() == []


async def test_wishlist_requires_login(client, product):
    assert (await client.get("/api/wishlist")).status_code == 401


async def test_recently_viewed_keeps_twenty_most_recent(client, test_db, user):
    products = [await create_product(test_db, f"Product {i}") for i in range(25)]
    login_as(client, user)

    for p in products:
        response = await client.post(f"/api/recently-viewed/{p.uuid}")
        assert response.status_code == 200

    count = await test_db.execute(
        select(func.count(RecentlyViewed.uuid)).where(RecentlyViewed.user_id == user.uuid)
    )
    assert count.scalar() == 20

    response = await client.get("/api/recently-viewed", params={"limit": 20})
    ids = [p["uuid"] for p in response.json()]
    assert ids == [p.uuid for p in reversed(products[5:])]


async def test_recently_viewed_default_limit_and_refresh(client, test_db, user):
    products = [await create_product(test_db, f"Product {i}") for i in range(12)]
    login_as(client, user)
    for p in products:
        await client.post(f"/api/recently-viewed/{p.uuid}")

    # Viewing again moves the product to the front without duplicating it
    await client.post(f"/api/recently-viewed/{products[0].uuid}")

    response = await client.get("/api/recently-viewed")
    ids = [p["uuid"] for p in response.json()]
    assert len(ids) == 10
    assert ids[0] == products[0].uuid
    assert len(set(ids)) == len(ids)


async def test_recently_viewed_limit_is_capped(client, user):
    login_as(client, user)

    response = await client.get("/api/recently-viewed", params={"limit": 50})

    assert response.status_code == 400


async def test_view_logs_activity(client, test_db, user, product):
    login_as(client, user)

    await client.post(f"/api/recently-viewed/{product.uuid}")

    result = await test_db.execute(select(UserActivity).where(UserActivity.user_id == user.uuid))
    activity = result.scalar_one()
    assert activity.action == "view_product"
    assert activity.entity_id == product.uuid


async def test_concurrent_first_view_refreshes_existing_row(client, test_db, user, product, monkeypatch):
    viewed_before = datetime(2020, 1, 1)
    test_db.add(RecentlyViewed(user_id=user.uuid, product_id=product.uuid, viewed_at=viewed_before))
    await test_db.commit()

    find_view = tracking._find_view
    lookups = []

    # The first lookup misses, as if another request inserted the row right after it
    async def miss_first_lookup(db, user_id, product_id):
        lookups.append(product_id)
        if len(lookups) == 1:
            return None
        return await find_view(db, user_id, product_id)

    monkeypatch.setattr(tracking, "_find_view", miss_first_lookup)
    login_as(client, user)

    response = await client.post(f"/api/recently-viewed/{product.uuid}")

    assert response.status_code == 200
    result = await test_db.execute(select(RecentlyViewed).where(RecentlyViewed.user_id == user.uuid))
    rows = result.scalars().all()
    assert len(rows) == 1
    assert rows[0].viewed_at > viewed_before
