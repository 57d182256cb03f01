"""
Cart endpoints: lines, applied coupon and totals.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import patch

from storefront.extensions import db
from storefront.model import Cart, Coupon


def add(client, headers, product, qty=1, **extra):
    return client.post("/api/cart", json={"product_id": product.id, "quantity": qty, **extra}, headers=headers)


def total(client, headers):
    return client.get("/api/cart/total", headers=headers).get_json()


def test_cart_requires_auth(client):
    resp = client.get("/api/cart")
    assert resp.status_code == 401
    assert resp.get_json()["status"] is False


def test_add_item_and_list(client, user_headers, catalog):
    resp = add(client, user_headers, catalog.shirt, 2, color="red", size="M")
    assert resp.status_code == 201
    item = resp.get_json()["data"]["item"]
    assert item["quantity"] == 2
    assert item["unit_price"] == 50.0

    body = client.get("/api/cart", headers=user_headers).get_json()
    assert body["status"] is True
    assert len(body["data"]["items"]) == 1
    assert body["data"]["totals"] == {"subtotal": 100.0, "discount": 0.0, "total": 100.0}


def test_same_product_and_options_merge(client, user_headers, catalog):
    add(client, user_headers, catalog.shirt, 1, color="red")
    add(client, user_headers, catalog.shirt, 2, color="red")
    add(client, user_headers, catalog.shirt, 1, color="blue")
    items = client.get("/api/cart", headers=user_headers).get_json()["data"]["items"]
    assert sorted((i["color"], i["quantity"]) for i in items) == [("blue", 1), ("red", 3)]


def test_add_unknown_product_is_404(client, user_headers, catalog):
    resp = client.post("/api/cart", json={"product_id": 9999, "quantity": 1}, headers=user_headers)
    assert resp.status_code == 404


def test_add_inactive_product_is_404(client, user_headers, catalog):
    catalog.cap.status = False
    db.session.commit()
    assert add(client, user_headers, catalog.cap).status_code == 404


def test_add_validates_quantity_and_product_id(client, user_headers, catalog):
    resp = client.post("/api/cart", json={"quantity": 0}, headers=user_headers)
    assert resp.status_code == 400
    errors = resp.get_json()["data"]["errors"]
    assert set(errors) == {"product_id", "quantity"}


def test_add_rejects_unknown_color(client, user_headers, catalog):
    resp = add(client, user_headers, catalog.shirt, color="green")
    assert resp.status_code == 400
    assert "color" in resp.get_json()["data"]["errors"]


def test_update_and_remove_item(client, user_headers, catalog):
    item_id = add(client, user_headers, catalog.shirt).get_json()["data"]["item"]["id"]

    resp = client.put(f"/api/cart/{item_id}", json={"quantity": 4}, headers=user_headers)
    assert resp.status_code == 200
    assert total(client, user_headers)["subtotal"] == 200.0

    assert client.put(f"/api/cart/{item_id}", json={"quantity": 0}, headers=user_headers).status_code == 400

    assert client.delete(f"/api/cart/{item_id}", headers=user_headers).status_code == 200
    assert total(client, user_headers)["subtotal"] == 0.0


def test_cannot_touch_another_users_line(client, user_headers, other_headers, catalog):
    item_id = add(client, user_headers, catalog.shirt).get_json()["data"]["item"]["id"]
    resp = client.delete(f"/api/cart/{item_id}", headers=other_headers)
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Cart item not found"


def test_percentage_coupon_total(client, user_headers, catalog, make_coupon):
    make_coupon("SAVE10", discount_type="percentage", discount_value=Decimal("10"))
    add(client, user_headers, catalog.shirt, 2)

    resp = client.post("/api/cart/discount", json={"code": "SAVE10"}, headers=user_headers)
    assert resp.status_code == 200
    assert resp.get_json()["coupon"]["code"] == "SAVE10"

    body = total(client, user_headers)
    assert (body["subtotal"], body["discount"], body["total"]) == (100.0, 10.0, 90.0)
    assert body["data"]["coupon_code"] == "SAVE10"


def test_fixed_coupon_clamps_total(client, user_headers, catalog, make_coupon):
    make_coupon("FIFTY", discount_type="fixed", discount_value=Decimal("50"))
    add(client, user_headers, catalog.cap, 1)
    client.post("/api/cart/discount", json={"code": "FIFTY"}, headers=user_headers)
    body = total(client, user_headers)
    assert (body["subtotal"], body["discount"], body["total"]) == (30.0, 50.0, 0.0)


def test_invalid_coupon_leaves_slot_empty(client, user_headers, catalog, make_coupon):
    make_coupon("OLD", end_date=datetime.utcnow() - timedelta(days=1))
    add(client, user_headers, catalog.shirt, 2)

    resp = client.post("/api/cart/discount", json={"code": "OLD"}, headers=user_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid or expired coupon"

    body = total(client, user_headers)
    assert body["discount"] == 0.0
    assert body["data"]["coupon_code"] is None


def test_failed_apply_keeps_previous_coupon(client, user_headers, catalog, make_coupon):
    make_coupon("SAVE10")
    add(client, user_headers, catalog.shirt, 2)
    client.post("/api/cart/discount", json={"code": "SAVE10"}, headers=user_headers)

    resp = client.post("/api/cart/discount", json={"code": "NOPE"}, headers=user_headers)
    assert resp.status_code == 400
    assert total(client, user_headers)["data"]["coupon_code"] == "SAVE10"


def test_last_apply_wins(client, user_headers, catalog, make_coupon):
    make_coupon("SAVE10")
    make_coupon("FIVE", discount_type="fixed", discount_value=Decimal("5"))
    add(client, user_headers, catalog.shirt, 2)
    client.post("/api/cart/discount", json={"code": "SAVE10"}, headers=user_headers)
    client.post("/api/cart/discount", json={"code": "FIVE"}, headers=user_headers)
    body = total(client, user_headers)
    assert body["discount"] == 5.0
    assert body["total"] == 95.0


def test_apply_without_code_is_400(client, user_headers, catalog):
    resp = client.post("/api/cart/discount", json={}, headers=user_headers)
    assert resp.status_code == 400
    assert "code" in resp.get_json()["data"]["errors"]


def test_remove_coupon(client, user_headers, catalog, make_coupon):
    make_coupon("SAVE10")
    add(client, user_headers, catalog.shirt, 2)
    client.post("/api/cart/discount", json={"code": "SAVE10"}, headers=user_headers)
    assert client.delete("/api/cart/discount", headers=user_headers).status_code == 200
    assert total(client, user_headers)["total"] == 100.0


def test_clearing_cart_clears_coupon(client, user_headers, catalog, make_coupon):
    make_coupon("SAVE10")
    add(client, user_headers, catalog.shirt, 2)
    client.post("/api/cart/discount", json={"code": "SAVE10"}, headers=user_headers)

    assert client.delete("/api/cart/clear", headers=user_headers).status_code == 200

    add(client, user_headers, catalog.shirt, 2)
    body = total(client, user_headers)
    assert body["discount"] == 0.0
    assert body["data"]["coupon_code"] is None


def test_stale_coupon_is_dropped_on_read(client, user, user_headers, catalog, make_coupon):
    coupon = make_coupon("SAVE10")
    add(client, user_headers, catalog.shirt, 2)
    client.post("/api/cart/discount", json={"code": "SAVE10"}, headers=user_headers)

    coupon.is_active = False
    db.session.commit()

    body = total(client, user_headers)
    assert (body["discount"], body["total"]) == (0.0, 100.0)
    assert Cart.query.filter_by(user_id=user.id).one().coupon_code is None


def test_coupon_window_follows_the_clock(client, user_headers, catalog, make_coupon):
    start = datetime(2024, 1, 1)
    make_coupon("WINTER", start_date=start, end_date=datetime(2024, 1, 31, 23, 59, 59))
    add(client, user_headers, catalog.shirt, 2)

    with patch("storefront.services.coupon_service.utcnow", return_value=datetime(2024, 1, 15)):
        assert client.post("/api/cart/discount", json={"code": "WINTER"}, headers=user_headers).status_code == 200
        assert total(client, user_headers)["discount"] == 10.0

    with patch("storefront.services.coupon_service.utcnow", return_value=datetime(2024, 2, 1)):
        body = total(client, user_headers)
        assert body["discount"] == 0.0


def test_usage_exhausted_coupon_cannot_be_applied(client, user_headers, catalog, make_coupon):
    make_coupon("FIVE", max_uses=5, used_count=5)
    add(client, user_headers, catalog.shirt, 1)
    resp = client.post("/api/cart/discount", json={"code": "FIVE"}, headers=user_headers)
    assert resp.status_code == 400
    assert Coupon.query.filter_by(code="FIVE").one().used_count == 5
