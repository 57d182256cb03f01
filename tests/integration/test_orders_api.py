"""
Checkout and order management.
"""

from decimal import Decimal

from storefront.extensions import db
from storefront.model import Address, Cart, Coupon, Order


def fill_cart(client, headers, product, qty=2):
    resp = client.post("/api/cart", json={"product_id": product.id, "quantity": qty}, headers=headers)
    assert resp.status_code == 201


def place(client, headers, **body):
    return client.post("/api/orders", json=body, headers=headers)


def test_checkout_snapshots_totals_and_clears_cart(client, user, user_headers, catalog, make_coupon):
    coupon = make_coupon("SAVE10", max_uses=3)
    fill_cart(client, user_headers, catalog.shirt, 2)
    client.post("/api/cart/discount", json={"code": "SAVE10"}, headers=user_headers)

    resp = place(client, user_headers)
    assert resp.status_code == 201
    order = resp.get_json()["data"]["order"]
    assert order["status"] == "pending"
    assert order["coupon_code"] == "SAVE10"
    assert order["money"] == {"subtotal": 100.0, "discount": 10.0, "total": 90.0}
    assert order["items"][0]["line_total"] == 100.0

    db.session.refresh(coupon)
    assert coupon.used_count == 1

    cart = Cart.query.filter_by(user_id=user.id).one()
    assert cart.items == []
    assert cart.coupon_code is None


def test_checkout_empty_cart_is_400(client, user_headers):
    resp = place(client, user_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Cart is empty"


def test_checkout_refuses_coupon_used_up_elsewhere(client, user, user_headers, catalog, make_coupon):
    coupon = make_coupon("ONCE", max_uses=1)
    fill_cart(client, user_headers, catalog.shirt, 1)
    client.post("/api/cart/discount", json={"code": "ONCE"}, headers=user_headers)

    # someone else took the last use in the meantime
    coupon.used_count = 1
    db.session.commit()

    resp = place(client, user_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid or expired coupon"
    assert Order.query.count() == 0
    db.session.refresh(coupon)
    assert coupon.used_count == 1

    cart = Cart.query.filter_by(user_id=user.id).one()
    assert cart.coupon_code is None
    assert len(cart.items) == 1

    # the cart keeps its lines, so a second attempt goes through at full price
    resp = place(client, user_headers)
    assert resp.status_code == 201
    assert resp.get_json()["data"]["order"]["money"]["discount"] == 0.0


def test_checkout_with_foreign_address_is_404(client, other_user, user_headers, catalog):
    addr = Address(user_id=other_user.id, city="Amman", street="Main", building="7")
    db.session.add(addr)
    db.session.commit()
    fill_cart(client, user_headers, catalog.shirt, 1)

    resp = place(client, user_headers, address_id=addr.id)
    assert resp.status_code == 404
    assert Order.query.count() == 0


def test_checkout_with_own_address(client, user, user_headers, catalog):
    addr = Address(user_id=user.id, city="Amman", street="Main", building="7")
    db.session.add(addr)
    db.session.commit()
    fill_cart(client, user_headers, catalog.cap, 1)

    resp = place(client, user_headers, address_id=addr.id, payment_method="card")
    assert resp.status_code == 201
    order = resp.get_json()["data"]["order"]
    assert order["address"]["city"] == "Amman"
    assert order["payment_method"] == "card"


def test_users_see_only_their_orders(client, user_headers, other_headers, manager_headers, catalog):
    fill_cart(client, user_headers, catalog.shirt, 1)
    order_id = place(client, user_headers).get_json()["data"]["order"]["id"]
    fill_cart(client, other_headers, catalog.cap, 1)
    place(client, other_headers)

    mine = client.get("/api/orders", headers=user_headers).get_json()["data"]
    assert [o["id"] for o in mine["orders"]] == [order_id]
    assert mine["meta"]["total"] == 1

    everything = client.get("/api/orders", headers=manager_headers).get_json()["data"]
    assert everything["meta"]["total"] == 2

    assert client.get(f"/api/orders/{order_id}", headers=other_headers).status_code == 404
    assert client.get(f"/api/orders/{order_id}", headers=manager_headers).status_code == 200


def test_status_update_requires_manager(client, user_headers, manager_headers, catalog):
    fill_cart(client, user_headers, catalog.shirt, 1)
    order_id = place(client, user_headers).get_json()["data"]["order"]["id"]

    assert client.put(f"/api/orders/{order_id}", json={"status": "shipped"}, headers=user_headers).status_code == 403

    resp = client.put(f"/api/orders/{order_id}", json={"status": "shipped"}, headers=manager_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["order"]["status"] == "shipped"

    resp = client.put(f"/api/orders/{order_id}", json={"status": "lost"}, headers=manager_headers)
    assert resp.status_code == 400


def test_cancelling_pending_order_releases_coupon(client, user_headers, manager_headers, catalog, make_coupon):
    coupon = make_coupon("ONCE", max_uses=1, discount_type="fixed", discount_value=Decimal("5"))
    fill_cart(client, user_headers, catalog.shirt, 1)
    client.post("/api/cart/discount", json={"code": "ONCE"}, headers=user_headers)
    order_id = place(client, user_headers).get_json()["data"]["order"]["id"]
    assert db.session.get(Coupon, coupon.id).used_count == 1

    client.put(f"/api/orders/{order_id}", json={"status": "cancelled"}, headers=manager_headers)
    assert db.session.get(Coupon, coupon.id).used_count == 0


def test_cancelled_order_is_final(client, user_headers, manager_headers, catalog, make_coupon):
    coupon = make_coupon("FIVE", max_uses=5, used_count=2)
    fill_cart(client, user_headers, catalog.shirt, 1)
    client.post("/api/cart/discount", json={"code": "FIVE"}, headers=user_headers)
    order_id = place(client, user_headers).get_json()["data"]["order"]["id"]
    assert db.session.get(Coupon, coupon.id).used_count == 3

    url = f"/api/orders/{order_id}"
    client.put(url, json={"status": "cancelled"}, headers=manager_headers)
    assert db.session.get(Coupon, coupon.id).used_count == 2

    resp = client.put(url, json={"status": "pending"}, headers=manager_headers)
    assert resp.status_code == 400
    assert db.session.get(Order, order_id).status == "cancelled"

    # cancelling again must not give the use back a second time
    client.put(url, json={"status": "cancelled"}, headers=manager_headers)
    assert db.session.get(Coupon, coupon.id).used_count == 2


def test_tracking_number(client, user_headers, manager_headers, catalog):
    fill_cart(client, user_headers, catalog.shirt, 1)
    order_id = place(client, user_headers).get_json()["data"]["order"]["id"]
    url = f"/api/orders/{order_id}/tracking"

    assert client.put(url, json={}, headers=manager_headers).status_code == 400
    assert client.put(url, json={"tracking_number": "X" * 256}, headers=manager_headers).status_code == 400

    resp = client.put(url, json={"tracking_number": "TRK-123"}, headers=manager_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["order"]["tracking_number"] == "TRK-123"


def test_only_admin_deletes_orders(client, user_headers, manager_headers, admin_headers, catalog):
    fill_cart(client, user_headers, catalog.shirt, 1)
    order_id = place(client, user_headers).get_json()["data"]["order"]["id"]

    assert client.delete(f"/api/orders/{order_id}", headers=manager_headers).status_code == 403
    assert client.delete(f"/api/orders/{order_id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/orders/{order_id}", headers=admin_headers).status_code == 404


def test_deleting_pending_order_releases_coupon(client, user_headers, admin_headers, catalog, make_coupon):
    coupon = make_coupon("ONCE", max_uses=1)
    fill_cart(client, user_headers, catalog.shirt, 1)
    client.post("/api/cart/discount", json={"code": "ONCE"}, headers=user_headers)
    order_id = place(client, user_headers).get_json()["data"]["order"]["id"]
    assert db.session.get(Coupon, coupon.id).used_count == 1

    assert client.delete(f"/api/orders/{order_id}", headers=admin_headers).status_code == 200
    assert db.session.get(Coupon, coupon.id).used_count == 0


def test_deleting_shipped_order_keeps_coupon_use(client, user_headers, manager_headers, admin_headers,
                                                 catalog, make_coupon):
    coupon = make_coupon("ONCE", max_uses=1)
    fill_cart(client, user_headers, catalog.shirt, 1)
    client.post("/api/cart/discount", json={"code": "ONCE"}, headers=user_headers)
    order_id = place(client, user_headers).get_json()["data"]["order"]["id"]
    client.put(f"/api/orders/{order_id}", json={"status": "shipped"}, headers=manager_headers)

    assert client.delete(f"/api/orders/{order_id}", headers=admin_headers).status_code == 200
    assert db.session.get(Coupon, coupon.id).used_count == 1
