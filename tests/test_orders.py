from app.domain.models.cart import Cart
from app.domain.models.order import Order


def _fill_cart(client, headers, product, quantity=2):
    client.post(
        "/cart",
        json={"productId": product.id, "color": "black", "size": "M", "quantity": quantity},
        headers=headers,
    )


def test_place_order_with_items(client, db, user, user_headers, product):
    payload = {
        "items": [{"productId": product.id, "color": "black", "size": "S", "quantity": 3}],
        "total": 300,
        "paymentOption": "EMI_3_MONTH",
    }
    response = client.post("/orders", json=payload, headers=user_headers)

    assert response.status_code == 201
    order = response.json()["order"]
    assert order["status"] == "pending"
    assert order["total"] == 300.0
    assert order["paymentOption"] == "EMI_3_MONTH"
    assert order["items"][0]["price"] == 100.0


def test_order_deactivates_carts(client, db, user, user_headers, product):
    _fill_cart(client, user_headers, product)

    response = client.post("/orders", json={}, headers=user_headers)

    assert response.status_code == 201
    assert response.json()["order"]["total"] == 200.0
    db.expire_all()
    assert db.query(Cart).filter(Cart.user_id == user.id, Cart.active.is_(True)).count() == 0
    assert client.get("/cart", headers=user_headers).json()["cart"] is None


def test_next_cart_is_fresh(client, db, user, user_headers, product):
    _fill_cart(client, user_headers, product)
    client.post("/orders", json={}, headers=user_headers)

    _fill_cart(client, user_headers, product, quantity=1)

    cart = client.get("/cart", headers=user_headers).json()["cart"]
    assert cart["total"] == 100.0
    assert db.query(Cart).filter(Cart.user_id == user.id).count() == 2


def test_total_is_computed_server_side(client, user_headers, product):
    payload = {"items": [{"productId": product.id, "quantity": 1}], "total": 1}
    response = client.post("/orders", json=payload, headers=user_headers)

    assert response.json()["order"]["total"] == 100.0


def test_empty_order(client, user_headers, db):
    response = client.post("/orders", json={}, headers=user_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "No items to order"


def test_invalid_payment_option(client, user_headers, product):
    payload = {"items": [{"productId": product.id, "quantity": 1}], "paymentOption": "BARTER"}
    response = client.post("/orders", json=payload, headers=user_headers)
    assert response.status_code == 400


def test_list_orders_only_own(client, db, user, admin, user_headers, admin_headers, product):
    payload = {"items": [{"productId": product.id, "quantity": 1}]}
    client.post("/orders", json=payload, headers=user_headers)
    client.post("/orders", json=payload, headers=user_headers)
    client.post("/orders", json=payload, headers=admin_headers)

    response = client.get("/orders", headers=user_headers)

    assert response.status_code == 200
    orders = response.json()["orders"]
    assert len(orders) == 2
    assert all(o["userId"] == user.id for o in orders)
    assert db.query(Order).count() == 3


def test_explicit_empty_items_does_not_order_server_cart(client, db, user, user_headers, product):
    _fill_cart(client, user_headers, product)

    response = client.post("/orders", json={"items": []}, headers=user_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "No items to order"
    assert db.query(Order).count() == 0
    assert client.get("/cart", headers=user_headers).json()["cart"]["total"] == 200.0


def test_order_deactivates_every_active_cart(client, db, user, user_headers, product):
    db.add_all([Cart(user_id=user.id, active=True), Cart(user_id=user.id, active=True)])
    db.commit()

    payload = {"items": [{"productId": product.id, "quantity": 1}]}
    response = client.post("/orders", json=payload, headers=user_headers)

    assert response.status_code == 201
    db.expire_all()
    assert db.query(Cart).filter(Cart.user_id == user.id, Cart.active.is_(True)).count() == 0
    assert db.query(Cart).filter(Cart.user_id == user.id).count() == 2
