"""HTTP routes over the checkout services."""
import pytest
from fastapi.testclient import TestClient
from redis.exceptions import RedisError

from storefront.api.deps import get_idempotency_guard
from storefront.data.database import get_db
from storefront.main import app

from conftest import add_cart_line, make_discount, make_product, stock_of

SHIPPING = {
    "first_name": "Ana",
    "last_name": "Reyes",
    "address": "12 Rizal St",
    "city": "Manila",
}


@pytest.fixture
def client(session_factory, guard, customer):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_idempotency_guard] = lambda: guard
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def tee(db):
    return make_product(db, 7, price="20.00", variants=[("black", "M", 10)])


def order_payload(**kwargs):
    payload = {
        "customer_id": 1,
        "shipping": SHIPPING,
        "payment_method": "COD",
        "shipping_amount": "5.00",
    }
    payload.update(kwargs)
    return payload


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_customer_routes(client):
    assert client.get("/customers/1").json()["first_name"] == "Ana"
    assert client.get("/customers/42").status_code == 404

    resp = client.post("/customers/", json={"id": 2, "first_name": "Ben"})
    assert resp.status_code == 200
    assert resp.json()["id"] == 2


def test_cart_routes(client, tee):
    resp = client.post("/carts/1/items", json={"product_id": 7, "color": "Black", "size": "m", "quantity": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["subtotal"] == "40.00"
    row_id = body["items"][0]["cart_row_id"]

    resp = client.post("/carts/1/items", json={"product_id": 7, "color": "black", "size": "M", "quantity": 9})
    assert resp.status_code == 409
    assert resp.json()["detail"]["error"] == "InsufficientStock"
    assert resp.json()["detail"]["available"] == 8

    assert client.delete(f"/carts/1/items/{row_id}").json()["items"] == []
    assert client.delete(f"/carts/1/items/{row_id}").status_code == 404


def test_discount_preview_does_not_redeem(client, db, tee):
    make_discount(db, "SAVE10", "percent", "10", min_order="30")
    add_cart_line(db, 1, 7, "black", "M", 2)

    resp = client.post(
        "/checkout/discount/preview",
        json={"customer_id": 1, "code": "save10", "shipping_amount": "5.00"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["amount"] == "4.00"
    assert body["total"] == "45.32"

    resp = client.post("/checkout/discount/preview", json={"customer_id": 1, "code": "NOPE"})
    assert resp.status_code == 400
    assert resp.json()["detail"]["reason"] == "NotFound"


def test_place_order_and_replay(client, db, tee):
    add_cart_line(db, 1, 7, "black", "M", 2)
    headers = {"X-Session-Id": "sess-1", "Idempotency-Key": "tok-1"}

    first = client.post("/orders/", json=order_payload(), headers=headers)
    assert first.status_code == 201
    body = first.json()
    assert body["success"] is True
    assert body["replayed"] is False
    assert body["order"]["total"] == "49.80"

    second = client.post("/orders/", json=order_payload(), headers=headers)
    assert second.status_code == 200
    assert second.json()["order_id"] == body["order_id"]
    assert second.json()["replayed"] is True

    assert stock_of(db, 7, "black", "M") == 8

    resp = client.get(f"/orders/{body['order_id']}", params={"customer_id": 1})
    assert resp.status_code == 200
    assert resp.json()["items"][0]["quantity"] == 2
    assert client.get(f"/orders/{body['order_id']}", params={"customer_id": 2}).status_code == 403


def test_place_order_errors(client, db, tee):
    resp = client.post("/orders/", json=order_payload())
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "EmptyCart"

    add_cart_line(db, 1, 7, "black", "M", 11)
    resp = client.post("/orders/", json=order_payload())
    assert resp.status_code == 409
    assert resp.json()["detail"]["product_id"] == 7

    resp = client.post("/orders/", json=order_payload(payment_method="PayPal", paypal_order_id="PAY-1"))
    assert resp.status_code == 402


def test_paypal_flow(client, db, tee):
    add_cart_line(db, 1, 7, "black", "M", 1)

    assert client.get("/payments/PAY-1/status").json()["paid"] is False
    assert client.post("/payments/PAY-1/capture", json={"status": "COMPLETED"}).json()["paid"] is True
    assert client.get("/payments/PAY-1/status").json()["paid"] is True

    resp = client.post("/orders/", json=order_payload(payment_method="PayPal", paypal_order_id="PAY-1"))
    assert resp.status_code == 201
    assert resp.json()["order"]["payment_completed"] is True


def test_idempotency_key_is_scoped_to_the_customer(client, db, tee):
    client.post("/customers/", json={"id": 2, "first_name": "Ben"})
    add_cart_line(db, 1, 7, "black", "M", 1)
    add_cart_line(db, 2, 7, "black", "M", 2)
    headers = {"X-Session-Id": "shared", "Idempotency-Key": "t"}

    first = client.post("/orders/", json=order_payload(), headers=headers)
    second = client.post("/orders/", json=order_payload(customer_id=2), headers=headers)

    assert first.status_code == 201
    assert second.status_code == 201
    assert second.json()["order_id"] != first.json()["order_id"]
    assert second.json()["order"]["customer_id"] == 2


def test_unreachable_idempotency_store_returns_503(client, guard, db, tee, monkeypatch):
    def broken_redis(*args, **kwargs):
        raise RedisError("connection refused")

    monkeypatch.setattr(guard, "begin", broken_redis)
    add_cart_line(db, 1, 7, "black", "M", 1)

    resp = client.post("/orders/", json=order_payload(), headers={"Idempotency-Key": "tok-1"})
    assert resp.status_code == 503
    assert resp.json()["detail"]["error"] == "IdempotencyUnavailable"
