import pytest
from bson import ObjectId

import main


@pytest.fixture
def product_id(make_product):
    return make_product(title="Test Order Product", price=200, discountPercentage=15)


@pytest.fixture
def order_payload(product_id, shipping_address):
    return {
        "item": [{"product": str(product_id), "quantity": 2, "price": 200}],
        "total": 340,
        "paymentMode": "CARD",
        "address": [shipping_address],
    }


@pytest.fixture
def order_id(client, customer_headers, order_payload):
    return client.post("/orders", json=order_payload, headers=customer_headers).json()["_id"]


def test_create_order_defaults_to_pending(client, customer, customer_headers, order_payload):
    res = client.post("/orders", json=order_payload, headers=customer_headers)
    assert res.status_code == 201
    body = res.json()
    assert body["user"] == str(customer["_id"])
    assert body["total"] == 340
    assert body["status"] == "Pending"
    assert body["item"][0]["price"] == 170
    assert body["address"][0]["zip"] == "12345"
    assert "clientSecret" not in body


def test_create_order_then_dispatch(client, admin_headers, order_id):
    res = client.put(f"/orders/{order_id}", json={"status": "Dispatched"}, headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["status"] == "Dispatched"
    assert res.json()["_id"] == order_id


@pytest.mark.parametrize("mode", ["CARD", "COD", "UPI"])
def test_payment_modes(client, customer_headers, order_payload, mode):
    order_payload["paymentMode"] = mode
    assert client.post("/orders", json=order_payload, headers=customer_headers).json()["paymentMode"] == mode


def test_unknown_payment_mode(client, customer_headers, order_payload):
    order_payload["paymentMode"] = "BARTER"
    assert client.post("/orders", json=order_payload, headers=customer_headers).status_code == 400


def test_total_is_optional(client, customer_headers, order_payload):
    del order_payload["total"]
    assert client.post("/orders", json=order_payload, headers=customer_headers).json()["total"] == 340


def test_total_mismatch_rejected(client, customer_headers, order_payload, mongo):
    order_payload["total"] = 1
    res = client.post("/orders", json=order_payload, headers=customer_headers)
    assert res.status_code == 400
    assert "does not match" in res.json()["message"]
    assert mongo["order"].count_documents({}) == 0


def test_missing_fields_rejected(client, customer, customer_headers):
    res = client.post("/orders", json={"user": str(customer["_id"])}, headers=customer_headers)
    assert res.status_code == 400


def test_unknown_product_rejected(client, customer_headers, order_payload):
    order_payload["item"][0]["product"] = str(ObjectId())
    del order_payload["total"]
    assert client.post("/orders", json=order_payload, headers=customer_headers).status_code == 400


def test_orders_for_user(client, customer, customer_headers, order_payload):
    order_payload["paymentMode"] = "COD"
    for _ in range(2):
        client.post("/orders", json=order_payload, headers=customer_headers)
    res = client.get(f"/orders/user/{customer['_id']}", headers=customer_headers)
    assert res.status_code == 200
    assert len(res.json()) == 2
    assert all(o["user"] == str(customer["_id"]) for o in res.json())
    assert "product" in res.json()[0]["item"][0]


def test_orders_for_user_without_orders(client, user_factory, headers_for):
    newcomer = user_factory(email="noorders@shop.io")
    assert client.get(f"/orders/user/{newcomer['_id']}", headers=headers_for(newcomer)).json() == []


def test_orders_of_another_user_forbidden(client, customer, order_id, user_factory, headers_for):
    snoop = user_factory(email="snoop@shop.io")
    assert client.get(f"/orders/user/{customer['_id']}", headers=headers_for(snoop)).status_code == 403
    assert client.get(f"/orders/{order_id}", headers=headers_for(snoop)).status_code == 403


def test_get_order(client, customer_headers, order_id):
    res = client.get(f"/orders/{order_id}", headers=customer_headers)
    assert res.json()["_id"] == order_id


def test_admin_lists_all_orders(client, admin_headers, customer_headers, order_payload):
    for _ in range(3):
        client.post("/orders", json=order_payload, headers=customer_headers)
    res = client.get("/orders", params={"page": 1, "limit": 2}, headers=admin_headers)
    assert res.headers["x-total-count"] == "3"
    assert len(res.json()) == 2


def test_customers_cannot_list_all_orders(client, customer_headers):
    assert client.get("/orders", headers=customer_headers).status_code == 403


def test_full_lifecycle(client, admin_headers, order_id):
    for status in ("Dispatched", "Out for delivery", "Delivered"):
        res = client.put(f"/orders/{order_id}", json={"status": status}, headers=admin_headers)
        assert res.status_code == 200
        assert res.json()["status"] == status


def test_patch_also_updates_status(client, admin_headers, order_id):
    assert client.patch(f"/orders/{order_id}", json={"status": "Cancelled"}, headers=admin_headers).json()["status"] == "Cancelled"


def test_cancelled_order_cannot_be_dispatched(client, admin_headers, order_id):
    client.put(f"/orders/{order_id}", json={"status": "Cancelled"}, headers=admin_headers)
    res = client.put(f"/orders/{order_id}", json={"status": "Dispatched"}, headers=admin_headers)
    assert res.status_code == 409
    assert res.json()["message"] == "Cannot change order status from Cancelled to Dispatched"


def test_unknown_status_rejected(client, admin_headers, order_id):
    res = client.put(f"/orders/{order_id}", json={"status": "processing"}, headers=admin_headers)
    assert res.status_code == 400


def test_update_missing_order(client, admin_headers):
    res = client.put("/orders/507f1f77bcf86cd799439011", json={"status": "Dispatched"}, headers=admin_headers)
    assert res.status_code == 404
    assert res.json() == {"message": "Order not found"}


def test_owner_may_cancel(client, customer_headers, order_id):
    res = client.put(f"/orders/{order_id}", json={"status": "Cancelled"}, headers=customer_headers)
    assert res.json()["status"] == "Cancelled"


def test_owner_may_not_dispatch(client, customer_headers, order_id):
    assert client.put(f"/orders/{order_id}", json={"status": "Dispatched"}, headers=customer_headers).status_code == 403


def test_card_order_starts_stripe_payment(client, customer_headers, order_payload, monkeypatch, mongo):
    class Intent:
        id = "pi_test_123"
        client_secret = "pi_test_123_secret"

    calls = []

    def fake_create(**kwargs):
        calls.append(kwargs)
        return Intent()

    monkeypatch.setattr(main, "STRIPE_SECRET", "sk_test")
    monkeypatch.setattr(main.stripe.PaymentIntent, "create", fake_create)
    res = client.post("/orders", json=order_payload, headers=customer_headers)
    assert res.status_code == 201
    assert res.json()["clientSecret"] == "pi_test_123_secret"
    assert res.json()["paymentRef"] == "pi_test_123"
    assert calls[0]["amount"] == 34000
    assert mongo["order"].find_one({"_id": ObjectId(res.json()["_id"])})["paymentRef"] == "pi_test_123"


def test_cod_order_skips_stripe(client, customer_headers, order_payload, monkeypatch):
    monkeypatch.setattr(main, "STRIPE_SECRET", "sk_test")
    monkeypatch.setattr(main.stripe.PaymentIntent, "create", lambda **kw: pytest.fail("stripe called"))
    order_payload["paymentMode"] = "COD"
    assert "clientSecret" not in client.post("/orders", json=order_payload, headers=customer_headers).json()


def test_stripe_webhook_without_configuration(client):
    assert client.post("/webhooks/stripe", json={"type": "payment_intent.succeeded"}).json() == {"received": False}


def test_order_with_unknown_stored_status(client, admin_headers, customer, mongo):
    oid = mongo["order"].insert_one({"user": customer["_id"], "status": "processing"}).inserted_id
    res = client.put(f"/orders/{oid}", json={"status": "Dispatched"}, headers=admin_headers)
    assert res.status_code == 409
    assert "processing" in res.json()["message"]


def payment_event(order_id=None):
    metadata = {"order_id": order_id} if order_id else {}
    return {
        "id": "evt_test",
        "object": "event",
        "type": "payment_intent.succeeded",
        "data": {"object": {"id": "pi_test_123", "object": "payment_intent", "metadata": metadata}},
    }


@pytest.fixture
def unpaid_order(order_id, monkeypatch):
    # placed before Stripe is switched on, so no PaymentIntent is created
    monkeypatch.setattr(main, "STRIPE_SECRET", "sk_test")
    monkeypatch.setattr(main, "STRIPE_WEBHOOK_SECRET", None)
    return order_id


def test_stripe_webhook_marks_order_paid(client, unpaid_order, mongo):
    order_id = unpaid_order
    res = client.post("/webhooks/stripe", json=payment_event(order_id))
    assert res.status_code == 200
    assert res.json() == {"received": True}
    assert mongo["order"].find_one({"_id": ObjectId(order_id)})["paymentStatus"] == "paid"


def test_stripe_webhook_without_order_id(client, unpaid_order, mongo):
    order_id = unpaid_order
    res = client.post("/webhooks/stripe", json=payment_event())
    assert res.json() == {"received": True}
    assert mongo["order"].find_one({"_id": ObjectId(order_id)})["paymentStatus"] == "unpaid"


def test_stripe_webhook_ignores_other_events(client, unpaid_order, mongo):
    order_id = unpaid_order
    event = payment_event(order_id)
    event["type"] = "payment_intent.payment_failed"
    client.post("/webhooks/stripe", json=event)
    assert mongo["order"].find_one({"_id": ObjectId(order_id)})["paymentStatus"] == "unpaid"


def test_stripe_webhook_bad_signature(client, monkeypatch, order_id, mongo):
    monkeypatch.setattr(main, "STRIPE_SECRET", "sk_test")
    monkeypatch.setattr(main, "STRIPE_WEBHOOK_SECRET", "whsec_test")
    res = client.post(
        "/webhooks/stripe",
        json=payment_event(order_id),
        headers={"Stripe-Signature": "t=1,v1=not-a-signature"},
    )
    assert res.status_code == 400
    assert res.json() == {"message": "Invalid payload"}
    assert mongo["order"].find_one({"_id": ObjectId(order_id)})["paymentStatus"] == "unpaid"


def test_stripe_webhook_malformed_body(client, unpaid_order):
    res = client.post("/webhooks/stripe", content=b"not json", headers={"Content-Type": "application/json"})
    assert res.status_code == 400
