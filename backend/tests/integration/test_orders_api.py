"""Integration tests for the Orders API

Runs the FastAPI app against an in-memory SQLite database through TestClient,
with the payment registry replaced by an always-approving one.
"""

import pytest
from fastapi.testclient import TestClient

from database import get_db
from main import app
from orders.dependencies import get_payment_registry


CARD = {
    "card_number": "4111 1111 1111 1111",
    "expiry_date": "12/30",
    "cvv": "123",
    "cardholder_name": "Maria Silva",
}


@pytest.fixture
def client(session_factory, db_session, registry):
    """TestClient whose requests each run in their own committed session."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_registry] = lambda: registry
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


def place_order(client, **overrides):
    body = {
        "customer_id": "cust_1",
        "lines": [{"product_id": "prod_mouse", "quantity": 2}],
        "payment_method": "CREDIT_CARD",
        "payment_data": CARD,
    }
    body.update(overrides)
    return client.post("/orders", json=body)


class TestCreateOrderEndpoint:

    def test_create_order(self, client):
        response = place_order(client)

        assert response.status_code == 201
        body = response.json()
        assert body["order"]["order_id"].startswith("order_")
        assert body["order"]["status"] == "PENDING"
        assert body["order"]["payment_status"] == "COMPLETED"
        assert body["order"]["total"] == "100.00"
        assert body["order"]["lines"][0]["quantity"] == 2
        assert body["payment_result"]["transaction_id"].startswith("cc_")
        assert body["validation_result"]["is_valid"] is True
        assert "stock_validation" in body["validation_result"]["metadata"]

    def test_request_id_header(self, client):
        response = place_order(client)
        assert response.headers["X-Request-ID"]

    def test_unknown_customer(self, client):
        response = place_order(client, customer_id="cust_404")
        assert response.status_code == 404
        assert response.json()["error_code"] == "CUSTOMER_NOT_FOUND"

    def test_missing_products(self, client):
        response = place_order(client, lines=[{"product_id": "ghost", "quantity": 1}])
        assert response.status_code == 404
        assert response.json()["missing_product_ids"] == ["ghost"]

    def test_non_positive_quantity_is_invalid_request(self, client):
        response = place_order(client, lines=[{"product_id": "prod_mouse", "quantity": 0}])
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"

    def test_insufficient_stock(self, client):
        response = place_order(client, lines=[{"product_id": "prod_keyboard", "quantity": 3}])
        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_FAILED"
        assert body["validation_result"]["errors"] == [
            "Insufficient stock for Mechanical Keyboard. Available: 1, requested: 3"
        ]

    def test_invalid_card(self, client):
        response = place_order(client, payment_data={**CARD, "cvv": "12"})
        assert response.status_code == 402
        body = response.json()
        assert body["error_code"] == "PAYMENT_FAILED"
        assert body["payment_result"]["transaction_id"] is None

    def test_camel_case_payment_data(self, client):
        response = place_order(
            client,
            payment_method="PIX",
            payment_data={"pixKey": "maria@example.com", "userDocument": "12345678901"},
        )
        assert response.status_code == 201
        assert response.json()["payment_result"]["transaction_id"].startswith("pix_")

    def test_payment_data_missing_field_is_rejected_at_boundary(self, client):
        card = {key: value for key, value in CARD.items() if key != "cvv"}
        response = place_order(client, payment_data=card)

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert any(error["loc"][:2] == ["body", "payment_data"] for error in body["details"])

    def test_payment_data_checked_against_selected_method(self, client):
        response = place_order(client, payment_method="BOLETO", payment_data=CARD)
        assert response.status_code == 422

    def test_unknown_payment_method(self, client):
        response = place_order(client, payment_method="CRYPTO")
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"

    def test_malformed_body(self, client):
        response = client.post("/orders", json={"lines": []})
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"


class TestOrderQueries:

    def test_get_order(self, client):
        order_id = place_order(client).json()["order"]["order_id"]

        response = client.get(f"/orders/{order_id}")
        assert response.status_code == 200
        assert response.json()["total"] == "100.00"

    def test_get_order_of_other_customer(self, client):
        order_id = place_order(client).json()["order"]["order_id"]

        response = client.get(f"/orders/{order_id}", params={"customer_id": "cust_2"})
        assert response.status_code == 403
        assert response.json()["error_code"] == "ACCESS_DENIED"

    def test_get_missing_order(self, client):
        response = client.get("/orders/order_missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "ORDER_NOT_FOUND"

    def test_list_customer_orders(self, client):
        first = place_order(client).json()["order"]["order_id"]
        second = place_order(client, lines=[{"product_id": "prod_course", "quantity": 1}]).json()["order"]["order_id"]

        response = client.get("/customers/cust_1/orders")
        assert response.status_code == 200
        assert [item["order_id"] for item in response.json()["items"]] == [second, first]


class TestStatusUpdates:

    def test_walk_through_lifecycle(self, client):
        order_id = place_order(client).json()["order"]["order_id"]

        for target in ("CONFIRMED", "PROCESSING", "SHIPPED", "DELIVERED"):
            response = client.patch(f"/orders/{order_id}/status", json={"status": target})
            assert response.status_code == 200
            assert response.json()["status"] == target

        assert client.get(f"/orders/{order_id}").json()["status"] == "DELIVERED"

    def test_invalid_transition(self, client):
        order_id = place_order(client).json()["order"]["order_id"]

        response = client.patch(f"/orders/{order_id}/status", json={"status": "SHIPPED"})
        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_TRANSITION"

    def test_cancel(self, client):
        order_id = place_order(client).json()["order"]["order_id"]

        response = client.patch(f"/orders/{order_id}/status", json={"status": "CANCELLED"})
        assert response.status_code == 200
        assert response.json()["payment_status"] == "COMPLETED"

    def test_update_missing_order(self, client):
        response = client.patch("/orders/order_missing/status", json={"status": "CONFIRMED"})
        assert response.status_code == 404


class TestObservabilityEndpoints:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["components"]["payments"]["status"] == "healthy"

    def test_metrics(self, client):
        place_order(client)
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "shopflow_orders_created_total" in response.text
