"""Tests for the FastAPI surface in purchase_service.main."""

import pytest
from fastapi.testclient import TestClient

from purchase_service.main import create_app


@pytest.fixture
def api_client(orchestrator):
    return TestClient(create_app(orchestrator))


@pytest.fixture
def payload():
    return {
        "itemName": "Mug",
        "paymentToken": "tok_visa",
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "address": "12 Analytical St",
        "cityState": "Springfield, IL",
        "zip": "62701",
    }


class TestHealthCheck:
    def test_health(self, api_client):
        response = api_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestPurchaseEndpoint:
    def test_success(self, api_client, payload, store):
        response = api_client.post("/v1/purchases", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Success"
        assert data["receiptDelivered"] is True
        assert data["orderId"] == store.orders()[0].objectId
        assert "failureClass" not in data

    def test_success_without_receipt(self, api_client, payload, mailer):
        mailer.fail = True

        response = api_client.post("/v1/purchases", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Success"
        assert data["receiptDelivered"] is False
        assert data["failureClass"] == "NotificationFailure"
        assert "email" in data["message"]

    def test_unknown_item(self, api_client, payload):
        response = api_client.post("/v1/purchases", json={**payload, "itemName": "Poster"})

        assert response.status_code == 404
        assert response.json() == {
            "status": "Failure",
            "failureClass": "NotFound",
            "message": "Sorry, this item is no longer available.",
        }

    def test_out_of_stock(self, api_client, payload):
        response = api_client.post("/v1/purchases", json={**payload, "itemName": "Hoodie"})

        assert response.status_code == 409
        assert response.json()["failureClass"] == "OutOfStock"

    def test_write_error(self, api_client, payload, store):
        store.fail_on.add("create_order")

        response = api_client.post("/v1/purchases", json=payload)

        assert response.status_code == 503
        assert response.json()["failureClass"] == "TransientWriteError"

    def test_declined(self, api_client, payload, payments, declined):
        payments.error = declined

        response = api_client.post("/v1/purchases", json=payload)

        assert response.status_code == 402
        assert response.json()["failureClass"] == "PaymentDeclined"

    def test_critical(self, api_client, payload, store):
        store.fail_on.add("save_order")

        response = api_client.post("/v1/purchases", json=payload)

        assert response.status_code == 500
        assert response.json()["failureClass"] == "CriticalInconsistency"

    def test_invalid_payload(self, api_client, payload, journal):
        del payload["paymentToken"]

        response = api_client.post("/v1/purchases", json=payload)

        assert response.status_code == 422
        assert journal == []
