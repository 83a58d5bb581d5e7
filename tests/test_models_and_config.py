"""Tests for purchase_service.models, purchase_service.config and purchase_service.logging_config."""

import logging
from decimal import Decimal

import pytest
from pydantic import ValidationError

from protos import store_pb2
from purchase_service.config import Settings, load_settings
from purchase_service.logging_config import get_logger, setup_logging
from purchase_service.models import Item, Order, PurchaseOutcome, PurchaseRequest, FailureClass


class TestItem:
    @pytest.mark.parametrize("price, cents", [
        ("10.00", 1000),
        ("19.99", 1999),
        ("0.005", 1),
        ("7", 700),
    ])
    def test_price_in_minor_units(self, price, cents):
        assert Item(name="X", price=price, quantityAvailable=1).price_in_minor_units() == cents

    @pytest.mark.parametrize("quantity, expected", [(1, True), (0, False), (-1, False)])
    def test_in_stock(self, quantity, expected):
        assert Item(name="X", price=Decimal("1"), quantityAvailable=quantity).in_stock is expected

    def test_proto_keeps_exact_price(self):
        message = Item(name="Tshirt", price="19.99", quantityAvailable=-2).to_proto()

        assert message.price == "19.99"
        assert message.quantity_available == -2
        assert Item.from_proto(message).price == Decimal("19.99")

    def test_garbled_proto_price_rejected(self):
        with pytest.raises(ValidationError):
            Item.from_proto(store_pb2.Item(name="Mug", price="ten dollars", quantity_available=1))


class TestPurchaseRequest:
    def test_size_is_optional(self):
        request = PurchaseRequest(
            itemName="Mug", paymentToken="tok", name="A", email="a@example.com",
            address="1 St", cityState="X, Y", zip="1",
        )
        assert request.size is None

    def test_missing_token_rejected(self):
        with pytest.raises(ValidationError):
            PurchaseRequest(
                itemName="Mug", name="A", email="a@example.com",
                address="1 St", cityState="X, Y", zip="1",
            )

    def test_empty_item_name_rejected(self):
        with pytest.raises(ValidationError):
            PurchaseRequest(
                itemName="", paymentToken="tok", name="A", email="a@example.com",
                address="1 St", cityState="X, Y", zip="1",
            )


class TestOrder:
    def test_from_request_starts_unpaid(self):
        request = PurchaseRequest(
            itemName="Hoodie", size="S", paymentToken="tok", name="A", email="a@example.com",
            address="1 St", cityState="X, Y", zip="1",
        )
        item = Item(name="Hoodie", price="45", quantityAvailable=2)

        order = Order.from_request(request, item)

        assert order.item == "Hoodie"
        assert order.size == "S"
        assert order.fulfilled is False
        assert order.charged is False
        assert order.paymentReference is None
        assert order.objectId is None

    def test_unset_fields_travel_as_empty_strings(self):
        order = Order(
            name="A", email="a@example.com", address="1 St", cityState="X, Y", zip="1", item="Mug",
        )

        message = order.to_proto()

        assert message.object_id == ""
        assert message.payment_reference == ""
        assert message.size == "N/A"
        assert Order.from_proto(message) == order

    def test_proto_carries_charge(self):
        message = store_pb2.Order(
            object_id="o1", name="A", email="a@example.com", address="1 St", city_state="X, Y",
            zip="1", item="Mug", charged=True, payment_reference="ch_1",
        )

        order = Order.from_proto(message)

        assert order.objectId == "o1"
        assert order.cityState == "X, Y"
        assert order.charged is True
        assert order.paymentReference == "ch_1"


class TestPurchaseOutcome:
    def test_receipt_caveat_is_success(self):
        outcome = PurchaseOutcome.succeeded_without_receipt("no mail", "o1")

        assert outcome.success is True
        assert outcome.receiptDelivered is False
        assert outcome.failureClass == FailureClass.NOTIFICATION_FAILURE

    def test_failed(self):
        outcome = PurchaseOutcome.failed(FailureClass.OUT_OF_STOCK, "gone")

        assert outcome.success is False
        assert outcome.receiptDelivered is False
        assert outcome.message == "gone"


class TestSettings:
    def test_defaults(self):
        settings = load_settings({})

        assert settings.store_service_url == "store_service:50051"
        assert settings.payment_service_url == "http://payment_service:8001"
        assert settings.mail_queue == "mail.outbound"
        assert settings.currency == "usd"
        assert settings.reservation_mode == "atomic"
        assert settings.rpc_timeout_seconds == 5.0

    def test_environment_overrides(self):
        settings = load_settings({
            "STORE_SERVICE_URL": "localhost:6000",
            "STORE_MASTER_KEY": "secret",
            "CURRENCY": "EUR",
            "RESERVATION_MODE": "Recheck",
            "PAYMENT_READ_TIMEOUT_SECONDS": "2.5",
            "LOG_FILE": "",
        })

        assert settings.store_service_url == "localhost:6000"
        assert settings.store_master_key == "secret"
        assert settings.currency == "eur"
        assert settings.reservation_mode == "recheck"
        assert settings.payment_read_timeout_seconds == 2.5
        assert settings.log_file == ""

    def test_unknown_reservation_mode(self):
        with pytest.raises(ValueError):
            load_settings({"RESERVATION_MODE": "optimistic"})

    def test_bad_number(self):
        with pytest.raises(ValueError):
            load_settings({"RPC_TIMEOUT_SECONDS": "soon"})

    def test_direct_construction_validates(self):
        with pytest.raises(ValueError):
            Settings(reservation_mode="none")


class TestLogging:
    def test_quietens_client_libraries(self, tmp_path):
        setup_logging(str(tmp_path / "purchase.log"))

        assert logging.getLogger("pika").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_get_logger(self):
        assert get_logger("purchase_service.workflow") is logging.getLogger("purchase_service.workflow")
