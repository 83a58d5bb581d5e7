"""
Pytest configuration and shared fixtures for purchase workflow tests.

The fakes stand in for the collaborator clients. They expose the same methods and
raise the same CollaboratorError subclasses, record every call in a shared journal
(so tests can assert call order), and can be told to fail at a given operation.
"""

import pytest

from mock_services.mock_store_service import InMemoryStore
from purchase_service.config import Settings
from purchase_service.errors import NotificationError, PaymentError, StoreError
from purchase_service.models import Item, Order, PurchaseRequest
from purchase_service.workflow import PurchaseOrchestrator


class FakeStore:
    """Item/order store backed by the mock service's InMemoryStore."""

    def __init__(self, journal, items=()):
        self.journal = journal
        self.data = InMemoryStore(items)
        self.fail_on = set()

    def _enter(self, operation):
        self.journal.append(operation)
        if operation in self.fail_on:
            raise StoreError(operation, "UNAVAILABLE - simulated")

    def find_item(self, name):
        self._enter("find_item")
        record = self.data.find_item(name)
        return Item.model_validate(record) if record else None

    def decrement_item(self, item):
        self._enter("decrement_item")
        return Item.model_validate(self.data.increment_quantity(item.name, -1))

    def reserve_item(self, item):
        self._enter("reserve_item")
        reserved, record = self.data.decrement_if_available(item.name)
        return Item.model_validate(record) if reserved else None

    def create_order(self, order):
        self._enter("create_order")
        return Order.model_validate(self.data.create_order(order.model_dump(mode="json", exclude={"objectId"})))

    def save_order(self, order):
        self._enter("save_order")
        return Order.model_validate(self.data.save_order(order.model_dump(mode="json")))

    def quantity(self, name):
        return self.data.find_item(name)["quantityAvailable"]

    def orders(self):
        return [Order.model_validate(record) for record in self.data.orders.values()]


class FakePayments:
    def __init__(self, journal):
        self.journal = journal
        self.charges = []
        self.error = None

    def create_charge(self, order_id, token, amount_cents, currency):
        self.journal.append("create_charge")
        if self.error is not None:
            raise self.error
        self.charges.append({"order_id": order_id, "token": token, "amount": amount_cents, "currency": currency})
        return {"transactionId": f"ch_{len(self.charges)}", "status": "succeeded"}


class FakeMailer:
    def __init__(self, journal):
        self.journal = journal
        self.sent = []
        self.fail = False

    def send_email(self, to, sender, subject, body):
        self.journal.append("send_email")
        if self.fail:
            raise NotificationError("mail queue unavailable")
        self.sent.append({"to": to, "from": sender, "subject": subject, "text": body})


@pytest.fixture
def journal():
    return []


@pytest.fixture
def store(journal):
    return FakeStore(journal, items=[
        {"name": "Mug", "price": "10.00", "quantityAvailable": 1},
        {"name": "Tshirt", "price": "19.99", "quantityAvailable": 5},
        {"name": "Hoodie", "price": "45.00", "quantityAvailable": 0},
    ])


@pytest.fixture
def payments(journal):
    return FakePayments(journal)


@pytest.fixture
def mailer(journal):
    return FakeMailer(journal)


@pytest.fixture
def settings():
    return Settings(store_email="store@example.com", store_name="Shop", log_file="")


@pytest.fixture
def orchestrator(store, payments, mailer, settings):
    return PurchaseOrchestrator(store, payments, mailer, settings)


@pytest.fixture
def make_request():
    def _make(**overrides):
        fields = {
            "itemName": "Mug",
            "paymentToken": "tok_visa",
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "address": "12 Analytical St",
            "cityState": "Springfield, IL",
            "zip": "62701",
        }
        fields.update(overrides)
        return PurchaseRequest(**fields)
    return _make


@pytest.fixture
def declined():
    return PaymentError("declined", status_code=402, declined=True)
