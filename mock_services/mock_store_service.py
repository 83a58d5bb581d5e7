"""
mock_store_service.py — Mock Implementation of the Store Service (gRPC)

This module provides a simulated item and order store for local runs and tests.
It implements the StoreService defined in `protos/store.proto` on top of
an in-memory, lock-protected data set, so the purchase workflow can be exercised
without a real database.

The mock simulates common store-related scenarios:
    • Item lookup, including unknown items (NOT_FOUND)
    • Atomic quantity decrement and atomic decrement-if-available
    • Order creation and update
    • Write failures for items whose name starts with "FAIL-WRITE" (UNAVAILABLE)
    • Locked-down access: calls without the master key are rejected (UNAUTHENTICATED)

Port:
    Default: 50051 (gRPC)
"""

import logging
import os
import threading
import uuid
from concurrent import futures

import grpc

from protos import store_pb2, store_pb2_grpc
from purchase_service.config import MASTER_KEY_METADATA
from purchase_service.models import Item, Order

log = logging.getLogger(__name__)

FAIL_WRITE_PREFIX = "FAIL-WRITE"

DEFAULT_ITEMS = (
    {"name": "Mug", "price": "10.00", "quantityAvailable": 25},
    {"name": "Tshirt", "price": "25.00", "quantityAvailable": 50},
    {"name": "Hoodie", "price": "45.00", "quantityAvailable": 20},
)


class InMemoryStore:
    """
    Thread-safe in-memory item and order tables.

    Records are stored as JSON-compatible dicts and copied on the way in and out,
    so callers never share state with the store.
    """

    def __init__(self, items=DEFAULT_ITEMS):
        self._lock = threading.Lock()
        self.items = {item["name"]: dict(item) for item in items}
        self.orders = {}

    def find_item(self, name: str):
        with self._lock:
            item = self.items.get(name)
            return dict(item) if item else None

    def increment_quantity(self, name: str, amount: int):
        """Adds `amount` to the quantity unconditionally. Returns None for unknown items."""
        with self._lock:
            item = self.items.get(name)
            if item is None:
                return None
            item["quantityAvailable"] += amount
            return dict(item)

    def decrement_if_available(self, name: str):
        """
        Takes one unit only if at least one is left.

        Returns:
            tuple[bool, dict] | None: (reserved, saved item), or None for unknown items.
        """
        with self._lock:
            item = self.items.get(name)
            if item is None:
                return None
            if item["quantityAvailable"] <= 0:
                return False, dict(item)
            item["quantityAvailable"] -= 1
            return True, dict(item)

    def create_order(self, fields: dict) -> dict:
        with self._lock:
            order = dict(fields, objectId=uuid.uuid4().hex)
            self.orders[order["objectId"]] = order
            return dict(order)

    def save_order(self, order: dict):
        with self._lock:
            if order.get("objectId") not in self.orders:
                return None
            self.orders[order["objectId"]] = dict(order)
            return dict(order)

    def get_order(self, object_id: str):
        with self._lock:
            order = self.orders.get(object_id)
            return dict(order) if order else None


class StoreService(store_pb2_grpc.StoreServiceServicer):
    """
    Mock implementation of the StoreService gRPC servicer backed by an InMemoryStore.

    Args:
        store (InMemoryStore): The data set to serve.
        master_key (str): Required value of the `x-master-key` metadata entry.
    """

    def __init__(self, store: InMemoryStore, master_key: str = ""):
        self.store = store
        self.master_key = master_key

    def _authorize(self, context):
        metadata = dict(context.invocation_metadata())
        if metadata.get(MASTER_KEY_METADATA, "") != self.master_key:
            context.abort(grpc.StatusCode.UNAUTHENTICATED, "master key required")

    def _check_writable(self, name: str, context):
        if name.startswith(FAIL_WRITE_PREFIX):
            log.warning(f"[Store] Simulated write failure for {name}.")
            context.abort(grpc.StatusCode.UNAVAILABLE, "simulated write failure")

    def FindItem(self, request, context):
        self._authorize(context)
        item = self.store.find_item(request.name)
        if item is None:
            context.abort(grpc.StatusCode.NOT_FOUND, f"no item named {request.name!r}")
        return Item.model_validate(item).to_proto()

    def DecrementItem(self, request, context):
        self._authorize(context)
        self._check_writable(request.name, context)
        item = self.store.increment_quantity(request.name, -1)
        if item is None:
            context.abort(grpc.StatusCode.NOT_FOUND, f"no item named {request.name!r}")
        log.info(f"[Store] {item['name']}: quantity now {item['quantityAvailable']}.")
        return Item.model_validate(item).to_proto()

    def ReserveItem(self, request, context):
        self._authorize(context)
        self._check_writable(request.name, context)
        result = self.store.decrement_if_available(request.name)
        if result is None:
            context.abort(grpc.StatusCode.NOT_FOUND, f"no item named {request.name!r}")
        reserved, item = result
        log.info(f"[Store] {item['name']}: reserved={reserved}, quantity now {item['quantityAvailable']}.")
        return store_pb2.ReserveItemResponse(reserved=reserved, item=Item.model_validate(item).to_proto())

    def CreateOrder(self, request, context):
        self._authorize(context)
        self._check_writable(request.order.item, context)
        fields = Order.from_proto(request.order).model_dump(mode="json", exclude={"objectId"})
        order = self.store.create_order(fields)
        log.info(f"[Store] Order {order['objectId']} created for {order['email']}.")
        return Order.model_validate(order).to_proto()

    def SaveOrder(self, request, context):
        self._authorize(context)
        self._check_writable(request.order.item, context)
        order = self.store.save_order(Order.from_proto(request.order).model_dump(mode="json"))
        if order is None:
            context.abort(grpc.StatusCode.NOT_FOUND, f"no order {request.order.object_id!r}")
        log.info(f"[Store] Order {order['objectId']} saved (charged={order['charged']}).")
        return Order.model_validate(order).to_proto()

    def GetOrder(self, request, context):
        self._authorize(context)
        order = self.store.get_order(request.object_id)
        if order is None:
            context.abort(grpc.StatusCode.NOT_FOUND, f"no order {request.object_id!r}")
        return Order.model_validate(order).to_proto()


def create_server(store: InMemoryStore, master_key: str = "", address: str = "[::]:50051"):
    """
    Builds (but does not start) a gRPC server serving `store`.

    Returns:
        tuple[grpc.Server, int]: The server and the bound port (useful with port 0).
    """
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=10))
    store_pb2_grpc.add_StoreServiceServicer_to_server(StoreService(store, master_key), server)
    port = server.add_insecure_port(address)
    return server, port


def serve():
    logging.basicConfig(level=logging.INFO)
    master_key = os.environ.get("STORE_MASTER_KEY", "")
    server, port = create_server(InMemoryStore(), master_key)
    log.info(f"Mock Store Service (gRPC) starting on port {port}...")
    server.start()
    server.wait_for_termination()


if __name__ == '__main__':
    serve()
