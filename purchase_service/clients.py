"""
This module provides communication clients for the external systems used by the purchase service:
- Store Service for items and orders (gRPC)
- Payment Service (REST API)
- Mail queue for receipt emails (RabbitMQ)
Each class encapsulates its protocol logic, error handling, and connection management.
Library errors are logged at the call site and re-raised as CollaboratorError subclasses.
"""

import json
import logging
import threading
from typing import Optional

import grpc
import httpx
import pika
from pydantic import ValidationError

from protos import store_pb2, store_pb2_grpc

from .config import MASTER_KEY_METADATA, Settings
from .errors import NotificationError, PaymentError, StoreError
from .models import Item, Order

log = logging.getLogger(__name__)


# --- Store Client (gRPC) ---
class StoreClient:
    """
    Client for the Store Service (gRPC).
    Serves as both the item store and the order store of the purchase workflow.
    """
    def __init__(self, settings: Settings, channel: Optional[grpc.Channel] = None):
        """
        Initializes the gRPC channel and stub for the Store Service.

        Args:
            settings (Settings): Provides the service address, master key and call timeout.
            channel (grpc.Channel, optional): Pre-built channel, mainly for tests.
        """
        self.channel = channel or grpc.insecure_channel(settings.store_service_url)
        self.stub = store_pb2_grpc.StoreServiceStub(self.channel)
        self.timeout = settings.rpc_timeout_seconds
        self.metadata = ((MASTER_KEY_METADATA, settings.store_master_key),) if settings.store_master_key else None

    def close(self):
        self.channel.close()

    def _call(self, method: str, request):
        """
        Invokes a StoreService method with the master key and timeout applied.

        Returns:
            The response message, or None if the store answered NOT_FOUND.
        Raises:
            StoreError: On any other gRPC failure, including deadline exceeded.
        """
        try:
            return getattr(self.stub, method)(request, timeout=self.timeout, metadata=self.metadata)
        except grpc.RpcError as e:
            if e.code() == grpc.StatusCode.NOT_FOUND:
                return None
            log.error(f"gRPC call {method} to store failed: {e.code()} - {e.details()}")
            raise StoreError(method, f"{e.code()} - {e.details()}") from e

    @staticmethod
    def _convert(method: str, convert, message):
        """Turns a response message into a model. An invalid record is a failed call."""
        try:
            return convert(message)
        except ValidationError as e:
            log.error(f"Store returned an invalid record for {method}: {e.error_count()} validation error(s)")
            raise StoreError(method, f"invalid response: {e.errors()[0]['msg']}") from e

    def find_item(self, name: str) -> Optional[Item]:
        """Looks up an item by its unique name. Returns None if there is no such item."""
        response = self._call("FindItem", store_pb2.FindItemRequest(name=name))
        if response is None:
            return None
        return self._convert("FindItem", Item.from_proto, response)

    def decrement_item(self, item: Item) -> Item:
        """
        Atomically increments the item's quantity by -1 and returns the saved item.
        The saved quantity may be negative if concurrent purchases took the last units.
        """
        response = self._call("DecrementItem", store_pb2.DecrementItemRequest(name=item.name))
        if response is None:
            raise StoreError("DecrementItem", f"item {item.name!r} vanished")
        return self._convert("DecrementItem", Item.from_proto, response)

    def reserve_item(self, item: Item) -> Optional[Item]:
        """
        Atomically decrements the item's quantity only if at least one unit is available.

        Returns:
            Item | None: The saved item, or None if nothing was reserved.
        """
        response = self._call("ReserveItem", store_pb2.ReserveItemRequest(name=item.name))
        if response is None:
            raise StoreError("ReserveItem", f"item {item.name!r} vanished")
        if not response.reserved:
            return None
        return self._convert("ReserveItem", Item.from_proto, response.item)

    def create_order(self, order: Order) -> Order:
        """Persists a new order and returns it with the store-assigned objectId."""
        request = store_pb2.CreateOrderRequest(order=order.model_copy(update={"objectId": None}).to_proto())
        response = self._call("CreateOrder", request)
        if response is None or not response.object_id:
            raise StoreError("CreateOrder", "store returned no order")
        return self._convert("CreateOrder", Order.from_proto, response)

    def save_order(self, order: Order) -> Order:
        """Overwrites an existing order record."""
        response = self._call("SaveOrder", store_pb2.SaveOrderRequest(order=order.to_proto()))
        if response is None:
            raise StoreError("SaveOrder", f"order {order.objectId} not found")
        saved = self._convert("SaveOrder", Order.from_proto, response)
        if saved.objectId != order.objectId or saved.charged != order.charged:
            raise StoreError("SaveOrder", f"store echoed a different record for order {order.objectId}")
        return saved

    def get_order(self, object_id: str) -> Optional[Order]:
        response = self._call("GetOrder", store_pb2.GetOrderRequest(object_id=object_id))
        if response is None:
            return None
        return self._convert("GetOrder", Order.from_proto, response)


# --- Payment Client (REST) ---
class PaymentClient:
    """
    Client for the Payment Service (REST API).
    Handles the creation of payment charges and error responses.
    """
    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None):
        """
        Initializes the HTTP client with proper timeout configuration.

        Args:
            settings (Settings): Provides base URL and timeouts.
            transport (httpx.BaseTransport, optional): Custom transport, mainly for tests.
        """
        timeout_config = httpx.Timeout(
            settings.payment_connect_timeout_seconds,
            read=settings.payment_read_timeout_seconds,
        )
        self.client = httpx.Client(
            base_url=settings.payment_service_url,
            timeout=timeout_config,
            transport=transport,
        )

    def close(self):
        """Closes the HTTP client session."""
        self.client.close()

    def create_charge(self, order_id: str, token: str, amount_cents: int, currency: str) -> dict:
        """
        Creates a new charge via the Payment Service REST API.
        Args:
            order_id (str): Order the charge belongs to; also used as idempotency key.
            token (str): Payment token provided by the buyer's client.
            amount_cents (int): Charge amount in cents.
            currency (str): ISO currency code (e.g. 'usd').
        Returns:
            dict: JSON response containing at least 'transactionId'.
        Raises:
            PaymentError: If the charge was declined, timed out, or failed otherwise.
        """
        payload = {
            "amount": amount_cents,
            "currency": currency,
            "paymentToken": token,
            "referenceId": order_id
        }
        headers = {"Idempotency-Key": f"purchase-{order_id}"}

        try:
            response = self.client.post("/v2/charges", json=payload, headers=headers)
            response.raise_for_status()
            result = response.json()
        except httpx.TimeoutException as e:
            # Status of the charge is unknown here. A retry with the same idempotency key is safe.
            log.error(f"[Order: {order_id}] Payment Service timeout. Charge status unknown.")
            raise PaymentError(f"timeout: {e}") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 402:
                log.warning(f"[Order: {order_id}] Payment declined: {e.response.text}")
                raise PaymentError("declined", status_code=status, declined=True) from e
            log.error(f"[Order: {order_id}] HTTP error from Payment Service: {e}")
            raise PaymentError(f"HTTP {status}", status_code=status) from e
        except httpx.HTTPError as e:
            log.error(f"[Order: {order_id}] Payment Service unreachable: {e}")
            raise PaymentError(str(e)) from e
        except ValueError as e:
            log.error(f"[Order: {order_id}] Payment Service returned invalid JSON: {e}")
            raise PaymentError("invalid response body") from e

        if not isinstance(result, dict) or not result.get("transactionId"):
            log.error(f"[Order: {order_id}] Payment Service response without transactionId: {result}")
            raise PaymentError("response without transactionId", status_code=response.status_code)
        return result


# --- Mail Client (MQ) ---
class MailClient:
    """
    Client for the receipt mail queue (RabbitMQ).
    Publishes email messages for the mailer and manages the MQ connection.
    """
    def __init__(self, settings: Settings):
        """Stores connection parameters. The connection is opened on first use."""
        self.settings = settings
        self.connection = None
        self.channel = None
        self._lock = threading.Lock()

    def _connect(self):
        """
        Establishes a RabbitMQ connection and declares the mail queue.
        Raises:
            pika.exceptions.AMQPConnectionError: If the connection fails.
        """
        credentials = pika.PlainCredentials(self.settings.rabbitmq_user, self.settings.rabbitmq_password)
        self.connection = pika.BlockingConnection(
            pika.ConnectionParameters(
                host=self.settings.rabbitmq_host,
                credentials=credentials,
                heartbeat=60,
                socket_timeout=self.settings.mq_socket_timeout_seconds,
                blocked_connection_timeout=self.settings.mq_socket_timeout_seconds,
            )
        )
        self.channel = self.connection.channel()
        self.channel.queue_declare(queue=self.settings.mail_queue, durable=True)
        log.info("Mail client connected to RabbitMQ.")

    def send_email(self, to: str, sender: str, subject: str, body: str):
        """
        Publishes a persistent email message to the mail queue.
        Args:
            to (str): Recipient address.
            sender (str): From address.
            subject (str): Subject line.
            body (str): Plain-text body.
        Raises:
            NotificationError: If connecting or publishing fails.
        """
        message = {"to": to, "from": sender, "subject": subject, "text": body}
        with self._lock:
            try:
                if not self.connection or self.connection.is_closed:
                    self._connect()

                self.channel.basic_publish(
                    exchange='',
                    routing_key=self.settings.mail_queue,
                    body=json.dumps(message),
                    properties=pika.BasicProperties(delivery_mode=2, content_type="application/json")
                )
            except pika.exceptions.AMQPError as e:
                log.error(f"Publishing receipt email to {to} failed: {e!r}")
                self.connection = None
                self.channel = None
                raise NotificationError(f"mail queue unavailable: {e!r}") from e
        log.info(f"Receipt email to {to} queued.")

    def close(self):
        if self.connection and self.connection.is_open:
            self.connection.close()
