"""
workflow.py — Core Orchestration Logic for Purchase Processing

This module contains the purchase workflow for a single item bought by a single buyer.
It coordinates the store, the payment service and the mail queue in a fixed sequence:

1. Look up the item by name (Store, gRPC)
2. Reserve one unit of stock (Store, gRPC)
3. Create the order record, unpaid (Store, gRPC)
4. Charge the payment token (Payment Service, REST)
5. Mark the order as charged (Store, gRPC)
6. Email a receipt to the buyer (Mail queue, RabbitMQ)

Each stage converts the error of its own external call into a classified StageFailure
right at the call site; the first failure ends the workflow. Nothing is compensated:
stock taken in stage 2 is not returned when a later stage fails, and a charge that
cannot be recorded in stage 5 is reported for manual reconciliation.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from .config import Settings
from .errors import NotificationError, PaymentError, StageFailure, StoreError
from .models import NOT_APPLICABLE_SIZE, FailureClass, Item, Order, PurchaseOutcome, PurchaseRequest

log = logging.getLogger(__name__)

MSG_UNAVAILABLE = "Sorry, this item is no longer available."
MSG_OUT_OF_STOCK = "Sorry, this item is out of stock."
MSG_NOT_CHARGED = "An error has occurred. Your credit card was not charged."


@dataclass
class PurchaseContext:
    """State carried forward from stage to stage within one purchase."""
    purchase_id: str
    request: PurchaseRequest
    item: Optional[Item] = None
    order: Optional[Order] = None
    payment_reference: Optional[str] = None

    @property
    def log_prefix(self) -> str:
        return f"[Purchase: {self.purchase_id}]"


class PurchaseOrchestrator:
    """
    Runs the purchase workflow. Holds no per-request state; one instance serves the process.

    Args:
        store: Item and order store (see `clients.StoreClient`).
        payments: Payment gateway (see `clients.PaymentClient`).
        mailer: Receipt email sender (see `clients.MailClient`).
        settings (Settings): Currency, store identity and reservation mode.
    """

    def __init__(self, store, payments, mailer, settings: Settings):
        self.store = store
        self.payments = payments
        self.mailer = mailer
        self.settings = settings
        self.stages = (
            self.lookup_item,
            self.reserve_inventory,
            self.create_order,
            self.capture_payment,
            self.confirm_order,
        )

    @property
    def critical_message(self) -> str:
        return (
            f"A critical error has occurred with your order. Please contact "
            f"{self.settings.store_email} at your earliest convenience."
        )

    @property
    def receipt_failed_message(self) -> str:
        return (
            f"Your purchase was successful, but we were not able to send you an email. "
            f"Contact us at {self.settings.store_email} if you have any questions."
        )

    def purchase(self, request: PurchaseRequest) -> PurchaseOutcome:
        """
        Executes the complete purchase workflow for one request.

        Args:
            request (PurchaseRequest): Validated purchase payload.

        Returns:
            PurchaseOutcome: Success (possibly with an undelivered receipt) or the
            classified failure of the first stage that failed.
        """
        ctx = PurchaseContext(purchase_id=uuid.uuid4().hex[:12], request=request)
        log.info(f"{ctx.log_prefix} Starting purchase of '{request.itemName}' for {request.email}.")

        try:
            for stage in self.stages:
                stage(ctx)
        except StageFailure as failure:
            log.info(f"{ctx.log_prefix} Purchase aborted: {failure.failure_class.value}.")
            return PurchaseOutcome.failed(failure.failure_class, failure.message)

        order_id = ctx.order.objectId
        if not self.send_receipt(ctx):
            return PurchaseOutcome.succeeded_without_receipt(self.receipt_failed_message, order_id)

        log.info(f"{ctx.log_prefix} Purchase completed (order {order_id}).")
        return PurchaseOutcome.succeeded(order_id)

    # --- 1. Item Lookup ---
    def lookup_item(self, ctx: PurchaseContext):
        try:
            item = self.store.find_item(ctx.request.itemName)
        except StoreError as e:
            log.error(f"{ctx.log_prefix} Item lookup failed: {e}")
            raise StageFailure(FailureClass.NOT_FOUND, MSG_UNAVAILABLE) from e

        if item is None:
            log.warning(f"{ctx.log_prefix} Item '{ctx.request.itemName}' does not exist.")
            raise StageFailure(FailureClass.NOT_FOUND, MSG_UNAVAILABLE)
        ctx.item = item

    # --- 2. Inventory Reservation ---
    def reserve_inventory(self, ctx: PurchaseContext):
        if not ctx.item.in_stock:
            log.warning(f"{ctx.log_prefix} '{ctx.item.name}' is out of stock.")
            raise StageFailure(FailureClass.OUT_OF_STOCK, MSG_OUT_OF_STOCK)

        try:
            if self.settings.reservation_mode == "atomic":
                saved = self.store.reserve_item(ctx.item)
            else:
                saved = self.store.decrement_item(ctx.item)
        except StoreError as e:
            log.error(f"{ctx.log_prefix} Decrementing quantity failed: {e}")
            raise StageFailure(FailureClass.TRANSIENT_WRITE_ERROR, MSG_NOT_CHARGED) from e

        # A concurrent purchase took the last unit between lookup and write.
        # Exactly 0 is fine: this purchase took the last one.
        if saved is None or saved.quantityAvailable < 0:
            log.warning(f"{ctx.log_prefix} Lost the race for the last unit of '{ctx.item.name}'.")
            raise StageFailure(FailureClass.OUT_OF_STOCK, MSG_OUT_OF_STOCK)

        ctx.item = saved
        log.info(f"{ctx.log_prefix} Reserved one '{saved.name}' ({saved.quantityAvailable} left).")

    # --- 3. Order Creation ---
    def create_order(self, ctx: PurchaseContext):
        try:
            ctx.order = self.store.create_order(Order.from_request(ctx.request, ctx.item))
        except StoreError as e:
            # The reserved unit is not returned to stock.
            log.error(f"{ctx.log_prefix} Creating order failed: {e}")
            raise StageFailure(FailureClass.TRANSIENT_WRITE_ERROR, MSG_NOT_CHARGED) from e
        log.info(f"{ctx.log_prefix} Order {ctx.order.objectId} created, not yet charged.")

    # --- 4. Payment Capture ---
    def capture_payment(self, ctx: PurchaseContext):
        amount_cents = ctx.item.price_in_minor_units()
        log.info(f"{ctx.log_prefix} Charging {amount_cents} {self.settings.currency} for order {ctx.order.objectId}.")
        try:
            result = self.payments.create_charge(
                order_id=ctx.order.objectId,
                token=ctx.request.paymentToken,
                amount_cents=amount_cents,
                currency=self.settings.currency,
            )
        except PaymentError as e:
            log.error(f"{ctx.log_prefix} Charge for order {ctx.order.objectId} failed: {e}")
            raise StageFailure(FailureClass.PAYMENT_DECLINED, MSG_NOT_CHARGED) from e

        ctx.payment_reference = result["transactionId"]
        log.info(f"{ctx.log_prefix} Payment succeeded (TxID: {ctx.payment_reference}).")

    # --- 5. Order Confirmation ---
    def confirm_order(self, ctx: PurchaseContext):
        ctx.order.charged = True
        ctx.order.paymentReference = ctx.payment_reference
        try:
            ctx.order = self.store.save_order(ctx.order)
        except Exception as e:
            # Any failure here leaves a charged card behind an order that says charged=false.
            # The buyer has to contact support so the payment can be matched by hand.
            log.critical(
                f"{ctx.log_prefix} CRITICAL: order {ctx.order.objectId} was charged "
                f"(TxID: {ctx.payment_reference}) but could not be marked as charged: {e}. "
                f"MANUAL RECONCILIATION REQUIRED!",
                exc_info=not isinstance(e, StoreError),
            )
            raise StageFailure(FailureClass.CRITICAL_INCONSISTENCY, self.critical_message) from e
        log.info(f"{ctx.log_prefix} Order {ctx.order.objectId} marked as charged.")

    # --- 6. Notification ---
    def send_receipt(self, ctx: PurchaseContext) -> bool:
        """Emails the receipt. Returns False if it could not be sent; the purchase stands either way."""
        request = ctx.request
        try:
            self.mailer.send_email(
                to=request.email,
                sender=self.settings.store_email,
                subject=f"Your order for a {self.settings.store_name} {request.itemName} was successful!",
                body=compose_receipt(request, ctx.item, self.settings.store_name),
            )
        except NotificationError as e:
            log.warning(f"{ctx.log_prefix} Receipt for order {ctx.order.objectId} not delivered: {e}")
            return False
        except Exception as e:
            # The purchase is already paid and recorded; only the receipt is lost.
            log.error(f"{ctx.log_prefix} Receipt for order {ctx.order.objectId} failed unexpectedly: {e!r}", exc_info=True)
            return False
        return True


def compose_receipt(request: PurchaseRequest, item: Item, store_name: str) -> str:
    """Builds the plain-text receipt body for a completed purchase."""
    lines = [
        "We've received and processed your order for the following item:",
        "",
        f"Item: {request.itemName}",
    ]
    if request.size and request.size != NOT_APPLICABLE_SIZE:
        lines.append(f"Size: {request.size}")
    lines += [
        "",
        f"Price: ${item.price:.2f}",
        "Shipping Address:",
        request.name,
        request.address,
        f"{request.cityState}, United States, {request.zip}",
        "",
        "We will send your item as soon as possible. Let us know if you have any questions!",
        "",
        "Thank you,",
        f"The {store_name} Team",
    ]
    return "\n".join(lines)
