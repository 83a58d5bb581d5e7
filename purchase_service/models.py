"""
models.py — Data Models for Purchase Processing

This module defines the data structures used for purchase requests, the store
records the workflow reads and writes, and the outcome returned to the caller.
It uses Pydantic models to ensure type safety and automatic validation of incoming data.

Models:
    - PurchaseRequest: The purchase payload received from the storefront.
    - Item: A purchasable item as held by the item store.
    - Order: An order record as held by the order store.
    - PurchaseOutcome: The classified result of one purchase attempt.
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from protos import store_pb2

NOT_APPLICABLE_SIZE = "N/A"


class FailureClass(str, Enum):
    """Failure classes in ascending severity."""
    NOT_FOUND = "NotFound"
    OUT_OF_STOCK = "OutOfStock"
    TRANSIENT_WRITE_ERROR = "TransientWriteError"
    PAYMENT_DECLINED = "PaymentDeclined"
    CRITICAL_INCONSISTENCY = "CriticalInconsistency"
    NOTIFICATION_FAILURE = "NotificationFailure"


class PurchaseRequest(BaseModel):
    """
    Represents a purchase request submitted by a buyer.

    Attributes:
        itemName (str): Name of the item to buy, e.g. "Mug", "Tshirt" or "Hoodie".
        size (str, optional): Size for sized items; omitted for items like the mug.
        paymentToken (str): Opaque token of a pre-authorized payment instrument.
        name (str): The buyer's name.
        email (str): The buyer's email address, receives the receipt.
        address (str): The buyer's street address.
        cityState (str): The buyer's city and state.
        zip (str): The buyer's zip code.
    """
    itemName: str = Field(..., min_length=1)
    size: Optional[str] = None
    paymentToken: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    cityState: str = Field(..., min_length=1)
    zip: str = Field(..., min_length=1)


class Item(BaseModel):
    """
    A purchasable item.

    Attributes:
        name (str): Unique lookup key.
        price (Decimal): Price in major currency units (e.g. dollars).
        quantityAvailable (int): Units left. Negative means oversold, never available.
    """
    name: str
    price: Decimal
    quantityAvailable: int

    @property
    def in_stock(self) -> bool:
        return self.quantityAvailable > 0

    def price_in_minor_units(self) -> int:
        """Converts the price to the smallest currency unit (cents), rounding half up."""
        return int((self.price * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @classmethod
    def from_proto(cls, message: store_pb2.Item) -> "Item":
        return cls(name=message.name, price=message.price, quantityAvailable=message.quantity_available)

    def to_proto(self) -> store_pb2.Item:
        return store_pb2.Item(name=self.name, price=str(self.price), quantity_available=self.quantityAvailable)


class Order(BaseModel):
    """
    An order record. Created unpaid before any money moves.

    `item` holds the name of the referenced Item; the order never owns the item.
    `objectId` is assigned by the order store on creation.
    """
    objectId: Optional[str] = None
    name: str
    email: str
    address: str
    cityState: str
    zip: str
    size: str = NOT_APPLICABLE_SIZE
    item: str
    fulfilled: bool = False
    charged: bool = False
    paymentReference: Optional[str] = None

    @classmethod
    def from_request(cls, request: PurchaseRequest, item: Item) -> "Order":
        return cls(
            name=request.name,
            email=request.email,
            address=request.address,
            cityState=request.cityState,
            zip=request.zip,
            size=request.size or NOT_APPLICABLE_SIZE,
            item=item.name,
        )

    @classmethod
    def from_proto(cls, message: store_pb2.Order) -> "Order":
        """Empty strings on the wire mean "unset" for objectId and paymentReference."""
        return cls(
            objectId=message.object_id or None,
            name=message.name,
            email=message.email,
            address=message.address,
            cityState=message.city_state,
            zip=message.zip,
            size=message.size or NOT_APPLICABLE_SIZE,
            item=message.item,
            fulfilled=message.fulfilled,
            charged=message.charged,
            paymentReference=message.payment_reference or None,
        )

    def to_proto(self) -> store_pb2.Order:
        return store_pb2.Order(
            object_id=self.objectId or "",
            name=self.name,
            email=self.email,
            address=self.address,
            city_state=self.cityState,
            zip=self.zip,
            size=self.size,
            item=self.item,
            fulfilled=self.fulfilled,
            charged=self.charged,
            payment_reference=self.paymentReference or "",
        )


class PurchaseOutcome(BaseModel):
    """
    Result of one purchase attempt.

    A successful purchase whose receipt could not be delivered is still a success;
    it carries `receiptDelivered=False` and the NotificationFailure class as a caveat.
    """
    success: bool
    message: str
    failureClass: Optional[FailureClass] = None
    receiptDelivered: bool = False
    orderId: Optional[str] = None

    @classmethod
    def succeeded(cls, order_id: Optional[str] = None) -> "PurchaseOutcome":
        return cls(success=True, message="Success", receiptDelivered=True, orderId=order_id)

    @classmethod
    def succeeded_without_receipt(cls, message: str, order_id: Optional[str] = None) -> "PurchaseOutcome":
        return cls(
            success=True,
            message=message,
            failureClass=FailureClass.NOTIFICATION_FAILURE,
            receiptDelivered=False,
            orderId=order_id,
        )

    @classmethod
    def failed(cls, failure_class: FailureClass, message: str) -> "PurchaseOutcome":
        return cls(success=False, message=message, failureClass=failure_class)
