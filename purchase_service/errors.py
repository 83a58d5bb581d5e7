"""Exceptions raised by the purchase service and its collaborator clients."""

from typing import Optional

from .models import FailureClass


class PurchaseServiceError(Exception):
    """Base exception for all purchase service errors."""

    pass


class CollaboratorError(PurchaseServiceError):
    """Raised by a client when a call to an external system fails."""

    pass


class StoreError(CollaboratorError):
    """Raised when the item/order store rejects or fails a call."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Store call {operation} failed: {detail}")


class PaymentError(CollaboratorError):
    """
    Raised when a charge could not be created.

    `declined` is True when the gateway answered and refused the charge (HTTP 402).
    Otherwise the outcome of the charge is unknown to the caller (timeout, 5xx, network).
    """

    def __init__(self, detail: str, status_code: Optional[int] = None, declined: bool = False):
        self.detail = detail
        self.status_code = status_code
        self.declined = declined
        super().__init__(f"Payment failed: {detail}")


class NotificationError(CollaboratorError):
    """Raised when a receipt email could not be handed to the mail queue."""

    pass


class StageFailure(PurchaseServiceError):
    """A purchase stage failed; carries the classified, customer-facing outcome."""

    def __init__(self, failure_class: FailureClass, message: str):
        self.failure_class = failure_class
        self.message = message
        super().__init__(f"{failure_class.value}: {message}")
