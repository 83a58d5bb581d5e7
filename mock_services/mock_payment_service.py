"""
mock_payment_service.py — Mock Implementation of the Payment Service (REST API)

This module provides a simulated Payment Service for testing the purchase workflow.
It exposes a simple FastAPI application that mimics real-world card charging behavior.

Simulation Scenarios:
    • Successful payment processing
    • Declined payment (HTTP 402)
    • Timeout simulation (simulates client read timeout)
    • Idempotent replay: a repeated Idempotency-Key returns the original result

Endpoints:
    POST /v2/charges — Handles incoming charge requests.

Port:
    Default: 8001 (HTTP)
"""

import logging
import threading
import time
import uuid

from fastapi import FastAPI, Header, HTTPException
from pydantic import BaseModel, Field

app = FastAPI(title="Mock Payment Service")
log = logging.getLogger(__name__)

TIMEOUT_DELAY_SECONDS = 10

_charges = {}
_charges_lock = threading.Lock()


class ChargeRequest(BaseModel):
    """
    Represents a payment charge request payload.

    Attributes:
        amount (int): Total payment amount in the smallest currency units (e.g., cents).
        currency (str): ISO 4217 currency code (e.g., 'usd').
        paymentToken (str): Payment authorization token.
        referenceId (str): Identifier of the order this charge belongs to.
    """
    amount: int = Field(..., gt=0)
    currency: str
    paymentToken: str
    referenceId: str


@app.post("/v2/charges")
def create_charge(
        request: ChargeRequest,
        idempotency_key: str = Header(..., alias="Idempotency-Key")
):
    """
        Processes a payment charge request.

        This endpoint simulates different payment outcomes based on the provided `paymentToken`:
            - Starts with "tok_decline_" → Payment declined (HTTP 402)
            - Starts with "tok_timeout_" → Simulated timeout (long-running process)
            - Any other token → Successful transaction

        Args:
            request (ChargeRequest): The charge details including amount, currency, token, and referenceId.
            idempotency_key (str): Unique key from the client; repeated keys replay the stored result.

        Returns:
            dict: Payment transaction result on success, including:
                - transactionId (str): Unique transaction identifier.
                - status (str): Always "succeeded" for successful payments.
                - amount (int), currency (str): What was charged.
                - createdAt (str): UTC timestamp of the transaction.

        Raises:
            HTTPException(402): If the payment is declined.
    """
    log.info(f"[PS] Charge request for {request.referenceId} (idempotency key: {idempotency_key})")

    with _charges_lock:
        if idempotency_key in _charges:
            log.info(f"[PS] Replaying stored result for {idempotency_key}.")
            return _charges[idempotency_key]

    if request.paymentToken.startswith("tok_decline_"):
        log.warning(f"[PS] Charge for {request.referenceId} declined.")
        raise HTTPException(
            status_code=402,
            detail={"errorCode": "card_declined", "message": "Your card was declined."}
        )

    if request.paymentToken.startswith("tok_timeout_"):
        log.info(f"[PS] Simulating timeout for {request.referenceId}...")
        time.sleep(TIMEOUT_DELAY_SECONDS)

    result = {
        "transactionId": f"ch_{uuid.uuid4().hex}",
        "status": "succeeded",
        "amount": request.amount,
        "currency": request.currency,
        "createdAt": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
    }
    with _charges_lock:
        result = _charges.setdefault(idempotency_key, result)
    log.info(f"[PS] Charge for {request.referenceId} succeeded ({result['transactionId']}).")
    return result


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8001)
