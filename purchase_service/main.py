"""
main.py — FastAPI Entry Point for the Purchase Service

This module provides the REST API through which a storefront purchases a single item.
It wires the collaborator clients together once at startup and runs the purchase
workflow synchronously for every request.

Responsibilities:
    • Accept purchase requests via HTTP API
    • Run the purchase workflow (Store → Payment → Store → Mail) and report its outcome
    • Create and close the process-wide collaborator clients
    • Provide system health information
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .clients import MailClient, PaymentClient, StoreClient
from .config import load_settings
from .logging_config import get_logger, setup_logging
from .models import FailureClass, PurchaseOutcome, PurchaseRequest
from .workflow import PurchaseOrchestrator

log = get_logger(__name__)

HTTP_STATUS_BY_FAILURE = {
    FailureClass.NOT_FOUND: 404,
    FailureClass.OUT_OF_STOCK: 409,
    FailureClass.TRANSIENT_WRITE_ERROR: 503,
    FailureClass.PAYMENT_DECLINED: 402,
    FailureClass.CRITICAL_INCONSISTENCY: 500,
}


@asynccontextmanager
async def default_lifespan(app: FastAPI):
    """
    Builds the collaborator clients and the orchestrator from environment settings,
    and closes the clients on shutdown. Clients are never created per request.
    """
    settings = load_settings()
    setup_logging(settings.log_file)
    log.info("Purchase service starting...")

    store = StoreClient(settings)
    payments = PaymentClient(settings)
    mailer = MailClient(settings)
    app.state.orchestrator = PurchaseOrchestrator(store, payments, mailer, settings)
    log.info(f"Collaborators ready (reservation mode: {settings.reservation_mode}).")
    try:
        yield
    finally:
        mailer.close()
        payments.close()
        store.close()
        log.info("Purchase service stopped.")


def create_app(orchestrator: PurchaseOrchestrator = None) -> FastAPI:
    """
    Creates the FastAPI application.

    Args:
        orchestrator (PurchaseOrchestrator, optional): Pre-built orchestrator. When omitted,
            one is built from environment settings on startup.
    """
    if orchestrator is None:
        app = FastAPI(title="Purchase Service", lifespan=default_lifespan)
    else:
        app = FastAPI(title="Purchase Service")
        app.state.orchestrator = orchestrator

    @app.post("/v1/purchases")
    def purchase_item(purchase: PurchaseRequest, request: Request):
        """
        Purchases one unit of an item and charges the buyer's payment token.

        Declared as a plain function so FastAPI runs the blocking workflow in its threadpool.

        Returns:
            JSONResponse: 200 on success (with `receiptDelivered` telling whether the
            receipt email went out); on failure 404/409/503/402/500 depending on the
            failure class, with a customer-facing message.
        """
        outcome = request.app.state.orchestrator.purchase(purchase)
        return to_response(outcome)

    @app.get("/health")
    def health_check():
        """Simple health check endpoint for monitoring systems and container orchestrators."""
        return {"status": "ok"}

    return app


def to_response(outcome: PurchaseOutcome) -> JSONResponse:
    """Maps a purchase outcome onto the HTTP response returned to the storefront."""
    if outcome.success:
        body = {"status": "Success", "receiptDelivered": outcome.receiptDelivered, "orderId": outcome.orderId}
        if not outcome.receiptDelivered:
            body["failureClass"] = outcome.failureClass.value
            body["message"] = outcome.message
        return JSONResponse(status_code=200, content=body)

    return JSONResponse(
        status_code=HTTP_STATUS_BY_FAILURE[outcome.failureClass],
        content={
            "status": "Failure",
            "failureClass": outcome.failureClass.value,
            "message": outcome.message,
        },
    )


app = create_app()
