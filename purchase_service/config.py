"""
config.py — Runtime Configuration for the Purchase Service

All settings are read from environment variables once at startup and grouped
into a single `Settings` object, which is then handed to the collaborator
clients and the orchestrator. Nothing reads the environment per request.
"""

import os
from dataclasses import dataclass

RESERVATION_MODES = ("atomic", "recheck")

# gRPC metadata entry carrying the store master key
MASTER_KEY_METADATA = "x-master-key"


@dataclass
class Settings:
    """Process-wide configuration for the purchase service and its collaborators."""
    # Store (gRPC)
    store_service_url: str = "store_service:50051"
    store_master_key: str = ""
    rpc_timeout_seconds: float = 5.0

    # Payment Service (REST)
    payment_service_url: str = "http://payment_service:8001"
    payment_connect_timeout_seconds: float = 5.0
    payment_read_timeout_seconds: float = 8.0
    currency: str = "usd"

    # Mail queue (RabbitMQ)
    rabbitmq_host: str = "localhost"
    rabbitmq_user: str = "shop"
    rabbitmq_password: str = "shop"
    mail_queue: str = "mail.outbound"
    mq_socket_timeout_seconds: float = 5.0

    # Store identity used in receipts and customer-facing messages
    store_email: str = "store@example.com"
    store_name: str = "Shop"

    reservation_mode: str = "atomic"
    log_file: str = "purchase_processing.log"

    def __post_init__(self):
        if self.reservation_mode not in RESERVATION_MODES:
            raise ValueError(
                f"RESERVATION_MODE must be one of {RESERVATION_MODES}, got {self.reservation_mode!r}"
            )


def load_settings(environ=None) -> Settings:
    """
    Builds a `Settings` instance from environment variables.

    Args:
        environ (Mapping[str, str], optional): Source of variables. Defaults to `os.environ`.

    Returns:
        Settings: The populated configuration.

    Raises:
        ValueError: If a numeric variable cannot be parsed or RESERVATION_MODE is unknown.
    """
    env = os.environ if environ is None else environ
    defaults = Settings()
    return Settings(
        store_service_url=env.get("STORE_SERVICE_URL", defaults.store_service_url),
        store_master_key=env.get("STORE_MASTER_KEY", defaults.store_master_key),
        rpc_timeout_seconds=float(env.get("RPC_TIMEOUT_SECONDS", defaults.rpc_timeout_seconds)),
        payment_service_url=env.get("PAYMENT_SERVICE_URL", defaults.payment_service_url),
        payment_connect_timeout_seconds=float(
            env.get("PAYMENT_CONNECT_TIMEOUT_SECONDS", defaults.payment_connect_timeout_seconds)
        ),
        payment_read_timeout_seconds=float(
            env.get("PAYMENT_READ_TIMEOUT_SECONDS", defaults.payment_read_timeout_seconds)
        ),
        currency=env.get("CURRENCY", defaults.currency).lower(),
        rabbitmq_host=env.get("RABBITMQ_HOST", defaults.rabbitmq_host),
        rabbitmq_user=env.get("RABBITMQ_USER", defaults.rabbitmq_user),
        rabbitmq_password=env.get("RABBITMQ_PASSWORD", defaults.rabbitmq_password),
        mail_queue=env.get("MAIL_QUEUE", defaults.mail_queue),
        mq_socket_timeout_seconds=float(
            env.get("MQ_SOCKET_TIMEOUT_SECONDS", defaults.mq_socket_timeout_seconds)
        ),
        store_email=env.get("STORE_EMAIL", defaults.store_email),
        store_name=env.get("STORE_NAME", defaults.store_name),
        reservation_mode=env.get("RESERVATION_MODE", defaults.reservation_mode).lower(),
        log_file=env.get("LOG_FILE", defaults.log_file),
    )
