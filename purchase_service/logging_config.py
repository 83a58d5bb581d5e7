"""Root logging setup for the purchase service, applied once from the app lifespan."""

import logging
import sys

# PID tag: uvicorn may run several workers writing to one file.
LOG_FORMAT = '%(asctime)s - %(levelname)s - [PID:%(process)d] - %(message)s'


def setup_logging(log_file: str = "purchase_processing.log", level: int = logging.INFO):
    """
    Sends all records to stdout, and to `log_file` unless it is empty.
    pika and httpx are held at WARNING; their INFO lines repeat per request.
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)

    logging.getLogger("pika").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name):
    return logging.getLogger(name)
