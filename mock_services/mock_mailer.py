"""
mock_mailer.py — Mock Implementation of the Email Delivery Worker

This module simulates the mail worker that takes receipt emails published by the
purchase service (via RabbitMQ) and delivers them. Delivery is simulated by logging
the message.

Communication Channels:
    - Input Queue: 'mail.outbound' ← Receives email messages {to, from, subject, text}

Malformed messages are rejected without requeue (dead-lettered if a DLX is configured).
"""

import json
import logging
import os
import time

import pika

log = logging.getLogger(__name__)

RABBITMQ_HOST = os.environ.get("RABBITMQ_HOST", "localhost")
RABBITMQ_USER = os.environ.get("RABBITMQ_USER", "shop")
RABBITMQ_PASSWORD = os.environ.get("RABBITMQ_PASSWORD", "shop")
MAIL_QUEUE = os.environ.get("MAIL_QUEUE", "mail.outbound")

REQUIRED_FIELDS = ("to", "from", "subject", "text")


def get_mq_connection():
    """
    Establishes and returns a connection to the RabbitMQ message broker.

    Returns:
        pika.BlockingConnection: Active connection to the RabbitMQ broker.

    Raises:
        pika.exceptions.AMQPConnectionError: If the broker is unavailable.
    """
    credentials = pika.PlainCredentials(RABBITMQ_USER, RABBITMQ_PASSWORD)
    return pika.BlockingConnection(
        pika.ConnectionParameters(host=RABBITMQ_HOST, credentials=credentials)
    )


def parse_email(body: bytes) -> dict:
    """
    Decodes and validates an email message.

    Raises:
        ValueError: If the body is not JSON or lacks a required field.
    """
    message = json.loads(body)
    if not isinstance(message, dict):
        raise ValueError("email message must be a JSON object")
    missing = [field for field in REQUIRED_FIELDS if not message.get(field)]
    if missing:
        raise ValueError(f"email message missing fields: {', '.join(missing)}")
    return message


def on_email_received(ch, method, properties, body):
    """
    Callback triggered when a new message arrives on the mail queue.

    Args:
        ch (BlockingChannel): The RabbitMQ channel object.
        method (pika.spec.Basic.Deliver): Delivery metadata for acknowledgment.
        properties (pika.BasicProperties): Message properties.
        body (bytes): The raw message payload in JSON format.
    """
    try:
        message = parse_email(body)
    except ValueError as e:
        log.error(f"[MAIL] Rejecting malformed message: {e}")
        ch.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
        return

    log.info(f"[MAIL] Delivered '{message['subject']}' from {message['from']} to {message['to']}.")
    ch.basic_ack(delivery_tag=method.delivery_tag)


def main():
    """
    Starts the mock mailer consumer loop.
    Reconnects every 5 seconds if the broker connection is lost; stops on Ctrl+C.
    """
    logging.basicConfig(level=logging.INFO)
    log.info("Mock Mailer (MQ) starting...")
    while True:
        try:
            connection = get_mq_connection()
            channel = connection.channel()
            channel.queue_declare(queue=MAIL_QUEUE, durable=True)

            log.info(f"[MAIL] Waiting for messages on '{MAIL_QUEUE}'.")
            channel.basic_consume(queue=MAIL_QUEUE, on_message_callback=on_email_received)
            channel.start_consuming()
        except pika.exceptions.AMQPConnectionError as e:
            log.warning(f"MQ connection failed, retrying in 5s... {e}")
            time.sleep(5)
        except KeyboardInterrupt:
            break


if __name__ == '__main__':
    main()
