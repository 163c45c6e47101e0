"""RabbitMQ transport for upload events and verification results."""

import pika
from pika.channel import Channel
from pydantic import BaseModel

from media_verifier.config import RabbitMQConfig
from media_verifier.domain.models import (
    ProgressEvent,
    ReviewRequestedEvent,
    UploadMessage,
    VerificationCompletedEvent,
    VerificationResult,
)
from media_verifier.exceptions import EventPublishError
from media_verifier.logging import setup_logging

from .interfaces import DeliveryCallback, MessageBroker

logger = setup_logging()

_JSON_PROPERTIES = pika.BasicProperties(content_type="application/json", delivery_mode=2)


class RabbitMQBroker(MessageBroker):
    """Consumes upload events and publishes verification events on one topic exchange."""

    def __init__(self, channel: Channel, config: RabbitMQConfig):
        self._channel = channel
        self._config = config
        self._queue = config.queue_config

    def publish_progress(self, event: ProgressEvent) -> None:
        self._send(self._queue.progress_routing_key, event, event.upload_id)

    def publish_result(self, message: UploadMessage, result: VerificationResult) -> None:
        event = VerificationCompletedEvent.from_result(message, result)
        self._send(self._queue.success_routing_key, event, message.upload_id)

    def publish_review(self, message: UploadMessage, result: VerificationResult) -> None:
        event = ReviewRequestedEvent.from_result(message, result)
        self._send(self._queue.review_routing_key, event, message.upload_id)

    def _send(self, routing_key: str, event: BaseModel, upload_id: str) -> None:
        """
        Serializes an event model and publishes it on the exchange.

        Raises:
            EventPublishError: If the channel refuses the message.
        """
        try:
            self._channel.basic_publish(
                exchange=self._config.exchange_name,
                routing_key=routing_key,
                body=event.model_dump_json(),
                properties=_JSON_PROPERTIES,
            )
        except Exception as e:
            logger.exception(
                "Failed to publish event",
                extra={"routing_key": routing_key, "upload_id": upload_id},
            )
            raise EventPublishError(routing_key, cause=e) from e

        logger.info(
            "Event published",
            extra={"routing_key": routing_key, "upload_id": upload_id},
        )

    def consume(self, callback: DeliveryCallback) -> None:
        """
        Starts consuming upload events from the verification queue.

        The quorum queue counts redeliveries in the x-delivery-count header;
        a first delivery carries no header and counts as 1.
        """

        def on_message(ch, method, properties, body):
            headers = (properties.headers if properties else None) or {}
            callback(body, method.delivery_tag, headers.get("x-delivery-count", 1))

        # Verification is long-running; hold one unacked upload at a time.
        self._channel.basic_qos(prefetch_count=1)
        self._channel.basic_consume(queue=self._queue.name, on_message_callback=on_message)
        logger.info("Started consuming", extra={"queue": self._queue.name})
        self._channel.start_consuming()

    def acknowledge(self, delivery_tag: int) -> None:
        self._channel.basic_ack(delivery_tag=delivery_tag)

    def reject(self, delivery_tag: int) -> None:
        self._channel.basic_nack(delivery_tag=delivery_tag, requeue=True)

    def setup(self) -> None:
        self._declare_dead_letter_route()
        self._declare_verification_queue()
        logger.info(
            "Queue infrastructure ready",
            extra={"queue": self._queue.name, "exchange": self._config.exchange_name},
        )

    def _declare_dead_letter_route(self) -> None:
        self._channel.exchange_declare(
            exchange=self._queue.dlq_exchange_name, exchange_type="direct", durable=True
        )
        self._channel.queue_declare(queue=self._queue.dlq_name, durable=True)
        self._channel.queue_bind(
            queue=self._queue.dlq_name,
            exchange=self._queue.dlq_exchange_name,
            routing_key=self._queue.dlq_routing_key,
        )

    def _declare_verification_queue(self) -> None:
        self._channel.exchange_declare(
            exchange=self._config.exchange_name, exchange_type="topic", durable=True
        )
        self._channel.queue_declare(
            queue=self._queue.name,
            durable=True,
            arguments={
                "x-queue-type": self._queue.queue_type,
                "x-delivery-limit": self._queue.max_delivery_count,
                "x-dead-letter-exchange": self._queue.dlq_exchange_name,
                "x-dead-letter-routing-key": self._queue.dlq_routing_key,
            },
        )
        self._channel.queue_bind(
            queue=self._queue.name,
            exchange=self._config.exchange_name,
            routing_key=self._queue.expected_routing_key,
        )
