"""Worker that handles queue message consumption and orchestration."""

import asyncio
import json

from pydantic import ValidationError

from media_verifier.config import RabbitMQConfig
from media_verifier.domain import UploadMessage
from media_verifier.exceptions import EventPublishError
from media_verifier.handlers import PostVerificationHook, UploadMessageHandler, run_hooks
from media_verifier.infrastructure.interfaces import MessageBroker
from media_verifier.logging import setup_logging

logger = setup_logging()


class Worker:
    """Consumes upload events from the queue and orchestrates verification."""

    def __init__(
        self,
        broker: MessageBroker,
        handler: UploadMessageHandler,
        config: RabbitMQConfig,
        hooks: list[PostVerificationHook] | None = None,
    ):
        self._broker = broker
        self._handler = handler
        self._config = config
        self._hooks = hooks or []

    def start(self) -> None:
        """Starts consuming messages from the queue."""
        logger.info("Worker initialized, starting message consumption")
        self._broker.consume(self._on_message)

    def _on_message(self, body: bytes, delivery_tag: int, delivery_count: int) -> None:
        """Callback for each received message."""
        logger.info(
            "Message received",
            extra={
                "attempt": delivery_count,
                "max_attempts": self._config.queue_config.max_delivery_count,
            },
        )

        try:
            message = UploadMessage.model_validate(json.loads(body))
        except (ValidationError, json.JSONDecodeError) as e:
            logger.exception("Invalid message format", extra={"error": str(e)})
            self._broker.reject(delivery_tag)
            return

        try:
            result = asyncio.run(self._handler.process(message))
        except Exception:
            logger.exception(
                "Message processing failed",
                extra={"upload_id": message.upload_id},
            )
            self._broker.reject(delivery_tag)
            return

        self._broker.acknowledge(delivery_tag)

        try:
            self._broker.publish_result(message, result)
        except EventPublishError:
            logger.exception(
                "Failed to publish verification result",
                extra={"upload_id": message.upload_id},
            )

        logger.info(
            "Message processed successfully",
            extra={
                "upload_id": message.upload_id,
                "is_approved": result.is_approved,
            },
        )

        run_hooks(self._hooks, message, result)
