"""Abstract interfaces for the verification event bus."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from media_verifier.domain.models import ProgressEvent, UploadMessage, VerificationResult

# (body, delivery_tag, delivery_count)
DeliveryCallback = Callable[[bytes, int, int], None]


class MessagePublisher(ABC):
    """Publishes the events a verification produces."""

    @abstractmethod
    def publish_progress(self, event: ProgressEvent) -> None:
        """
        Announces a pipeline checkpoint for an upload.

        Raises:
            EventPublishError: If publishing fails.
        """

    @abstractmethod
    def publish_result(self, message: UploadMessage, result: VerificationResult) -> None:
        """
        Announces the final verdict for an upload.

        Raises:
            EventPublishError: If publishing fails.
        """

    @abstractmethod
    def publish_review(self, message: UploadMessage, result: VerificationResult) -> None:
        """
        Asks for a human moderator to look at an upload.

        Raises:
            EventPublishError: If publishing fails.
        """


class MessageBroker(MessagePublisher, ABC):
    """Publisher that also consumes upload events from the verification queue."""

    @abstractmethod
    def consume(self, callback: DeliveryCallback) -> None:
        """Blocks, handing each upload event to the callback."""

    @abstractmethod
    def acknowledge(self, delivery_tag: int) -> None:
        """Marks an upload event as handled."""

    @abstractmethod
    def reject(self, delivery_tag: int) -> None:
        """
        Returns an upload event for redelivery.

        The broker dead-letters it once the delivery limit is reached.
        """

    @abstractmethod
    def setup(self) -> None:
        """Declares the exchanges and queues the worker depends on."""
