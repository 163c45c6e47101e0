"""Infrastructure interface exports."""

from media_verifier.infrastructure.interfaces.content_classifier import ContentClassifier
from media_verifier.infrastructure.interfaces.media_tools import MediaTools
from media_verifier.infrastructure.interfaces.message_broker import (
    DeliveryCallback,
    MessageBroker,
    MessagePublisher,
)
from media_verifier.infrastructure.interfaces.storage import StorageClient
from media_verifier.infrastructure.interfaces.transcription_service import (
    TranscriptionService,
)

__all__ = [
    "ContentClassifier",
    "DeliveryCallback",
    "MediaTools",
    "MessageBroker",
    "MessagePublisher",
    "StorageClient",
    "TranscriptionService",
]
