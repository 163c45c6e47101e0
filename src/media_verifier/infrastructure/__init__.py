"""Infrastructure layer exports."""

from media_verifier.infrastructure.assemblyai_transcriber import AssemblyAITranscriber
from media_verifier.infrastructure.ffmpeg_tools import FFmpegMediaTools
from media_verifier.infrastructure.gemini_classifier import GeminiContentClassifier
from media_verifier.infrastructure.gemini_transcriber import GeminiTranscriber
from media_verifier.infrastructure.minio_storage import MinioStorageClient
from media_verifier.infrastructure.rabbitmq_broker import RabbitMQBroker
from media_verifier.infrastructure.temp_workspace import TempWorkspace

__all__ = [
    "AssemblyAITranscriber",
    "FFmpegMediaTools",
    "GeminiContentClassifier",
    "GeminiTranscriber",
    "MinioStorageClient",
    "RabbitMQBroker",
    "TempWorkspace",
]
