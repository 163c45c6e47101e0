"""Application configuration loaded from environment variables."""

import os
import tempfile
from pathlib import Path
from typing import Literal

from pydantic import BaseModel


class MinioConfig(BaseModel, frozen=True):
    """MinIO connection configuration."""

    endpoint: str
    user: str
    password: str
    bucket_name: str = "uploads"


class QueueConfig(BaseModel, frozen=True):
    """RabbitMQ queue configuration."""

    name: str
    queue_type: str = "quorum"
    max_delivery_count: int = 3
    expected_routing_key: str
    success_routing_key: str
    progress_routing_key: str
    review_routing_key: str
    dlq_name: str
    dlq_exchange_name: str = "dead_letter_exchange"
    dlq_routing_key: str


class RabbitMQConfig(BaseModel, frozen=True):
    """RabbitMQ connection configuration."""

    host: str
    user: str
    password: str
    exchange_name: str = "events"
    queue_config: QueueConfig = QueueConfig(
        name="media_verification_queue",
        expected_routing_key="media.upload.received",
        success_routing_key="media.verification.completed",
        progress_routing_key="media.verification.progress",
        review_routing_key="media.moderation.review_required",
        dlq_name="dlq_media_verification",
        dlq_routing_key="media.verification.failed",
    )


class GeminiConfig(BaseModel, frozen=True):
    """Gemini classifier configuration. An empty key disables the classifier."""

    api_key: str = ""
    model_name: str = "gemini-2.5-flash"
    system_prompt_path: Path = Path("prompts/moderation_system.txt")
    timeout_seconds: float = 60.0


class AssemblyAIConfig(BaseModel, frozen=True):
    """AssemblyAI API configuration."""

    api_key: str = ""
    polling_interval_seconds: float = 3.0


class TranscriptionConfig(BaseModel, frozen=True):
    """Selects the speech-to-text backend used for audio samples."""

    provider: Literal["gemini", "assemblyai", "none"] = "gemini"
    timeout_seconds: float = 120.0


class MediaToolsConfig(BaseModel, frozen=True):
    """ffmpeg/ffprobe invocation settings."""

    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    temp_dir: Path = Path(tempfile.gettempdir()) / "jevah-media-processing"
    timeout_seconds: float = 60.0
    frame_width: int = 320
    frame_quality: int = 5
    frame_count: int = 3


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    minio: MinioConfig
    rabbitmq: RabbitMQConfig
    gemini: GeminiConfig
    assemblyai: AssemblyAIConfig
    transcription: TranscriptionConfig
    media_tools: MediaToolsConfig


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    default_tools = MediaToolsConfig()
    return AppConfig(
        minio=MinioConfig(
            endpoint=os.getenv("MINIO_ENDPOINT", "minio:9000"),
            user=os.getenv("MINIO_USER", ""),
            password=os.getenv("MINIO_PASSWORD", ""),
            bucket_name=os.getenv("MINIO_BUCKET", "uploads"),
        ),
        rabbitmq=RabbitMQConfig(
            host=os.getenv("RABBITMQ_HOST", "rabbitmq"),
            user=os.getenv("RABBITMQ_USER", ""),
            password=os.getenv("RABBITMQ_PASSWORD", ""),
        ),
        gemini=GeminiConfig(
            api_key=os.getenv("GEMINI_API_KEY", ""),
            model_name=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            timeout_seconds=float(os.getenv("GEMINI_TIMEOUT_SECONDS", "60")),
        ),
        assemblyai=AssemblyAIConfig(
            api_key=os.getenv("ASSEMBLYAI_API_KEY", ""),
            polling_interval_seconds=float(
                os.getenv("ASSEMBLYAI_POLLING_INTERVAL_SECONDS", "3")
            ),
        ),
        transcription=TranscriptionConfig(
            provider=os.getenv("TRANSCRIPTION_PROVIDER", "gemini"),
            timeout_seconds=float(os.getenv("TRANSCRIPTION_TIMEOUT_SECONDS", "120")),
        ),
        media_tools=MediaToolsConfig(
            ffmpeg_path=os.getenv("FFMPEG_PATH", default_tools.ffmpeg_path),
            ffprobe_path=os.getenv("FFPROBE_PATH", default_tools.ffprobe_path),
            temp_dir=Path(os.getenv("MEDIA_TEMP_DIR", str(default_tools.temp_dir))),
            timeout_seconds=float(os.getenv("MEDIA_TOOL_TIMEOUT_SECONDS", "60")),
            frame_count=int(os.getenv("VERIFICATION_FRAME_COUNT", "3")),
        ),
    )
