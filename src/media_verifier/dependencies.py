"""Dependency injection configuration for the media verification worker."""

from pathlib import Path

import assemblyai as aai
import pika
from google import genai
from minio import Minio

from media_verifier.config import AppConfig
from media_verifier.domain.moderation import ContentModerator
from media_verifier.domain.text_extraction import DocumentTextExtractor
from media_verifier.domain.verification import MediaVerifier
from media_verifier.handlers import ReviewAlertHook, UploadMessageHandler
from media_verifier.infrastructure import (
    AssemblyAITranscriber,
    FFmpegMediaTools,
    GeminiContentClassifier,
    GeminiTranscriber,
    MinioStorageClient,
    RabbitMQBroker,
    TempWorkspace,
)
from media_verifier.infrastructure.interfaces import (
    ContentClassifier,
    TranscriptionService,
)
from media_verifier.logging import setup_logging
from media_verifier.worker import Worker

logger = setup_logging()


def build_classifier(config: AppConfig, client: genai.Client | None) -> ContentClassifier | None:
    """Returns the Gemini classifier, or None when no API key is configured."""
    if client is None:
        return None
    prompt_path = Path(__file__).parent / config.gemini.system_prompt_path
    system_prompt = prompt_path.read_text(encoding="utf-8")
    return GeminiContentClassifier(client, config.gemini.model_name, system_prompt)


def build_transcriber(
    config: AppConfig, client: genai.Client | None
) -> TranscriptionService | None:
    """Returns the configured speech-to-text backend, or None if unavailable."""
    provider = config.transcription.provider

    if provider == "assemblyai":
        if not config.assemblyai.api_key:
            logger.warning("AssemblyAI selected but ASSEMBLYAI_API_KEY is not set")
            return None
        aai.settings.api_key = config.assemblyai.api_key
        return AssemblyAITranscriber(
            aai.Transcriber(), config.assemblyai.polling_interval_seconds
        )

    if provider == "gemini":
        if client is None:
            logger.warning("Gemini transcription selected but GEMINI_API_KEY is not set")
            return None
        return GeminiTranscriber(client, config.gemini.model_name)

    return None


def build_verifier(config: AppConfig) -> MediaVerifier:
    """Wires the verification pipeline without touching storage or the broker."""
    client = genai.Client(api_key=config.gemini.api_key) if config.gemini.api_key else None

    workspace = TempWorkspace(config.media_tools.temp_dir)
    media_tools = FFmpegMediaTools(config.media_tools, workspace)
    if not media_tools.is_available():
        logger.warning(
            "ffmpeg not found, video and audio uploads will fail verification",
            extra={"ffmpeg_path": config.media_tools.ffmpeg_path},
        )

    return MediaVerifier(
        media_tools=media_tools,
        moderator=ContentModerator(
            build_classifier(config, client), config.gemini.timeout_seconds
        ),
        workspace=workspace,
        transcriber=build_transcriber(config, client),
        text_extractor=DocumentTextExtractor(),
        frame_count=config.media_tools.frame_count,
        transcription_timeout_seconds=config.transcription.timeout_seconds,
    )


def build_worker(config: AppConfig) -> Worker:
    """Connects to MinIO and RabbitMQ and returns a ready-to-start worker."""
    minio_client = Minio(
        endpoint=config.minio.endpoint,
        access_key=config.minio.user,
        secret_key=config.minio.password,
        secure=False,
    )
    storage = MinioStorageClient(minio_client)
    storage.ensure_bucket_exists(config.minio.bucket_name)

    credentials = pika.PlainCredentials(config.rabbitmq.user, config.rabbitmq.password)
    parameters = pika.ConnectionParameters(
        host=config.rabbitmq.host,
        credentials=credentials,
        heartbeat=0,
    )
    rabbit_connection = pika.BlockingConnection(parameters)
    rabbit_channel = rabbit_connection.channel()

    broker = RabbitMQBroker(rabbit_channel, config.rabbitmq)
    broker.setup()

    handler = UploadMessageHandler(storage, build_verifier(config), broker.publish_progress)
    hooks = [ReviewAlertHook(broker)]

    return Worker(broker, handler, config.rabbitmq, hooks)
