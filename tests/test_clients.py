import asyncio
import base64
import json
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import assemblyai as aai
import pytest

from media_verifier.config import RabbitMQConfig
from media_verifier.domain.models import (
    Frame,
    InlineMedia,
    ModerationVerdict,
    ProgressEvent,
    UploadMessage,
    VerificationResult,
)
from media_verifier.exceptions import (
    ClassifierError,
    EventPublishError,
    StorageDownloadError,
    TranscriptionError,
)
from media_verifier.infrastructure import (
    AssemblyAITranscriber,
    GeminiContentClassifier,
    GeminiTranscriber,
    MinioStorageClient,
    RabbitMQBroker,
)


def _gemini_client(text=None, error=None):
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        return_value=SimpleNamespace(text=text), side_effect=error
    )
    return client


def test_classifier_sends_prompt_then_images():
    client = _gemini_client(text='{"isApproved": true}')
    classifier = GeminiContentClassifier(client, "gemini-2.5-flash", "system rules")
    images = [
        InlineMedia(data=b"thumb", mime_type="image/png"),
        InlineMedia(data=b"frame", mime_type="image/jpeg"),
    ]

    raw = asyncio.run(classifier.classify("judge this", images))

    assert raw == '{"isApproved": true}'
    kwargs = client.aio.models.generate_content.await_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash"
    assert kwargs["config"]["system_instruction"] == "system rules"
    parts = kwargs["contents"][0].parts
    assert parts[0].text == "judge this"
    assert [p.inline_data.mime_type for p in parts[1:]] == ["image/png", "image/jpeg"]


def test_classifier_wraps_api_errors():
    classifier = GeminiContentClassifier(_gemini_client(error=RuntimeError("429")), "m", "s")

    with pytest.raises(ClassifierError):
        asyncio.run(classifier.classify("judge this", []))


def test_classifier_rejects_empty_response():
    classifier = GeminiContentClassifier(_gemini_client(text=""), "m", "s")

    with pytest.raises(ClassifierError, match="empty response"):
        asyncio.run(classifier.classify("judge this", []))


def test_gemini_transcriber_returns_stripped_text():
    client = _gemini_client(text="  Blessed assurance  \n")

    text = asyncio.run(GeminiTranscriber(client, "m").transcribe(b"mp3", "audio/mpeg"))

    assert text == "Blessed assurance"
    parts = client.aio.models.generate_content.await_args.kwargs["contents"][0].parts
    assert parts[1].inline_data.data == b"mp3"


def test_gemini_transcriber_silence_is_empty():
    text = asyncio.run(
        GeminiTranscriber(_gemini_client(text=None), "m").transcribe(b"mp3", "audio/mpeg")
    )

    assert text == ""


def test_gemini_transcriber_wraps_errors():
    transcriber = GeminiTranscriber(_gemini_client(error=RuntimeError("boom")), "m")

    with pytest.raises(TranscriptionError):
        asyncio.run(transcriber.transcribe(b"mp3", "audio/mpeg"))


def _queued(transcript_id="t1"):
    return SimpleNamespace(
        id=transcript_id, status=aai.TranscriptStatus.queued, text=None, error=None
    )


def _poll_returning(monkeypatch, *transcripts):
    polls = MagicMock(side_effect=list(transcripts))
    monkeypatch.setattr(aai.Transcript, "get_by_id", polls)
    return polls


def test_assemblyai_transcriber_polls_until_completed(monkeypatch):
    sdk = MagicMock()
    sdk.submit.return_value = _queued()
    polls = _poll_returning(
        monkeypatch,
        SimpleNamespace(id="t1", status=aai.TranscriptStatus.processing, text=None, error=None),
        SimpleNamespace(
            id="t1", status=aai.TranscriptStatus.completed, text=" Amazing grace ", error=None
        ),
    )

    text = asyncio.run(AssemblyAITranscriber(sdk, 0).transcribe(b"mp3", "audio/mpeg"))

    assert text == "Amazing grace"
    assert sdk.submit.call_args.args[0].endswith(".mp3")
    assert polls.call_count == 2
    polls.assert_called_with("t1")


def test_assemblyai_error_status_raises(monkeypatch):
    sdk = MagicMock()
    sdk.submit.return_value = _queued()
    _poll_returning(
        monkeypatch,
        SimpleNamespace(id="t1", status=aai.TranscriptStatus.error, text=None, error="bad audio"),
    )

    with pytest.raises(TranscriptionError):
        asyncio.run(AssemblyAITranscriber(sdk, 0).transcribe(b"mp3", "audio/mpeg"))


def test_assemblyai_stuck_transcript_stops_polling_on_timeout(monkeypatch):
    sdk = MagicMock()
    sdk.submit.return_value = _queued()
    polls = MagicMock(return_value=_queued())
    monkeypatch.setattr(aai.Transcript, "get_by_id", polls)
    transcriber = AssemblyAITranscriber(sdk, polling_interval_seconds=0.02)

    async def transcribe_with_deadline():
        await asyncio.wait_for(transcriber.transcribe(b"mp3", "audio/mpeg"), timeout=0.1)

    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(transcribe_with_deadline())

    calls_at_timeout = polls.call_count
    assert 0 < calls_at_timeout < 10
    asyncio.run(asyncio.sleep(0.1))
    assert polls.call_count == calls_at_timeout


def test_minio_download_releases_connection():
    response = MagicMock(data=b"bytes")
    client = MagicMock()
    client.get_object.return_value = response

    data = MinioStorageClient(client).download("uploads", "media/a.mp4")

    assert data == b"bytes"
    response.close.assert_called_once()
    response.release_conn.assert_called_once()


def test_minio_download_failure_is_wrapped():
    client = MagicMock()
    client.get_object.side_effect = RuntimeError("NoSuchKey")

    with pytest.raises(StorageDownloadError) as excinfo:
        MinioStorageClient(client).download("uploads", "media/a.mp4")

    assert excinfo.value.object_name == "media/a.mp4"


def test_minio_creates_missing_bucket():
    client = MagicMock()
    client.bucket_exists.return_value = False

    MinioStorageClient(client).ensure_bucket_exists("uploads")

    client.make_bucket.assert_called_once_with("uploads")


@pytest.fixture
def rabbit_config():
    return RabbitMQConfig(host="localhost", user="guest", password="guest")


def test_broker_setup_binds_verification_queue(rabbit_config):
    channel = MagicMock()

    RabbitMQBroker(channel, rabbit_config).setup()

    channel.queue_bind.assert_any_call(
        queue="media_verification_queue",
        exchange="events",
        routing_key="media.upload.received",
    )
    main_queue = [
        c for c in channel.queue_declare.call_args_list
        if c.kwargs["queue"] == "media_verification_queue"
    ][0]
    assert main_queue.kwargs["arguments"]["x-dead-letter-routing-key"] == (
        "media.verification.failed"
    )


def test_broker_publish_failure_raises(rabbit_config):
    channel = MagicMock()
    channel.basic_publish.side_effect = RuntimeError("channel closed")

    with pytest.raises(EventPublishError):
        RabbitMQBroker(channel, rabbit_config).publish_progress(_progress_event())


def _progress_event():
    return ProgressEvent(
        upload_id="upload-1",
        progress=30,
        stage="analyzing",
        message="Extracting audio and frames...",
        timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


def _message():
    return UploadMessage(
        upload_id="upload-1",
        bucket_name="uploads",
        object_name="media/upload-1.mp4",
        mime_type="video/mp4",
        content_type="videos",
        title="Sunday Worship",
        user_id="user-9",
    )


def _result(requires_review=False):
    return VerificationResult(
        is_approved=not requires_review,
        moderation_result=ModerationVerdict(
            is_approved=not requires_review,
            confidence=0.9,
            reason="Worship content",
            flags=frozenset({"worship_content", "music"}),
            requires_review=requires_review,
        ),
        transcript="praise him",
        video_frames=(Frame(timestamp_seconds=10.0, data=b"\xff\xd8jpeg"),),
    )


def _published(channel):
    kwargs = channel.basic_publish.call_args.kwargs
    return kwargs["routing_key"], json.loads(kwargs["body"]), kwargs["properties"]


def test_broker_publishes_progress_events_as_json(rabbit_config):
    channel = MagicMock()

    RabbitMQBroker(channel, rabbit_config).publish_progress(_progress_event())

    routing_key, body, properties = _published(channel)
    assert routing_key == "media.verification.progress"
    assert body["upload_id"] == "upload-1"
    assert body["progress"] == 30
    assert body["stage"] == "analyzing"
    assert isinstance(body["timestamp"], str)
    assert properties.content_type == "application/json"
    assert properties.delivery_mode == 2


def test_broker_result_carries_frames_as_data_urls(rabbit_config):
    channel = MagicMock()

    RabbitMQBroker(channel, rabbit_config).publish_result(_message(), _result())

    routing_key, body, _ = _published(channel)
    assert routing_key == "media.verification.completed"
    assert body["user_id"] == "user-9"
    assert body["flags"] == ["music", "worship_content"]
    assert body["transcript"] == "praise him"
    assert body["video_frames"] == [
        "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8jpeg").decode("ascii")
    ]


def test_broker_review_event_names_the_upload(rabbit_config):
    channel = MagicMock()

    RabbitMQBroker(channel, rabbit_config).publish_review(
        _message(), _result(requires_review=True)
    )

    routing_key, body, _ = _published(channel)
    assert routing_key == "media.moderation.review_required"
    assert body["title"] == "Sunday Worship"
    assert body["content_type"] == "videos"
    assert body["is_approved"] is False
    assert "video_frames" not in body


def test_broker_passes_delivery_count_to_callback(rabbit_config):
    channel = MagicMock()
    callback = MagicMock()

    RabbitMQBroker(channel, rabbit_config).consume(callback)

    on_message = channel.basic_consume.call_args.kwargs["on_message_callback"]
    on_message(channel, SimpleNamespace(delivery_tag=4), SimpleNamespace(headers=None), b"{}")
    on_message(
        channel,
        SimpleNamespace(delivery_tag=5),
        SimpleNamespace(headers={"x-delivery-count": 3}),
        b"{}",
    )

    assert [c.args for c in callback.call_args_list] == [(b"{}", 4, 1), (b"{}", 5, 3)]
    channel.basic_qos.assert_called_once_with(prefetch_count=1)
