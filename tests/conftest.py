import asyncio

import pytest

from media_verifier.domain.models import Frame, Sample
from media_verifier.exceptions import AudioExtractionError, ClassifierError
from media_verifier.infrastructure.interfaces import (
    ContentClassifier,
    MediaTools,
    TranscriptionService,
)
from media_verifier.infrastructure.temp_workspace import TempWorkspace


class FakeMediaTools(MediaTools):
    """Returns canned samples and frames; delays let tests reorder completion."""

    def __init__(self, duration=200.0, audio_delays=None, fail_audio_at=None):
        self.duration = duration
        self.audio_delays = audio_delays or {}
        self.fail_audio_at = fail_audio_at
        self.duration_requests = []
        self.audio_windows = []
        self.frame_timestamps = []
        self.cancelled = []

    async def probe_duration(self, source, mime_type):
        assert source.exists()
        self.duration_requests.append((source, mime_type))
        return self.duration

    async def extract_audio(self, source, window, tag):
        self.audio_windows.append(window)
        try:
            await asyncio.sleep(self.audio_delays.get(window.offset_seconds, 0))
        except asyncio.CancelledError:
            self.cancelled.append(window.offset_seconds)
            raise
        if window.offset_seconds == self.fail_audio_at:
            raise AudioExtractionError(window.offset_seconds, RuntimeError("boom"))
        return Sample(
            offset_seconds=window.offset_seconds,
            duration_seconds=window.duration_seconds,
            data=f"audio@{window.offset_seconds:g}".encode(),
        )

    async def extract_frame(self, source, timestamp, tag):
        self.frame_timestamps.append(timestamp)
        return Frame(timestamp_seconds=timestamp, data=f"frame@{timestamp:g}".encode())


class FakeTranscriber(TranscriptionService):
    """Echoes the sample payload back as text."""

    def __init__(self, texts=None, delays=None):
        self.texts = texts or {}
        self.delays = delays or {}
        self.calls = []

    async def transcribe(self, audio_data, mime_type):
        self.calls.append((audio_data, mime_type))
        await asyncio.sleep(self.delays.get(audio_data, 0))
        return self.texts.get(audio_data, audio_data.decode())


class FakeClassifier(ContentClassifier):
    def __init__(self, response="", error=None, delay=0):
        self.response = response
        self.error = error
        self.delay = delay
        self.calls = []

    async def classify(self, prompt, images):
        self.calls.append((prompt, list(images)))
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise ClassifierError("classifier down", cause=self.error)
        return self.response


@pytest.fixture
def workspace(tmp_path):
    return TempWorkspace(tmp_path / "work")


@pytest.fixture
def media_tools():
    return FakeMediaTools()


@pytest.fixture
def transcriber():
    return FakeTranscriber()
