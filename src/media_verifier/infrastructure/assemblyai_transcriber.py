"""AssemblyAI implementation of the TranscriptionService interface."""

import asyncio
import tempfile

import assemblyai as aai

from media_verifier.exceptions import TranscriptionError
from media_verifier.logging import setup_logging

from .interfaces import TranscriptionService

logger = setup_logging()

_SUFFIXES = {
    "audio/mpeg": ".mp3",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/mp4": ".m4a",
    "audio/ogg": ".ogg",
}
_FINISHED = (aai.TranscriptStatus.completed, aai.TranscriptStatus.error)


class AssemblyAITranscriber(TranscriptionService):
    """
    Handles audio transcription using AssemblyAI.

    The clip is submitted once and then polled from the event loop, so a
    cancelled or timed-out caller stops polling instead of leaving a thread
    blocked inside the SDK.
    """

    def __init__(self, transcriber: aai.Transcriber, polling_interval_seconds: float = 3.0):
        self._transcriber = transcriber
        self._polling_interval_seconds = polling_interval_seconds

    async def transcribe(self, audio_data: bytes, mime_type: str) -> str:
        try:
            transcript = await asyncio.to_thread(self._submit, audio_data, mime_type)
            while transcript.status not in _FINISHED:
                await asyncio.sleep(self._polling_interval_seconds)
                transcript = await asyncio.to_thread(aai.Transcript.get_by_id, transcript.id)
        except Exception as e:
            logger.exception("AssemblyAI transcription failed")
            raise TranscriptionError("audio_sample", e) from e

        if transcript.status == aai.TranscriptStatus.error:
            raise TranscriptionError(transcript.id, Exception(transcript.error))

        text = (transcript.text or "").strip()
        logger.info("Audio transcription successful", extra={"text_length": len(text)})
        return text

    def _submit(self, audio_data: bytes, mime_type: str) -> aai.Transcript:
        # The SDK uploads from a path, so the clip only lives on disk until then.
        suffix = _SUFFIXES.get(mime_type, "")
        with tempfile.NamedTemporaryFile(suffix=suffix, delete=True) as temp_file:
            temp_file.write(audio_data)
            temp_file.flush()
            return self._transcriber.submit(temp_file.name)
