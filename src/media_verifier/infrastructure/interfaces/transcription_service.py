"""Abstract interface for transcription service operations."""

from abc import ABC, abstractmethod


class TranscriptionService(ABC):
    """Abstract base class for audio transcription backends."""

    @abstractmethod
    async def transcribe(self, audio_data: bytes, mime_type: str) -> str:
        """
        Transcribes an audio clip.

        Args:
            audio_data: Raw audio file bytes.
            mime_type: MIME type of the audio.

        Returns:
            The transcript text, empty when nothing was said.

        Raises:
            TranscriptionError: If transcription fails.
        """
        pass
