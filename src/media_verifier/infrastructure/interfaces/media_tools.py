"""Abstract interface for the external media probing/transcoding tool."""

from abc import ABC, abstractmethod
from pathlib import Path

from media_verifier.domain.models import Frame, Sample, SampleWindow


class MediaTools(ABC):
    """Abstract base class for duration probing and sample extraction."""

    @abstractmethod
    async def probe_duration(self, source: Path, mime_type: str) -> float:
        """
        Returns the media duration in seconds.

        Never raises for tool failures; falls back to a fixed default
        depending on whether the media is video or audio.
        """

    @abstractmethod
    async def extract_audio(self, source: Path, window: SampleWindow, tag: str) -> Sample:
        """
        Cuts one audio sample out of the source.

        Args:
            source: Path of the media file.
            window: Offset and length of the sample.
            tag: Job identifier used to namespace temporary files.

        Raises:
            MediaToolUnavailableError: If the transcoder is not installed.
            AudioExtractionError: If the transcoder fails.
        """

    @abstractmethod
    async def extract_frame(self, source: Path, timestamp: float, tag: str) -> Frame:
        """
        Grabs one downscaled still frame from the source.

        Raises:
            MediaToolUnavailableError: If the transcoder is not installed.
            FrameExtractionError: If the transcoder fails.
        """
