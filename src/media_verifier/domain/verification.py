"""The media verification pipeline: sample, transcribe, moderate, report."""

import asyncio
from collections.abc import Awaitable
from pathlib import Path
from typing import TypeVar

from media_verifier.exceptions import VerificationError
from media_verifier.infrastructure.interfaces import MediaTools, TranscriptionService
from media_verifier.infrastructure.temp_workspace import TempWorkspace
from media_verifier.logging import setup_logging

from .moderation import ContentModerator
from .models import (
    Frame,
    InlineMedia,
    ModerationInput,
    Sample,
    VerificationJob,
    VerificationResult,
)
from .progress import ProgressReporter, ProgressSink
from .sampling import DEFAULT_FRAME_COUNT, plan_audio_samples, plan_frame_timestamps
from .text_extraction import (
    EPUB_MIME_TYPE,
    MODERATION_TEXT_LIMIT,
    PDF_MIME_TYPE,
    DocumentTextExtractor,
)

logger = setup_logging()

T = TypeVar("T")

DEFAULT_TRANSCRIPTION_TIMEOUT = 120.0


async def _gather_all(*aws: Awaitable[T]) -> list[T]:
    """
    Runs awaitables concurrently and returns results in argument order.

    If one fails or the caller is cancelled, the rest are cancelled and
    awaited before the error propagates, so none outlives the caller.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class MediaVerifier:
    """Runs the verification pipeline for one upload at a time per call."""

    def __init__(
        self,
        media_tools: MediaTools,
        moderator: ContentModerator,
        workspace: TempWorkspace,
        transcriber: TranscriptionService | None = None,
        text_extractor: DocumentTextExtractor | None = None,
        frame_count: int = DEFAULT_FRAME_COUNT,
        transcription_timeout_seconds: float = DEFAULT_TRANSCRIPTION_TIMEOUT,
    ):
        self._media_tools = media_tools
        self._moderator = moderator
        self._workspace = workspace
        self._transcriber = transcriber
        self._text_extractor = text_extractor or DocumentTextExtractor()
        self._frame_count = frame_count
        self._transcription_timeout_seconds = transcription_timeout_seconds

    async def verify(
        self, job: VerificationJob, on_progress: ProgressSink | None = None
    ) -> VerificationResult:
        """
        Verifies an upload and returns the moderation outcome.

        Args:
            job: The upload to verify.
            on_progress: Optional sink receiving every progress event.

        Returns:
            VerificationResult with the verdict, transcript and frames.

        Raises:
            VerificationError: If extraction fails or media tools are missing.
        """
        reporter = ProgressReporter(job.upload_id, on_progress)
        reporter.report(10, "file_received", "File received, starting verification...")

        try:
            transcript, frames = await self._gather_evidence(job, reporter)

            thumbnail = None
            if job.thumbnail_data:
                reporter.report(72, "moderating", "Checking thumbnail image...")
                thumbnail = InlineMedia(
                    data=job.thumbnail_data,
                    mime_type=job.thumbnail_mime_type or "image/jpeg",
                )

            reporter.report(75, "moderating", "Checking content guidelines...")
            verdict = await self._moderator.moderate(
                ModerationInput(
                    title=job.title,
                    description=job.description,
                    content_type=job.content_type,
                    transcript=transcript or None,
                    frames=tuple(frames),
                    thumbnail=thumbnail,
                )
            )
        except asyncio.CancelledError:
            logger.warning("Verification cancelled", extra={"upload_id": job.upload_id})
            reporter.report(0, "error", "Verification cancelled")
            raise
        except Exception as e:
            logger.exception("Verification failed", extra={"upload_id": job.upload_id})
            reporter.report(0, "error", f"Verification failed: {e}")
            raise VerificationError(job.upload_id, e) from e

        reporter.report(95, "finalizing", "Verification complete!")
        logger.info(
            "Verification completed",
            extra={
                "upload_id": job.upload_id,
                "is_approved": verdict.is_approved,
                "requires_review": verdict.requires_review,
            },
        )
        return VerificationResult(
            is_approved=verdict.is_approved,
            moderation_result=verdict,
            transcript=transcript or None,
            video_frames=tuple(frames) or None,
        )

    async def _gather_evidence(
        self, job: VerificationJob, reporter: ProgressReporter
    ) -> tuple[str, list[Frame]]:
        if job.content_type == "videos" and job.mime_type.startswith("video"):
            return await self._process_video(job, reporter)
        if job.content_type in ("music", "audio") and job.mime_type.startswith("audio"):
            return await self._process_audio(job, reporter), []
        if job.content_type == "books":
            return await self._process_book(job, reporter), []

        logger.info(
            "No extractable media for content type, moderating metadata only",
            extra={
                "upload_id": job.upload_id,
                "content_type": job.content_type,
                "mime_type": job.mime_type,
            },
        )
        return "", []

    async def _process_video(
        self, job: VerificationJob, reporter: ProgressReporter
    ) -> tuple[str, list[Frame]]:
        reporter.report(20, "validating", "Validating video format...")

        with self._workspace.scoped_file(job.upload_id, "input", job.file_data) as source:
            duration = await self._media_tools.probe_duration(source, job.mime_type)
            logger.info(
                "Video duration detected",
                extra={"duration": duration, "upload_id": job.upload_id},
            )

            reporter.report(30, "analyzing", "Extracting audio and frames...")
            samples, frames = await _gather_all(
                self._extract_samples(source, duration, job.upload_id),
                self._extract_frames(source, duration, job.upload_id),
            )

        reporter.report(50, "analyzing", "Transcribing audio...")
        transcript = await self._transcribe(samples, job.upload_id)

        reporter.report(70, "analyzing", "Processing complete!")
        return transcript, frames

    async def _process_audio(self, job: VerificationJob, reporter: ProgressReporter) -> str:
        reporter.report(20, "validating", "Validating audio format...")

        with self._workspace.scoped_file(job.upload_id, "input", job.file_data) as source:
            duration = await self._media_tools.probe_duration(source, job.mime_type)
            logger.info(
                "Audio duration detected",
                extra={"duration": duration, "upload_id": job.upload_id},
            )

            reporter.report(30, "analyzing", "Preparing audio sample...")
            samples = await self._extract_samples(source, duration, job.upload_id)

        reporter.report(40, "analyzing", "Transcribing audio...")
        transcript = await self._transcribe(samples, job.upload_id)

        reporter.report(70, "analyzing", "Processing complete!")
        return transcript

    async def _process_book(self, job: VerificationJob, reporter: ProgressReporter) -> str:
        reporter.report(20, "validating", "Validating book format...")

        text = ""
        if job.mime_type == PDF_MIME_TYPE:
            reporter.report(30, "analyzing", "Extracting text from PDF...")
        elif job.mime_type == EPUB_MIME_TYPE:
            reporter.report(30, "analyzing", "Extracting text from EPUB...")

        if self._text_extractor.supports(job.mime_type):
            text = await asyncio.to_thread(
                self._text_extractor.extract,
                job.file_data,
                job.mime_type,
                MODERATION_TEXT_LIMIT,
            )
            logger.info(
                "Book text extraction completed",
                extra={"text_length": len(text), "upload_id": job.upload_id},
            )
        else:
            logger.warning(
                "Unsupported book file type",
                extra={"mime_type": job.mime_type, "upload_id": job.upload_id},
            )

        reporter.report(70, "analyzing", "Processing complete!")
        return text

    async def _extract_samples(
        self, source: Path, duration: float, upload_id: str
    ) -> list[Sample]:
        windows = plan_audio_samples(duration)
        return await _gather_all(
            *(self._media_tools.extract_audio(source, w, upload_id) for w in windows)
        )

    async def _extract_frames(
        self, source: Path, duration: float, upload_id: str
    ) -> list[Frame]:
        timestamps = plan_frame_timestamps(duration, self._frame_count)
        return await _gather_all(
            *(self._media_tools.extract_frame(source, ts, upload_id) for ts in timestamps)
        )

    async def _transcribe(self, samples: list[Sample], upload_id: str) -> str:
        """Transcribes samples concurrently and joins them in sample order."""
        if self._transcriber is None:
            logger.warning(
                "No transcription service configured", extra={"upload_id": upload_id}
            )
            return ""

        texts = await asyncio.gather(
            *(self._transcribe_sample(sample, upload_id) for sample in samples)
        )
        transcript = " ".join(text for text in texts if text)
        logger.info(
            "Transcription completed",
            extra={
                "upload_id": upload_id,
                "transcript_length": len(transcript),
                "segments_processed": len(samples),
            },
        )
        return transcript

    async def _transcribe_sample(self, sample: Sample, upload_id: str) -> str:
        try:
            text = await asyncio.wait_for(
                self._transcriber.transcribe(sample.data, sample.mime_type),
                timeout=self._transcription_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Transcription timed out, continuing without this sample",
                extra={
                    "upload_id": upload_id,
                    "offset": sample.offset_seconds,
                    "timeout_seconds": self._transcription_timeout_seconds,
                },
            )
            return ""
        except Exception:
            logger.warning(
                "Transcription failed, continuing without this sample",
                exc_info=True,
                extra={"upload_id": upload_id, "offset": sample.offset_seconds},
            )
            return ""
        return text.strip()
