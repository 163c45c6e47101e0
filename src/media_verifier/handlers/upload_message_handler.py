"""Handler for processing upload events."""

import asyncio

from media_verifier.domain import UploadMessage, VerificationJob, VerificationResult
from media_verifier.domain.progress import ProgressSink
from media_verifier.domain.verification import MediaVerifier
from media_verifier.infrastructure.interfaces import StorageClient
from media_verifier.logging import setup_logging

logger = setup_logging()


class UploadMessageHandler:
    """Downloads an upload from storage and runs it through verification."""

    def __init__(
        self,
        storage: StorageClient,
        verifier: MediaVerifier,
        progress_sink: ProgressSink | None = None,
    ):
        self._storage = storage
        self._verifier = verifier
        self._progress_sink = progress_sink

    async def process(self, message: UploadMessage) -> VerificationResult:
        """
        Verifies the media referenced by an upload event.

        Args:
            message: The upload event containing the object locations.

        Returns:
            VerificationResult with the moderation verdict.

        Raises:
            StorageDownloadError: If the media or thumbnail download fails.
            VerificationError: If the verification pipeline aborts.
        """
        logger.info(
            "Processing upload",
            extra={
                "upload_id": message.upload_id,
                "object_name": message.object_name,
                "content_type": message.content_type,
            },
        )

        file_data = await asyncio.to_thread(
            self._storage.download, message.bucket_name, message.object_name
        )

        thumbnail_data = None
        if message.thumbnail_object_name:
            thumbnail_data = await asyncio.to_thread(
                self._storage.download,
                message.bucket_name,
                message.thumbnail_object_name,
            )

        job = VerificationJob(
            upload_id=message.upload_id,
            content_type=message.content_type,
            mime_type=message.mime_type,
            title=message.title,
            description=message.description,
            file_data=file_data,
            thumbnail_data=thumbnail_data,
            thumbnail_mime_type=message.thumbnail_mime_type,
        )

        result = await self._verifier.verify(job, on_progress=self._progress_sink)

        logger.info(
            "Upload processed",
            extra={
                "upload_id": message.upload_id,
                "is_approved": result.is_approved,
            },
        )
        return result
