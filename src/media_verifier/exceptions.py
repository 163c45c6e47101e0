"""Custom exceptions for the media verification service."""


class MediaToolUnavailableError(Exception):
    """Raised when a required media binary is not on PATH."""

    def __init__(self, tool: str, purpose: str):
        self.tool = tool
        self.purpose = purpose
        super().__init__(f"{tool} is required for {purpose}")


class MediaToolError(Exception):
    """Raised when a media tool subprocess exits with a non-zero status."""

    def __init__(self, tool: str, returncode: int | None, stderr: str = ""):
        self.tool = tool
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr}" if stderr else ""
        super().__init__(f"{tool} exited with status {returncode}{detail}")


class MediaToolTimeoutError(Exception):
    """Raised when a media tool subprocess exceeds its time budget."""

    def __init__(self, tool: str, timeout_seconds: float):
        self.tool = tool
        self.timeout_seconds = timeout_seconds
        super().__init__(f"{tool} did not finish within {timeout_seconds:g}s")


class AudioExtractionError(Exception):
    """Raised when an audio sample cannot be cut from the upload."""

    def __init__(self, offset_seconds: float, cause: Exception | None = None):
        self.offset_seconds = offset_seconds
        self.cause = cause
        super().__init__(
            f"Audio extraction failed at offset {offset_seconds:g}s: {cause}"
        )


class FrameExtractionError(Exception):
    """Raised when a still frame cannot be extracted from the upload."""

    def __init__(self, timestamp_seconds: float, cause: Exception | None = None):
        self.timestamp_seconds = timestamp_seconds
        self.cause = cause
        super().__init__(
            f"Frame extraction failed at {timestamp_seconds:g}s: {cause}"
        )


class TranscriptionError(Exception):
    """Raised when audio transcription fails."""

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        super().__init__(f"Failed to transcribe audio '{source}'")


class ClassifierError(Exception):
    """Raised when the content classifier call fails."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class StorageDownloadError(Exception):
    """Raised when downloading a file from storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to download '{object_name}' from storage")


class EventPublishError(Exception):
    """Raised when publishing an event to the message broker fails."""

    def __init__(self, routing_key: str, cause: Exception | None = None):
        self.routing_key = routing_key
        self.cause = cause
        super().__init__(f"Failed to publish event with routing key '{routing_key}'")


class VerificationError(Exception):
    """Raised when the verification pipeline for an upload aborts."""

    def __init__(self, upload_id: str, cause: Exception | None = None):
        self.upload_id = upload_id
        self.cause = cause
        super().__init__(f"Verification failed for upload '{upload_id}': {cause}")
