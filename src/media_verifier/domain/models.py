"""Domain models for media verification."""

import base64
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ContentType = Literal["videos", "music", "audio", "books"]

ProgressStage = Literal[
    "file_received",
    "validating",
    "analyzing",
    "moderating",
    "finalizing",
    "error",
]

SampleLabel = Literal["beginning", "middle", "end"]


class VerificationJob(BaseModel, frozen=True):
    """One verification request. Lives only for the duration of the call."""

    upload_id: str
    content_type: ContentType
    mime_type: str
    title: str
    description: str | None = None
    file_data: bytes = Field(repr=False)
    thumbnail_data: bytes | None = Field(default=None, repr=False)
    thumbnail_mime_type: str | None = None


class SampleWindow(BaseModel, frozen=True):
    """A planned audio sample: where to seek and how much to cut."""

    label: SampleLabel
    offset_seconds: float
    duration_seconds: float


class Sample(BaseModel, frozen=True):
    """An extracted audio clip."""

    offset_seconds: float
    duration_seconds: float
    data: bytes = Field(repr=False)
    mime_type: str = "audio/mpeg"


class Frame(BaseModel, frozen=True):
    """A still image taken from a video upload."""

    timestamp_seconds: float
    data: bytes = Field(repr=False)
    mime_type: str = "image/jpeg"

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class InlineMedia(BaseModel, frozen=True):
    """Raw bytes sent inline to an external model."""

    data: bytes = Field(repr=False)
    mime_type: str


class ModerationInput(BaseModel, frozen=True):
    """Everything the moderator looks at for a single upload."""

    title: str
    description: str | None = None
    content_type: str
    transcript: str | None = None
    frames: tuple[Frame, ...] = ()
    thumbnail: InlineMedia | None = None

    def searchable_text(self) -> str:
        """Title, description and transcript as one lowercase string."""
        parts = [self.title or "", self.description or "", self.transcript or ""]
        return " ".join(parts).lower()


class ModerationVerdict(BaseModel, frozen=True):
    """Outcome of moderating one upload."""

    is_approved: bool
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str
    flags: frozenset[str] = frozenset()
    requires_review: bool


class ProgressEvent(BaseModel, frozen=True):
    """A single pipeline checkpoint for an upload."""

    upload_id: str
    progress: int = Field(ge=0, le=100)
    stage: ProgressStage
    message: str
    timestamp: datetime


class VerificationResult(BaseModel, frozen=True):
    """Result returned to the caller once the pipeline completes."""

    is_approved: bool
    moderation_result: ModerationVerdict
    transcript: str | None = None
    video_frames: tuple[Frame, ...] | None = None


class UploadMessage(BaseModel, frozen=True):
    """Incoming upload event pointing at the media in object storage."""

    upload_id: str
    bucket_name: str
    object_name: str
    mime_type: str
    content_type: ContentType
    title: str
    description: str | None = None
    thumbnail_object_name: str | None = None
    thumbnail_mime_type: str | None = None
    user_id: str | None = None


class VerificationCompletedEvent(BaseModel, frozen=True):
    """Outgoing event announcing the outcome of a verification."""

    upload_id: str
    user_id: str | None = None
    is_approved: bool
    requires_review: bool
    confidence: float
    reason: str
    flags: list[str]
    transcript: str | None = None
    video_frames: list[str] = []

    @classmethod
    def from_result(
        cls, message: UploadMessage, result: VerificationResult
    ) -> "VerificationCompletedEvent":
        verdict = result.moderation_result
        return cls(
            upload_id=message.upload_id,
            user_id=message.user_id,
            is_approved=result.is_approved,
            requires_review=verdict.requires_review,
            confidence=verdict.confidence,
            reason=verdict.reason,
            flags=sorted(verdict.flags),
            transcript=result.transcript,
            video_frames=[frame.to_data_url() for frame in result.video_frames or ()],
        )


class ReviewRequestedEvent(BaseModel, frozen=True):
    """Outgoing event asking a human moderator to look at an upload."""

    upload_id: str
    user_id: str | None = None
    title: str
    content_type: ContentType
    is_approved: bool
    confidence: float
    reason: str
    flags: list[str]

    @classmethod
    def from_result(
        cls, message: UploadMessage, result: VerificationResult
    ) -> "ReviewRequestedEvent":
        verdict = result.moderation_result
        return cls(
            upload_id=message.upload_id,
            user_id=message.user_id,
            title=message.title,
            content_type=message.content_type,
            is_approved=verdict.is_approved,
            confidence=verdict.confidence,
            reason=verdict.reason,
            flags=sorted(verdict.flags),
        )
