"""Domain layer exports."""

from media_verifier.domain.models import (
    Frame,
    InlineMedia,
    ModerationInput,
    ModerationVerdict,
    ProgressEvent,
    Sample,
    SampleWindow,
    UploadMessage,
    VerificationJob,
    VerificationResult,
)
from media_verifier.domain.progress import ProgressReporter, ProgressSink
from media_verifier.domain.sampling import plan_audio_samples, plan_frame_timestamps
from media_verifier.domain.text_extraction import DocumentTextExtractor

__all__ = [
    "DocumentTextExtractor",
    "Frame",
    "InlineMedia",
    "ModerationInput",
    "ModerationVerdict",
    "ProgressEvent",
    "ProgressReporter",
    "ProgressSink",
    "Sample",
    "SampleWindow",
    "UploadMessage",
    "VerificationJob",
    "VerificationResult",
    "plan_audio_samples",
    "plan_frame_timestamps",
]
