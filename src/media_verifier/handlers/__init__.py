"""Handler exports."""

from media_verifier.handlers.hooks import PostVerificationHook, ReviewAlertHook, run_hooks
from media_verifier.handlers.upload_message_handler import UploadMessageHandler

__all__ = [
    "PostVerificationHook",
    "ReviewAlertHook",
    "UploadMessageHandler",
    "run_hooks",
]
