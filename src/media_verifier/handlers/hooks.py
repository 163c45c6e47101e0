"""Actions run after an upload has been verified."""

from abc import ABC, abstractmethod

from media_verifier.domain import UploadMessage, VerificationResult
from media_verifier.infrastructure.interfaces import MessagePublisher
from media_verifier.logging import setup_logging

logger = setup_logging()


class PostVerificationHook(ABC):
    """Side effect triggered by a finished verification."""

    @abstractmethod
    def run(self, message: UploadMessage, result: VerificationResult) -> None:
        """
        Reacts to a verification result.

        Args:
            message: The upload event that was verified.
            result: The verification outcome.
        """


class ReviewAlertHook(PostVerificationHook):
    """Publishes a review request when the verdict needs a human moderator."""

    def __init__(self, publisher: MessagePublisher):
        self._publisher = publisher

    def run(self, message: UploadMessage, result: VerificationResult) -> None:
        if not result.moderation_result.requires_review:
            return

        self._publisher.publish_review(message, result)
        logger.info("Review requested", extra={"upload_id": message.upload_id})


def run_hooks(
    hooks: list[PostVerificationHook],
    message: UploadMessage,
    result: VerificationResult,
) -> None:
    """Runs every hook; a failing hook is logged and does not stop the rest."""
    for hook in hooks:
        try:
            hook.run(message, result)
        except Exception:
            logger.exception(
                "Post-verification hook failed",
                extra={"hook": type(hook).__name__, "upload_id": message.upload_id},
            )
