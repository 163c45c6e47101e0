"""Moderation of an upload against the platform's content guidelines."""

import asyncio

from media_verifier.exceptions import ClassifierError
from media_verifier.infrastructure.interfaces import ContentClassifier
from media_verifier.logging import setup_logging

from .keyword_moderation import keyword_verdict
from .models import InlineMedia, ModerationInput, ModerationVerdict
from .verdict_parsing import MAX_FRAMES, build_moderation_prompt, parse_classifier_response

logger = setup_logging()

DEFAULT_CLASSIFIER_TIMEOUT = 60.0


class ContentModerator:
    """Asks the content classifier for a verdict, with a keyword fallback."""

    def __init__(
        self,
        classifier: ContentClassifier | None = None,
        timeout_seconds: float = DEFAULT_CLASSIFIER_TIMEOUT,
    ):
        self._classifier = classifier
        self._timeout_seconds = timeout_seconds
        if classifier is None:
            logger.warning(
                "No content classifier configured, moderation will use keyword checks only"
            )

    async def moderate(self, request: ModerationInput) -> ModerationVerdict:
        """
        Produces a verdict for one upload.

        Args:
            request: Text and images gathered for the upload.

        Returns:
            ModerationVerdict from the classifier, or from the keyword
            heuristic when the classifier is missing, fails or times out.
        """
        if self._classifier is None:
            return keyword_verdict(request)

        prompt = build_moderation_prompt(request)
        images = self._collect_images(request)

        try:
            raw = await asyncio.wait_for(
                self._classifier.classify(prompt, images), timeout=self._timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Content classification timed out, using keyword checks",
                extra={"timeout_seconds": self._timeout_seconds},
            )
            return keyword_verdict(request)
        except ClassifierError:
            logger.exception("Content classification failed, using keyword checks")
            return keyword_verdict(request)

        try:
            verdict = parse_classifier_response(raw)
        except Exception:
            logger.exception("Unparseable classifier response, using keyword checks")
            return keyword_verdict(request)

        logger.info(
            "Moderation completed",
            extra={
                "is_approved": verdict.is_approved,
                "confidence": verdict.confidence,
                "requires_review": verdict.requires_review,
                "image_count": len(images),
            },
        )
        return verdict

    def _collect_images(self, request: ModerationInput) -> list[InlineMedia]:
        """Thumbnail first, then up to three frames in timeline order."""
        images = []
        if request.thumbnail is not None:
            images.append(request.thumbnail)
        for frame in request.frames[:MAX_FRAMES]:
            images.append(InlineMedia(data=frame.data, mime_type=frame.mime_type))
        return images
