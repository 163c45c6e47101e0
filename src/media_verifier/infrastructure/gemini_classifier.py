"""Gemini implementation of the ContentClassifier interface."""

from collections.abc import Sequence

from google import genai
from google.genai import types

from media_verifier.domain.models import InlineMedia
from media_verifier.exceptions import ClassifierError
from media_verifier.logging import setup_logging

from .interfaces import ContentClassifier

logger = setup_logging()


class GeminiContentClassifier(ContentClassifier):
    """Content classifier backed by a multi-modal Gemini model."""

    def __init__(self, client: genai.Client, model_name: str, system_prompt: str):
        self._client = client
        self._model_name = model_name
        self._system_prompt = system_prompt

    async def classify(self, prompt: str, images: Sequence[InlineMedia]) -> str:
        """
        Sends the upload description and images to Gemini in one request.

        Args:
            prompt: Description of the upload to judge.
            images: Thumbnail and frames, in the order the prompt lists them.

        Returns:
            The model's raw text answer.

        Raises:
            ClassifierError: If the Gemini API call fails or returns nothing.
        """
        parts = [types.Part.from_text(text=prompt)]
        for image in images:
            parts.append(types.Part.from_bytes(data=image.data, mime_type=image.mime_type))

        try:
            response = await self._client.aio.models.generate_content(
                model=self._model_name,
                contents=[types.Content(role="user", parts=parts)],
                config={
                    "response_mime_type": "application/json",
                    "system_instruction": self._system_prompt,
                },
            )
        except Exception as e:
            logger.exception("Gemini API call failed")
            raise ClassifierError(f"Gemini classification failed: {e}", cause=e) from e

        if not response.text:
            raise ClassifierError("Gemini returned empty response")

        logger.info("Content classification completed", extra={"image_count": len(images)})
        return response.text
