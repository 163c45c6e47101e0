"""Gemini implementation of the TranscriptionService interface."""

from google import genai
from google.genai import types

from media_verifier.exceptions import TranscriptionError
from media_verifier.logging import setup_logging

from .interfaces import TranscriptionService

logger = setup_logging()

TRANSCRIBE_PROMPT = (
    "Transcribe the speech and sung lyrics in this audio clip verbatim, in the "
    "language spoken. Return only the transcript text. If there is no speech or "
    "singing, return an empty response."
)


class GeminiTranscriber(TranscriptionService):
    """Transcribes audio clips by sending them inline to Gemini."""

    def __init__(self, client: genai.Client, model_name: str):
        self._client = client
        self._model_name = model_name

    async def transcribe(self, audio_data: bytes, mime_type: str) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model_name,
                contents=[
                    types.Content(
                        role="user",
                        parts=[
                            types.Part.from_text(text=TRANSCRIBE_PROMPT),
                            types.Part.from_bytes(data=audio_data, mime_type=mime_type),
                        ],
                    )
                ],
            )
        except Exception as e:
            logger.exception("Gemini transcription failed")
            raise TranscriptionError("audio_sample", e) from e

        text = (response.text or "").strip()
        logger.info("Audio transcription successful", extra={"text_length": len(text)})
        return text
