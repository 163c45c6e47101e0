"""Abstract interface for the multi-modal content classifier."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from media_verifier.domain.models import InlineMedia


class ContentClassifier(ABC):
    """Abstract base class for content classification backends."""

    @abstractmethod
    async def classify(self, prompt: str, images: Sequence[InlineMedia]) -> str:
        """
        Sends the prompt and images to the classifier.

        Args:
            prompt: Description of the upload to judge.
            images: Images to attach, in the order the prompt refers to them.

        Returns:
            The classifier's raw text response.

        Raises:
            ClassifierError: If the classifier call fails.
        """
        pass
