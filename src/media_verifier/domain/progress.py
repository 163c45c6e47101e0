"""Progress reporting for a single verification job."""

from collections.abc import Callable
from datetime import datetime, timezone

from media_verifier.logging import setup_logging

from .models import ProgressEvent, ProgressStage

logger = setup_logging()

ProgressSink = Callable[[ProgressEvent], None]


class ProgressReporter:
    """Relays pipeline checkpoints for one upload to a caller-supplied sink."""

    def __init__(self, upload_id: str, sink: ProgressSink | None = None):
        self._upload_id = upload_id
        self._sink = sink

    def report(self, progress: int, stage: ProgressStage, message: str) -> ProgressEvent:
        """
        Builds an event and forwards it to the sink straight away.

        A failing sink is logged and otherwise ignored; progress delivery
        never decides the outcome of a verification.
        """
        event = ProgressEvent(
            upload_id=self._upload_id,
            progress=progress,
            stage=stage,
            message=message,
            timestamp=datetime.now(timezone.utc),
        )
        if self._sink is None:
            return event

        try:
            self._sink(event)
        except Exception:
            logger.exception(
                "Progress sink failed",
                extra={"upload_id": self._upload_id, "stage": stage},
            )
        return event
