"""Decides which parts of an upload get sampled for moderation."""

from .models import SampleWindow

SAMPLE_SECONDS = 60.0
SINGLE_SAMPLE_MAX_DURATION = 120.0
MIDDLE_SAMPLE_MIN_DURATION = 180.0

FIRST_FRAME_MIN_SECONDS = 5.0
LAST_FRAME_TAIL_SECONDS = 10.0
DEFAULT_FRAME_COUNT = 3


def plan_audio_samples(total_duration: float) -> list[SampleWindow]:
    """
    Plans the audio windows to cut from an upload.

    Short uploads get a single window from the start. Longer ones are sampled
    at the beginning and end, plus the middle once they pass three minutes,
    so content placed anywhere in the timeline is heard.

    Args:
        total_duration: Upload length in seconds.

    Returns:
        Windows in timeline order.
    """
    if total_duration <= SINGLE_SAMPLE_MAX_DURATION:
        return [
            SampleWindow(
                label="beginning",
                offset_seconds=0.0,
                duration_seconds=min(SAMPLE_SECONDS, total_duration),
            )
        ]

    windows = [
        SampleWindow(label="beginning", offset_seconds=0.0, duration_seconds=SAMPLE_SECONDS)
    ]
    if total_duration > MIDDLE_SAMPLE_MIN_DURATION:
        windows.append(
            SampleWindow(
                label="middle",
                offset_seconds=max(0.0, total_duration / 2 - SAMPLE_SECONDS / 2),
                duration_seconds=SAMPLE_SECONDS,
            )
        )
    windows.append(
        SampleWindow(
            label="end",
            offset_seconds=max(0.0, total_duration - SAMPLE_SECONDS),
            duration_seconds=SAMPLE_SECONDS,
        )
    )
    return windows


def plan_frame_timestamps(
    total_duration: float, frame_count: int = DEFAULT_FRAME_COUNT
) -> list[float]:
    """
    Plans where to grab still frames, biased toward the very start and end.

    Args:
        total_duration: Video length in seconds.
        frame_count: Number of frames wanted.

    Returns:
        Timestamps in seconds, in timeline order for the default count.
    """
    d = total_duration
    if frame_count <= 0:
        return []
    if frame_count == 1:
        timestamps = [max(FIRST_FRAME_MIN_SECONDS, d * 0.5)]
    elif frame_count == 2:
        timestamps = [max(FIRST_FRAME_MIN_SECONDS, d * 0.1), d * 0.5]
    elif frame_count == 3:
        timestamps = [
            max(FIRST_FRAME_MIN_SECONDS, d * 0.05),
            d * 0.5,
            max(d - LAST_FRAME_TAIL_SECONDS, d * 0.95),
        ]
    else:
        timestamps = [max(FIRST_FRAME_MIN_SECONDS, d * 0.05)]
        timestamps.extend((d / frame_count) * i for i in range(1, frame_count - 1))
        timestamps.append(max(d - LAST_FRAME_TAIL_SECONDS, d * 0.95))

    # Seeking at or past the end of a very short clip yields no frame.
    return [ts if ts < d else d * 0.95 for ts in timestamps]
