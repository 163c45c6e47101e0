"""ffmpeg/ffprobe implementation of the MediaTools interface."""

import asyncio
import contextlib
import shutil
from pathlib import Path

from media_verifier.config import MediaToolsConfig
from media_verifier.domain.models import Frame, Sample, SampleWindow
from media_verifier.exceptions import (
    AudioExtractionError,
    FrameExtractionError,
    MediaToolError,
    MediaToolTimeoutError,
    MediaToolUnavailableError,
)
from media_verifier.logging import setup_logging

from .interfaces import MediaTools
from .temp_workspace import TempWorkspace

logger = setup_logging()

VIDEO_FALLBACK_DURATION = 10.0
AUDIO_FALLBACK_DURATION = 60.0
_STDERR_TAIL_CHARS = 500


def _seconds(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")


class FFmpegMediaTools(MediaTools):
    """Probes and samples uploads by shelling out to ffprobe and ffmpeg."""

    def __init__(self, config: MediaToolsConfig, workspace: TempWorkspace):
        self._config = config
        self._workspace = workspace

    def is_available(self) -> bool:
        return shutil.which(self._config.ffmpeg_path) is not None

    async def probe_duration(self, source: Path, mime_type: str) -> float:
        fallback = (
            VIDEO_FALLBACK_DURATION
            if mime_type.startswith("video")
            else AUDIO_FALLBACK_DURATION
        )
        if shutil.which(self._config.ffprobe_path) is None:
            logger.warning(
                "ffprobe not found, using default duration",
                extra={"duration": fallback},
            )
            return fallback

        try:
            stdout = await self._run(
                self._config.ffprobe_path,
                [
                    "-i", str(source),
                    "-show_entries", "format=duration",
                    "-v", "quiet",
                    "-of", "csv=p=0",
                ],
            )
        except (MediaToolError, MediaToolTimeoutError, OSError):
            logger.warning(
                "Could not get media duration, using default",
                exc_info=True,
                extra={"duration": fallback},
            )
            return fallback

        try:
            duration = float(stdout.strip())
        except ValueError:
            logger.warning(
                "Unparseable duration from ffprobe, using default",
                extra={"output": stdout.strip()[:100], "duration": fallback},
            )
            return fallback
        # NaN fails this comparison too.
        if not duration > 0:
            return fallback
        return duration

    async def extract_audio(self, source: Path, window: SampleWindow, tag: str) -> Sample:
        self._require_ffmpeg("audio extraction")

        args = ["-i", str(source)]
        if window.offset_seconds > 0:
            args += ["-ss", _seconds(window.offset_seconds)]
        args += [
            "-t", _seconds(window.duration_seconds),
            "-vn",
            "-acodec", "libmp3lame",
            "-ar", "44100",
            "-ac", "2",
        ]

        with self._workspace.scoped_path(tag, f"audio-{window.label}", ".mp3") as output:
            try:
                await self._run(self._config.ffmpeg_path, args + ["-y", str(output)])
                data = self._read_output(output)
            except (MediaToolError, MediaToolTimeoutError, OSError) as e:
                logger.exception(
                    "Error extracting audio sample",
                    extra={"offset": window.offset_seconds, "label": window.label},
                )
                raise AudioExtractionError(window.offset_seconds, e) from e

        return Sample(
            offset_seconds=window.offset_seconds,
            duration_seconds=window.duration_seconds,
            data=data,
            mime_type="audio/mpeg",
        )

    async def extract_frame(self, source: Path, timestamp: float, tag: str) -> Frame:
        self._require_ffmpeg("frame extraction")

        args = [
            "-ss", _seconds(timestamp),
            "-i", str(source),
            "-vframes", "1",
            "-vf", f"scale={self._config.frame_width}:-1",
            "-q:v", str(self._config.frame_quality),
        ]

        with self._workspace.scoped_path(tag, "frame", ".jpg") as output:
            try:
                await self._run(self._config.ffmpeg_path, args + ["-y", str(output)])
                data = self._read_output(output)
            except (MediaToolError, MediaToolTimeoutError, OSError) as e:
                logger.exception(
                    "Error extracting video frame", extra={"timestamp": timestamp}
                )
                raise FrameExtractionError(timestamp, e) from e

        return Frame(timestamp_seconds=timestamp, data=data, mime_type="image/jpeg")

    def _require_ffmpeg(self, purpose: str) -> None:
        if not self.is_available():
            raise MediaToolUnavailableError(self._config.ffmpeg_path, purpose)

    def _read_output(self, output: Path) -> bytes:
        data = output.read_bytes() if output.exists() else b""
        if not data:
            raise MediaToolError(self._config.ffmpeg_path, 0, "produced no output")
        return data

    async def _run(self, tool: str, args: list[str]) -> str:
        """
        Runs a media tool to completion and returns its stdout.

        The process is killed when it outlives the configured timeout or when
        the awaiting task is cancelled, so no tool keeps running after the
        job that started it has finished.
        """
        process = await asyncio.create_subprocess_exec(
            tool,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._config.timeout_seconds
            )
        except asyncio.TimeoutError:
            await self._kill(process)
            raise MediaToolTimeoutError(tool, self._config.timeout_seconds) from None
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        if process.returncode != 0:
            tail = stderr.decode("utf-8", errors="replace")[-_STDERR_TAIL_CHARS:].strip()
            raise MediaToolError(tool, process.returncode, tail)
        return stdout.decode("utf-8", errors="replace")

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
        await process.wait()
