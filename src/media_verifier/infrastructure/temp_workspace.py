"""Scratch directory shared by all verification jobs in the process."""

import logging
import re
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


class TempWorkspace:
    """
    Hands out collision-free paths under one temporary directory.

    The directory is created on first use. Jobs never share a file: every
    path carries the job tag, a millisecond timestamp and a random token, and
    every path handed out by the context managers is deleted on exit.
    """

    def __init__(self, root: Path):
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def unique_path(self, tag: str, kind: str, suffix: str = "") -> Path:
        self._root.mkdir(parents=True, exist_ok=True)
        safe_tag = _UNSAFE_CHARS.sub("_", tag) or "job"
        token = uuid.uuid4().hex[:9]
        return self._root / f"{safe_tag}-{kind}-{int(time.time() * 1000)}-{token}{suffix}"

    @contextmanager
    def scoped_path(self, tag: str, kind: str, suffix: str = "") -> Iterator[Path]:
        """Yields a fresh path that is removed when the block exits."""
        path = self.unique_path(tag, kind, suffix)
        try:
            yield path
        finally:
            self.discard(path)

    @contextmanager
    def scoped_file(self, tag: str, kind: str, data: bytes) -> Iterator[Path]:
        """Writes data to a fresh path and removes it when the block exits."""
        with self.scoped_path(tag, kind) as path:
            path.write_bytes(data)
            yield path

    def discard(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Failed to remove temporary file", extra={"path": str(path)})
