"""Scoped ownership of temporary files created during one pipeline run."""

import os
import tempfile
import uuid
from pathlib import Path
from typing import List, Optional, Union

from ..utils.logging import get_logger

logger = get_logger(__name__)


class TempFileScope:
    """Track temporary paths and delete all of them on exit.

    Used as a context manager; release happens on normal exit, exceptions and
    task cancellation alike. Deletion failures are logged, never raised.

    Example::

        with TempFileScope(base_dir) as scope:
            wav = scope.new_path("voice.silk", ".wav")
            ...
    """

    def __init__(self, base_dir: Optional[Union[str, Path]] = None):
        self.base_dir = Path(base_dir) if base_dir else Path(tempfile.gettempdir())
        self._paths: List[Path] = []

    def new_path(self, source: Union[str, Path], suffix: str) -> Path:
        """Allocate and register a unique path derived from ``source``.

        The name combines the source stem with a random suffix so concurrent
        runs on same-named attachments never collide.
        """
        stem = Path(source).stem or "audio"
        path = self.base_dir / f"{stem}.{uuid.uuid4().hex}{suffix}"
        self.register(path)
        return path

    def register(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        if path not in self._paths:
            self._paths.append(path)
        return path

    @property
    def paths(self) -> List[Path]:
        return list(self._paths)

    def release(self) -> None:
        """Delete every registered path that still exists."""
        for path in reversed(self._paths):
            try:
                os.remove(path)
                logger.debug("Cleaned up temporary audio file", extra={"path": str(path)})
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(
                    "Failed to remove temporary audio file",
                    extra={"path": str(path), "error": str(e)},
                )
        self._paths.clear()

    def __enter__(self) -> "TempFileScope":
        self.base_dir.mkdir(parents=True, exist_ok=True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()
