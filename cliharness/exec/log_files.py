"""
Log file management for captured command output.

Owns the shared artifacts directory and hands out one fresh, truncated
binary sink per capture call. Callers are responsible for closing sinks.
"""

import asyncio
import logging
from pathlib import Path
from typing import BinaryIO, Union

from ..exceptions import SinkOpenError


logger = logging.getLogger(__name__)


class LogFileManager:
    """Creates and resets named log files inside one artifacts directory."""

    def __init__(self, artifacts_dir: Union[str, Path]):
        """
        Initialize log file manager.

        Args:
            artifacts_dir: Directory holding every log file this manager creates
        """
        self.artifacts_dir = Path(artifacts_dir).resolve()

    def ensure_directory(self) -> Path:
        """Create the artifacts directory if it does not exist yet."""
        self.artifacts_dir.mkdir(parents=True, exist_ok=True)
        return self.artifacts_dir

    def path_for(self, name: str) -> Path:
        """
        Resolve a log file name to an absolute path in the artifacts directory.

        Raises:
            ValueError: If the name is empty or escapes the artifacts directory
        """
        if not name or not name.strip():
            raise ValueError("Output file name must not be empty")

        path = (self.artifacts_dir / name).resolve()
        try:
            path.relative_to(self.artifacts_dir)
        except ValueError:
            raise ValueError(
                f"Output file name '{name}' resolves outside artifacts directory '{self.artifacts_dir}'"
            )
        if path == self.artifacts_dir:
            raise ValueError(f"Output file name '{name}' does not name a file")

        return path

    def remove_if_exists(self, path: Path) -> None:
        """
        Delete a previous log file at path, if any.

        Raises:
            SinkOpenError: If the previous file cannot be removed
        """
        if path.exists():
            logger.debug(f"Removing previous log file: {path}")
            try:
                path.unlink()
            except OSError as e:
                logger.error(f"Failed to remove previous log file {path}: {e}")
                raise SinkOpenError(path, e) from e

    async def open_sink(self, path: Path) -> BinaryIO:
        """
        Open a fresh writable sink at path.

        Returns only once the file is open.

        Raises:
            SinkOpenError: If the file cannot be opened
        """
        try:
            sink = await asyncio.to_thread(open, path, "wb")
        except OSError as e:
            logger.error(f"Failed to open log file {path}: {e}")
            raise SinkOpenError(path, e) from e

        logger.debug(f"Opened log file: {path}")
        return sink

    async def prepare(self, name: str) -> BinaryIO:
        """
        Reset the named log file and open a sink on it.

        Any previous contents are discarded. The caller must close the sink.
        """
        self.ensure_directory()
        path = self.path_for(name)
        self.remove_if_exists(path)
        return await self.open_sink(path)
