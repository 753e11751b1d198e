"""
Capture orchestration: run a command with its combined output logged to a file.

Using a file rather than pipes means the complete output survives when the
process floods stdio, hangs until killed, or crashes. The log stays on disk
for troubleshooting; keep in mind it holds raw text, so ANSI codes need
stripping (see ``CapturedResult.plain_output``) before it is readable.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .command import SpawnOptions, build_command
from .log_files import LogFileManager
from .process_runner import ExitStatus, ProcessRunner
from ..exceptions import HarnessError, OutputReadError
from ..text import strip_ansi


logger = logging.getLogger(__name__)


class CaptureState(str, Enum):
    """Lifecycle states of one capture call."""
    IDLE = "idle"
    DIRECTORY_READY = "directory_ready"
    FILE_PREPARED = "file_prepared"
    SINK_OPEN = "sink_open"
    PROCESS_RUNNING = "process_running"
    SINK_CLOSED = "sink_closed"
    RESULT_READ = "result_read"
    DONE = "done"
    ERROR = "error"


@dataclass
class CapturedResult:
    """Exit code and complete, un-normalized output of one capture call."""
    exit_code: int
    output: str
    status: ExitStatus
    log_path: Path

    @property
    def plain_output(self) -> str:
        """Output with terminal escape sequences removed."""
        return strip_ansi(self.output)


@dataclass
class _CaptureSession:
    """Tracks the state of a single in-flight capture call."""
    command: str
    state: CaptureState = CaptureState.IDLE

    def advance(self, state: CaptureState) -> None:
        logger.debug(f"Capture '{self.command}': {self.state.value} -> {state.value}")
        self.state = state


class CaptureOrchestrator:
    """
    Runs commands with output captured to per-call log files.

    Each call owns its sink exclusively and always closes it, whether the
    command succeeds, fails, or the harness itself errors.
    """

    def __init__(self, log_files: LogFileManager, runner: Optional[ProcessRunner] = None):
        """
        Initialize capture orchestrator.

        Args:
            log_files: Manager for the artifacts directory and log sinks
            runner: Process runner (default: ProcessRunner with ``sh``)
        """
        self.log_files = log_files
        self.runner = runner or ProcessRunner()

    async def capture(self, command: str, options: SpawnOptions) -> CapturedResult:
        """
        Execute a command and return its exit code and logged output.

        Non-zero exit codes are returned as data. The returned output is raw;
        normalization is up to the caller.

        Args:
            command: Primary shell command
            options: Pre/post steps and the log file name

        Returns:
            CapturedResult for the finished process

        Raises:
            SpawnError: If the shell could not be started
            SinkOpenError: If the previous log file could not be removed or
                the new one could not be opened
            OutputReadError: If the log file could not be read back
            ValueError: If the output file name is empty or resolves outside
                the artifacts directory
        """
        full_command = build_command(command, options)
        session = _CaptureSession(command=full_command)

        self.log_files.ensure_directory()
        session.advance(CaptureState.DIRECTORY_READY)

        log_path = self.log_files.path_for(options.output_file_name)
        try:
            self.log_files.remove_if_exists(log_path)
            session.advance(CaptureState.FILE_PREPARED)
            sink = await self.log_files.open_sink(log_path)
        except HarnessError as e:
            e.capture_state = session.state
            raise
        session.advance(CaptureState.SINK_OPEN)

        try:
            session.advance(CaptureState.PROCESS_RUNNING)
            status = await self.runner.run(full_command, sink)
        except BaseException as e:
            sink.close()
            if isinstance(e, HarnessError):
                e.capture_state = session.state
            session.advance(CaptureState.ERROR)
            raise
        sink.close()
        session.advance(CaptureState.SINK_CLOSED)

        try:
            data = await asyncio.to_thread(log_path.read_bytes)
        except OSError as e:
            logger.error(f"Failed to read output file {log_path}: {e}")
            session.advance(CaptureState.ERROR)
            error = OutputReadError(log_path, e)
            error.capture_state = CaptureState.SINK_CLOSED
            raise error from e
        session.advance(CaptureState.RESULT_READ)

        result = CapturedResult(
            exit_code=status.exit_code,
            output=data.decode("utf-8", errors="replace"),
            status=status,
            log_path=log_path,
        )
        session.advance(CaptureState.DONE)
        return result
