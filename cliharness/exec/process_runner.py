"""
Process runner that streams a shell command's output into a log sink.

Both stdout and stderr of the child are bound to the same sink file, so
bytes land on disk in emission order and nothing is buffered in memory.
"""

import asyncio
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Dict, Optional

from ..exceptions import SpawnError


logger = logging.getLogger(__name__)


# Reported when a process ends without an exit code (e.g. killed by a signal).
# Outside the 0-255 codes a shell produces in practice, and distinct from 0/1.
UNKNOWN_EXIT_CODE = 99


@dataclass(frozen=True)
class ExitStatus:
    """
    How a child process terminated.

    Exactly one of ``code`` and ``signal`` is set for a process that exited
    normally or was signaled; both are None when the runtime reported no
    status at all.
    """
    code: Optional[int] = None
    signal: Optional[int] = None

    @classmethod
    def exited(cls, code: int) -> 'ExitStatus':
        return cls(code=code)

    @classmethod
    def signaled(cls, signal: int) -> 'ExitStatus':
        return cls(signal=signal)

    @classmethod
    def unknown(cls) -> 'ExitStatus':
        return cls()

    @classmethod
    def from_returncode(cls, returncode: Optional[int]) -> 'ExitStatus':
        """Map a subprocess return code (negative for signals) to a status."""
        if returncode is None:
            return cls.unknown()
        if returncode < 0:
            return cls.signaled(-returncode)
        return cls.exited(returncode)

    @property
    def exit_code(self) -> int:
        """Numeric exit code, with UNKNOWN_EXIT_CODE when none was reported."""
        if self.code is None:
            return UNKNOWN_EXIT_CODE
        return self.code

    @property
    def success(self) -> bool:
        return self.code == 0


class _ExitProtocol(asyncio.SubprocessProtocol):
    """Bridges process exit callbacks into a future that settles once."""

    def __init__(self, exited: asyncio.Future):
        self.exited = exited
        self.transport: Optional[asyncio.SubprocessTransport] = None

    def connection_made(self, transport):
        self.transport = transport

    def process_exited(self):
        returncode = self.transport.get_returncode() if self.transport else None
        if not self.exited.done():
            self.exited.set_result(returncode)

    def connection_lost(self, exc):
        # Covers transports torn down without a process_exited callback
        if not self.exited.done():
            self.exited.set_result(self.transport.get_returncode() if self.transport else None)


class ProcessRunner:
    """
    Runs one shell command at a time against a writable sink.
    """

    def __init__(
        self,
        shell: str = "sh",
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[Path] = None,
    ):
        """
        Initialize process runner.

        Args:
            shell: POSIX shell invoked as ``<shell> -c <command>``
            env: Environment variables to add/override on top of the parent's
            cwd: Working directory (default: current directory)
        """
        self.shell = shell
        self.env = env or {}
        self.cwd = cwd

    def _process_env(self) -> Dict[str, str]:
        process_env = os.environ.copy()
        process_env.update(self.env)
        return process_env

    async def run(self, command: str, sink: BinaryIO) -> ExitStatus:
        """
        Spawn the command and wait for it to terminate.

        Args:
            command: Full shell command string
            sink: Open binary file receiving both stdout and stderr

        Returns:
            ExitStatus of the terminated process

        Raises:
            SpawnError: If the shell process could not be started
        """
        loop = asyncio.get_running_loop()
        exited = loop.create_future()

        logger.debug(f"Executing command: {command}")
        try:
            transport, _ = await loop.subprocess_exec(
                lambda: _ExitProtocol(exited),
                self.shell, "-c", command,
                stdin=subprocess.DEVNULL,
                stdout=sink,
                stderr=sink,
                env=self._process_env(),
                cwd=str(self.cwd) if self.cwd else None,
            )
        except OSError as e:
            logger.error(f"Failed to start subprocess: {e}")
            raise SpawnError(command, e) from e

        try:
            returncode = await exited
        finally:
            transport.close()

        status = ExitStatus.from_returncode(returncode)
        if status.signal is not None:
            logger.info(f"{command} terminated by signal {status.signal}")
        logger.info(f"{command} exited with code {status.exit_code}")
        return status
