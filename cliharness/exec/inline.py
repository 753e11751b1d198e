"""
Inline runner for short-lived commands whose output fits in memory.
"""

import asyncio
import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, Optional, Union

from .command import RunOptions, build_command
from .process_runner import ExitStatus
from ..exceptions import CommandFailedError, SpawnError
from ..text import strip_ansi


logger = logging.getLogger(__name__)


class InlineRunner:
    """
    Runs a chained command and returns its normalized stdout.

    A non-zero exit raises CommandFailedError, which is what makes
    "expect success" assertions fail on their own.
    """

    def __init__(
        self,
        shell: str = "sh",
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[Path] = None,
    ):
        self.shell = shell
        self.env = env or {}
        self.cwd = cwd

    async def run(self, command: str, options: Optional[RunOptions] = None) -> str:
        """
        Run a command and return its stdout with escape sequences stripped.

        Raises:
            CommandFailedError: If the command exits non-zero
            SpawnError: If the shell could not be started
        """
        full_command = build_command(command, options)

        process_env = os.environ.copy()
        process_env.update(self.env)

        logger.debug(f"Executing command: {full_command}")
        try:
            process = await asyncio.create_subprocess_exec(
                self.shell, "-c", full_command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=process_env,
                cwd=str(self.cwd) if self.cwd else None,
            )
        except OSError as e:
            logger.error(f"Failed to start subprocess: {e}")
            raise SpawnError(full_command, e) from e

        stdout, stderr = await process.communicate()
        status = ExitStatus.from_returncode(process.returncode)

        stdout_text = stdout.decode("utf-8", errors="replace")
        if not status.success:
            raise CommandFailedError(
                full_command,
                status.exit_code,
                stdout=stdout_text,
                stderr=stderr.decode("utf-8", errors="replace"),
            )

        return strip_ansi(stdout_text)

    async def run_expecting_failure(
        self,
        command: str,
        options: Optional[RunOptions] = None,
    ) -> Union[CommandFailedError, str]:
        """
        Run a command that is expected to fail.

        Returns:
            The CommandFailedError on non-zero exit, or a string noting that
            no error was thrown so the caller can fail its assertion. That
            string embeds stdout with escape sequences already stripped, the
            same text ``run`` would have returned.
        """
        try:
            output = await self.run(command, options)
        except CommandFailedError as e:
            return e
        return f"No error thrown? Output: {output}"
