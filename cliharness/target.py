"""
Wrapper around the CLI under test.

The CLI is opaque to the harness: it is a command prefix such as
``node bin/mytool`` that arguments are appended to.
"""

import logging
from typing import TYPE_CHECKING, Optional, Union

from cliharness.exceptions import CommandFailedError, CommandOutputError
from cliharness.exec import CapturedResult, RunOptions, SpawnOptions

if TYPE_CHECKING:
    from cliharness import Harness


logger = logging.getLogger(__name__)


class TargetCli:
    """Runs the CLI under test through a Harness."""

    def __init__(self, executable: str, harness: 'Harness'):
        if not executable or not executable.strip():
            raise ValueError("Target CLI executable must not be empty")
        self.executable = executable.strip()
        self.harness = harness

    def command_for(self, args: str) -> str:
        return f"{self.executable} {args}".rstrip()

    async def run(self, args: str, options: Optional[RunOptions] = None) -> str:
        return await self.harness.inline.run(self.command_for(args), options)

    async def run_expecting_failure(
        self,
        args: str,
        options: Optional[RunOptions] = None,
    ) -> Union[CommandFailedError, str]:
        return await self.harness.inline.run_expecting_failure(self.command_for(args), options)

    async def spawn(self, args: str, options: SpawnOptions) -> CapturedResult:
        return await self.harness.capture.capture(self.command_for(args), options)

    async def spawn_or_raise(self, args: str, options: SpawnOptions) -> str:
        """
        Capture a CLI run and return its raw output if it exited 0.

        On any other exit code, raise CommandOutputError carrying the whole
        normalized log, so a failing test prints what the CLI said.
        """
        result = await self.spawn(args, options)
        if result.exit_code != 0:
            logger.error(f"{self.command_for(args)} exited with code {result.exit_code}, log: {result.log_path}")
            raise CommandOutputError(self.command_for(args), result.exit_code, result.plain_output)
        return result.output
