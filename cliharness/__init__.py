"""
Command-execution and log-capture harness.

Drives an external CLI as a subprocess and captures its output either in
memory (``run``) or through a per-call log file (``spawn_and_log``).
"""

from typing import Optional, Union

from cliharness.config import HarnessConfig, load_config
from cliharness.exceptions import (
    HarnessError,
    SpawnError,
    SinkOpenError,
    OutputReadError,
    CommandFailedError,
    CommandOutputError,
)
from cliharness.exec import (
    CaptureOrchestrator,
    CapturedResult,
    InlineRunner,
    LogFileManager,
    ProcessRunner,
    RunOptions,
    SpawnOptions,
    UNKNOWN_EXIT_CODE,
)
from cliharness.target import TargetCli
from cliharness.text import strip_ansi


class Harness:
    """Runners wired together from one HarnessConfig."""

    def __init__(self, config: Optional[HarnessConfig] = None):
        self.config = config or HarnessConfig()
        self.inline = InlineRunner(shell=self.config.shell, env=self.config.env)
        self.log_files = LogFileManager(self.config.artifacts_dir)
        self.runner = ProcessRunner(shell=self.config.shell, env=self.config.env)
        self.capture = CaptureOrchestrator(self.log_files, self.runner)

    def target(self, executable: Optional[str] = None) -> TargetCli:
        """Wrap the CLI under test, defaulting to the configured target_cli."""
        executable = executable or self.config.target_cli
        if not executable:
            raise ValueError("No target CLI given and none configured (target_cli)")
        return TargetCli(executable, self)


_default_harness: Optional[Harness] = None


def get_default_harness() -> Harness:
    """Build the module-level harness from load_config() on first use."""
    global _default_harness
    if _default_harness is None:
        _default_harness = Harness(load_config())
    return _default_harness


async def run(command: str, options: Optional[RunOptions] = None) -> str:
    """Run a chained command and return its normalized stdout."""
    return await get_default_harness().inline.run(command, options)


async def run_expecting_failure(
    command: str,
    options: Optional[RunOptions] = None,
) -> Union[CommandFailedError, str]:
    """Run a command expected to fail; see InlineRunner.run_expecting_failure."""
    return await get_default_harness().inline.run_expecting_failure(command, options)


async def spawn_and_log(command: str, options: SpawnOptions) -> CapturedResult:
    """Run a chained command with its combined output captured to a log file."""
    return await get_default_harness().capture.capture(command, options)


__all__ = [
    "Harness",
    "HarnessConfig",
    "TargetCli",
    "load_config",
    "get_default_harness",
    "run",
    "run_expecting_failure",
    "spawn_and_log",
    "strip_ansi",
    "RunOptions",
    "SpawnOptions",
    "CapturedResult",
    "UNKNOWN_EXIT_CODE",
    "HarnessError",
    "SpawnError",
    "SinkOpenError",
    "OutputReadError",
    "CommandFailedError",
    "CommandOutputError",
]
