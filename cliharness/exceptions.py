"""Harness exceptions."""

from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass


class HarnessError(Exception):
    """Base class for failures of the harness itself.

    A non-zero exit from the command under test is data, not a HarnessError.
    When raised from a capture call, ``capture_state`` holds the last state
    the call reached before failing.
    """

    capture_state = None


class SpawnError(HarnessError):
    """Raised when the shell process could not be started at all."""

    def __init__(self, command: str, cause: OSError):
        self.command = command
        self.cause = cause
        super().__init__(f"Failed to start subprocess for '{command}': {cause}")


class SinkOpenError(HarnessError):
    """Raised when the log file could not be reset or opened for writing."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to open log file {path}: {cause}")


class OutputReadError(HarnessError):
    """Raised when a finished process's log file cannot be read back."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to read output file {path}: {cause}")


class CommandFailedError(Exception):
    """Raised by the inline runner when a command exits non-zero."""

    def __init__(self, command: str, exit_code: int, stdout: str = "", stderr: str = ""):
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr

        message = f"Command failed with exit code {exit_code}: {command}"
        if stderr:
            message += f"\n{stderr}"
        super().__init__(message)


class CommandOutputError(Exception):
    """Raised when a captured command fails; the message carries the full log."""

    def __init__(self, command: str, exit_code: int, output: str):
        self.command = command
        self.exit_code = exit_code
        self.output = output
        super().__init__(f"{command} exited with code {exit_code}: \n{output}")


@dataclass
class ValidationError:
    """Single config validation error."""
    message: str
    path: str = ""
    exit_code: int = 2


class ConfigValidationError(Exception):
    """Raised when harness configuration fails validation.

    Collects every problem found in one pass so the CLI can report them all
    and map to a single exit code.
    """

    def __init__(self, errors: List[ValidationError], source: Optional[Path] = None):
        self.errors = errors
        self.source = source
        self.exit_code = 2

        messages = []
        for error in errors:
            location = f" ({error.path})" if error.path else ""
            messages.append(f"Validation error{location}: {error.message}")

        super().__init__("\n".join(messages))
