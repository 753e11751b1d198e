"""
Run requests and shell command composition.
"""

from dataclasses import dataclass
from typing import Optional


CHAIN_OPERATOR = " && "


@dataclass
class RunOptions:
    """
    Optional shell steps wrapped around the primary command.

    Attributes:
        pre: Command to run before the primary command
        post: Command to run after the primary command
    """
    pre: Optional[str] = None
    post: Optional[str] = None


@dataclass
class SpawnOptions(RunOptions):
    """RunOptions plus the log file name, unique per call site."""
    output_file_name: str = ""


def build_command(command: str, options: Optional[RunOptions] = None) -> str:
    """
    Compose pre, command and post into one success-chained shell string.

    Absent steps are omitted entirely, so no empty chain links remain.
    """
    options = options or RunOptions()
    parts = [options.pre, command, options.post]
    return CHAIN_OPERATOR.join(part for part in parts if part)
