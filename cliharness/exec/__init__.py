"""
Execution module for the harness.
Handles command composition, process execution, and output capture.
"""

from .command import RunOptions, SpawnOptions, build_command
from .log_files import LogFileManager
from .process_runner import ProcessRunner, ExitStatus, UNKNOWN_EXIT_CODE
from .capture import CaptureOrchestrator, CaptureState, CapturedResult
from .inline import InlineRunner

__all__ = [
    "RunOptions",
    "SpawnOptions",
    "build_command",
    "LogFileManager",
    "ProcessRunner",
    "ExitStatus",
    "UNKNOWN_EXIT_CODE",
    "CaptureOrchestrator",
    "CaptureState",
    "CapturedResult",
    "InlineRunner",
]
