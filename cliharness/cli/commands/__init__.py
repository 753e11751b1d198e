"""CLI command handlers."""

from .run import run_command, capture_command

__all__ = ['run_command', 'capture_command']
