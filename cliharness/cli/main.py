"""Main CLI entry point for cliharness."""

import argparse
import sys
from typing import Optional

from .commands import run_command, capture_command


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the cliharness CLI."""
    parser = argparse.ArgumentParser(
        prog='cliharness',
        description='Run shell commands with deterministic output capture'
    )
    parser.add_argument(
        '--config',
        type=str,
        help='Path to harness config YAML (default: ./cliharness.yaml)'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default=None,
        help='Set log level (default: from config)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Run a command and print its normalized stdout')
    run_parser.add_argument(
        'shell_command',
        type=str,
        help='Shell command to run'
    )
    _add_chain_arguments(run_parser)

    # Capture command
    capture_parser = subparsers.add_parser(
        'capture',
        help='Run a command with combined output captured to a log file'
    )
    capture_parser.add_argument(
        'shell_command',
        type=str,
        help='Shell command to run'
    )
    capture_parser.add_argument(
        '--output-file',
        type=str,
        required=True,
        metavar='NAME',
        help='Log file name inside the artifacts directory'
    )
    capture_parser.add_argument(
        '--raw',
        action='store_true',
        help='Print the log without stripping escape sequences'
    )
    _add_chain_arguments(capture_parser)

    return parser


def _add_chain_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--pre',
        type=str,
        help='Command to run before the main command'
    )
    parser.add_argument(
        '--post',
        type=str,
        help='Command to run after the main command'
    )


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'run':
        return run_command(parsed_args)
    elif parsed_args.command == 'capture':
        return capture_command(parsed_args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
