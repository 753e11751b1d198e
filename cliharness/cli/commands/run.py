"""Run and capture command implementations."""

import asyncio
import logging
import sys
from argparse import Namespace
from typing import Optional

from cliharness import Harness
from cliharness.config import HarnessConfig, load_config
from cliharness.exceptions import CommandFailedError, ConfigValidationError, HarnessError
from cliharness.exec import RunOptions, SpawnOptions
from cliharness.text import strip_ansi


logger = logging.getLogger(__name__)

# Exit code for failures of the harness itself, as opposed to the command
HARNESS_ERROR_EXIT_CODE = 2


def setup_logging(args: Namespace, config: Optional[HarnessConfig] = None) -> None:
    """Configure root logging from --log-level/--debug, falling back to config."""
    level_name = args.log_level or (config.log_level if config else 'info')
    log_level = getattr(logging, level_name.upper())
    if args.debug:
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _load_harness(args: Namespace) -> Harness:
    try:
        config = load_config(args.config)
    except ConfigValidationError as e:
        setup_logging(args)
        for error in e.errors:
            location = f" ({error.path})" if error.path else ""
            logger.error(f"Validation error{location}: {error.message}")
        raise

    setup_logging(args, config)
    logger.debug(f"Artifacts directory: {config.artifacts_dir}")
    return Harness(config)


def run_command(args: Namespace) -> int:
    """
    Run a command inline and print its normalized stdout.

    Returns the command's exit code, or 2 if the harness itself failed.
    """
    try:
        harness = _load_harness(args)
    except ConfigValidationError as e:
        return e.exit_code

    options = RunOptions(pre=args.pre, post=args.post)
    try:
        output = asyncio.run(harness.inline.run(args.shell_command, options))
    except CommandFailedError as e:
        sys.stdout.write(strip_ansi(e.stdout))
        sys.stderr.write(strip_ansi(e.stderr))
        logger.info(f"Command failed with exit code {e.exit_code}")
        return e.exit_code
    except HarnessError as e:
        logger.error(str(e))
        return HARNESS_ERROR_EXIT_CODE

    sys.stdout.write(output)
    return 0


def capture_command(args: Namespace) -> int:
    """
    Run a command with its combined output captured to a log file.

    Prints the captured log and returns the captured exit code.
    """
    try:
        harness = _load_harness(args)
    except ConfigValidationError as e:
        return e.exit_code

    options = SpawnOptions(pre=args.pre, post=args.post, output_file_name=args.output_file)
    try:
        result = asyncio.run(harness.capture.capture(args.shell_command, options))
    except ValueError as e:
        logger.error(f"Invalid output file: {e}")
        return HARNESS_ERROR_EXIT_CODE
    except HarnessError as e:
        logger.error(str(e))
        return HARNESS_ERROR_EXIT_CODE

    sys.stdout.write(result.output if args.raw else result.plain_output)
    logger.info(f"Output captured to {result.log_path}")
    return result.exit_code
