"""Harness configuration loaded from YAML with environment overrides."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import yaml

from cliharness.exceptions import ValidationError, ConfigValidationError


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_FILE = "cliharness.yaml"
DEFAULT_ARTIFACTS_DIR = "artifacts"
CONFIG_ENV_VAR = "CLIHARNESS_CONFIG"

LOG_LEVELS = {"debug", "info", "warn", "warning", "error"}


@dataclass
class HarnessConfig:
    """
    Settings shared by every runner of one harness.

    Attributes:
        artifacts_dir: Directory holding captured log files
        shell: POSIX shell used as ``<shell> -c <command>``
        target_cli: Command prefix of the CLI under test, if any
        env: Environment variables added on top of the parent's
        log_level: Default log level for the command line entry point
    """
    artifacts_dir: Path = field(default_factory=lambda: Path.cwd() / DEFAULT_ARTIFACTS_DIR)
    shell: str = "sh"
    target_cli: Optional[str] = None
    env: Dict[str, str] = field(default_factory=dict)
    log_level: str = "info"


class ConfigLoader:
    """Loads and validates harness configuration."""

    KNOWN_KEYS = {"artifacts_dir", "shell", "target_cli", "env", "log_level"}

    ENV_OVERRIDES = {
        "CLIHARNESS_ARTIFACTS_DIR": "artifacts_dir",
        "CLIHARNESS_SHELL": "shell",
        "CLIHARNESS_TARGET_CLI": "target_cli",
    }

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self.environ = os.environ if environ is None else environ
        self.errors: List[ValidationError] = []

    def find_config_file(self, path: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """Locate the config file: explicit path, then env var, then ./cliharness.yaml."""
        if path:
            return Path(path)

        env_path = self.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path)

        default = Path.cwd() / DEFAULT_CONFIG_FILE
        if default.exists():
            return default
        return None

    def load(self, path: Optional[Union[str, Path]] = None) -> HarnessConfig:
        """Load configuration, apply environment overrides, and validate."""
        self.errors = []
        config_path = self.find_config_file(path)

        raw: Dict[str, Any] = {}
        base_dir = Path.cwd()
        if config_path is not None:
            base_dir = config_path.resolve().parent
            raw = self._read_yaml(config_path)

        for env_var, key in self.ENV_OVERRIDES.items():
            value = self.environ.get(env_var)
            if value:
                logger.debug(f"Config override from {env_var}: {key}={value}")
                raw[key] = value

        self._validate(raw)
        if self.errors:
            raise ConfigValidationError(self.errors, source=config_path)

        artifacts_dir = Path(raw.get("artifacts_dir", DEFAULT_ARTIFACTS_DIR)).expanduser()
        if not artifacts_dir.is_absolute():
            artifacts_dir = base_dir / artifacts_dir

        return HarnessConfig(
            artifacts_dir=artifacts_dir,
            shell=raw.get("shell", "sh"),
            target_cli=raw.get("target_cli"),
            env={str(k): _env_value(v) for k, v in (raw.get("env") or {}).items()},
            log_level=raw.get("log_level", "info"),
        )

    def _read_yaml(self, config_path: Path) -> Dict[str, Any]:
        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            self._add_error(f"Failed to load config: {e}")
            raise ConfigValidationError(self.errors, source=config_path)

        if data is None:
            return {}
        if not isinstance(data, dict):
            self._add_error("Config must be a YAML object/dictionary")
            raise ConfigValidationError(self.errors, source=config_path)

        logger.debug(f"Loaded config: {config_path}")
        return data

    def _validate(self, raw: Dict[str, Any]) -> None:
        for key in raw:
            if key not in self.KNOWN_KEYS:
                self._add_error(f"Unknown field '{key}'", key)

        for key in ("artifacts_dir", "shell", "target_cli", "log_level"):
            value = raw.get(key)
            if value is not None and not isinstance(value, str):
                self._add_error(f"'{key}' must be a string, got {type(value).__name__}", key)

        shell = raw.get("shell")
        if isinstance(shell, str) and not shell.strip():
            self._add_error("'shell' must not be empty", "shell")

        env = raw.get("env")
        if env is not None and not isinstance(env, dict):
            self._add_error(f"'env' must be a mapping, got {type(env).__name__}", "env")
        elif env:
            for name, value in env.items():
                if isinstance(value, (dict, list)):
                    self._add_error(
                        f"Environment value for '{name}' must be a scalar, got {type(value).__name__}",
                        f"env.{name}"
                    )

        log_level = raw.get("log_level")
        if isinstance(log_level, str) and log_level.lower() not in LOG_LEVELS:
            self._add_error(f"Unknown log level '{log_level}'", "log_level")

    def _add_error(self, message: str, path: str = "") -> None:
        self.errors.append(ValidationError(message=message, path=path))


def _env_value(value: Any) -> str:
    """Render a YAML scalar the way a shell would expect to see it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def load_config(path: Optional[Union[str, Path]] = None) -> HarnessConfig:
    """Load harness configuration from YAML and the environment."""
    return ConfigLoader().load(path)
