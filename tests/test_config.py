"""Tests for harness configuration loading and validation."""

from pathlib import Path

import pytest
import yaml

from cliharness.config import ConfigLoader, HarnessConfig, load_config
from cliharness.exceptions import ConfigValidationError


def write_config(path: Path, content: dict) -> Path:
    with open(path, 'w') as f:
        yaml.dump(content, f)
    return path


class TestConfigLoader:

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = ConfigLoader(environ={}).load()

        assert config.artifacts_dir.resolve() == (tmp_path / "artifacts").resolve()
        assert config.shell == "sh"
        assert config.target_cli is None
        assert config.env == {}
        assert config.log_level == "info"

    def test_load_from_file(self, tmp_path):
        config_file = write_config(tmp_path / "harness.yaml", {
            "artifacts_dir": "logs/artifacts",
            "shell": "/bin/sh",
            "target_cli": "node bin/tool",
            "env": {"CI": "true", "RETRIES": 3},
            "log_level": "debug",
        })

        config = ConfigLoader(environ={}).load(config_file)

        assert config.artifacts_dir.resolve() == (tmp_path / "logs" / "artifacts").resolve()
        assert config.shell == "/bin/sh"
        assert config.target_cli == "node bin/tool"
        assert config.env == {"CI": "true", "RETRIES": "3"}
        assert config.log_level == "debug"

    def test_env_null_and_bool_values(self, tmp_path):
        config_file = tmp_path / "harness.yaml"
        config_file.write_text("env:\n  EMPTY:\n  CI: true\n  DRY_RUN: false\n")

        config = ConfigLoader(environ={}).load(config_file)

        assert config.env == {"EMPTY": "", "CI": "true", "DRY_RUN": "false"}

    def test_nested_env_value_rejected(self, tmp_path):
        config_file = write_config(tmp_path / "harness.yaml", {
            "env": {"OK": "1", "NESTED": {"a": 1}, "LIST": [1, 2]},
        })

        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigLoader(environ={}).load(config_file)

        paths = {e.path for e in exc_info.value.errors}
        assert paths == {"env.NESTED", "env.LIST"}

    def test_absolute_artifacts_dir(self, tmp_path):
        target = tmp_path / "elsewhere"
        config_file = write_config(tmp_path / "harness.yaml", {"artifacts_dir": str(target)})

        assert ConfigLoader(environ={}).load(config_file).artifacts_dir.resolve() == target.resolve()

    def test_default_file_in_cwd(self, tmp_path, monkeypatch):
        write_config(tmp_path / "cliharness.yaml", {"shell": "bash"})
        monkeypatch.chdir(tmp_path)

        assert ConfigLoader(environ={}).load().shell == "bash"

    def test_config_path_from_env(self, tmp_path):
        config_file = write_config(tmp_path / "custom.yaml", {"target_cli": "tool"})

        config = ConfigLoader(environ={"CLIHARNESS_CONFIG": str(config_file)}).load()
        assert config.target_cli == "tool"

    def test_env_overrides_file(self, tmp_path):
        config_file = write_config(tmp_path / "harness.yaml", {"shell": "bash", "artifacts_dir": "a"})
        environ = {
            "CLIHARNESS_SHELL": "zsh",
            "CLIHARNESS_ARTIFACTS_DIR": "b",
            "CLIHARNESS_TARGET_CLI": "tool --flag",
        }

        config = ConfigLoader(environ=environ).load(config_file)

        assert config.shell == "zsh"
        assert config.artifacts_dir.resolve() == (tmp_path / "b").resolve()
        assert config.target_cli == "tool --flag"

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        config = ConfigLoader(environ={}).load(config_file)
        assert config.artifacts_dir.resolve() == (tmp_path / "artifacts").resolve()

    def test_load_config_function(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CLIHARNESS_CONFIG", raising=False)
        monkeypatch.delenv("CLIHARNESS_SHELL", raising=False)
        monkeypatch.delenv("CLIHARNESS_ARTIFACTS_DIR", raising=False)
        monkeypatch.delenv("CLIHARNESS_TARGET_CLI", raising=False)
        config_file = write_config(tmp_path / "harness.yaml", {"shell": "dash"})

        config = load_config(config_file)
        assert isinstance(config, HarnessConfig)
        assert config.shell == "dash"


class TestConfigValidation:

    def test_unknown_and_mistyped_fields_collected(self, tmp_path):
        config_file = write_config(tmp_path / "harness.yaml", {
            "artifact_dir": "typo",
            "shell": 5,
            "env": ["not", "a", "mapping"],
        })

        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigLoader(environ={}).load(config_file)

        error = exc_info.value
        assert error.exit_code == 2
        assert len(error.errors) == 3
        paths = {e.path for e in error.errors}
        assert paths == {"artifact_dir", "shell", "env"}

    def test_unknown_log_level(self, tmp_path):
        config_file = write_config(tmp_path / "harness.yaml", {"log_level": "loud"})

        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigLoader(environ={}).load(config_file)

        assert "Unknown log level" in str(exc_info.value)

    def test_empty_shell(self, tmp_path):
        config_file = write_config(tmp_path / "harness.yaml", {"shell": "  "})

        with pytest.raises(ConfigValidationError):
            ConfigLoader(environ={}).load(config_file)

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("shell: [unclosed\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigLoader(environ={}).load(config_file)

        assert "Failed to load config" in str(exc_info.value)

    def test_non_mapping_yaml(self, tmp_path):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigLoader(environ={}).load(config_file)

        assert "YAML object" in str(exc_info.value)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigValidationError):
            ConfigLoader(environ={}).load(tmp_path / "missing.yaml")
