"""Shared fixtures for harness tests."""

import shutil
from pathlib import Path

import pytest

from cliharness import Harness, HarnessConfig
from cliharness.exec import CaptureOrchestrator, LogFileManager, ProcessRunner


def has_shell() -> bool:
    """Check if a POSIX shell is available."""
    return shutil.which("sh") is not None


requires_shell = pytest.mark.skipif(not has_shell(), reason="sh not available")


@pytest.fixture
def artifacts_dir(tmp_path) -> Path:
    """Artifacts directory inside a temporary workspace (not created yet)."""
    return tmp_path / "artifacts"


@pytest.fixture
def log_files(artifacts_dir) -> LogFileManager:
    return LogFileManager(artifacts_dir)


@pytest.fixture
def orchestrator(log_files) -> CaptureOrchestrator:
    return CaptureOrchestrator(log_files, ProcessRunner())


@pytest.fixture
def harness(artifacts_dir) -> Harness:
    return Harness(HarnessConfig(artifacts_dir=artifacts_dir))
