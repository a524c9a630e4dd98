"""Shared fixtures for the resource staging test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from staging_test_helpers import RecordingHook

from resource_staging import ArchiveExtractor, CleanupRegistry, StagingConfig


@pytest.fixture
def shutdown_hook() -> RecordingHook:
    """Provide a hook that never reaches :mod:`atexit`."""
    return RecordingHook()


@pytest.fixture
def registry(shutdown_hook: RecordingHook) -> CleanupRegistry:
    """Provide a cleanup registry isolated from the process-wide one."""
    return CleanupRegistry(shutdown_hook)


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create an isolated working directory and ``chdir`` into it."""
    root = tmp_path / "workspace"
    root.mkdir()
    monkeypatch.chdir(root)
    monkeypatch.delenv("RESOURCE_STAGING_PREFIX", raising=False)
    monkeypatch.delenv("RESOURCE_STAGING_ROOT", raising=False)
    return root


@pytest.fixture
def extractor(workspace: Path, registry: CleanupRegistry) -> ArchiveExtractor:
    """Return an extractor staging beneath ``workspace``."""
    return ArchiveExtractor(StagingConfig(staging_root=workspace), registry)
