"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from groot.core import Repository


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create an empty workspace directory."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def repo(workspace: Path) -> Repository:
    """Create an initialized on-disk repository."""
    return Repository.init(workspace)


@pytest.fixture
def memory_repo(workspace: Path) -> Repository:
    """Create a repository that keeps all state in memory."""
    return Repository.in_memory(workspace)
