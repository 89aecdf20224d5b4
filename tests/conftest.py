"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

MakeFile = Callable[..., Path]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at a temporary directory.

    Keeps tests from reading or writing the real user configuration.
    """
    config_home = tmp_path / "xdg-config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for age comparisons.

    Whole seconds keep mtimes derived from it exact.
    """
    return datetime.now(UTC).replace(microsecond=0)


@pytest.fixture
def make_file(now: datetime) -> MakeFile:
    """Factory creating a file whose mtime lies `age` before `now`."""

    def _make(path: Path, age: timedelta = timedelta(0), content: str = "data") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        timestamp = (now - age).timestamp()
        os.utime(path, (timestamp, timestamp))
        return path

    return _make


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Directory to clean."""
    path = tmp_path / "work"
    path.mkdir()
    return path
