# tests/conftest.py
"""
Shared pytest fixtures: a messy folder to organize, configurations, and a
helper that captures a directory tree so tests can prove nothing changed.
"""

from pathlib import Path

import pytest

from clarity_organizer.core.config_manager import ConfigStore, Configuration


def take_snapshot(root: Path) -> dict:
    """Maps every entry under `root` to its file content (None for folders)."""
    snapshot = {}
    for path in sorted(root.rglob("*")):
        relative = path.relative_to(root).as_posix()
        snapshot[relative] = path.read_bytes() if path.is_file() else None
    return snapshot


@pytest.fixture
def snapshot():
    return take_snapshot


@pytest.fixture
def default_config() -> Configuration:
    return Configuration.default()


@pytest.fixture
def messy_dir(tmp_path: Path) -> Path:
    """The three-file folder: one image, one document, one unknown file."""
    root = tmp_path / "messy"
    root.mkdir()
    (root / "a.jpg").write_text("image")
    (root / "b.txt").write_text("text")
    (root / "c.xyz").write_text("unknown")
    return root


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    return tmp_path / "config"


@pytest.fixture
def store(config_dir: Path) -> ConfigStore:
    return ConfigStore(config_dir)
