"""Shared test fixtures."""

from __future__ import annotations

import os

import pytest

from dirsize.core.run_log import RunLog


@pytest.fixture(autouse=True)
def isolate_settings(tmp_path, monkeypatch):
    """Redirect the settings file to a temp directory."""
    config_home = tmp_path / "config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home / "dirsize" / "settings.json"


@pytest.fixture
def sample_tree(tmp_path):
    """Target directory with nested, empty, hidden and plain-file entries."""
    root = tmp_path / "target"
    deeper = root / "alpha" / "nested" / "deeper"
    deeper.mkdir(parents=True)
    (root / "alpha" / "a.bin").write_bytes(b"a" * 100)
    (root / "alpha" / "nested" / "b.bin").write_bytes(b"b" * 200)
    (deeper / "c.bin").write_bytes(b"c" * 300)

    (root / "beta").mkdir()

    hidden = root / ".hidden"
    hidden.mkdir()
    (hidden / "secret.bin").write_bytes(b"s" * 4096)

    (root / "notes.txt").write_bytes(b"n" * 10)
    return root


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "run.log"


@pytest.fixture
def run_log(log_path):
    with RunLog(log_path) as opened:
        yield opened


@pytest.fixture
def deny_scandir(monkeypatch):
    """Make os.scandir raise PermissionError for the given paths.

    Works regardless of the uid the tests run under.
    """
    real_scandir = os.scandir

    def _deny(*paths):
        blocked = {str(p) for p in paths}

        def fake_scandir(path="."):
            if str(path) in blocked:
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", fake_scandir)

    return _deny


@pytest.fixture
def read_log(log_path):
    """Return the run log lines written so far."""

    def _read(path=None) -> list[str]:
        target = path or log_path
        if not target.exists():
            return []
        return target.read_text(encoding="utf-8").splitlines()

    return _read
