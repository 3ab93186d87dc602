"""Pytest configuration and fixtures."""

import os

import pytest


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Isolate environment variables for each test.

    This prevents test pollution where one test's environment changes
    affect other tests, and keeps user config files out of the way.
    """
    original_env = os.environ.copy()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    for name in ("BIBADD_FILE", "BIBADD_INTERACT", "BIBADD_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the test inside an empty working directory."""
    directory = tmp_path / "work"
    directory.mkdir()
    monkeypatch.chdir(directory)
    return directory
