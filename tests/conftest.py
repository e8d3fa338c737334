"""Shared pytest fixtures for test files."""

from __future__ import annotations

import pytest

from scratch_sweeper.config import ENV_FILE_VAR, MTIME_ONLY_VAR, OLDER_THAN_VAR, ROOT_VAR


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep tests away from the developer's ~/.env and SCRATCH_SWEEPER_* variables.

    Variables loaded from a .env file during a test are removed again on
    teardown because monkeypatch restores them to "unset".
    """
    for name in (ROOT_VAR, OLDER_THAN_VAR, MTIME_ONLY_VAR):
        monkeypatch.delenv(name, raising=False)
    env_file = tmp_path / "missing.env"
    monkeypatch.setenv(ENV_FILE_VAR, str(env_file))
    yield env_file


@pytest.fixture(name="scratch")
def fixture_scratch(tmp_path):
    """Return an empty scratch root directory."""
    root = tmp_path / "scratch"
    root.mkdir()
    return root
