"""Pytest configuration helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_repo_on_path() -> None:
    """Allow tests to import from repo modules without setting PYTHONPATH."""
    repo_root = Path(__file__).resolve().parents[1]
    path_str = str(repo_root)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_ensure_repo_on_path()

from app.config import Settings, get_settings  # noqa: E402


@pytest.fixture
def reset_settings_env(tmp_path, monkeypatch):
    """Pin every setting to its default, then the test overrides; shell env and .env cannot leak in."""

    def _reset() -> None:
        for name, field in Settings.model_fields.items():
            monkeypatch.setenv(name, str(field.default))
        monkeypatch.setenv("SILENCE_WINDOW_SECONDS", "0.05")
        monkeypatch.setenv("TRANSCRIPT_DIR", str(tmp_path / "transcripts"))
        monkeypatch.setenv("PROFILE_STORE_PATH", str(tmp_path / "profile.json"))
        get_settings.cache_clear()

    return _reset


@pytest.fixture(autouse=True)
def isolated_settings(reset_settings_env):
    reset_settings_env()
    yield get_settings()
    get_settings.cache_clear()
