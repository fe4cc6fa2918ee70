"""Tests for environment-driven settings."""

import os
from pathlib import Path

import pytest

from workforce_allocation.config import DEFAULT_REGIONS, Settings, load_env


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("WFA_REGIONS", "WFA_LIMITED_THRESHOLD", "WFA_ALMOST_FULL_THRESHOLD",
                 "WFA_SEED_FILE", "WFA_API_HOST", "WFA_API_PORT", "WFA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env()
    assert settings.regions == DEFAULT_REGIONS
    assert (settings.limited_threshold, settings.almost_full_threshold) == (70.0, 90.0)
    assert settings.seed_file is None
    assert settings.api_port == 8000
    assert settings.log_level == "INFO"


def test_overrides(monkeypatch):
    monkeypatch.setenv("WFA_REGIONS", "Nord, Syd,,")
    monkeypatch.setenv("WFA_LIMITED_THRESHOLD", "50")
    monkeypatch.setenv("WFA_SEED_FILE", "/tmp/seed.json")
    monkeypatch.setenv("WFA_API_PORT", "9000")
    monkeypatch.setenv("WFA_LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.regions == ("Nord", "Syd")
    assert settings.limited_threshold == 50.0
    assert settings.seed_file == Path("/tmp/seed.json")
    assert settings.api_port == 9000
    assert settings.log_level == "DEBUG"


def test_inverted_thresholds_rejected(monkeypatch):
    monkeypatch.setenv("WFA_LIMITED_THRESHOLD", "95")
    with pytest.raises(ValueError):
        Settings.from_env()


def test_load_env_file(tmp_path, monkeypatch):
    # keep the loaded variables out of later tests
    monkeypatch.setattr(os, "environ", dict(os.environ))
    env_file = tmp_path / ".env"
    env_file.write_text("WFA_API_PORT=8123\n")
    load_env(env_file)
    assert Settings.from_env().api_port == 8123
