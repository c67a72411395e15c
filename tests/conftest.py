"""Shared fixtures: no retry backoff, no real network."""
import pytest

from huur_violations.config import Config


@pytest.fixture(autouse=True)
def fast_config(monkeypatch):
    """Single attempt per request and a short per-find timeout."""
    monkeypatch.setattr(Config, "MAX_RETRIES", 1)
    monkeypatch.setattr(Config, "FIND_TIMEOUT", 5.0)
    monkeypatch.setattr(Config, "HUUR_API_KEY", None)
    monkeypatch.setattr(Config, "API_KEY", None)
