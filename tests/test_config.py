"""Tests for configuration helpers."""
import pytest

from huur_violations import config as config_module
from huur_violations.config import Config


def test_max_threads_precedence(monkeypatch):
    """Test env wins over the settings file, default is 1."""
    monkeypatch.delenv("MaxThreads", raising=False)
    monkeypatch.delenv("MAX_THREADS", raising=False)
    assert config_module._max_threads({}) == 1
    assert config_module._max_threads({"MaxThreads": 4}) == 4
    monkeypatch.setenv("MaxThreads", "6")
    assert config_module._max_threads({"MaxThreads": 4}) == 6


def test_max_threads_invalid(monkeypatch):
    """Test junk and non-positive values fall back to one."""
    monkeypatch.delenv("MaxThreads", raising=False)
    monkeypatch.setenv("MAX_THREADS", "lots")
    assert config_module._max_threads({}) == 1
    monkeypatch.setenv("MAX_THREADS", "0")
    assert config_module._max_threads({}) == 1


def test_settings_file(tmp_path):
    """Test appsettings.json is optional."""
    path = tmp_path / "appsettings.json"
    assert config_module._load_settings(path) == {}
    path.write_text('{"MaxThreads": 3}')
    assert config_module._load_settings(path) == {"MaxThreads": 3}


def test_validate(monkeypatch):
    """Test the sink URL is only required when submitting."""
    monkeypatch.setattr(Config, "HUUR_API_BASE", None)
    with pytest.raises(ValueError, match="HUUR_API_BASE"):
        Config.validate()
    Config.validate(require_sink=False)
    monkeypatch.setattr(Config, "HUUR_API_BASE", "https://huur.example")
    Config.validate()
