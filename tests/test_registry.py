"""Tests for the finder registry."""
import pytest

from huur_violations.config import Config
from huur_violations.finders.blinkay import BlinkayFinder
from huur_violations.finders.registry import get_finder_class, load_finders, supported_finders


def test_all_providers_registered():
    """Test the eight providers are present."""
    assert supported_finders() == [
        "blinkay",
        "fort_lauderdale",
        "houston",
        "metropolis",
        "parking_compliance",
        "rmcpay",
        "vanguard",
        "west_palm_beach",
    ]


def test_finders_have_identity():
    """Test every finder exposes a name and a link."""
    for finder in load_finders(supported_finders()):
        assert finder.name
        assert finder.link.startswith("https://")


def test_load_enabled_subset():
    """Test unknown keys are skipped."""
    finders = load_finders(["Blinkay", "nope"])
    assert len(finders) == 1
    assert isinstance(finders[0], BlinkayFinder)


def test_config_driven_enablement(monkeypatch):
    """Test ENABLED_FINDERS filters the default load."""
    monkeypatch.setattr(Config, "ENABLED_FINDERS", ["vanguard", "rmcpay"])
    assert [f.key for f in load_finders()] == ["vanguard", "rmcpay"]
    monkeypatch.setattr(Config, "ENABLED_FINDERS", [])
    assert len(load_finders()) == 8


def test_unknown_finder_class():
    """Test lookup errors name the supported keys."""
    with pytest.raises(ValueError, match="supported"):
        get_finder_class("nope")
