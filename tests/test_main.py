"""Tests for the CLI."""
import argparse

import pytest

from huur_violations.config import Config
from huur_violations.jobs.loader import Query
from huur_violations.main import main, parse_args, parse_query, read_queries


def test_parse_query():
    """Test PLATE:STATE parsing."""
    assert parse_query("abc123:fl") == Query("ABC123", "FL")
    assert parse_query(" XYZ , tx ") == Query("XYZ", "TX")
    with pytest.raises(argparse.ArgumentTypeError):
        parse_query("ABC123")


def test_read_queries(tmp_path):
    """Test input files skip comments, blanks and bad lines."""
    path = tmp_path / "plates.csv"
    path.write_text("# plate,state\nABC123,FL\n\nbad-line\nXYZ789:NY\n")
    assert read_queries(path) == [Query("ABC123", "FL"), Query("XYZ789", "NY")]


def test_parse_args():
    """Test repeated queries and flags."""
    args = parse_args(["--query", "A1:FL", "--query", "B2:TX", "--max-threads", "3", "--dry-run"])
    assert args.query == [Query("A1", "FL"), Query("B2", "TX")]
    assert args.max_threads == 3
    assert args.dry_run is True


def test_main_without_queries_exits():
    """Test a run with nothing to search exits with status 1."""
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1


def test_main_requires_sink(monkeypatch):
    """Test a submitting run without HUUR_API_BASE exits with status 1."""
    monkeypatch.setattr(Config, "HUUR_API_BASE", None)
    with pytest.raises(SystemExit) as exc:
        main(["--query", "A1:FL"])
    assert exc.value.code == 1
