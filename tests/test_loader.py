"""Tests for the batch loader."""
import asyncio
from decimal import Decimal

import httpx
import pytest

from huur_violations.config import Config
from huur_violations.finders.base import Finder
from huur_violations.finders.fort_lauderdale import CityOfFortLauderdaleFinder
from huur_violations.jobs.loader import Query, ViolationLoader
from huur_violations.jobs.metrics_exporter import MetricsExporter
from huur_violations.parse.models import ParkingViolation
from huur_violations.store.dev_storage import DevStorage


class Tracker:
    def __init__(self):
        self.active = 0
        self.peak = 0


class FakeFinder(Finder):
    def __init__(self, key: str, tracker: Tracker, per_query: int = 1):
        super().__init__()
        self.key = key
        self.name = key.title()
        self.link = f"https://{key}.example"
        self.tracker = tracker
        self.per_query = per_query

    async def _find(self, license_plate: str, state: str) -> list[ParkingViolation]:
        self.tracker.active += 1
        self.tracker.peak = max(self.tracker.peak, self.tracker.active)
        await asyncio.sleep(0.05)
        self.tracker.active -= 1
        return [
            ParkingViolation(
                citation_number=f"{self.key}-{license_plate}-{i}",
                tag=license_plate,
                state=state,
                agency=self.name,
                amount=Decimal("10"),
            )
            for i in range(self.per_query)
        ]


class FakeSink:
    def __init__(self, fail_every: int = 0):
        self.received = []
        self.fail_every = fail_every

    async def create_violation(self, violation: ParkingViolation) -> bool:
        self.received.append(violation)
        if self.fail_every and len(self.received) % self.fail_every == 0:
            return False
        return True


class ExplodingSink:
    async def create_violation(self, violation: ParkingViolation) -> bool:
        raise RuntimeError("sink down")


QUERIES = [Query("AAA111", "FL"), Query("BBB222", "TX"), Query("CCC333", "NY")]


@pytest.mark.asyncio
async def test_batch_respects_max_threads():
    """Test 3 queries x 4 finders with two slots submits everything."""
    tracker = Tracker()
    finders = [FakeFinder(f"f{i}", tracker, per_query=i) for i in range(1, 5)]
    sink = FakeSink()

    loader = ViolationLoader(finders=finders, client=sink, max_threads=2)
    summary = await loader.run(QUERIES)

    expected = sum(range(1, 5)) * len(QUERIES)
    assert len(summary.violations) == expected
    assert summary.submitted == expected
    assert len(sink.received) == expected
    assert summary.errors == []
    assert tracker.peak == 2


@pytest.mark.asyncio
async def test_single_thread_is_sequential():
    """Test the default of one slot never overlaps finder calls."""
    tracker = Tracker()
    finders = [FakeFinder("a", tracker), FakeFinder("b", tracker)]
    loader = ViolationLoader(finders=finders, client=FakeSink(), max_threads=1)
    await loader.run(QUERIES)
    assert tracker.peak == 1


@pytest.mark.asyncio
async def test_unmapped_state_does_not_stop_siblings():
    """Test a strict-table failure is reported while another finder still returns."""
    def refuse(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    strict = CityOfFortLauderdaleFinder(transport=httpx.MockTransport(refuse))
    sibling = FakeFinder("sibling", Tracker())
    sink = FakeSink()

    loader = ViolationLoader(finders=[strict, sibling], client=sink, max_threads=2)
    summary = await loader.run([Query("ABC123", "ZZ")])

    assert len(summary.errors) == 1
    assert summary.errors[0].finder_name == "City of Fort Lauderdale"
    assert [v.citation_number for v in summary.violations] == ["sibling-ABC123-0"]
    assert summary.submitted == 1


@pytest.mark.asyncio
async def test_submission_failures_are_counted():
    """Test rejected submissions are counted but not fatal."""
    sink = FakeSink(fail_every=2)
    loader = ViolationLoader(finders=[FakeFinder("a", Tracker(), per_query=2)], client=sink, max_threads=1)
    summary = await loader.run(QUERIES)

    assert summary.submitted == 3
    assert summary.failed_submissions == 3


@pytest.mark.asyncio
async def test_submission_exceptions_are_swallowed():
    """Test a sink that raises does not abort the batch."""
    loader = ViolationLoader(finders=[FakeFinder("a", Tracker())], client=ExplodingSink(), max_threads=1)
    summary = await loader.run(QUERIES)

    assert len(summary.violations) == 3
    assert summary.submitted == 0
    assert summary.failed_submissions == 3


@pytest.mark.asyncio
async def test_dry_run_never_submits(monkeypatch):
    """Test dry-run needs no sink configuration and submits nothing."""
    monkeypatch.setattr(Config, "HUUR_API_BASE", None)
    loader = ViolationLoader(finders=[FakeFinder("a", Tracker())], dry_run=True)
    summary = await loader.run(QUERIES)

    assert len(summary.violations) == 3
    assert summary.submitted == 0


def test_missing_sink_is_fatal(monkeypatch):
    """Test construction fails without HUUR_API_BASE."""
    monkeypatch.setattr(Config, "HUUR_API_BASE", None)
    with pytest.raises(ValueError, match="HUUR_API_BASE"):
        ViolationLoader(finders=[])


@pytest.mark.asyncio
async def test_no_finders():
    """Test an empty registry returns an empty summary."""
    summary = await ViolationLoader(finders=[], client=FakeSink()).run(QUERIES)
    assert summary.violations == []
    assert summary.queries == 3


@pytest.mark.asyncio
async def test_metrics_and_dev_storage(tmp_path):
    """Test the run exports metrics and saves per-finder results."""
    exporter = MetricsExporter("run1", metrics_file=tmp_path / "metrics.jsonl")
    storage = DevStorage("run1", dev_dir=tmp_path / "dev")
    loader = ViolationLoader(
        finders=[FakeFinder("a", Tracker())],
        client=FakeSink(),
        dev_storage=storage,
        exporter=exporter,
    )
    summary = await loader.run([Query("AAA111", "FL")])

    assert summary.run_id == "run1"
    lines = (tmp_path / "metrics.jsonl").read_text().splitlines()
    assert len(lines) == 1
    assert '"submitted": 1' in lines[0]
    assert (tmp_path / "dev" / "run1" / "AAA111_FL" / "a.json").exists()
