"""Batch orchestration: every query against every finder, then submit."""
import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol

from huur_violations.config import config, Config
from huur_violations.finders.base import Finder, FinderErrorEvent
from huur_violations.finders.registry import load_finders
from huur_violations.jobs.metrics import Metrics
from huur_violations.jobs.metrics_exporter import MetricsExporter
from huur_violations.parse.models import ParkingViolation
from huur_violations.store.dev_storage import DevStorage
from huur_violations.store.huur_api import HuurApiClient

logger = logging.getLogger(__name__)


class ViolationSink(Protocol):
    async def create_violation(self, violation: ParkingViolation) -> bool:
        ...


@dataclass(frozen=True)
class Query:
    plate: str
    state: str


@dataclass
class BatchSummary:
    run_id: str
    queries: int = 0
    violations: list[ParkingViolation] = field(default_factory=list)
    submitted: int = 0
    failed_submissions: int = 0
    errors: list[FinderErrorEvent] = field(default_factory=list)


class ViolationLoader:
    """Runs finders for a batch of plate/state queries.

    At most `max_threads` finder invocations are in flight at once. Finder
    errors and submission failures are counted and logged; neither stops
    the batch.
    """

    def __init__(
        self,
        finders: Optional[Iterable[Finder]] = None,
        client: Optional[ViolationSink] = None,
        max_threads: Optional[int] = None,
        dry_run: bool = False,
        dev_storage: Optional[DevStorage] = None,
        exporter: Optional[MetricsExporter] = None,
    ):
        if client is None and not dry_run:
            Config.validate(require_sink=True)
        self.finders = list(finders) if finders is not None else load_finders()
        self.client = client
        self.max_threads = max(max_threads or config.MAX_THREADS, 1)
        self.dry_run = dry_run
        self.dev_storage = dev_storage
        self.exporter = exporter

    async def run(self, queries: Iterable[Query], submit: bool = True) -> BatchSummary:
        """Search every query with every finder and submit what is found."""
        queries = list(queries)
        run_id = self.exporter.run_id if self.exporter else str(uuid.uuid4())[:8]
        summary = BatchSummary(run_id=run_id, queries=len(queries))

        if not self.finders:
            logger.warning("No violation finders registered.")
            return summary

        logger.info(f"Providers discovered: {len(self.finders)}")
        logger.info(f"Processing with {self.max_threads} thread(s)")

        submit = submit and not self.dry_run
        client = self.client
        owns_client = False
        if submit and client is None:
            client = HuurApiClient(config.HUUR_API_BASE)
            owns_client = True

        metrics = Metrics(total=len(queries) * len(self.finders))
        semaphore = asyncio.Semaphore(self.max_threads)

        async def process(query: Query, finder: Finder) -> None:
            async with semaphore:
                logger.info(f"Searching plate={query.plate}, state={query.state} with {finder.name}")
                found = await finder.find(query.plate, query.state, on_error=summary.errors.append)
            metrics.increment("finder_calls")
            if not found:
                return
            metrics.increment("found", len(found))
            summary.violations.extend(found)
            logger.info(f"  + {len(found)} found from {finder.name}")
            if self.dev_storage:
                self.dev_storage.save_results(query.plate, query.state, finder.key or finder.name, found)
            if submit:
                await self._submit(client, found, summary, metrics)

        try:
            tasks = [process(query, finder) for query in queries for finder in self.finders]
            results = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            if owns_client:
                await client.aclose()

        for result in results:
            if isinstance(result, Exception):
                logger.error(f"Unexpected error in lookup task: {result}")
        metrics.increment("finder_errors", len(summary.errors))

        self._final_report(summary, metrics, submit)
        if self.exporter:
            await self.exporter.export_metrics(metrics.get_summary(), len(queries), len(self.finders))
        return summary

    async def _submit(
        self,
        client: ViolationSink,
        violations: list[ParkingViolation],
        summary: BatchSummary,
        metrics: Metrics,
    ) -> None:
        for violation in violations:
            try:
                ok = await client.create_violation(violation)
            except Exception as e:
                logger.error(f"  x Submission error: {e}")
                ok = False
            if ok:
                summary.submitted += 1
                metrics.increment("submitted")
            else:
                summary.failed_submissions += 1
                metrics.increment("submit_failed")

    def _final_report(self, summary: BatchSummary, metrics: Metrics, submit: bool) -> None:
        """Generate final report."""
        logger.info("=" * 60)
        logger.info("FINAL REPORT")
        logger.info(f"Run ID: {summary.run_id}")
        logger.info(f"Providers: {len(self.finders)}")
        logger.info(f"Queries: {summary.queries}")
        logger.info(f"Violations found: {len(summary.violations)}")
        if submit:
            logger.info(f"Total violations submitted: {summary.submitted}")
            logger.info(f"Failed submissions: {summary.failed_submissions}")
        logger.info(f"Finder errors: {len(summary.errors)}")
        for error in summary.errors:
            logger.info(f"  x Error from {error.finder_name} ({error.license_plate}/{error.state}): {error.message}")
        for violation in summary.violations:
            logger.info(violation.summary_line())
        metrics.report()
        logger.info("=" * 60)
