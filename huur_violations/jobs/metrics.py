"""Metrics tracking for a lookup batch."""
import time
import logging
from collections import defaultdict
from typing import Dict

logger = logging.getLogger(__name__)


class Metrics:
    """Track finder calls, results and submissions."""

    def __init__(self, total: int):
        # total = queries x finders
        self.total = total
        self.start_time = time.time()
        self.counters: Dict[str, int] = defaultdict(int)

    def increment(self, key: str, amount: int = 1) -> None:
        """Increment a counter."""
        self.counters[key] = self.counters.get(key, 0) + amount

    def elapsed(self) -> float:
        return time.time() - self.start_time

    def get_rate(self) -> float:
        """Finder calls completed per second."""
        elapsed = self.elapsed()
        calls = self.counters.get("finder_calls", 0)
        if elapsed > 0:
            return calls / elapsed
        return 0.0

    def report(self) -> None:
        """Log current metrics."""
        calls = self.counters.get("finder_calls", 0)
        logger.info(
            f"Progress: {calls}/{self.total} ({calls*100//self.total if self.total > 0 else 0}%) | "
            f"Rate: {self.get_rate():.2f}/s | "
            f"Found: {self.counters.get('found', 0)} | "
            f"Submitted: {self.counters.get('submitted', 0)} | "
            f"Errors: {self.counters.get('finder_errors', 0)}"
        )

    def get_summary(self) -> Dict:
        """Get summary statistics."""
        return {
            "total": self.total,
            "finder_calls": self.counters.get("finder_calls", 0),
            "finder_errors": self.counters.get("finder_errors", 0),
            "found": self.counters.get("found", 0),
            "submitted": self.counters.get("submitted", 0),
            "submit_failed": self.counters.get("submit_failed", 0),
            "rate": self.get_rate(),
            "elapsed_seconds": self.elapsed(),
        }
