"""Metrics exporter for observability."""
import json
import time
from pathlib import Path
from typing import Dict, Optional
import aiofiles

from huur_violations.config import DATA_DIR

METRICS_FILE = DATA_DIR / "metrics.jsonl"


class MetricsExporter:
    """Appends one JSON line per run to the metrics file."""

    def __init__(self, run_id: str, metrics_file: Optional[Path] = None):
        self.run_id = run_id
        self.metrics_file = metrics_file or METRICS_FILE

    async def export_metrics(self, summary: Dict, queries: int, finders: int) -> None:
        """Export metrics to JSONL file."""
        metrics = {
            "ts": time.time(),
            "run_id": self.run_id,
            "queries": queries,
            "finders": finders,
            "finder_calls": summary.get("finder_calls", 0),
            "finder_errors": summary.get("finder_errors", 0),
            "found": summary.get("found", 0),
            "submitted": summary.get("submitted", 0),
            "submit_failed": summary.get("submit_failed", 0),
            "rps": round(summary.get("rate", 0.0), 2),
            "elapsed": round(summary.get("elapsed_seconds", 0.0), 3),
        }

        self.metrics_file.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(metrics) + "\n"
        async with aiofiles.open(self.metrics_file, "a") as f:
            await f.write(line)
