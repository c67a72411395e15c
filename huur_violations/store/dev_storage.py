"""DEV mode storage: save found violations to data/dev/ for inspection."""
import logging
import re
from pathlib import Path
from typing import Optional

import orjson

from huur_violations.config import DATA_DIR
from huur_violations.parse.models import ParkingViolation

logger = logging.getLogger(__name__)

DEV_DIR = DATA_DIR / "dev"

_UNSAFE = re.compile(r"[^A-Za-z0-9_-]+")


def _safe(part: str) -> str:
    return _UNSAFE.sub("_", part.strip()) or "_"


class DevStorage:
    """Stores each finder's results per query in DEV mode."""

    def __init__(self, run_id: str, dev_dir: Optional[Path] = None):
        self.run_dir = (dev_dir or DEV_DIR) / run_id
        self.run_dir.mkdir(parents=True, exist_ok=True)

    def save_results(
        self,
        license_plate: str,
        state: str,
        finder_key: str,
        violations: list[ParkingViolation],
    ) -> Path:
        query_dir = self.run_dir / f"{_safe(license_plate.upper())}_{_safe(state.upper())}"
        query_dir.mkdir(exist_ok=True)
        path = query_dir / f"{_safe(finder_key)}.json"
        payload = [v.to_payload() for v in violations]
        with open(path, "wb") as f:
            f.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
        logger.debug(f"Saved {len(violations)} violation(s) to {path}")
        return path
