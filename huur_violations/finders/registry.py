"""Static finder registry."""
import logging
from typing import Iterable, Optional

from huur_violations.config import config
from huur_violations.finders.base import Finder
from huur_violations.finders.blinkay import BlinkayFinder
from huur_violations.finders.fort_lauderdale import CityOfFortLauderdaleFinder
from huur_violations.finders.houston import CityOfHoustonFinder
from huur_violations.finders.metropolis import MetropolisFinder
from huur_violations.finders.parking_compliance import ParkingComplianceFinder
from huur_violations.finders.rmcpay import RmcPayFinder
from huur_violations.finders.vanguard import VanGuardFinder
from huur_violations.finders.west_palm_beach import WestPalmBeachFinder

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, type[Finder]] = {
    cls.key: cls
    for cls in (
        BlinkayFinder,
        CityOfFortLauderdaleFinder,
        CityOfHoustonFinder,
        WestPalmBeachFinder,
        ParkingComplianceFinder,
        MetropolisFinder,
        RmcPayFinder,
        VanGuardFinder,
    )
}


def supported_finders() -> list[str]:
    return sorted(_REGISTRY)


def get_finder_class(key: str) -> type[Finder]:
    try:
        return _REGISTRY[key.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown finder {key!r}; supported: {', '.join(supported_finders())}") from None


def load_finders(enabled: Optional[Iterable[str]] = None) -> list[Finder]:
    """Instantiate the enabled finders (all of them when nothing is configured)."""
    keys = list(enabled) if enabled is not None else list(config.ENABLED_FINDERS)
    if not keys:
        keys = list(_REGISTRY)

    finders = []
    for key in keys:
        try:
            finders.append(get_finder_class(key)())
        except Exception as e:
            logger.error(f"Failed to load finder {key}: {e}")
    return finders
