"""Finder base class and error reporting."""
import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from huur_violations.config import config
from huur_violations.fetch.client import HttpSession
from huur_violations.parse.models import ParkingViolation

logger = logging.getLogger(__name__)


class ScrapeError(RuntimeError):
    """A provider page did not have the shape the protocol expects."""


@dataclass
class FinderErrorEvent:
    """Raised-and-caught failure of one finder invocation."""

    finder_name: str
    license_plate: str
    state: str
    exception: BaseException
    message: str


ErrorHandler = Callable[[FinderErrorEvent], None]


class Finder(ABC):
    """One provider's lookup protocol.

    `find` never raises: any failure inside `_find` is turned into a
    FinderErrorEvent, delivered to the registered handlers, and an empty
    list is returned.
    """

    key: str = ""
    name: str = ""
    link: str = ""
    origin: Optional[str] = None
    referer: Optional[str] = None

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        self._error_handlers: list[ErrorHandler] = []

    def add_error_handler(self, handler: ErrorHandler) -> None:
        self._error_handlers.append(handler)

    def remove_error_handler(self, handler: ErrorHandler) -> None:
        if handler in self._error_handlers:
            self._error_handlers.remove(handler)

    def session(self) -> HttpSession:
        """Fresh session, so cookie jars never leak between invocations."""
        return HttpSession(origin=self.origin, referer=self.referer, transport=self._transport)

    async def find(
        self,
        license_plate: str,
        state: str,
        on_error: Optional[ErrorHandler] = None,
    ) -> list[ParkingViolation]:
        """Look up violations for a plate. Always returns a list."""
        try:
            return await asyncio.wait_for(
                self._find(license_plate, state),
                timeout=config.FIND_TIMEOUT,
            )
        except Exception as e:
            self._emit_error(license_plate, state, e, on_error)
            return []

    @abstractmethod
    async def _find(self, license_plate: str, state: str) -> list[ParkingViolation]:
        ...

    def _emit_error(
        self,
        license_plate: str,
        state: str,
        exc: BaseException,
        on_error: Optional[ErrorHandler] = None,
    ) -> None:
        message = str(exc) or type(exc).__name__
        event = FinderErrorEvent(
            finder_name=self.name,
            license_plate=license_plate,
            state=state,
            exception=exc,
            message=message,
        )
        logger.warning(f"{self.name} failed for plate={license_plate}, state={state}: {message}")
        handlers = list(self._error_handlers)
        if on_error is not None:
            handlers.append(on_error)
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error handler for {self.name} raised: {e}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
