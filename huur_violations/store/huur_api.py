"""HTTP client for the Huur violations API."""
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from huur_violations.config import config
from huur_violations.parse.models import ParkingViolation

logger = logging.getLogger(__name__)


class HuurApiClient:
    """Create and list violations on the Huur API.

    Neither call raises: a failed create returns False and a failed list
    returns an empty list. Creates are not retried.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        headers = {"Accept": "application/json"}
        api_key = api_key if api_key is not None else config.HUUR_API_KEY
        if api_key:
            headers["X-API-Key"] = api_key
        self.client = httpx.AsyncClient(
            headers=headers,
            timeout=config.TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    @property
    def violations_url(self) -> str:
        return f"{self.base_url}/api/violations"

    async def create_violation(self, violation: ParkingViolation) -> bool:
        """POST one violation; True when the API accepted it."""
        try:
            response = await self.client.post(self.violations_url, json=violation.to_payload())
        except Exception as e:
            logger.error(f"Failed to submit violation {violation.citation_number or violation.notice_number}: {e}")
            return False
        if not response.is_success:
            logger.warning(f"Huur API rejected violation with HTTP {response.status_code}")
        return response.is_success

    async def list_violations(self) -> list[ParkingViolation]:
        try:
            response = await self.client.get(self.violations_url)
            response.raise_for_status()
            payload = response.json()
        except Exception as e:
            logger.error(f"Failed to list violations: {e}")
            return []
        if not isinstance(payload, list):
            logger.error("Unexpected violations payload from Huur API")
            return []

        violations = []
        for item in payload:
            try:
                violations.append(ParkingViolation.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed violation from Huur API: {e.error_count()} error(s)")
        return violations
