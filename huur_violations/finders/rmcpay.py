"""RmcPay: operator lookup followed by violation search."""
import asyncio
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from huur_violations.config import config
from huur_violations.fetch.client import HttpSession
from huur_violations.finders.base import Finder
from huur_violations.finders.states import rmcpay_state_id
from huur_violations.parse.models import ParkingViolation
from huur_violations.parse.values import cents_to_amount, map_payment_status, parse_date

logger = logging.getLogger(__name__)

API_BASE = "https://rmcpay.com/rmcapi/api/violation_index.php"
OPERATOR_URL = f"{API_BASE}/getviolationoperatorinfo"
VIOLATION_URL = f"{API_BASE}/searchviolation"


class RmcPayViolation(BaseModel):
    """Row of the searchviolation `data` array. Every field arrives as text."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    number: Optional[str] = None
    violation_number: Optional[str] = None
    date: Optional[str] = None
    amountincents: Optional[str] = None
    lpn: Optional[str] = None
    paid: Optional[str] = None
    status: Optional[str] = None
    location: Optional[str] = None
    zone: Optional[str] = None
    vehiclestate: Optional[str] = None
    settlementdate: Optional[str] = None
    operator_display_name: Optional[str] = None


def first_operator_id(payload: Any) -> str:
    """First non-null operator_id from getviolationoperatorinfo, or ""."""
    if not isinstance(payload, dict):
        return ""
    data = payload.get("data")
    operators = data.get("operators") if isinstance(data, dict) else None
    if not isinstance(operators, list):
        return ""
    for operator in operators:
        if isinstance(operator, dict) and operator.get("operator_id") not in (None, ""):
            return str(operator["operator_id"])
    return ""


def parse_violations(
    payload: Any,
    link: str,
    license_plate: str = "",
    state: str = "",
) -> list[ParkingViolation]:
    if not isinstance(payload, dict):
        return []
    rows = payload.get("data")
    if not isinstance(rows, list):
        return []

    violations = []
    for item in rows:
        try:
            row = RmcPayViolation.model_validate(item)
        except ValidationError as e:
            logger.warning(f"Skipping malformed RmcPay row: {e.error_count()} error(s)")
            continue
        issued = parse_date(row.date)
        status = row.status or ""
        violations.append(
            ParkingViolation(
                citation_number=row.violation_number,
                notice_number=row.number,
                agency=row.operator_display_name,
                address=row.location or row.zone,
                tag=row.lpn or license_plate or None,
                state=row.vehiclestate or state or None,
                issue_date=issued,
                start_date=issued,
                end_date=parse_date(row.settlementdate),
                amount=cents_to_amount(row.amountincents),
                currency="USD",
                payment_status=map_payment_status(status),
                is_active=status.lower() != "paid" and row.paid != "1",
                link=link,
            )
        )
    return violations


class RmcPayFinder(Finder):
    key = "rmcpay"
    name = "RmcPay"
    link = "https://www.rmcpay.com"

    async def _find(self, license_plate: str, state: str) -> list[ParkingViolation]:
        state_id = rmcpay_state_id(state)
        async with self.session() as session:
            operator_id = await self.get_operator_id(session, license_plate, state_id)
            return await self._search(session, operator_id, state_id, license_plate, "")

    async def find_by_citation(self, citation: str) -> list[ParkingViolation]:
        """Look up a single violation by its number, without plate or state."""
        try:
            return await asyncio.wait_for(
                self._find_by_citation(citation),
                timeout=config.FIND_TIMEOUT,
            )
        except Exception as e:
            self._emit_error(citation, "", e)
            return []

    async def _find_by_citation(self, citation: str) -> list[ParkingViolation]:
        async with self.session() as session:
            operator_id = await self.get_operator_id(session, "", "", citation)
            return await self._search(session, operator_id, "", "", citation)

    async def get_operator_id(
        self,
        session: HttpSession,
        license_plate: str,
        state_id: str,
        citation: str = "",
    ) -> str:
        """Operator owning the plate or citation; "" when unknown."""
        params = {
            "violationnumber": citation,
            "stateid": state_id,
            "lpn": license_plate,
            "operatorid": "0",
            "omsessiondata": "",
        }
        try:
            response = await session.get(OPERATOR_URL, params=params)
            if not response.is_success:
                return ""
            return first_operator_id(response.json())
        except Exception as e:
            logger.warning(f"RmcPay operator lookup failed: {e}")
            return ""

    async def _search(
        self,
        session: HttpSession,
        operator_id: str,
        state_id: str,
        license_plate: str,
        citation: str,
    ) -> list[ParkingViolation]:
        params = {
            "operatorid": operator_id,
            "violationnumber": citation,
            "stateid": state_id,
            "lpn": license_plate,
            "vin": "",
            "plate_type_id": "",
            "devicenumber": "",
            "payment_plan_id": "",
            "immobilization_id": "",
            "single_violation": "0",
            "omsessiondata": "",
        }
        response = await session.get(VIOLATION_URL, params=params)
        if not response.is_success:
            logger.warning(f"{self.name} returned HTTP {response.status_code}")
            return []
        return parse_violations(response.json(), self.link, license_plate, state)
