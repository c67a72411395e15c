"""Parking Compliance (CPM dashboard) violation app."""
import logging
from decimal import Decimal
from typing import Any, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from huur_violations.finders.base import Finder
from huur_violations.parse.models import ParkingViolation, PaymentStatus
from huur_violations.parse.values import parse_date

logger = logging.getLogger(__name__)

INACTIVE_STATUSES = {"RESOLVED", "PAID"}


class Lot(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    address: Optional[str] = None


class ComplianceNotice(BaseModel):
    """One element of the plate lookup array."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    id: Optional[str] = Field(default=None, alias="_id")
    lot: Optional[Lot] = None
    plate_number: Optional[str] = Field(default=None, alias="plateNumber")
    entry_time: Optional[str] = Field(default=None, alias="entryTime")
    exit_time: Optional[str] = Field(default=None, alias="exitTime")
    status: Optional[str] = None
    notice_number: Optional[str] = Field(default=None, alias="noticeNumber")
    fine: Optional[Decimal] = None


def parse_notices(payload: Any, state: str, agency: str, link: str) -> list[ParkingViolation]:
    if not isinstance(payload, list):
        return []
    violations = []
    for item in payload:
        try:
            notice = ComplianceNotice.model_validate(item)
        except ValidationError as e:
            logger.warning(f"Skipping malformed {agency} notice: {e.error_count()} error(s)")
            continue
        status = (notice.status or "").upper()
        entered = parse_date(notice.entry_time) if notice.entry_time else None
        violations.append(
            ParkingViolation(
                notice_number=notice.notice_number,
                agency=agency,
                address=notice.lot.address if notice.lot else None,
                start_date=entered,
                end_date=parse_date(notice.exit_time) if notice.exit_time else None,
                issue_date=entered,
                tag=notice.plate_number,
                state=state,
                amount=notice.fine or Decimal("0"),
                currency="USD",
                payment_status=PaymentStatus.PAID if status == "PAID" else PaymentStatus.NEW,
                is_active=status not in INACTIVE_STATUSES,
                link=link,
            )
        )
    return violations


class ParkingComplianceFinder(Finder):
    key = "parking_compliance"
    name = "Parking Compliance"
    link = "https://api.cpmdashboard.com/v1/violationapp/violations/"

    async def _find(self, license_plate: str, state: str) -> list[ParkingViolation]:
        async with self.session() as session:
            response = await session.get(f"{self.link}{quote(license_plate, safe='')}")
        if not response.is_success:
            logger.warning(f"{self.name} returned HTTP {response.status_code} for {license_plate}")
            return []
        return parse_notices(response.json(), state, self.name, self.link)
