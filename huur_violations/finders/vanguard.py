"""VanGuard parking notices (payparkingnotice.com)."""
import logging
from typing import Any, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from huur_violations.finders.base import Finder
from huur_violations.parse.models import ParkingViolation, PaymentStatus
from huur_violations.parse.values import from_epoch_ms, parse_date, parse_decimal

logger = logging.getLogger(__name__)


class NoticeDate(BaseModel):
    # Only the epoch timestamp matters; zone and calendar parts are ignored
    model_config = ConfigDict(extra="ignore")

    ts: Optional[int] = None


class VanGuardNotice(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    notice: Optional[str] = None
    notice_date: Optional[NoticeDate] = Field(default=None, alias="noticeDate")
    entry_time: Optional[str] = Field(default=None, alias="entryTime")
    exit_time: Optional[str] = Field(default=None, alias="exitTime")
    ticket_status: Optional[str] = Field(default=None, alias="ticketStatus")
    lpn: Optional[str] = None
    lpn_state: Optional[str] = Field(default=None, alias="lpnState")
    lot_address: Optional[str] = Field(default=None, alias="lotAddress")
    amount_due: Optional[str] = Field(default=None, alias="amountDue")


def parse_lookup(
    payload: Any,
    license_plate: str,
    state: str,
    agency: str,
    link: str,
) -> list[ParkingViolation]:
    if not isinstance(payload, dict):
        return []
    try:
        records_found = int(payload.get("recordsFound") or 0)
    except (TypeError, ValueError):
        records_found = 0
    notices = payload.get("notices")
    if records_found <= 0 or not isinstance(notices, list):
        return []

    violations = []
    for item in notices:
        try:
            notice = VanGuardNotice.model_validate(item)
        except ValidationError as e:
            logger.warning(f"Skipping malformed {agency} notice: {e.error_count()} error(s)")
            continue
        paid = (notice.ticket_status or "").lower() == "paid"
        violations.append(
            ParkingViolation(
                notice_number=notice.notice,
                agency=agency,
                address=notice.lot_address,
                tag=notice.lpn or license_plate,
                state=notice.lpn_state or state,
                issue_date=from_epoch_ms(notice.notice_date.ts) if notice.notice_date else None,
                start_date=parse_date(notice.entry_time),
                end_date=parse_date(notice.exit_time),
                amount=parse_decimal(notice.amount_due),
                currency="USD",
                payment_status=PaymentStatus.PAID if paid else PaymentStatus.NEW,
                is_active=not paid,
                link=link,
            )
        )
    return violations


class VanGuardFinder(Finder):
    key = "vanguard"
    name = "VanGuard"
    link = "https://www.payparkingnotice.com/api/"

    async def _find(self, license_plate: str, state: str) -> list[ParkingViolation]:
        async with self.session() as session:
            # includeAll keeps its trailing slash on the wire
            response = await session.get(
                f"{self.link}lookup?method=lpnLookup&lpn={quote(license_plate, safe='')}"
                f"&lpnState={quote(state, safe='')}&includeAll=true/"
            )
        if not response.is_success:
            logger.warning(f"{self.name} returned HTTP {response.status_code} for {license_plate}")
            return []
        return parse_lookup(response.json(), license_plate, state, self.name, self.link)
