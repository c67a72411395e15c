"""Metropolis customer violation search."""
import logging
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from huur_violations.finders.base import Finder
from huur_violations.parse.models import ParkingViolation, PaymentStatus
from huur_violations.parse.values import from_epoch_ms

logger = logging.getLogger(__name__)


class SiteAddress(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    street: Optional[str] = None
    city: Optional[str] = None
    state_code: Optional[str] = Field(default=None, alias="stateCode")
    zip: Optional[str] = None

    def formatted(self) -> str:
        return f"{self.street or ''}, {self.city or ''}, {self.state_code or ''} {self.zip or ''}".strip()


class ViolationItemView(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    site_address_info: Optional[SiteAddress] = Field(default=None, alias="siteAddressInfo")
    license_plate: Optional[str] = Field(default=None, alias="licensePlate")
    license_plate_state: Optional[str] = Field(default=None, alias="licensePlateState")
    visit_start: Optional[float] = Field(default=None, alias="visitStart")
    visit_end: Optional[float] = Field(default=None, alias="visitEnd")
    violation_issued: Optional[float] = Field(default=None, alias="violationIssued")
    total_amount: Optional[Decimal] = Field(default=None, alias="totalAmount")


class MetropolisViolation(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    ext_id: Optional[str] = Field(default=None, alias="extId")
    violation_item_view: Optional[ViolationItemView] = Field(default=None, alias="violationItemView")


def parse_search_response(
    payload: Any,
    license_plate: str,
    state: str,
    agency: str,
    link: str,
) -> list[ParkingViolation]:
    """Envelope: {success, data: {violations: [...]}, message}."""
    if not isinstance(payload, dict) or not payload.get("success"):
        return []
    data = payload.get("data") or {}
    items = data.get("violations") if isinstance(data, dict) else None
    if not isinstance(items, list):
        return []

    violations = []
    for item in items:
        try:
            parsed = MetropolisViolation.model_validate(item)
        except ValidationError as e:
            logger.warning(f"Skipping malformed {agency} violation: {e.error_count()} error(s)")
            continue
        view = parsed.violation_item_view or ViolationItemView()
        violations.append(
            ParkingViolation(
                notice_number=parsed.ext_id,
                agency=agency,
                address=view.site_address_info.formatted() if view.site_address_info else None,
                issue_date=from_epoch_ms(view.violation_issued),
                start_date=from_epoch_ms(view.visit_start),
                end_date=from_epoch_ms(view.visit_end),
                tag=view.license_plate or license_plate,
                state=view.license_plate_state or state,
                amount=view.total_amount or Decimal("0"),
                currency="USD",
                payment_status=PaymentStatus.NEW,
                is_active=True,
                link=link,
            )
        )
    return violations


class MetropolisFinder(Finder):
    key = "metropolis"
    name = "Metropolis"
    link = "https://site.metropolis.io/api/violation/customer/violations/"
    origin = "https://site.metropolis.io"
    referer = "https://site.metropolis.io/"

    async def _find(self, license_plate: str, state: str) -> list[ParkingViolation]:
        async with self.session() as session:
            response = await session.get(
                f"{self.link}search",
                params={"licensePlateText": license_plate, "licensePlateState": state},
            )
        if not response.is_success:
            logger.warning(f"{self.name} returned HTTP {response.status_code} for {license_plate}")
            return []
        return parse_search_response(response.json(), license_plate, state, self.name, self.link)
