"""Blinkay multi-fine portal: form-token scrape."""
import logging
import re

from huur_violations.finders.base import Finder, ScrapeError
from huur_violations.parse.html_parser import (
    TOKEN_FIELD,
    contains_any,
    extract_hidden_value,
)
from huur_violations.parse.models import ParkingViolation, PaymentStatus
from huur_violations.parse.values import cents_to_amount, parse_date

logger = logging.getLogger(__name__)

INSTALLATION_ID = "110010"

NO_RESULTS_MARKERS = ["No records found", "no violations", "not found"]
ROW_MARKER = "multiticket_row"

_TOKEN = re.compile(r'name="__RequestVerificationToken"[^>]*value="([^"]+)"')
_ROW = re.compile(
    r'<div class="multiticket_row\s*">\s*<div class="multiticket_col1">.*?<div class="clear"></div>\s*</div>',
    re.DOTALL,
)
_TICKET = re.compile(r'name="CheckedTickets"\s+value="(\d+)"')
_AMOUNT = re.compile(r'data-amount="(\d+)"')
_PLATE = re.compile(r'<div class="multiticket_col3">([^<]+)</div>')
_DATE = re.compile(r'<div class="multiticket_col4">([^<]+)</div>')


def parse_multi_details(
    content: str,
    license_plate: str,
    state: str,
    agency: str,
    link: str,
) -> list[ParkingViolation]:
    """Parse the MultiDetails response into violations, one per ticket row."""
    if not content or contains_any(content, NO_RESULTS_MARKERS) or ROW_MARKER not in content:
        return []

    violations = []
    for row in _ROW.finditer(content):
        block = row.group(0)
        try:
            violations.append(_parse_row(block, license_plate, state, agency, link))
        except Exception as e:
            logger.warning(f"Skipping malformed {agency} row: {e}")
    return violations


def _parse_row(block: str, license_plate: str, state: str, agency: str, link: str) -> ParkingViolation:
    ticket = _TICKET.search(block)
    amount = _AMOUNT.search(block)
    plate = _PLATE.search(block)
    issued = _DATE.search(block)
    # A pre-checked row is one the portal already considers settled
    status = PaymentStatus.PAID if "checked" in block else PaymentStatus.NEW
    return ParkingViolation(
        notice_number=ticket.group(1) if ticket else None,
        agency=agency,
        tag=plate.group(1).strip() if plate else license_plate,
        state=state,
        issue_date=parse_date(issued.group(1).strip() if issued else None),
        amount=cents_to_amount(amount.group(1)) if amount else cents_to_amount(0),
        payment_status=status,
        is_active=status == PaymentStatus.NEW,
        link=link,
    )


class BlinkayFinder(Finder):
    """Blinkay USA parking fines."""

    key = "blinkay"
    name = "Blinkay"
    link = "https://webapp-usa.blinkay.app"
    installation_id = INSTALLATION_ID

    async def _find(self, license_plate: str, state: str) -> list[ParkingViolation]:
        search_url = (
            f"{self.link}/integraMobile/Fine/MultiFine"
            f"?InstallationId={self.installation_id}&Culture=en-US"
        )
        async with self.session() as session:
            page = await session.get(search_url)
            html = page.text

            token_match = _TOKEN.search(html)
            if not token_match:
                raise ScrapeError("Failed to extract CSRF token")

            form = {
                TOKEN_FIELD: token_match.group(1),
                "Plate": license_plate.strip().upper(),
                "TicketNumber": "",
                "ForceInstallationId": extract_hidden_value(html, "ForceInstallationId") or self.installation_id,
                "InstallationList": extract_hidden_value(html, "InstallationList") or self.installation_id,
                "StandardInstallationList": extract_hidden_value(html, "StandardInstallationList") or "",
            }
            response = await session.post(
                f"{self.link}/integraMobile/Fine/MultiDetails",
                data=form,
                headers={"Referer": search_url},
            )
            return parse_multi_details(response.text, license_plate, state, self.name, self.link)
