"""West Palm Beach citation portal: Kendo table scrape."""
import logging
import re
from typing import Optional

from huur_violations.finders.base import Finder
from huur_violations.parse.html_parser import (
    TOKEN_FIELD,
    clean_html,
    contains_any,
    extract_href,
    extract_request_token,
)
from huur_violations.parse.models import ParkingViolation
from huur_violations.parse.values import map_payment_status, parse_date, parse_decimal

logger = logging.getLogger(__name__)

NO_RESULTS_MARKERS = ["No citations found", "No results"]
MIN_CELLS = 9

_TBODY = re.compile(
    r"<tbody[^>]*class=[\"']k-table-tbody[\"'][^>]*>(.*?)</tbody>",
    re.IGNORECASE | re.DOTALL,
)
_ROW = re.compile(
    r"<tr[^>]*class=[\"']k-table-row[^\"']*[\"'][^>]*>(.*?)</tr>",
    re.IGNORECASE | re.DOTALL,
)
_CELL = re.compile(r"<td[^>]*>(.*?)</td>", re.IGNORECASE | re.DOTALL)


def parse_search_results(
    content: str,
    license_plate: str,
    state: str,
    agency: str,
    base_url: str,
) -> list[ParkingViolation]:
    if not content or contains_any(content, NO_RESULTS_MARKERS, ignore_case=True):
        return []
    tbody = _TBODY.search(content)
    if not tbody:
        return []

    violations = []
    for row in _ROW.finditer(tbody.group(1)):
        try:
            violation = parse_row(row.group(1), license_plate, state, agency, base_url)
        except Exception as e:
            logger.warning(f"Skipping malformed {agency} row: {e}")
            continue
        if violation is not None:
            violations.append(violation)
    return violations


def parse_row(
    row_html: str,
    license_plate: str,
    state: str,
    agency: str,
    base_url: str,
) -> Optional[ParkingViolation]:
    """Map one table row by cell position; None when the row is too short."""
    raw_cells = _CELL.findall(row_html)
    if len(raw_cells) < MIN_CELLS:
        return None
    cells = [clean_html(cell) for cell in raw_cells]

    status_text = cells[7]
    issued = parse_date(cells[5])
    return ParkingViolation(
        citation_number=cells[0],
        link=extract_href(raw_cells[0], base_url) or base_url,
        address=cells[1],
        state=cells[2] or state,
        tag=cells[3] or license_plate,
        issue_date=issued,
        start_date=issued,
        end_date=parse_date(cells[6]),
        payment_status=map_payment_status(status_text),
        note=status_text,
        amount=parse_decimal(cells[8].replace("$", "").replace(",", "")),
        currency="USD",
        agency=agency,
        provider=1,
        is_active=True,
    )


class WestPalmBeachFinder(Finder):
    """West Palm Beach parking citations."""

    key = "west_palm_beach"
    name = "West Palm Beach"
    link = "https://wpb.citationportal.com"

    async def _find(self, license_plate: str, state: str) -> list[ParkingViolation]:
        async with self.session() as session:
            page = await session.get(self.link)
            token = extract_request_token(page.text) or ""

            response = await session.post(
                f"{self.link}/Citation/Search",
                data={
                    TOKEN_FIELD: token,
                    "Type": "PlateStrict",
                    "Term": license_plate,
                    "AdditionalTerm": state,
                },
                headers={"Referer": self.link},
            )
            return parse_search_results(response.text, license_plate, state, self.name, self.link)
