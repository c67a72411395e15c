"""T2 hosted court portals (/Account/Portal citation search)."""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from selectolax.parser import HTMLParser

from huur_violations.fetch.client import HttpSession
from huur_violations.finders.base import Finder
from huur_violations.finders.states import portal_state_id
from huur_violations.parse.html_parser import TOKEN_FIELD, extract_input_value
from huur_violations.parse.models import ParkingViolation
from huur_violations.parse.values import map_payment_status, parse_date, parse_decimal

logger = logging.getLogger(__name__)

REDIRECT_PREFIX = "document.location"
_NON_AMOUNT = re.compile(r"[^\d.]")


@dataclass
class LinkInfo:
    url: str
    text: str


def extract_result_path(content: str) -> Optional[str]:
    """Path from a `document.location = '/...';` redirect instruction."""
    if not content or not content.startswith(REDIRECT_PREFIX):
        return None
    slash = content.find("/")
    if slash < 0:
        return None
    return content[slash:].replace(";", "").replace("'", "").strip()


def parse_citations(
    content: str,
    license_plate: str,
    state: str,
    agency: str,
    link: str,
) -> list[ParkingViolation]:
    """Rows of the citations-list table, one violation each."""
    if not content:
        return []
    parser = HTMLParser(content)
    violations = []
    for row in parser.css("table#citations-list-table tr"):
        row_id = row.attributes.get("id") or ""
        if not row_id.startswith("citation"):
            continue
        cells = row.css("td")
        if len(cells) < 6:
            continue
        try:
            texts = [cell.text(strip=True) for cell in cells]
            violations.append(
                ParkingViolation(
                    note=row_id,
                    citation_number=texts[0],
                    payment_status=map_payment_status(texts[1]),
                    amount=parse_decimal(_NON_AMOUNT.sub("", texts[2])),
                    currency="USD",
                    issue_date=parse_date(texts[3]),
                    tag=license_plate,
                    state=state,
                    address=texts[5],
                    agency=agency,
                    link=link,
                    is_active=True,
                )
            )
        except Exception as e:
            logger.warning(f"Skipping malformed {agency} citation row {row_id}: {e}")
    return violations


class PortalSearch:
    """Token, search POST and redirect dance shared by T2 portals."""

    def __init__(self, session: HttpSession, base_url: str, agency: str):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.agency = agency

    @property
    def portal_url(self) -> str:
        return f"{self.base_url}/Account/Portal"

    @property
    def search_url(self) -> str:
        return f"{self.base_url}/Account/Citations/Search"

    async def get_token(self) -> str:
        response = await self.session.get(self.portal_url)
        return extract_input_value(HTMLParser(response.text), TOKEN_FIELD)

    async def search_citations(self, license_plate: str, state: str) -> list[ParkingViolation]:
        # Unknown states raise before any network traffic
        state_id = portal_state_id(state)
        token = await self.get_token()

        response = await self.session.post(
            self.search_url,
            data={
                TOKEN_FIELD: token,
                "PlateNumber": license_plate.upper(),
                "StateId": state_id,
                "CitationNumber": "",
            },
            headers={
                "X-Requested-With": "XMLHttpRequest",
                "Referer": self.portal_url,
                "Origin": self.base_url,
            },
        )
        path = extract_result_path(response.text.strip())
        if path is None:
            logger.debug(f"{self.agency}: no redirect in search response")
            return []

        results = await self.session.get(self.base_url + path)
        return parse_citations(results.text, license_plate, state, self.agency, self.base_url)

    async def extract_links(self) -> list[LinkInfo]:
        """Every anchor on the portal page, with absolute URLs."""
        try:
            response = await self.session.get(self.portal_url)
        except Exception as e:
            logger.error(f"Error extracting links from {self.portal_url}: {e}")
            return []
        links = []
        for node in HTMLParser(response.text).css("a[href]"):
            href = node.attributes.get("href") or ""
            if not href:
                continue
            url = href if href.startswith("http") else self.base_url + href
            links.append(LinkInfo(url=url, text=node.text(strip=True)))
        return links


class PortalFinder(Finder):
    """Finder backed by a T2 hosted portal."""

    async def _find(self, license_plate: str, state: str) -> list[ParkingViolation]:
        async with self.session() as session:
            portal = PortalSearch(session, self.link, self.name)
            return await portal.search_citations(license_plate, state)

    async def portal_links(self) -> list[LinkInfo]:
        async with self.session() as session:
            return await PortalSearch(session, self.link, self.name).extract_links()
