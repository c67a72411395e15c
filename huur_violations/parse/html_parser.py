"""HTML helpers: token extraction, cell cleanup and DOM lookups."""
import html
import logging
import re
from urllib.parse import urljoin

from selectolax.parser import HTMLParser

logger = logging.getLogger(__name__)

TOKEN_FIELD = "__RequestVerificationToken"

# Both attribute orders seen in the wild
_TOKEN_PATTERNS = [
    re.compile(
        r"name=[\"']__RequestVerificationToken[\"']\s+(?:type=[\"']hidden[\"']\s+)?value=[\"']([^\"']+)[\"']",
        re.IGNORECASE,
    ),
    re.compile(
        r"value=[\"']([^\"']+)[\"']\s+(?:type=[\"']hidden[\"']\s+)?name=[\"']__RequestVerificationToken[\"']",
        re.IGNORECASE,
    ),
]

_SCRIPT_STYLE = re.compile(r"<(script|style)\b[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")
_HREF = re.compile(r"href=[\"']([^\"']+)[\"']", re.IGNORECASE)


def extract_hidden_value(content: str, field: str) -> str | None:
    """Value of a `name="field" ... value="..."` input, or None."""
    match = re.search(rf'name="{re.escape(field)}"[^>]*value="([^"]*)"', content or "")
    return match.group(1) if match else None


def extract_request_token(content: str) -> str | None:
    """Anti-forgery token from raw HTML, whichever attribute order is used."""
    for pattern in _TOKEN_PATTERNS:
        match = pattern.search(content or "")
        if match:
            return match.group(1)
    return None


def extract_input_value(parser: HTMLParser, name: str, default: str = "") -> str:
    """Extract the value attribute of the first input with the given name."""
    node = parser.css_first(f"input[name='{name}']")
    if node is None:
        return default
    return node.attributes.get("value") or default


def clean_html(fragment: str) -> str:
    """Strip scripts, styles and tags, decode entities, collapse whitespace."""
    if not fragment:
        return ""
    text = _SCRIPT_STYLE.sub("", fragment)
    text = _TAG.sub(" ", text)
    text = html.unescape(text)
    return _WHITESPACE.sub(" ", text).strip()


def extract_href(fragment: str, base_url: str) -> str | None:
    """First href in a raw HTML fragment, made absolute."""
    match = _HREF.search(fragment or "")
    if not match:
        return None
    return urljoin(base_url.rstrip("/") + "/", html.unescape(match.group(1)))


def contains_any(content: str, markers: list[str], ignore_case: bool = False) -> bool:
    """Substring test used by the no-results heuristics."""
    if ignore_case:
        lowered = content.lower()
        return any(marker.lower() in lowered for marker in markers)
    return any(marker in content for marker in markers)
