"""Lenient value parsing shared by the finders."""
import logging
import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from huur_violations.parse.models import PaymentStatus

logger = logging.getLogger(__name__)

# Result of any date that fails to parse
MIN_DATE = datetime.min

DATE_FORMATS = [
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%b %d, %Y %I:%M %p",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d-%b-%Y",
]

NEW_STATUSES = {"OPEN", "UNPAID", "OVERDUE"}
PAID_STATUSES = {"PAID", "VOID", "PENDING", "CLOSED VOID", "CLOSED WARNING", "CLOSED PAID"}


def parse_date(value: Any) -> datetime:
    """Parse a provider date string, returning MIN_DATE when nothing fits.

    Timezone-aware values are converted to naive UTC so every record carries
    comparable datetimes.
    """
    if isinstance(value, datetime):
        return _naive_utc(value)
    if not value or not isinstance(value, str):
        return MIN_DATE
    text = " ".join(value.split())
    try:
        return _naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    logger.debug(f"Unparsable date: {value!r}")
    return MIN_DATE


def _naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def from_epoch_ms(value: Any) -> datetime | None:
    """Convert epoch milliseconds to a naive UTC datetime."""
    if value is None or value == "":
        return None
    try:
        ms = int(value)
        return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).replace(tzinfo=None)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def parse_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Parse a money-ish value; non-numeric input yields `default`."""
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    cleaned = re.sub(r"[^\d.\-]", "", str(value))
    if not cleaned:
        return default
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return default


def cents_to_amount(value: Any) -> Decimal:
    """Minor units to major units, exact. Non-numeric input yields 0."""
    if isinstance(value, (int, Decimal)):
        cents = Decimal(value)
    else:
        cleaned = re.sub(r"[$,\s]", "", "" if value is None else str(value))
        try:
            cents = Decimal(cleaned)
        except InvalidOperation:
            return Decimal("0")
    if not cents.is_finite():
        return Decimal("0")
    return cents / 100


def map_payment_status(status: str | None) -> PaymentStatus:
    """Map a provider status string onto NEW/PAID."""
    if not status:
        return PaymentStatus.NEW
    normalized = " ".join(status.split()).upper()
    if normalized in NEW_STATUSES:
        return PaymentStatus.NEW
    if normalized in PAID_STATUSES:
        return PaymentStatus.PAID
    logger.debug(f"Unknown payment status {status!r}, treating as NEW")
    return PaymentStatus.NEW
