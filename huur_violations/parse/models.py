"""Data models for normalized violation records."""
from datetime import datetime
from decimal import Decimal
from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


class PaymentStatus(IntEnum):
    """Two-valued payment state shared by every provider."""

    PAID = 0
    NEW = 1


class FineType(IntEnum):
    PARKING = 1


class ParkingViolation(BaseModel):
    """Normalized parking violation, the unit submitted to the Huur API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    citation_number: Optional[str] = Field(default=None, description="Formal citation reference")
    notice_number: Optional[str] = Field(default=None, description="Provider tracking id")
    agency: Optional[str] = Field(default=None, description="Issuing authority or provider name")
    tag: Optional[str] = Field(default=None, description="License plate")
    state: Optional[str] = None
    address: Optional[str] = None
    issue_date: Optional[datetime] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    amount: Decimal = Field(default=Decimal("0"), description="Amount in major currency units")
    currency: str = "USD"
    payment_status: PaymentStatus = PaymentStatus.NEW
    fine_type: FineType = FineType.PARKING
    is_active: bool = False
    link: Optional[str] = None
    note: Optional[str] = None
    provider: Optional[int] = Field(default=None, description="Sub-source discriminator")

    @field_serializer("amount", when_used="json")
    def _amount_as_number(self, value: Decimal) -> float:
        return float(value)

    def to_payload(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    def summary_line(self) -> str:
        reference = self.citation_number or self.notice_number or "?"
        issued = self.issue_date.isoformat()[:10] if self.issue_date else "n/a"
        return (
            f"- {reference} [{self.state}] {self.tag}: {self.agency} "
            f"${self.amount:.2f} on {issued} [{self.payment_status.name}]"
        )
