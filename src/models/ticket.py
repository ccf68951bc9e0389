"""Ticket models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from models.event import EventSummary
from utils.codes import normalize_rfid
from utils.time_policy import compute_expired, format_timestamp, parse_timestamp


class Ticket(BaseModel):
    """One user's admission to one event."""

    ticket_id: str
    user_id: str
    event_id: str
    organizer_id: str
    user_name: str
    rfid: str
    qr_code: Optional[str] = None
    checked_in: bool = False
    checked_in_at: Optional[datetime] = None
    expired: bool = False
    created_at: datetime
    updated_at: datetime

    @field_validator("checked_in_at", "created_at", "updated_at", mode="before")
    @classmethod
    def parse_times(cls, value: Any) -> Any:
        if isinstance(value, (str, datetime)):
            return parse_timestamp(value)
        return value

    def with_expiry(self, now: datetime, event_end_time: datetime) -> "Ticket":
        """Return a copy whose ``expired`` flag reflects ``now``."""
        return self.model_copy(update={"expired": compute_expired(now, event_end_time)})

    def to_item(self) -> Dict[str, Any]:
        """Serialize for DynamoDB (timestamps as ISO-8601 strings)."""
        item = {
            "ticket_id": self.ticket_id,
            "user_id": self.user_id,
            "event_id": self.event_id,
            "organizer_id": self.organizer_id,
            "user_name": self.user_name,
            "rfid": self.rfid,
            "checked_in": self.checked_in,
            "expired": self.expired,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }
        if self.qr_code:
            item["qr_code"] = self.qr_code
        if self.checked_in_at:
            item["checked_in_at"] = format_timestamp(self.checked_in_at)
        return item

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "Ticket":
        return cls.model_validate(item)


class TicketListItem(Ticket):
    """Ticket plus the event details shown in listings."""

    event: Optional[EventSummary] = None


class BookTicketRequest(BaseModel):
    """Inbound booking payload."""

    event_id: str = Field(min_length=1)


class VerifyTicketRequest(BaseModel):
    """Verification by system identifier or by RFID code, scoped to an event."""

    event_id: str = Field(min_length=1)
    ticket_id: Optional[str] = None
    rfid: Optional[str] = None

    @field_validator("rfid")
    @classmethod
    def clean_rfid(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return normalize_rfid(value)

    @model_validator(mode="after")
    def require_identifier(self) -> "VerifyTicketRequest":
        if not (self.ticket_id or self.rfid):
            raise ValueError("Provide either rfid or ticket_id")
        return self


class CheckInRequest(BaseModel):
    """Check-in by ticket id (organizer scanner flow)."""

    ticket_id: str = Field(min_length=1)
    event_id: str = Field(min_length=1)


class VerificationStatus(str, Enum):
    SUCCESS = "success"
    ALREADY_VERIFIED = "already_verified"


class VerificationResult(BaseModel):
    """Outcome of a verify/check-in call."""

    status: VerificationStatus
    message: str
    ticket: Ticket

    @classmethod
    def verified(cls, ticket: Ticket) -> "VerificationResult":
        return cls(status=VerificationStatus.SUCCESS, message="VERIFIED_SUCCESS", ticket=ticket)

    @classmethod
    def already_verified(cls, ticket: Ticket) -> "VerificationResult":
        return cls(
            status=VerificationStatus.ALREADY_VERIFIED,
            message="ALREADY_VERIFIED",
            ticket=ticket,
        )


class ReconciliationResult(BaseModel):
    """Sold counter repair outcome."""

    event_id: str
    previous_tickets_sold: int
    tickets_sold: int
    drift: int


class TicketList(BaseModel):
    tickets: List[TicketListItem] = Field(default_factory=list)
    count: int = 0
