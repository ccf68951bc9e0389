"""Event models (the slice of an event the ticketing core reads)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from utils.time_policy import ensure_utc, parse_timestamp


class Event(BaseModel):
    """Capacity and time fields of an event, plus display data for listings."""

    event_id: str
    organizer_id: str
    capacity: int = Field(gt=0)
    tickets_sold: int = Field(default=0, ge=0)
    start_time: datetime
    end_time: datetime

    title: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_times(cls, value: Any) -> Any:
        if isinstance(value, (str, datetime)):
            return parse_timestamp(value)
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def force_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def validate_window(self) -> "Event":
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self

    @property
    def seats_left(self) -> int:
        return max(self.capacity - self.tickets_sold, 0)

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "Event":
        """Build from a DynamoDB item (numbers arrive as Decimal)."""
        return cls(
            event_id=item["event_id"],
            organizer_id=item["organizer_id"],
            capacity=int(item["capacity"]),
            tickets_sold=int(item.get("tickets_sold", 0)),
            start_time=item["start_time"],
            end_time=item["end_time"],
            title=item.get("title"),
            location=item.get("location"),
            image=item.get("image"),
        )

    def summary(self) -> "EventSummary":
        return EventSummary(
            event_id=self.event_id,
            title=self.title,
            start_time=self.start_time,
            end_time=self.end_time,
            location=self.location,
            image=self.image,
        )


class EventSummary(BaseModel):
    """Event details embedded in ticket listings."""

    event_id: str
    title: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    image: Optional[str] = None
