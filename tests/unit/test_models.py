"""
Pydantic model validation tests.

Ensures all models validate correctly and reject invalid data.
No AWS connection required.

Run with: pytest tests/unit/test_models.py -v
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError


class TestEvent:
    """Test Event model validation."""

    def test_event_from_item_converts_decimals(self):
        from decimal import Decimal
        from models.event import Event

        event = Event.from_item(
            {
                "event_id": "e-1",
                "organizer_id": "o-1",
                "capacity": Decimal("10"),
                "tickets_sold": Decimal("3"),
                "start_time": "2030-06-01T18:00:00Z",
                "end_time": "2030-06-01T23:00:00+00:00",
            }
        )
        assert event.capacity == 10
        assert event.tickets_sold == 3
        assert event.seats_left == 7
        assert event.start_time == datetime(2030, 6, 1, 18, tzinfo=timezone.utc)

    def test_naive_times_are_utc(self):
        from models.event import Event

        event = Event(
            event_id="e-1",
            organizer_id="o-1",
            capacity=1,
            start_time="2030-06-01T18:00:00",
            end_time="2030-06-01T19:00:00",
        )
        assert event.start_time.tzinfo == timezone.utc

    def test_end_must_follow_start(self):
        from models.event import Event

        with pytest.raises(ValidationError):
            Event(
                event_id="e-1",
                organizer_id="o-1",
                capacity=1,
                start_time="2030-06-01T18:00:00Z",
                end_time="2030-06-01T18:00:00Z",
            )

    def test_capacity_must_be_positive(self):
        from models.event import Event

        with pytest.raises(ValidationError):
            Event(
                event_id="e-1",
                organizer_id="o-1",
                capacity=0,
                start_time="2030-06-01T18:00:00Z",
                end_time="2030-06-01T19:00:00Z",
            )


class TestTicket:
    """Test Ticket model serialization."""

    def _ticket(self, **overrides):
        from models.ticket import Ticket

        now = datetime(2030, 5, 1, tzinfo=timezone.utc)
        fields = dict(
            ticket_id="t-1",
            user_id="u-1",
            event_id="e-1",
            organizer_id="o-1",
            user_name="Jane Doe",
            rfid="AB CD EF 01",
            created_at=now,
            updated_at=now,
        )
        fields.update(overrides)
        return Ticket(**fields)

    def test_item_omits_unset_optional_fields(self):
        item = self._ticket().to_item()
        assert "checked_in_at" not in item
        assert "qr_code" not in item
        assert item["created_at"] == "2030-05-01T00:00:00+00:00"
        assert item["checked_in"] is False

    def test_item_round_trip_keeps_check_in(self):
        from models.ticket import Ticket

        checked = self._ticket(
            checked_in=True, checked_in_at=datetime(2030, 6, 1, 19, tzinfo=timezone.utc)
        )
        assert Ticket.from_item(checked.to_item()) == checked

    def test_with_expiry(self):
        ticket = self._ticket()
        end = datetime(2030, 6, 1, 23, tzinfo=timezone.utc)

        assert ticket.with_expiry(end, end).expired is False
        assert ticket.with_expiry(datetime(2030, 6, 2, tzinfo=timezone.utc), end).expired is True
        assert ticket.expired is False


class TestRequests:
    """Test inbound payload validation."""

    def test_verify_requires_identifier(self):
        from models.ticket import VerifyTicketRequest

        with pytest.raises(ValidationError) as exc_info:
            VerifyTicketRequest(event_id="e-1")
        assert "Provide either rfid or ticket_id" in str(exc_info.value)

    def test_verify_normalizes_rfid(self):
        from models.ticket import VerifyTicketRequest

        request = VerifyTicketRequest(event_id="e-1", rfid="abcdef01")
        assert request.rfid == "AB CD EF 01"

    def test_blank_rfid_with_ticket_id(self):
        from models.ticket import VerifyTicketRequest

        request = VerifyTicketRequest(event_id="e-1", rfid="  ", ticket_id="t-1")
        assert request.rfid is None

    def test_book_requires_event_id(self):
        from models.ticket import BookTicketRequest

        with pytest.raises(ValidationError):
            BookTicketRequest(event_id="")

    def test_check_in_requires_ticket_id(self):
        from models.ticket import CheckInRequest

        with pytest.raises(ValidationError):
            CheckInRequest(event_id="e-1")
