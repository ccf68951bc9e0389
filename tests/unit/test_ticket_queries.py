"""Ticket listing tests for organizers and ticket holders."""

from datetime import timedelta

import pytest

from conftest import BEFORE_START, EVENT_END, ORGANIZER_ID
from services.ticket_issuer import TicketIssuer
from services.ticket_query_service import TicketQueryService
from utils.error_handling import EventNotFoundError, ForbiddenError


class StubEncoder:
    def encode(self, payload):
        return payload


@pytest.fixture
def queries(repos):
    return TicketQueryService(repos["tickets"], repos["events"])


@pytest.fixture
def booked(repos, put_event, put_user):
    put_event(title="Launch Party", location="Main Hall")
    put_event(
        event_id="event-2",
        start_time=BEFORE_START + timedelta(days=10),
        end_time=BEFORE_START + timedelta(days=11),
        title="Afterparty",
    )
    put_user("alice")
    put_user("bob")
    issuer = TicketIssuer(repos["tickets"], repos["events"], repos["users"], encoder=StubEncoder())
    return [
        issuer.book_ticket("alice", "event-1", now=BEFORE_START),
        issuer.book_ticket("bob", "event-1", now=BEFORE_START + timedelta(minutes=1)),
        issuer.book_ticket("alice", "event-2", now=BEFORE_START + timedelta(minutes=2)),
    ]


def test_event_listing_for_organizer(queries, booked):
    listing = queries.tickets_for_event("event-1", ORGANIZER_ID, now=BEFORE_START)

    assert listing.count == 2
    assert [t.user_id for t in listing.tickets] == ["alice", "bob"]
    assert listing.tickets[0].event.title == "Launch Party"


def test_event_listing_requires_organizer(queries, booked):
    with pytest.raises(ForbiddenError):
        queries.tickets_for_event("event-1", "alice", now=BEFORE_START)


def test_event_listing_unknown_event(queries):
    with pytest.raises(EventNotFoundError):
        queries.tickets_for_event("missing", ORGANIZER_ID)


def test_user_listing_newest_first_with_event_details(queries, booked):
    listing = queries.tickets_for_user("alice", now=BEFORE_START)

    assert listing.count == 2
    assert [t.event_id for t in listing.tickets] == ["event-2", "event-1"]
    assert listing.tickets[1].event.location == "Main Hall"
    assert all(t.expired is False for t in listing.tickets)


def test_expired_flag_recomputed_on_read(queries, booked):
    listing = queries.tickets_for_user("alice", now=EVENT_END + timedelta(seconds=1))

    by_event = {t.event_id: t for t in listing.tickets}
    assert by_event["event-1"].expired is True
    assert by_event["event-2"].expired is False


def test_user_without_tickets(queries, booked):
    assert queries.tickets_for_user("nobody").count == 0
