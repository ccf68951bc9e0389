"""Read-side ticket listings for organizers and ticket holders."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from models.event import Event
from models.ticket import Ticket, TicketList, TicketListItem
from repositories.event_repo import EventRepository
from repositories.ticket_repo import TicketRepository
from utils.error_handling import ForbiddenError
from utils.logging_config import get_logger
from utils.time_policy import utcnow

logger = get_logger(__name__)


def _list_item(ticket: Ticket, event: Optional[Event], now: datetime) -> TicketListItem:
    if event is None:
        # Event removed after booking; keep the stored flag.
        return TicketListItem(**ticket.model_dump())
    refreshed = ticket.with_expiry(now, event.end_time)
    return TicketListItem(**refreshed.model_dump(), event=event.summary())


class TicketQueryService:
    def __init__(self, tickets: TicketRepository, events: EventRepository):
        self.tickets = tickets
        self.events = events

    def tickets_for_event(
        self, event_id: str, organizer_id: str, now: Optional[datetime] = None
    ) -> TicketList:
        """All tickets for an event; only its organizer may list them."""
        now = now or utcnow()
        event = self.events.require(event_id)
        if event.organizer_id != organizer_id:
            raise ForbiddenError("Only the event organizer can view these tickets")

        items = [_list_item(t, event, now) for t in self.tickets.list_for_event(event_id)]
        items.sort(key=lambda item: item.created_at)
        return TicketList(tickets=items, count=len(items))

    def tickets_for_user(self, user_id: str, now: Optional[datetime] = None) -> TicketList:
        """The caller's tickets, newest first, with event details attached."""
        now = now or utcnow()
        events: Dict[str, Optional[Event]] = {}
        items: List[TicketListItem] = []
        for ticket in self.tickets.list_for_user(user_id):
            if ticket.event_id not in events:
                events[ticket.event_id] = self.events.get(ticket.event_id)
            items.append(_list_item(ticket, events[ticket.event_id], now))

        items.sort(key=lambda item: item.created_at, reverse=True)
        logger.info("User tickets listed", extra={"user_id": user_id, "count": len(items)})
        return TicketList(tickets=items, count=len(items))
