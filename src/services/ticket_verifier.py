"""
Organizer-side ticket verification (check-in).

Per ticket the state machine is Unverified -> Verified, and Verified is
terminal. The transition is a conditional update on ``checked_in = false``,
so two scanners reading the same ticket at the same moment produce exactly
one ``success`` and one ``already_verified``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from models.ticket import Ticket, VerificationResult
from repositories.event_repo import EventRepository
from repositories.ticket_repo import TicketRepository
from utils.codes import normalize_rfid
from utils.error_handling import ForbiddenError, TicketNotFoundError
from utils.logging_config import get_logger
from utils.time_policy import check_verification_window, compute_expired, utcnow
from utils.validators import ensure_any_present, ensure_present

logger = get_logger(__name__)


class TicketVerifier:
    """Resolves tickets and performs the one-time check-in."""

    def __init__(self, tickets: TicketRepository, events: EventRepository):
        self.tickets = tickets
        self.events = events

    def resolve_ticket(
        self,
        event_id: str,
        ticket_id: Optional[str] = None,
        rfid: Optional[str] = None,
    ) -> Ticket:
        """Find a ticket by id or by RFID, scoped to ``event_id``.

        The RFID wins when both are given, since that is what a scanner reads.
        """
        ensure_any_present(rfid=rfid, ticket_id=ticket_id)
        if rfid:
            ticket = self.tickets.get_by_rfid(normalize_rfid(rfid))
        else:
            ticket = self.tickets.get(ticket_id)

        if ticket is None or ticket.event_id != event_id:
            raise TicketNotFoundError()
        return ticket

    def verify(
        self,
        event_id: str,
        organizer_id: str,
        ticket_id: Optional[str] = None,
        rfid: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> VerificationResult:
        ensure_present(event_id, "event_id")
        now = now or utcnow()

        ticket = self.resolve_ticket(event_id, ticket_id=ticket_id, rfid=rfid)
        if ticket.organizer_id != organizer_id:
            raise ForbiddenError("Unauthorized. Only the event organizer can verify this ticket.")

        event = self.events.require(event_id)
        check_verification_window(now, event.start_time, event.end_time)

        if ticket.checked_in:
            logger.info("Ticket already verified", extra={"ticket_id": ticket.ticket_id})
            return VerificationResult.already_verified(
                ticket.with_expiry(now, event.end_time)
            )

        updated = self.tickets.mark_checked_in(
            ticket.ticket_id, now, expired=compute_expired(now, event.end_time)
        )
        if updated is None:
            # Lost the race to a concurrent scan; report the winner's state.
            current = self.tickets.get(ticket.ticket_id)
            if current is None:
                raise TicketNotFoundError()
            logger.info(
                "Concurrent check-in detected",
                extra={"ticket_id": ticket.ticket_id, "event_id": event_id},
            )
            return VerificationResult.already_verified(current.with_expiry(now, event.end_time))

        logger.info(
            "Ticket verified",
            extra={"ticket_id": ticket.ticket_id, "event_id": event_id},
        )
        return VerificationResult.verified(updated)
