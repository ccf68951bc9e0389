"""
Ticket issuance, cancellation and sold-counter bookkeeping.

Every write here is a single-item conditional operation; DynamoDB gives no
atomicity across the ticket row, its guard rows and the event counter. The
order below keeps the inconsistency windows narrow:

    booking: claim (event, user) guard -> claim RFID guard -> put ticket
             -> guarded counter increment
    cancel:  delete ticket -> release guards -> floored counter decrement

A failed increment after the ticket row exists rolls the ticket and its
guards back. If that rollback (or a decrement after cancel) fails, the
counter drifts from the live ticket count until ``reconcile_sold`` runs.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from models.ticket import ReconciliationResult, Ticket
from repositories.event_repo import EventRepository
from repositories.ticket_repo import TicketRepository
from repositories.user_repo import UserDirectory
from utils.codes import generate_rfid
from utils.error_handling import (
    AppError,
    CodeGenerationExhaustedError,
    DuplicateBookingError,
    ForbiddenError,
    SoldOutError,
    TicketNotFoundError,
)
from utils.logging_config import get_logger
from utils.qr_code import QrCodeEncoder
from utils.time_policy import check_booking_window, compute_expired, utcnow

logger = get_logger(__name__)

DEFAULT_RFID_ATTEMPTS = 5


class TicketIssuer:
    """Books, cancels and reconciles tickets."""

    def __init__(
        self,
        tickets: TicketRepository,
        events: EventRepository,
        users: UserDirectory,
        encoder: Optional[QrCodeEncoder] = None,
        rfid_max_attempts: int = DEFAULT_RFID_ATTEMPTS,
        rfid_generator=generate_rfid,
    ):
        self.tickets = tickets
        self.events = events
        self.users = users
        self.encoder = encoder or QrCodeEncoder()
        self.rfid_max_attempts = rfid_max_attempts
        self.rfid_generator = rfid_generator

    def book_ticket(self, user_id: str, event_id: str, now: Optional[datetime] = None) -> Ticket:
        """Issue one ticket for ``user_id`` to ``event_id``."""
        now = now or utcnow()

        event = self.events.require(event_id)
        check_booking_window(now, event.start_time, event.end_time)
        if self.tickets.booking_exists(event_id, user_id):
            raise DuplicateBookingError()
        if event.tickets_sold >= event.capacity:
            raise SoldOutError()

        user_name = self.users.get_display_name(user_id)
        ticket_id = str(uuid.uuid4())

        # Write-time re-check of the duplicate rule.
        if not self.tickets.claim_booking(event_id, user_id, ticket_id):
            logger.info(
                "Concurrent duplicate booking rejected",
                extra={"event_id": event_id, "user_id": user_id},
            )
            raise DuplicateBookingError()

        try:
            rfid = self._allocate_rfid(ticket_id)
        except AppError:
            self.tickets.release_booking(event_id, user_id, ticket_id)
            raise

        ticket = Ticket(
            ticket_id=ticket_id,
            user_id=user_id,
            event_id=event_id,
            organizer_id=event.organizer_id,
            user_name=user_name,
            rfid=rfid,
            checked_in=False,
            expired=compute_expired(now, event.end_time),
            created_at=now,
            updated_at=now,
        )

        try:
            ticket.qr_code = self.encoder.encode(ticket_id)
            self.tickets.put(ticket)
        except AppError:
            self._release_guards(ticket)
            raise

        try:
            sold = self.events.increment_sold(event_id)
        except AppError as exc:
            logger.info(
                "Sold counter increment rejected; rolling back ticket",
                extra={"ticket_id": ticket_id, "event_id": event_id, "reason": exc.kind},
            )
            self._rollback(ticket)
            raise

        logger.info(
            "Ticket booked",
            extra={
                "ticket_id": ticket_id,
                "event_id": event_id,
                "user_id": user_id,
                "tickets_sold": sold,
            },
        )
        return ticket

    def cancel(self, ticket_id: str, requesting_user_id: str) -> Ticket:
        """Delete a ticket owned by the caller and free its seat."""
        ticket = self.tickets.get(ticket_id)
        if ticket is None:
            raise TicketNotFoundError()
        if ticket.user_id != requesting_user_id:
            raise ForbiddenError("Unauthorized to cancel this ticket")

        removed = self.tickets.delete(ticket_id)
        try:
            self._release_guards(removed)
        finally:
            # The seat is freed even when a guard row could not be released.
            try:
                sold = self.events.decrement_sold(removed.event_id)
            except AppError:
                logger.error(
                    "Ticket deleted but sold counter not decremented; reconcile the event",
                    extra={"ticket_id": ticket_id, "event_id": removed.event_id},
                )
                raise

        logger.info(
            "Ticket cancelled",
            extra={"ticket_id": ticket_id, "event_id": removed.event_id, "tickets_sold": sold},
        )
        return removed

    def reconcile_sold(self, event_id: str, organizer_id: str) -> ReconciliationResult:
        """Rewrite ``tickets_sold`` from the live ticket count."""
        event = self.events.require(event_id)
        if event.organizer_id != organizer_id:
            raise ForbiddenError("Only the event organizer can reconcile this event")

        actual = self.tickets.count_for_event(event_id)
        self.events.set_sold(event_id, actual)

        drift = actual - event.tickets_sold
        if drift:
            logger.warning(
                "Sold counter drift repaired",
                extra={
                    "event_id": event_id,
                    "previous_tickets_sold": event.tickets_sold,
                    "tickets_sold": actual,
                },
            )
        return ReconciliationResult(
            event_id=event_id,
            previous_tickets_sold=event.tickets_sold,
            tickets_sold=actual,
            drift=drift,
        )

    def _allocate_rfid(self, ticket_id: str) -> str:
        """Generate-and-claim; the guard table is the authoritative check."""
        for attempt in range(1, self.rfid_max_attempts + 1):
            candidate = self.rfid_generator()
            if self.tickets.rfid_exists(candidate):
                continue
            if self.tickets.claim_rfid(candidate, ticket_id):
                return candidate
            logger.info("RFID collision on claim", extra={"attempt": attempt})

        logger.error(
            "RFID generation exhausted",
            extra={"ticket_id": ticket_id, "attempts": self.rfid_max_attempts},
        )
        raise CodeGenerationExhaustedError()

    def _release_guards(self, ticket: Ticket) -> None:
        self.tickets.release_rfid(ticket.rfid, ticket.ticket_id)
        self.tickets.release_booking(ticket.event_id, ticket.user_id, ticket.ticket_id)

    def _rollback(self, ticket: Ticket) -> None:
        try:
            self.tickets.delete(ticket.ticket_id)
            self._release_guards(ticket)
        except AppError:
            logger.exception(
                "Rollback failed; ticket may exist without a counted seat",
                extra={"ticket_id": ticket.ticket_id, "event_id": ticket.event_id},
            )
