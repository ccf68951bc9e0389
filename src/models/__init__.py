"""Pydantic models for API payloads and stored records."""

from models.event import Event, EventSummary  # noqa: F401
from models.response import ApiResponse  # noqa: F401
from models.ticket import (  # noqa: F401
    BookTicketRequest,
    CheckInRequest,
    ReconciliationResult,
    Ticket,
    TicketList,
    TicketListItem,
    VerificationResult,
    VerificationStatus,
    VerifyTicketRequest,
)
