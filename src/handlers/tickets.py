"""
Ticket handlers: book, verify/check-in, listings, cancellation and
sold-counter reconciliation.

Each handler authenticates the caller, validates the body with pydantic and
delegates to a service. Business failures come back as AppError subclasses
and are rendered with their status code and kind; anything unexpected is
logged and returned as a generic 500.
"""

from __future__ import annotations

import json
import uuid
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from models.response import ApiResponse
from models.ticket import BookTicketRequest, CheckInRequest, VerifyTicketRequest
from utils.error_handling import (
    AppError,
    ValidationError,
    internal_error_response,
    json_response,
    to_response,
)
from utils.logging_config import get_logger
from utils.settings import Settings

logger = get_logger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)

# Lazy-loaded services to avoid import-time AWS clients
_settings: Optional[Settings] = None
_identity: Optional["IdentityProvider"] = None
_issuer: Optional["TicketIssuer"] = None
_verifier: Optional["TicketVerifier"] = None
_queries: Optional["TicketQueryService"] = None
_repos: Optional[Dict[str, Any]] = None


def _get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_environment()
    return _settings


def _get_repositories() -> Dict[str, Any]:
    """Build the table repositories once per container."""
    global _repos
    if _repos is None:
        from repositories.dynamodb_repo import get_dynamodb
        from repositories.event_repo import EventRepository
        from repositories.ticket_repo import TicketKeyRepository, TicketRepository
        from repositories.user_repo import UserDirectory
        from utils.cache_service import LRUCache

        settings = _get_settings()
        dynamodb = get_dynamodb(settings)
        keys = TicketKeyRepository(settings.ticket_keys_table, dynamodb=dynamodb)
        names = LRUCache(
            max_size=settings.display_name_cache_max_size,
            ttl_seconds=settings.display_name_cache_ttl_seconds,
        )
        _repos = {
            "tickets": TicketRepository(settings.tickets_table, keys, dynamodb=dynamodb),
            "events": EventRepository(settings.events_table, dynamodb=dynamodb),
            "users": UserDirectory(settings.users_table, dynamodb=dynamodb, cache=names),
        }
    return _repos


def _get_identity():
    global _identity
    if _identity is None:
        from services.identity_service import IdentityProvider

        settings = _get_settings()
        _identity = IdentityProvider(settings.jwt_secret, settings.jwt_algorithm)
    return _identity


def _get_issuer():
    global _issuer
    if _issuer is None:
        from services.ticket_issuer import TicketIssuer

        repos = _get_repositories()
        _issuer = TicketIssuer(
            repos["tickets"],
            repos["events"],
            repos["users"],
            rfid_max_attempts=_get_settings().rfid_max_attempts,
        )
    return _issuer


def _get_verifier():
    global _verifier
    if _verifier is None:
        from services.ticket_verifier import TicketVerifier

        repos = _get_repositories()
        _verifier = TicketVerifier(repos["tickets"], repos["events"])
    return _verifier


def _get_queries():
    global _queries
    if _queries is None:
        from services.ticket_query_service import TicketQueryService

        repos = _get_repositories()
        _queries = TicketQueryService(repos["tickets"], repos["events"])
    return _queries


def parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    try:
        payload = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        raise ValidationError("Request body must be valid JSON") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def parse_request(model: Type[RequestT], event: Dict[str, Any]) -> RequestT:
    """Validate the JSON body as ``model``; failures become a 422."""
    try:
        return model.model_validate(parse_body(event))
    except PydanticValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        message = str(first.get("msg", "Invalid input")).removeprefix("Value error, ")
        raise ValidationError(message) from exc


def path_param(event: Dict[str, Any], name: str, prefix: str) -> Optional[str]:
    """Read a path parameter, falling back to the segment after ``prefix``."""
    value = (event.get("pathParameters") or {}).get(name)
    if value:
        return value
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    if not path.startswith(prefix):
        return None
    return path[len(prefix):].split("/", 1)[0] or None


def handle(
    event: Dict[str, Any], action: Callable[[str], Dict[str, Any]], operation: str
) -> Dict[str, Any]:
    """Run ``action(correlation_id)`` and render failures consistently."""
    correlation_id = str(uuid.uuid4())
    try:
        return action(correlation_id)
    except AppError as exc:
        logger.info(
            f"{operation} rejected",
            extra={
                "correlation_id": correlation_id,
                "kind": exc.kind,
                "reason": getattr(exc, "reason", exc.kind),
            },
        )
        return to_response(exc, correlation_id)
    except Exception:  # noqa: BLE001
        logger.exception(f"{operation} failed", extra={"correlation_id": correlation_id})
        return internal_error_response(correlation_id)


def book_handler(event, context):
    """Handle POST /tickets/book."""

    def action(correlation_id: str) -> Dict[str, Any]:
        user_id = _get_identity().authenticate(event)
        request = parse_request(BookTicketRequest, event)
        ticket = _get_issuer().book_ticket(user_id, request.event_id)
        logger.info(
            "Booking served",
            extra={"correlation_id": correlation_id, "ticket_id": ticket.ticket_id},
        )
        return json_response(201, ticket.model_dump_json())

    return handle(event, action, "Booking")


def verify_handler(event, context):
    """Handle POST /tickets/verify (ticket_id or rfid)."""

    def action(correlation_id: str) -> Dict[str, Any]:
        organizer_id = _get_identity().authenticate(event)
        request = parse_request(VerifyTicketRequest, event)
        result = _get_verifier().verify(
            request.event_id,
            organizer_id,
            ticket_id=request.ticket_id,
            rfid=request.rfid,
        )
        return json_response(200, result.model_dump_json())

    return handle(event, action, "Verification")


def check_in_handler(event, context):
    """Handle POST /tickets/check-in (ticket_id only)."""

    def action(correlation_id: str) -> Dict[str, Any]:
        organizer_id = _get_identity().authenticate(event)
        request = parse_request(CheckInRequest, event)
        result = _get_verifier().verify(
            request.event_id, organizer_id, ticket_id=request.ticket_id
        )
        return json_response(200, result.model_dump_json())

    return handle(event, action, "Check-in")


def my_tickets_handler(event, context):
    """Handle GET /tickets/my-tickets."""

    def action(correlation_id: str) -> Dict[str, Any]:
        user_id = _get_identity().authenticate(event)
        listing = _get_queries().tickets_for_user(user_id)
        return json_response(200, listing.model_dump_json())

    return handle(event, action, "User ticket listing")


def event_tickets_handler(event, context):
    """Handle GET /tickets/event/{eventId}."""

    def action(correlation_id: str) -> Dict[str, Any]:
        organizer_id = _get_identity().authenticate(event)
        event_id = path_param(event, "eventId", "/tickets/event/")
        if not event_id:
            raise ValidationError("eventId is required")
        listing = _get_queries().tickets_for_event(event_id, organizer_id)
        return json_response(200, listing.model_dump_json())

    return handle(event, action, "Event ticket listing")


def cancel_handler(event, context):
    """Handle DELETE /tickets/cancel/{ticketId}."""

    def action(correlation_id: str) -> Dict[str, Any]:
        user_id = _get_identity().authenticate(event)
        ticket_id = path_param(event, "ticketId", "/tickets/cancel/")
        if not ticket_id:
            raise ValidationError("ticketId is required")
        removed = _get_issuer().cancel(ticket_id, user_id)
        response = ApiResponse(
            message="Ticket cancelled successfully.",
            data={"ticket_id": removed.ticket_id, "event_id": removed.event_id},
            correlation_id=correlation_id,
        )
        return json_response(200, response.model_dump_json())

    return handle(event, action, "Cancellation")


def reconcile_handler(event, context):
    """Handle POST /events/{eventId}/reconcile (organizer repair of tickets_sold)."""

    def action(correlation_id: str) -> Dict[str, Any]:
        organizer_id = _get_identity().authenticate(event)
        event_id = path_param(event, "eventId", "/events/")
        if not event_id:
            raise ValidationError("eventId is required")
        result = _get_issuer().reconcile_sold(event_id, organizer_id)
        return json_response(200, result.model_dump_json())

    return handle(event, action, "Reconciliation")
