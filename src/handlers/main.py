"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

Why one Lambda?
- Keeps warm caches (display names, DynamoDB resource) across routes.
- Simpler to deploy while still keeping code organized by delegating to modules.
"""

from typing import Callable, Tuple

from . import health_check, tickets
from utils.error_handling import json_response


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    The event contains the HTTP method and path; we route it to the correct
    handler while keeping shared setup (logging, error handling) centralized.
    """
    method = event.get("requestContext", {}).get("http", {}).get("method", "")
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    route_key = f"{method.upper()} {path}"

    # Map route keys to handler callables. Using startswith for path params.
    route_table: Tuple[Tuple[str, Callable], ...] = (
        ("GET /health", health_check.lambda_handler),
        ("POST /tickets/book", tickets.book_handler),
        ("POST /tickets/verify", tickets.verify_handler),
        ("POST /tickets/check-in", tickets.check_in_handler),
        ("GET /tickets/my-tickets", tickets.my_tickets_handler),
        ("GET /tickets/event/", tickets.event_tickets_handler),
        ("DELETE /tickets/cancel/", tickets.cancel_handler),
    )

    for prefix, handler in route_table:
        if route_key.startswith(prefix):
            return handler(event, context)

    if method.upper() == "POST" and path.startswith("/events/") and path.rstrip("/").endswith(
        "/reconcile"
    ):
        return tickets.reconcile_handler(event, context)

    return json_response(404, {"message": "Route not found", "route": route_key})
