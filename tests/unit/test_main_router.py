import json

import pytest

from handlers import main


def _event(method, path):
    return {"requestContext": {"http": {"method": method, "path": path}}}


def test_main_routes_health(monkeypatch):
    monkeypatch.setattr(main.health_check, "lambda_handler", lambda e, c: {"status": "ok"})
    resp = main.lambda_handler(_event("GET", "/health"), None)
    assert resp["status"] == "ok"


@pytest.mark.parametrize(
    "method, path, handler_name",
    [
        ("POST", "/tickets/book", "book_handler"),
        ("POST", "/tickets/verify", "verify_handler"),
        ("POST", "/tickets/check-in", "check_in_handler"),
        ("GET", "/tickets/my-tickets", "my_tickets_handler"),
        ("GET", "/tickets/event/event-1", "event_tickets_handler"),
        ("DELETE", "/tickets/cancel/t-1", "cancel_handler"),
        ("POST", "/events/event-1/reconcile", "reconcile_handler"),
    ],
)
def test_main_routes_tickets(monkeypatch, method, path, handler_name):
    marker = {}

    def fake_handler(event, context):
        marker["called"] = True
        return {"statusCode": 200}

    monkeypatch.setattr(main.tickets, handler_name, fake_handler)
    resp = main.lambda_handler(_event(method, path), None)
    assert resp["statusCode"] == 200
    assert marker["called"] is True


def test_main_unknown_route():
    resp = main.lambda_handler(_event("GET", "/unknown"), None)
    assert resp["statusCode"] == 404
    body = json.loads(resp["body"])
    assert body["message"] == "Route not found"
    assert body["route"] == "GET /unknown"


def test_main_wrong_method():
    resp = main.lambda_handler(_event("GET", "/tickets/book"), None)
    assert resp["statusCode"] == 404
