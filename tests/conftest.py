"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import tickets` to work
when running tests, simulating the Lambda environment where code
is deployed from the src/ directory.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import boto3
import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add repository root AND src/ to sys.path if missing.

    The src/ directory is added to simulate Lambda's import behavior,
    where Code.from_asset("src") makes src/ the root of the package.
    """
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"

    # Add repo root first (for imports like infrastructure.*)
    root_str = str(repo_root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)

    # Add src/ for Lambda-style imports (from handlers import ...)
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Ensure boto3 has offline-friendly defaults so tests do not require AWS access.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("AWS_SESSION_TOKEN", "test")
os.environ.setdefault("ENVIRONMENT", "dev")

# Lambda environment variables used by handlers
os.environ.setdefault("TICKETS_TABLE", "test-tickets")
os.environ.setdefault("TICKET_KEYS_TABLE", "test-ticket-keys")
os.environ.setdefault("EVENTS_TABLE", "test-events")
os.environ.setdefault("USERS_TABLE", "test-users")
os.environ.setdefault("JWT_SECRET", "test-secret")

# Create a default boto3 session so resources/clients do not error during import.
boto3.setup_default_session(region_name="eu-west-2")

from moto import mock_aws  # noqa: E402

from repositories.event_repo import EventRepository  # noqa: E402
from repositories.ticket_repo import TicketKeyRepository, TicketRepository  # noqa: E402
from repositories.user_repo import UserDirectory  # noqa: E402
from utils.cache_service import LRUCache  # noqa: E402

ORGANIZER_ID = "organizer-1"
EVENT_START = datetime(2030, 6, 1, 18, 0, tzinfo=timezone.utc)
EVENT_END = datetime(2030, 6, 1, 23, 0, tzinfo=timezone.utc)
BEFORE_START = EVENT_START - timedelta(days=1)


def _create_table(dynamodb, name, key, indexes=()):
    attributes = {key}
    gsis = []
    for index_name, partition, sort in indexes:
        attributes.update({partition, sort})
        gsis.append(
            {
                "IndexName": index_name,
                "KeySchema": [
                    {"AttributeName": partition, "KeyType": "HASH"},
                    {"AttributeName": sort, "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            }
        )
    kwargs = {
        "TableName": name,
        "KeySchema": [{"AttributeName": key, "KeyType": "HASH"}],
        "AttributeDefinitions": [
            {"AttributeName": attr, "AttributeType": "S"} for attr in sorted(attributes)
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }
    if gsis:
        kwargs["GlobalSecondaryIndexes"] = gsis
    return dynamodb.create_table(**kwargs)


@pytest.fixture
def dynamodb():
    """In-memory DynamoDB with the four ticketing tables."""
    with mock_aws():
        resource = boto3.resource("dynamodb", region_name="eu-west-2")
        _create_table(
            resource,
            "test-tickets",
            "ticket_id",
            indexes=(
                ("event_id-index", "event_id", "created_at"),
                ("user_id-index", "user_id", "created_at"),
            ),
        )
        _create_table(resource, "test-ticket-keys", "guard_key")
        _create_table(resource, "test-events", "event_id")
        _create_table(resource, "test-users", "user_id")
        yield resource


@pytest.fixture
def repos(dynamodb):
    keys = TicketKeyRepository("test-ticket-keys", dynamodb=dynamodb)
    return {
        "tickets": TicketRepository("test-tickets", keys, dynamodb=dynamodb),
        "keys": keys,
        "events": EventRepository("test-events", dynamodb=dynamodb),
        "users": UserDirectory(
            "test-users", dynamodb=dynamodb, cache=LRUCache(max_size=10, ttl_seconds=60)
        ),
    }


@pytest.fixture
def put_event(dynamodb):
    """Insert an event row; returns the event id."""
    table = dynamodb.Table("test-events")

    def _put(
        event_id="event-1",
        capacity=100,
        tickets_sold=0,
        start_time=EVENT_START,
        end_time=EVENT_END,
        organizer_id=ORGANIZER_ID,
        **extra,
    ):
        item = {
            "event_id": event_id,
            "organizer_id": organizer_id,
            "capacity": capacity,
            "start_time": start_time.isoformat(),
            "end_time": end_time.isoformat(),
            **extra,
        }
        # None leaves the counter off the row, as event rows created elsewhere may
        if tickets_sold is not None:
            item["tickets_sold"] = tickets_sold
        table.put_item(Item=item)
        return event_id

    return _put


@pytest.fixture
def put_user(dynamodb):
    table = dynamodb.Table("test-users")

    def _put(user_id, name=None):
        table.put_item(Item={"user_id": user_id, "name": name or f"User {user_id}"})
        return user_id

    return _put
