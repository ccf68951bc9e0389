"""
Event store access limited to capacity/time reads and the sold counter.

The counter only moves through conditional updates so concurrent bookings
cannot push it past capacity and cancellations cannot push it below zero.
"""

from typing import Optional

from botocore.exceptions import ClientError

from models.event import Event
from repositories.dynamodb_repo import DynamoDbRepository, is_conditional_failure
from utils.error_handling import EventNotFoundError, SoldOutError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class EventRepository(DynamoDbRepository):
    """Events table keyed by ``event_id``; a missing ``tickets_sold`` counts as 0."""

    def get(self, event_id: str) -> Optional[Event]:
        item = self.get_item({"event_id": event_id})
        return Event.from_item(item) if item else None

    def require(self, event_id: str) -> Event:
        event = self.get(event_id)
        if event is None:
            raise EventNotFoundError()
        return event

    def increment_sold(self, event_id: str) -> int:
        """Add one sold ticket, only while ``tickets_sold < capacity``."""
        with self._store_call("increment_sold", event_id=event_id):
            try:
                resp = self.table.update_item(
                    Key={"event_id": event_id},
                    UpdateExpression=(
                        "SET tickets_sold = if_not_exists(tickets_sold, :zero) + :one"
                    ),
                    ConditionExpression=(
                        "attribute_exists(event_id) AND "
                        "(attribute_not_exists(tickets_sold) OR tickets_sold < #capacity)"
                    ),
                    # "capacity" is a DynamoDB reserved word
                    ExpressionAttributeNames={"#capacity": "capacity"},
                    ExpressionAttributeValues={":zero": 0, ":one": 1},
                    ReturnValues="UPDATED_NEW",
                )
            except ClientError as exc:
                if not is_conditional_failure(exc):
                    raise
                if self.get(event_id) is None:
                    raise EventNotFoundError() from exc
                raise SoldOutError() from exc
        return int(resp["Attributes"]["tickets_sold"])

    def decrement_sold(self, event_id: str) -> int:
        """Remove one sold ticket, floored at zero."""
        with self._store_call("decrement_sold", event_id=event_id):
            try:
                resp = self.table.update_item(
                    Key={"event_id": event_id},
                    UpdateExpression="SET tickets_sold = tickets_sold - :one",
                    ConditionExpression="attribute_exists(event_id) AND tickets_sold > :zero",
                    ExpressionAttributeValues={":zero": 0, ":one": 1},
                    ReturnValues="UPDATED_NEW",
                )
            except ClientError as exc:
                if not is_conditional_failure(exc):
                    raise
                logger.warning(
                    "Sold counter already at zero or event missing; decrement skipped",
                    extra={"event_id": event_id},
                )
                return 0
        return int(resp["Attributes"]["tickets_sold"])

    def set_sold(self, event_id: str, value: int) -> None:
        """Overwrite the counter (reconciliation only)."""
        with self._store_call("set_sold", event_id=event_id):
            try:
                self.table.update_item(
                    Key={"event_id": event_id},
                    UpdateExpression="SET tickets_sold = :value",
                    ConditionExpression="attribute_exists(event_id)",
                    ExpressionAttributeValues={":value": max(value, 0)},
                )
            except ClientError as exc:
                if not is_conditional_failure(exc):
                    raise
                raise EventNotFoundError() from exc
