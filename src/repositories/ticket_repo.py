"""
Ticket persistence.

DynamoDB only enforces uniqueness on primary keys, so the two uniqueness
rules live in a separate guard table written with insert-if-absent puts:

* ``BOOKING#<event_id>#<user_id>`` - one live ticket per user and event
* ``RFID#<code>``                  - globally unique ticket codes

Guards are claimed before the ticket row is written and released when the
ticket is cancelled.
"""

from datetime import datetime
from typing import List, Optional

from botocore.exceptions import ClientError

from models.ticket import Ticket
from repositories.dynamodb_repo import DynamoDbRepository, is_conditional_failure
from utils.error_handling import TicketNotFoundError
from utils.logging_config import get_logger
from utils.time_policy import format_timestamp

logger = get_logger(__name__)

EVENT_INDEX = "event_id-index"
USER_INDEX = "user_id-index"


def booking_key(event_id: str, user_id: str) -> str:
    return f"BOOKING#{event_id}#{user_id}"


def rfid_key(rfid: str) -> str:
    return f"RFID#{rfid}"


class TicketKeyRepository(DynamoDbRepository):
    """Guard table keyed by ``guard_key``."""

    def exists(self, key: str) -> bool:
        return self.get_item({"guard_key": key}) is not None

    def owner(self, key: str) -> Optional[str]:
        """Return the ticket id holding the guard, if any."""
        item = self.get_item({"guard_key": key})
        return item["ticket_id"] if item else None

    def claim(self, key: str, ticket_id: str) -> bool:
        """Insert-if-absent. False means someone else holds the key."""
        with self._store_call("claim", guard_key=key):
            try:
                self.table.put_item(
                    Item={"guard_key": key, "ticket_id": ticket_id},
                    ConditionExpression="attribute_not_exists(guard_key)",
                )
            except ClientError as exc:
                if is_conditional_failure(exc):
                    return False
                raise
        return True

    def release(self, key: str, ticket_id: str) -> None:
        """Delete the guard only while it still belongs to ``ticket_id``."""
        with self._store_call("release", guard_key=key):
            try:
                self.table.delete_item(
                    Key={"guard_key": key},
                    ConditionExpression="ticket_id = :tid",
                    ExpressionAttributeValues={":tid": ticket_id},
                )
            except ClientError as exc:
                if not is_conditional_failure(exc):
                    raise
                logger.warning(
                    "Guard not held by ticket; left in place",
                    extra={"guard_key": key, "ticket_id": ticket_id},
                )


class TicketRepository(DynamoDbRepository):
    """Tickets table keyed by ``ticket_id`` with event and user indexes."""

    def __init__(self, table_name: str, keys: TicketKeyRepository, dynamodb=None):
        super().__init__(table_name, dynamodb=dynamodb)
        self.keys = keys

    # Guards

    def booking_exists(self, event_id: str, user_id: str) -> bool:
        return self.keys.exists(booking_key(event_id, user_id))

    def claim_booking(self, event_id: str, user_id: str, ticket_id: str) -> bool:
        return self.keys.claim(booking_key(event_id, user_id), ticket_id)

    def release_booking(self, event_id: str, user_id: str, ticket_id: str) -> None:
        self.keys.release(booking_key(event_id, user_id), ticket_id)

    def rfid_exists(self, rfid: str) -> bool:
        return self.keys.exists(rfid_key(rfid))

    def claim_rfid(self, rfid: str, ticket_id: str) -> bool:
        return self.keys.claim(rfid_key(rfid), ticket_id)

    def release_rfid(self, rfid: str, ticket_id: str) -> None:
        self.keys.release(rfid_key(rfid), ticket_id)

    # Tickets

    def put(self, ticket: Ticket) -> None:
        with self._store_call("put", ticket_id=ticket.ticket_id):
            self.table.put_item(
                Item=ticket.to_item(),
                ConditionExpression="attribute_not_exists(ticket_id)",
            )

    def get(self, ticket_id: str) -> Optional[Ticket]:
        item = self.get_item({"ticket_id": ticket_id})
        return Ticket.from_item(item) if item else None

    def get_by_rfid(self, rfid: str) -> Optional[Ticket]:
        ticket_id = self.keys.owner(rfid_key(rfid))
        return self.get(ticket_id) if ticket_id else None

    def list_for_event(self, event_id: str) -> List[Ticket]:
        items = self.query_all(
            IndexName=EVENT_INDEX,
            KeyConditionExpression="event_id = :eid",
            ExpressionAttributeValues={":eid": event_id},
        )
        return [Ticket.from_item(item) for item in items]

    def list_for_user(self, user_id: str) -> List[Ticket]:
        items = self.query_all(
            IndexName=USER_INDEX,
            KeyConditionExpression="user_id = :uid",
            ExpressionAttributeValues={":uid": user_id},
        )
        return [Ticket.from_item(item) for item in items]

    def count_for_event(self, event_id: str) -> int:
        return self.count(
            IndexName=EVENT_INDEX,
            KeyConditionExpression="event_id = :eid",
            ExpressionAttributeValues={":eid": event_id},
        )

    def mark_checked_in(self, ticket_id: str, checked_in_at: datetime, expired: bool) -> Optional[Ticket]:
        """
        Flip ``checked_in`` to true only if it is currently false.

        Returns the updated ticket, or None when another request already
        checked it in. Raises TicketNotFoundError if the row is gone.
        """
        stamp = format_timestamp(checked_in_at)
        with self._store_call("mark_checked_in", ticket_id=ticket_id):
            try:
                resp = self.table.update_item(
                    Key={"ticket_id": ticket_id},
                    UpdateExpression=(
                        "SET checked_in = :true, checked_in_at = :now, "
                        "updated_at = :now, expired = :expired"
                    ),
                    ConditionExpression="attribute_exists(ticket_id) AND checked_in = :false",
                    ExpressionAttributeValues={
                        ":true": True,
                        ":false": False,
                        ":now": stamp,
                        ":expired": expired,
                    },
                    ReturnValues="ALL_NEW",
                )
            except ClientError as exc:
                if not is_conditional_failure(exc):
                    raise
                if self.get(ticket_id) is None:
                    raise TicketNotFoundError() from exc
                return None
        return Ticket.from_item(resp["Attributes"])

    def delete(self, ticket_id: str) -> Ticket:
        """Delete and return the removed ticket."""
        with self._store_call("delete", ticket_id=ticket_id):
            try:
                resp = self.table.delete_item(
                    Key={"ticket_id": ticket_id},
                    ConditionExpression="attribute_exists(ticket_id)",
                    ReturnValues="ALL_OLD",
                )
            except ClientError as exc:
                if not is_conditional_failure(exc):
                    raise
                raise TicketNotFoundError() from exc
        return Ticket.from_item(resp["Attributes"])
