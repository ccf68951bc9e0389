"""
Data layer construct: DynamoDB tables for tickets, uniqueness guards, events
and users.
"""

from aws_cdk import (
    RemovalPolicy,
    aws_dynamodb as dynamodb,
)
from constructs import Construct


class DataLayerConstruct(Construct):
    """Provision the ticketing tables."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
    ) -> None:
        super().__init__(scope, construct_id)

        is_prod = environment == "prod"
        removal_policy = RemovalPolicy.RETAIN if is_prod else RemovalPolicy.DESTROY

        def table(name: str, key: str) -> dynamodb.Table:
            return dynamodb.Table(
                self,
                name,
                partition_key=dynamodb.Attribute(name=key, type=dynamodb.AttributeType.STRING),
                billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
                point_in_time_recovery=is_prod,
                removal_policy=removal_policy,
            )

        # Tickets, queried by event (organizer view) and by user (my tickets).
        self.tickets_table = table("Tickets", "ticket_id")
        self.tickets_table.add_global_secondary_index(
            index_name="event_id-index",
            partition_key=dynamodb.Attribute(name="event_id", type=dynamodb.AttributeType.STRING),
            sort_key=dynamodb.Attribute(name="created_at", type=dynamodb.AttributeType.STRING),
        )
        self.tickets_table.add_global_secondary_index(
            index_name="user_id-index",
            partition_key=dynamodb.Attribute(name="user_id", type=dynamodb.AttributeType.STRING),
            sort_key=dynamodb.Attribute(name="created_at", type=dynamodb.AttributeType.STRING),
        )

        # Insert-if-absent guards: BOOKING#<event>#<user> and RFID#<code>.
        self.ticket_keys_table = table("TicketKeys", "guard_key")

        # Owned by event CRUD; the ticketing core only moves tickets_sold.
        self.events_table = table("Events", "event_id")
        self.users_table = table("Users", "user_id")
