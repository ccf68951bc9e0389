"""
Main CDK Stack for the ticketing API.
"""

from aws_cdk import (
    SecretValue,
    Stack,
    Tags,
    CfnOutput,
)
from constructs import Construct

from infrastructure.constructs.data_layer import DataLayerConstruct
from infrastructure.constructs.api_layer import ApiLayerConstruct
from infrastructure.config.settings import Settings


class TicketingStack(Stack):
    """Main stack wiring all constructs together."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        settings: Settings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Global tags for cost/accounting.
        Tags.of(self).add("Project", "event-ticketing")
        Tags.of(self).add("Environment", settings.environment)
        Tags.of(self).add("ManagedBy", "cdk")

        # 1) Data layer.
        data_construct = DataLayerConstruct(
            self,
            "DataLayer",
            environment=settings.environment,
        )

        # 2) API layer (single Lambda).
        jwt_secret = SecretValue.secrets_manager(settings.jwt_secret_name).unsafe_unwrap()
        api_construct = ApiLayerConstruct(
            self,
            "ApiLayer",
            environment=settings.environment,
            table_env={
                "TICKETS_TABLE": data_construct.tickets_table.table_name,
                "TICKET_KEYS_TABLE": data_construct.ticket_keys_table.table_name,
                "EVENTS_TABLE": data_construct.events_table.table_name,
                "USERS_TABLE": data_construct.users_table.table_name,
            },
            jwt_secret=jwt_secret,
            rfid_max_attempts=settings.rfid_max_attempts,
            store_timeout_seconds=settings.store_timeout_seconds,
            lambda_memory_mb=settings.lambda_memory_mb,
            lambda_timeout_seconds=settings.lambda_timeout_seconds,
        )

        # Permissions for the API Lambda.
        fn = api_construct.main_lambda
        data_construct.tickets_table.grant_read_write_data(fn)
        data_construct.ticket_keys_table.grant_read_write_data(fn)
        data_construct.events_table.grant_read_write_data(fn)
        data_construct.users_table.grant_read_data(fn)

        # Outputs to quickly find resources.
        CfnOutput(self, "ApiEndpoint", value=api_construct.api.api_endpoint)
        CfnOutput(self, "TicketsTable", value=data_construct.tickets_table.table_name)
        CfnOutput(self, "EventsTable", value=data_construct.events_table.table_name)
