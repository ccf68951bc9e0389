"""
Runtime configuration for the ticketing Lambda.

Values come from the Lambda environment set by the API layer construct.
"""

from dataclasses import dataclass
import os


@dataclass
class Settings:
    """Runtime settings with local-friendly defaults."""

    environment: str = "dev"
    aws_region: str = "eu-west-2"

    # DynamoDB tables
    tickets_table: str = "tickets"
    ticket_keys_table: str = "ticket-keys"
    events_table: str = "events"
    users_table: str = "users"

    # Bearer token verification
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"

    # Bounded retry for unique RFID allocation
    rfid_max_attempts: int = 5

    # Store calls must fail fast instead of hanging the request
    store_timeout_seconds: int = 3
    store_max_attempts: int = 3

    # Display names rarely change; cache across warm invocations
    display_name_cache_ttl_seconds: int = 300
    display_name_cache_max_size: int = 500

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ
        return cls(
            environment=env.get("ENVIRONMENT", cls.environment),
            aws_region=env.get("AWS_REGION", cls.aws_region),
            tickets_table=env.get("TICKETS_TABLE", cls.tickets_table),
            ticket_keys_table=env.get("TICKET_KEYS_TABLE", cls.ticket_keys_table),
            events_table=env.get("EVENTS_TABLE", cls.events_table),
            users_table=env.get("USERS_TABLE", cls.users_table),
            jwt_secret=env.get("JWT_SECRET", cls.jwt_secret),
            jwt_algorithm=env.get("JWT_ALGORITHM", cls.jwt_algorithm),
            rfid_max_attempts=int(env.get("RFID_MAX_ATTEMPTS", cls.rfid_max_attempts)),
            store_timeout_seconds=int(
                env.get("STORE_TIMEOUT_SECONDS", cls.store_timeout_seconds)
            ),
            store_max_attempts=int(env.get("STORE_MAX_ATTEMPTS", cls.store_max_attempts)),
            display_name_cache_ttl_seconds=int(
                env.get("DISPLAY_NAME_CACHE_TTL_SECONDS", cls.display_name_cache_ttl_seconds)
            ),
            display_name_cache_max_size=int(
                env.get("DISPLAY_NAME_CACHE_MAX_SIZE", cls.display_name_cache_max_size)
            ),
        )
