"""
Environment-specific deployment settings.

Cost-optimized defaults for development/testing.
"""

from dataclasses import dataclass
import os


@dataclass
class Settings:
    """Deployment settings with cost-optimized defaults."""

    # Environment
    environment: str = "dev"
    aws_region: str = "eu-west-2"  # Default AWS region

    # Lambda Configuration
    lambda_memory_mb: int = 256
    lambda_timeout_seconds: int = 10
    lambda_architecture: str = "ARM_64"  # 20% cheaper

    # Ticketing behaviour passed to the Lambda environment
    rfid_max_attempts: int = 5
    store_timeout_seconds: int = 3

    # Name of the Secrets Manager secret holding the JWT signing key
    jwt_secret_name: str = "ticketing/jwt-secret"

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        region = os.environ.get("AWS_REGION", cls.aws_region)
        jwt_secret_name = os.environ.get("JWT_SECRET_NAME", cls.jwt_secret_name)

        # Production overrides
        if env == "prod":
            return cls(
                environment="prod",
                aws_region=region,
                jwt_secret_name=jwt_secret_name,
                lambda_memory_mb=512,
                lambda_timeout_seconds=15,
            )

        return cls(environment=env, aws_region=region, jwt_secret_name=jwt_secret_name)
