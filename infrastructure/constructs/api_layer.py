"""
API layer construct: shared Lambda + HTTP API routes.

A single Lambda keeps warm caches and reduces cold start costs.
Uses Docker bundling for dependencies (runs in CI/CD pipeline).
"""

from pathlib import Path
from typing import Dict

from aws_cdk import (
    BundlingOptions,
    Duration,
    aws_lambda as _lambda,
    aws_apigatewayv2 as apigw,
    aws_apigatewayv2_integrations as integrations,
    aws_logs as logs,
)
from constructs import Construct

SRC_DIR = str(Path(__file__).resolve().parents[2] / "src")

ROUTES = (
    (apigw.HttpMethod.GET, "/health"),
    (apigw.HttpMethod.POST, "/tickets/book"),
    (apigw.HttpMethod.POST, "/tickets/verify"),
    (apigw.HttpMethod.POST, "/tickets/check-in"),
    (apigw.HttpMethod.GET, "/tickets/my-tickets"),
    (apigw.HttpMethod.GET, "/tickets/event/{eventId}"),
    (apigw.HttpMethod.DELETE, "/tickets/cancel/{ticketId}"),
    (apigw.HttpMethod.POST, "/events/{eventId}/reconcile"),
)


class ApiLayerConstruct(Construct):
    """Expose ticketing endpoints via HTTP API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        table_env: Dict[str, str],
        jwt_secret: str,
        rfid_max_attempts: int,
        store_timeout_seconds: int,
        lambda_memory_mb: int = 256,
        lambda_timeout_seconds: int = 10,
    ) -> None:
        super().__init__(scope, construct_id)

        # Installs pydantic, PyJWT, qrcode/Pillow and python-json-logger
        bundled_code = _lambda.Code.from_asset(
            SRC_DIR,
            bundling=BundlingOptions(
                image=_lambda.Runtime.PYTHON_3_12.bundling_image,
                command=[
                    "bash", "-c",
                    "pip install -r requirements-lambda.txt -t /asset-output && "
                    "cp -r . /asset-output"
                ],
            ),
        )

        self.main_lambda = _lambda.Function(
            self,
            "ApiHandler",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="handlers.main.lambda_handler",
            code=bundled_code,
            memory_size=lambda_memory_mb,
            timeout=Duration.seconds(lambda_timeout_seconds),
            architecture=_lambda.Architecture.X86_64,
            environment={
                "ENVIRONMENT": environment,
                "JWT_SECRET": jwt_secret,
                "RFID_MAX_ATTEMPTS": str(rfid_max_attempts),
                "STORE_TIMEOUT_SECONDS": str(store_timeout_seconds),
                **table_env,
            },
            log_retention=logs.RetentionDays.ONE_WEEK,
        )

        # HTTP API with minimal latency and low cost.
        self.api = apigw.HttpApi(
            self,
            "HttpApi",
            api_name=f"ticketing-api-{environment}",
            cors_preflight=apigw.CorsPreflightOptions(
                allow_origins=["*"],
                allow_methods=[apigw.CorsHttpMethod.ANY],
                allow_headers=["Authorization", "Content-Type"],
            ),
        )

        integration = integrations.HttpLambdaIntegration(
            "LambdaIntegration", self.main_lambda
        )

        for method, path in ROUTES:
            self.api.add_routes(
                path=path,
                methods=[method],
                integration=integration,
            )
