"""Shared DynamoDB plumbing for the ticketing tables."""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from utils.error_handling import DependentServiceError
from utils.logging_config import get_logger
from utils.settings import Settings

logger = get_logger(__name__)

# Resource reuse across warm invocations.
_dynamodb = None


def get_dynamodb(settings: Optional[Settings] = None):
    """Get or create the DynamoDB resource with bounded timeouts."""
    global _dynamodb
    if _dynamodb is None:
        settings = settings or Settings.from_environment()
        _dynamodb = boto3.resource(
            "dynamodb",
            region_name=settings.aws_region,
            config=Config(
                connect_timeout=settings.store_timeout_seconds,
                read_timeout=settings.store_timeout_seconds,
                retries={"max_attempts": settings.store_max_attempts, "mode": "standard"},
            ),
        )
    return _dynamodb


def is_conditional_failure(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


class DynamoDbRepository:
    """Table handle plus helpers that map AWS failures to DependentServiceError."""

    def __init__(self, table_name: str, dynamodb=None):
        self.table_name = table_name
        self.table = (dynamodb or get_dynamodb()).Table(table_name)

    @contextmanager
    def _store_call(self, operation: str, **context: Any) -> Iterator[None]:
        """Translate botocore errors that callers did not handle themselves."""
        try:
            yield
        except ClientError as exc:
            logger.error(
                "DynamoDB call failed",
                extra={
                    "table": self.table_name,
                    "operation": operation,
                    "error_code": exc.response.get("Error", {}).get("Code"),
                    **context,
                },
            )
            raise DependentServiceError() from exc
        except BotoCoreError as exc:
            logger.error(
                "DynamoDB unreachable",
                extra={"table": self.table_name, "operation": operation, "error": str(exc)},
            )
            raise DependentServiceError() from exc

    def get_item(self, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Strongly consistent single-item read."""
        with self._store_call("get_item", **key):
            resp = self.table.get_item(Key=key, ConsistentRead=True)
        return resp.get("Item")

    def query_all(self, **kwargs: Any) -> List[Dict[str, Any]]:
        """Run a query and follow pagination until exhausted."""
        items: List[Dict[str, Any]] = []
        with self._store_call("query", index=kwargs.get("IndexName")):
            while True:
                resp = self.table.query(**kwargs)
                items.extend(resp.get("Items", []))
                last_key = resp.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        return items

    def count(self, **kwargs: Any) -> int:
        """Count matching items without transferring them."""
        total = 0
        with self._store_call("count", index=kwargs.get("IndexName")):
            while True:
                resp = self.table.query(Select="COUNT", **kwargs)
                total += resp.get("Count", 0)
                last_key = resp.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        return total
