"""User directory: display names for ticket holders."""

from typing import Optional

from repositories.dynamodb_repo import DynamoDbRepository
from utils.cache_service import LRUCache
from utils.error_handling import NotFoundError
from utils.logging_config import get_logger

logger = get_logger(__name__)

# In-memory cache (survives warm Lambda invocations).
display_name_cache = LRUCache(max_size=500, ttl_seconds=300)


class UserDirectory(DynamoDbRepository):
    """Users table keyed by ``user_id``."""

    def __init__(self, table_name: str, dynamodb=None, cache: Optional[LRUCache] = None):
        super().__init__(table_name, dynamodb=dynamodb)
        self.cache = cache if cache is not None else display_name_cache

    def get_display_name(self, user_id: str) -> str:
        cache_key = f"user:{user_id}"
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        item = self.get_item({"user_id": user_id})
        if not item or not item.get("name"):
            logger.info("User not found in directory", extra={"user_id": user_id})
            raise NotFoundError("User not found")

        name = item["name"]
        self.cache.set(cache_key, name)
        return name
