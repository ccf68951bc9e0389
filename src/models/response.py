"""Common response wrapper."""

from typing import Any, Optional

from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Generic API response for confirmations without a resource body."""

    message: str
    data: Optional[Any] = None
    correlation_id: Optional[str] = None
