"""
Bearer token verification.

Tokens are HS256 JWTs issued by the auth service; the ``id`` claim (or the
standard ``sub`` claim) carries the user id.
"""

from typing import Any, Dict, Optional

import jwt

from utils.error_handling import UnauthenticatedError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class IdentityProvider:
    """Resolve the calling user from an API Gateway event."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def authenticate(self, event: Dict[str, Any]) -> str:
        token = self._bearer_token(event)
        if not token:
            raise UnauthenticatedError("Unauthorized: No token provided")

        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise UnauthenticatedError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected bearer token", extra={"error": type(exc).__name__})
            raise UnauthenticatedError("Unauthorized: Invalid token") from exc

        user_id = claims.get("id") or claims.get("sub")
        if not user_id:
            raise UnauthenticatedError("Unauthorized: Invalid token")
        return str(user_id)

    @staticmethod
    def _bearer_token(event: Dict[str, Any]) -> Optional[str]:
        headers = event.get("headers") or {}
        # HTTP API lower-cases header names; REST API and tests may not.
        auth = headers.get("authorization") or headers.get("Authorization") or ""
        scheme, _, token = auth.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()
