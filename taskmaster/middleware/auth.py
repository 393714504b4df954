"""Bearer token access guard for FastAPI."""
from typing import Optional

from fastapi import Depends, Request

from taskmaster.errors import Unauthenticated
from taskmaster.services.security import TokenService, get_token_service

BEARER_PREFIX = "Bearer "


class AccessGuard:
    """Stateless check of the Authorization header."""

    def __init__(self, tokens: TokenService):
        self.tokens = tokens

    def verify(self, authorization: Optional[str]) -> int:
        """
        Validate an ``Authorization: Bearer <token>`` header value.

        Args:
            authorization: Raw header value, or None when the header is absent

        Returns:
            The user id carried by the token

        Raises:
            Unauthenticated: On a missing header, wrong scheme, bad signature or expired token
        """
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            raise Unauthenticated("Missing or invalid Authorization header")

        token = authorization[len(BEARER_PREFIX):].strip()
        if not token:
            raise Unauthenticated("Missing or invalid Authorization header")

        return self.tokens.verify(token)


def get_access_guard(tokens: TokenService = Depends(get_token_service)) -> AccessGuard:
    """Dependency for getting the AccessGuard."""
    return AccessGuard(tokens)


async def get_current_user_id(
    request: Request,
    guard: AccessGuard = Depends(get_access_guard),
) -> int:
    """The authenticated caller's id; the only identity trusted for task scoping."""
    return guard.verify(request.headers.get("authorization"))
