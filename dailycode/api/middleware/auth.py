"""JWT authentication for FastAPI.

Tokens are issued by the account service; this backend only verifies them
and reads the user id from the `sub` claim.
"""

import logging
from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dailycode.shared.config import get_settings
from dailycode.shared.exceptions import AuthenticationError, InvalidTokenError

logger = logging.getLogger(__name__)


class JWTBearer(HTTPBearer):
    """Bearer scheme that reports a missing or malformed header as a domain error."""

    def __init__(self) -> None:
        super().__init__(auto_error=False)

    async def __call__(self, request: Request) -> HTTPAuthorizationCredentials:
        credentials = await super().__call__(request)

        if credentials is None:
            raise AuthenticationError("Authentication required")
        if credentials.scheme.lower() != "bearer":
            raise AuthenticationError("Invalid authentication scheme")

        return credentials


jwt_bearer = JWTBearer()


def decode_user_id(token: str) -> UUID:
    """Verify a token and return the user id it was issued for.

    Raises:
        InvalidTokenError: If the token is expired, badly signed or has no
            UUID `sub` claim
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub"]},
        )
        return UUID(str(payload["sub"]))
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired token")
        raise InvalidTokenError() from None
    except (jwt.InvalidTokenError, ValueError):
        raise InvalidTokenError() from None


async def get_current_user_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(jwt_bearer)],
) -> UUID:
    """Authenticated user's id, also kept on the request for access logs."""
    user_id = decode_user_id(credentials.credentials)
    request.state.user_id = user_id
    return user_id
