"""
Authentication Dependency for FastAPI.

Tokens are issued by the identity system and carry two claims:
- id      → internal user id (UUID)
- kahaId  → external correlation id, may change over time

Every authenticated request also runs UserService.ensure_user so the local user
record exists and carries the current kahaId. A failed sync is logged and the
request goes ahead with the identity from the token.
"""

import logging
from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from chat_service.application.services.user_service import UserService
from chat_service.config.settings import Config
from chat_service.domain.exceptions import DomainError
from chat_service.domain.value_objects import UserId

logger = logging.getLogger(__name__)


@dataclass
class AuthUser:
    user_id: UserId
    kaha_id: str

    def __post_init__(self):
        if not self.user_id or not self.kaha_id:
            raise ValueError("AuthUser must have both id and kahaId defined.")


security = HTTPBearer()


def decode_token(token: str) -> AuthUser:
    """
    Validate a bearer token and extract the user.

    Raises:
        HTTPException 401 if token is invalid, expired, or missing required claims
    """
    try:
        claims = jwt.decode(
            token,
            Config.SERVICE_AUTH_SECRET,
            algorithms=[Config.SERVICE_AUTH_ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )

    user_id = claims.get("id")
    kaha_id = claims.get("kahaId")
    if not user_id or not kaha_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing required claims in token",
        )
    try:
        return AuthUser(user_id=UserId(str(user_id)), kaha_id=str(kaha_id))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user id in token",
        )


async def authenticate_token(token: str, user_service: UserService) -> AuthUser:
    user = decode_token(token)
    try:
        await user_service.ensure_user(user.user_id, user.kaha_id)
    except DomainError as e:
        logger.warning(f"[Auth] Could not sync user {user.user_id}: {e.message}")
    return user


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthUser:
    user_service = await request.app.state.dishka_container.get(UserService)
    return await authenticate_token(credentials.credentials, user_service)
