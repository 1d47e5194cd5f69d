# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication and scope checks.
#
# Usage:
#   from app.auth import get_current_user, require_scopes, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"username": user.username}
#
#   router.add_api_route(path, handler, dependencies=[Depends(require_scopes(["admin"]))])
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.auth.models import AuthUser
from app.auth.security import ACCESS, decode_token
from app.dependencies import SettingsDep
from app.exceptions import InsufficientScopeError, InvalidCredentialsError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor; missing headers are reported as our own 401
security = HTTPBearer(auto_error=False)


async def get_current_user(
    settings: SettingsDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthUser:
    """
    Extract and validate the caller from the access token.

    Raises:
        InvalidCredentialsError: 401 if the token is missing, invalid or expired
    """
    if credentials is None:
        raise InvalidCredentialsError("Not authenticated")

    payload = decode_token(credentials.credentials, settings, expected_type=ACCESS)
    scopes = tuple(s for s in payload.get("scope", "").split() if s)

    logger.debug(f"Authenticated user: {payload['sub']} scopes={scopes}")
    return AuthUser(username=payload["sub"], scopes=scopes)


def require_scopes(scopes: list[str]):
    """
    Build a dependency admitting callers that hold ANY of the given scopes.

    Each listed scope independently grants the action, so holding one is
    enough.
    """
    required = list(scopes)

    async def check_scopes(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if not user.has_any_scope(required):
            logger.info(f"User {user.username} lacks scopes {required}")
            raise InsufficientScopeError(required, list(user.scopes))
        return user

    return check_scopes
