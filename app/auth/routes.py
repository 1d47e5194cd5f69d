# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Handlers for the "authentication" group of the routes document.
# Paths, methods and status codes come from the document; this module only
# supplies the functions.
#
#   access_token  - exchange username/password for tokens (OAuth2 form)
#   refresh_token - exchange a refresh token for a new access token
#   me            - describe the current caller
# =============================================================================

import logging

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, RefreshRequest, TokenResponse
from app.auth.security import REFRESH, create_access_token, create_refresh_token, decode_token
from app.dependencies import SettingsDep, UserServiceDep
from app.exceptions import InvalidCredentialsError
from core.models.route import RouteEntry
from core.registry.permissions import PermissionRegistry
from core.registry.resolver import bind_group
from core.registry.routes import RouteRegistry

logger = logging.getLogger(__name__)

GROUP = "authentication"


async def access_token(
    users: UserServiceDep,
    settings: SettingsDep,
    form: OAuth2PasswordRequestForm = Depends(),
) -> TokenResponse:
    """
    Log in with username and password.

    Requested scopes (form field "scope") narrow the grant; without any,
    the token carries every scope the user holds.
    """
    user = users.authenticate(form.username, form.password)
    if user is None:
        logger.info(f"Failed login for {form.username}")
        raise InvalidCredentialsError("Incorrect username or password")

    held = list(user.get("scopes") or [])
    scopes = [s for s in form.scopes if s in held] if form.scopes else held

    logger.info(f"Issued tokens for {form.username} scopes={scopes}")
    return TokenResponse(
        access_token=create_access_token(user["username"], scopes, settings),
        refresh_token=create_refresh_token(user["username"], scopes, settings),
        scope=" ".join(scopes),
    )


async def refresh_token(
    request: RefreshRequest,
    users: UserServiceDep,
    settings: SettingsDep,
) -> TokenResponse:
    """Trade a refresh token for a new access token with the same scopes."""
    payload = decode_token(request.refresh_token, settings, expected_type=REFRESH)

    user = users.get_by_username(payload["sub"])
    if user is None or user.get("disabled"):
        raise InvalidCredentialsError("Account no longer active")

    # Never widen past what the account holds now
    held = set(user.get("scopes") or [])
    scopes = [s for s in payload.get("scope", "").split() if s in held]

    return TokenResponse(
        access_token=create_access_token(payload["sub"], scopes, settings),
        scope=" ".join(scopes),
    )


async def me(users: UserServiceDep, user: AuthUser = Depends(get_current_user)) -> dict:
    """Return the caller's account and the scopes on the presented token."""
    record = users.get_by_username(user.username)
    if record is None:
        raise InvalidCredentialsError("Account no longer active")
    return {**users.public_view(record), "token_scopes": list(user.scopes)}


HANDLERS = {
    "access_token": access_token,
    "refresh_token": refresh_token,
    "me": me,
}


def register(
    router: APIRouter,
    routes: RouteRegistry,
    permissions: PermissionRegistry,
) -> list[RouteEntry]:
    """Bind the authentication handlers; these endpoints need no scope."""
    return bind_group(router, routes, permissions, GROUP, HANDLERS, public=True)
