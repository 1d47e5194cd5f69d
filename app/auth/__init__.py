# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication with scope checks.
#
# Usage:
#   from app.auth import get_current_user, require_scopes, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"username": user.username}
# =============================================================================

from app.auth.dependencies import get_current_user, require_scopes
from app.auth.models import AuthUser, TokenResponse, UserResponse

__all__ = [
    "get_current_user",
    "require_scopes",
    "AuthUser",
    "TokenResponse",
    "UserResponse",
]
