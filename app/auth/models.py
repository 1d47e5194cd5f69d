# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """
    Authenticated caller extracted from an access token.

    This is the minimal user info available from the token itself,
    without querying the record store.
    """
    model_config = ConfigDict(frozen=True)

    username: str
    scopes: tuple[str, ...] = ()

    def has_any_scope(self, scopes: list[str]) -> bool:
        return any(scope in self.scopes for scope in scopes)


class UserResponse(BaseModel):
    """Public view of a user account."""
    id: int | str
    username: str
    scopes: list[str] = Field(default_factory=list)


class TokenResponse(BaseModel):
    """
    Response of the access_token and refresh_token endpoints.

    Follows the OAuth2 token response shape.
    """
    access_token: str
    token_type: str = "bearer"
    refresh_token: str | None = None
    scope: str = ""


class RefreshRequest(BaseModel):
    """Body of the refresh_token endpoint."""
    refresh_token: str = Field(..., min_length=1)
