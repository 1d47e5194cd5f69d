# =============================================================================
# core/services/user_service.py - User Accounts
# =============================================================================
# Users are ordinary records of the "User" resource in the record store.
# Passwords are stored as bcrypt hashes; scopes as a list of names.
# =============================================================================

import logging
from typing import Any

from app.auth.security import get_password_hash, verify_password
from app.exceptions import UserExistsError
from core.services.resource_service import ResourceStore

logger = logging.getLogger(__name__)

USER_RESOURCE = "User"


class UserService:
    """
    Account lookup, registration and password checks.

    Args:
        store: Record store holding the User resource
    """

    def __init__(self, store: ResourceStore):
        self.store = store

    def get_by_username(self, username: str) -> dict[str, Any] | None:
        return self.store.find_by(USER_RESOURCE, "username", username)

    def create_user(self, username: str, password: str, scopes: list[str]) -> dict[str, Any]:
        """
        Register a user.

        Raises:
            UserExistsError: If the username is taken
        """
        if self.get_by_username(username) is not None:
            raise UserExistsError(username)

        user = self.store.create(USER_RESOURCE, {
            "username": username,
            "password_hash": get_password_hash(password),
            "scopes": list(scopes),
            "disabled": False,
        })
        logger.info(f"Created user: {username} with scopes {scopes}")
        return user

    def authenticate(self, username: str, password: str) -> dict[str, Any] | None:
        """Return the user when the password matches, else None."""
        user = self.get_by_username(username)
        if user is None or user.get("disabled"):
            return None
        if not verify_password(password, user.get("password_hash", "")):
            return None
        return user

    def seed_admin(self, username: str | None, password: str | None, scopes: list[str]) -> dict[str, Any] | None:
        """Create the bootstrap admin once; a no-op when unset or present."""
        if not username or not password:
            return None
        existing = self.get_by_username(username)
        if existing is not None:
            return existing
        return self.create_user(username, password, scopes)

    @staticmethod
    def public_view(user: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": user["id"],
            "username": user["username"],
            "scopes": list(user.get("scopes") or []),
        }
