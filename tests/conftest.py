# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - Provides sample routes/permissions documents and built registries
# - Provides a TestClient over an app built from config/*.yaml
# =============================================================================

import os
import sys
from pathlib import Path

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-signing")
os.environ.setdefault("STORAGE_BACKEND", "memory")

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from core.registry.loader import load_permissions, load_routes

CONFIG_DIR = PROJECT_ROOT / "config"

ADMIN = ("admin", "admin-password")
AUDITOR = ("audrey", "auditor-password")
OWNER = ("olive", "owner-password")


# =============================================================================
# Documents
# =============================================================================

@pytest.fixture
def routes_document():
    """Small routes document covering auth, a CRUD resource and a misc group."""
    return {
        "resources": [
            {
                "name": "authentication",
                "description": "Token endpoints",
                "base": "/auth",
                "endpoints": [
                    {"access_token": {
                        "methods": ["POST"],
                        "success": "Token issued",
                        "error": "Bad credentials",
                        "status": 201,
                        "path": {"url": "/token"},
                    }},
                    {"refresh_token": {
                        "methods": ["POST"],
                        "success": "Token refreshed",
                        "status": 200,
                        "path": {"url": "/refresh"},
                    }},
                ],
            },
            {
                "name": "catalogue",
                "description": "Currencies",
                "base": "/catalogue",
                "resource": "Catalogue",
                "endpoints": [
                    {"add": {
                        "crud": "create",
                        "status": 201,
                        "payload": {"symbol": "str", "name": "str"},
                    }},
                    {"list": {"crud": "list"}},
                    {"view": {
                        "crud": "retrieve",
                        "error": "Currency not found",
                        "path": {"url": "/{currency_id}", "params": {"currency_id": "int"}},
                    }},
                    {"delete": {
                        "crud": "destroy",
                        "path": {"url": "/{currency_id}", "params": {"currency_id": "int"}},
                    }},
                ],
            },
            {
                "name": "otp",
                "description": "One-time passwords",
                "base": "/otp",
                "endpoints": [
                    {"login": {"methods": ["POST"], "status": 200, "path": {"url": "/login"}}},
                ],
            },
            {
                "name": "auth",
                "description": "Password login",
                "base": "/login",
                "endpoints": [
                    {"login": {"methods": ["POST"], "status": 200}},
                ],
            },
        ]
    }


@pytest.fixture
def permissions_document():
    """Permissions for Catalogue (CRUD) and a non-CRUD service."""
    return {
        "bundles": {"readonly": ["view", "list"]},
        "models": [
            {
                "name": "Catalogue",
                "description": "Supported currencies",
                "permissions": [
                    {"name": "admin", "action": ["delete", "edit", "view", "add", "list"]},
                    {"name": "auditor", "action": ["view"]},
                    {"name": "reader", "action": "readonly"},
                ],
            },
        ],
        "services": [
            {
                "name": "reports",
                "description": "Report endpoints",
                "permissions": [
                    {"name": "analyst", "action": ["monthly", "yearly"]},
                ],
            },
        ],
    }


@pytest.fixture
def route_registry(routes_document):
    return load_routes(routes_document)


@pytest.fixture
def permission_registry(permissions_document):
    return load_permissions(permissions_document)


# =============================================================================
# Application
# =============================================================================

@pytest.fixture
def settings():
    """Settings pointing at the bundled config documents."""
    from app.config import Settings

    return Settings(
        ROUTES_CONFIG_PATH=str(CONFIG_DIR / "routes.yaml"),
        PERMISSIONS_CONFIG_PATH=str(CONFIG_DIR / "permissions.yaml"),
        STORAGE_BACKEND="memory",
        ADMIN_USERNAME=ADMIN[0],
        ADMIN_PASSWORD=ADMIN[1],
        ADMIN_SCOPES="admin",
    )


@pytest.fixture
def app(settings):
    from app.factory import create_app
    from core.services.user_service import UserService

    application = create_app(settings)
    users = UserService(application.state.store)
    users.create_user(AUDITOR[0], AUDITOR[1], ["auditor"])
    users.create_user(OWNER[0], OWNER[1], ["owner"])
    return application


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client


def _login(client, credentials, scope: str | None = None) -> dict:
    data = {"username": credentials[0], "password": credentials[1]}
    if scope:
        data["scope"] = scope
    response = client.post("/api/v1/auth/token", data=data)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def login(client):
    """Log in and return the full token response."""
    return lambda credentials, scope=None: _login(client, credentials, scope)


@pytest.fixture
def admin_headers(client):
    token = _login(client, ADMIN)["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auditor_headers(client):
    token = _login(client, AUDITOR)["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner_headers(client):
    token = _login(client, OWNER)["access_token"]
    return {"Authorization": f"Bearer {token}"}
