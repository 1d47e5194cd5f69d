# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# Everything here is read from app.state, which create_app() fills in once
# at startup. Nothing is a module-level singleton.
# =============================================================================

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings
from core.registry.permissions import PermissionRegistry
from core.registry.routes import RouteRegistry
from core.services.resource_service import ResourceStore
from core.services.user_service import UserService


@dataclass(frozen=True)
class Registries:
    """The route and permission registries published together."""
    routes: RouteRegistry
    permissions: PermissionRegistry


def get_app_settings(request: Request) -> Settings:
    """Return the Settings the app was built with."""
    return request.app.state.settings


def get_registries(request: Request) -> Registries:
    """Return the registries currently published on the app."""
    return request.app.state.registries


def get_store(request: Request) -> ResourceStore:
    """Return the record store."""
    return request.app.state.store


def get_user_service(request: Request) -> UserService:
    """Return the user service bound to the record store."""
    return UserService(request.app.state.store)


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
RegistriesDep = Annotated[Registries, Depends(get_registries)]
StoreDep = Annotated[ResourceStore, Depends(get_store)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
