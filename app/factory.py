# =============================================================================
# app/factory.py - Application Factory
# =============================================================================
# Builds the FastAPI application from the routes and permissions documents.
#
# Startup order:
#   1. load both registries (any failure aborts startup)
#   2. create the record store and seed the admin account
#   3. wire generated CRUD routes and hand-written handlers
#   4. publish registries/store on app.state for dependency injection
#
# Usage:
#   from app.factory import create_app
#   app = create_app(Settings(ROUTES_CONFIG_PATH="config/routes.yaml"))
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.auth import require_scopes
from app.auth import routes as auth_routes
from app.config import VERSION, Settings, get_settings
from app.dependencies import Registries
from app.exceptions import (
    MWalletException,
    application_error_handler,
    mwallet_exception_handler,
)
from app.routers import health, registry, wallets
from core.registry.loader import load_permissions, load_routes
from core.registry.resolver import build_crud_routers
from core.services.resource_service import create_store
from core.services.user_service import UserService
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def load_registries(settings: Settings) -> Registries:
    """
    Load both documents into a fresh pair of registries.

    Raises:
        ConfigParseError: If a document is unreadable
        ConfigValidationError: If a document describes invalid entries
    """
    routes = load_routes(settings.ROUTES_CONFIG_PATH, strict=settings.REGISTRY_STRICT)
    permissions = load_permissions(settings.PERMISSIONS_CONFIG_PATH, strict=settings.REGISTRY_STRICT)
    return Registries(routes=routes, permissions=permissions)


def reload_registries(app: FastAPI) -> Registries:
    """
    Rebuild the registries and swap them in with a single assignment.

    Published registries are never mutated; in-flight lookups keep the
    instance they started with. Routes registered at startup keep their
    scopes; only lookups made through app.state see the new documents.
    If loading fails the old registries stay published.
    """
    registries = load_registries(app.state.settings)
    app.state.registries = registries
    logger.info(
        f"Reloaded registries: {len(registries.routes)} routes, "
        f"{len(registries.permissions)} permission blocks"
    )
    return registries


def build_api_router(registries: Registries, store) -> APIRouter:
    """Wire every configured route onto one router."""
    router = APIRouter()
    routes, permissions = registries.routes, registries.permissions

    auth_routes.register(router, routes, permissions)
    build_crud_routers(router, routes, permissions, store, guard=require_scopes)
    wallets.register(router, routes, permissions, guard=require_scopes)
    registry.register(router, routes, permissions, guard=require_scopes)

    return router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Registries are already built by create_app(); this only reports them.
    """
    settings = app.state.settings
    registries = app.state.registries
    logger.info(f"Starting mWallet API in {settings.ENVIRONMENT} mode")
    logger.info(
        f"Serving {len(registries.routes)} configured routes for groups {registries.routes.keys}"
    )

    yield

    logger.info("Shutting down mWallet API")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use; defaults to the cached environment settings

    Raises:
        ConfigParseError / ConfigValidationError: If the documents cannot be
            loaded. No application is returned in that case.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    registries = load_registries(settings)

    store = create_store(settings.STORAGE_BACKEND)
    UserService(store).seed_admin(
        settings.ADMIN_USERNAME,
        settings.ADMIN_PASSWORD,
        settings.admin_scopes_list,
    )

    app = FastAPI(
        title="mWallet API",
        description="Cryptocurrency wallet API whose routes and scopes are declared in YAML.",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registries = registries
    app.state.store = store

    # -------------------------------------------------------------------------
    # Middleware
    # -------------------------------------------------------------------------

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------

    app.add_exception_handler(MWalletException, mwallet_exception_handler)
    app.add_exception_handler(ApplicationError, application_error_handler)

    @app.exception_handler(Exception)
    async def handle_general_exception(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            }
        )

    # -------------------------------------------------------------------------
    # Routers
    # -------------------------------------------------------------------------

    app.include_router(health.router, prefix=settings.API_PREFIX, tags=["Health"])
    app.include_router(build_api_router(registries, store), prefix=settings.API_PREFIX)

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint - returns API info.
        """
        return {
            "name": "mWallet API",
            "version": VERSION,
            "docs": "/docs",
            "health": f"{settings.API_PREFIX}/health",
            "groups": registries.routes.keys,
        }

    return app
