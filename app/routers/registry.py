# =============================================================================
# app/routers/registry.py - Registry Introspection
# =============================================================================
# Read-only views of the loaded route and permission registries.
# Handlers for the "registry" group of the routes document:
#
#   routes      - every route entry, optionally filtered
#   permissions - every scope rule per model/service
#   lookup      - run a find() against the route registry
# =============================================================================

from typing import Annotated, Callable

from fastapi import APIRouter, Query

from app.dependencies import RegistriesDep
from core.models.route import RouteEntry
from core.registry.permissions import PermissionRegistry
from core.registry.resolver import bind_group
from core.registry.routes import RouteRegistry

GROUP = "registry"


def _entry_view(entry: RouteEntry) -> dict:
    return {
        "name": entry.name,
        "endpoint": entry.endpoint,
        "path": entry.path,
        "methods": entry.method_names,
        "status": entry.status,
        "resource": entry.resource,
        "crud": entry.crud.value if entry.crud else None,
        "tags": list(entry.tags),
    }


async def list_routes(
    registries: RegistriesDep,
    name: Annotated[str | None, Query(description="Route group")] = None,
    resource: Annotated[str | None, Query(description="Resource tag")] = None,
) -> dict:
    """List route entries in document order."""
    entries = registries.routes.filter(name=name, resource=resource)
    return {
        "count": len(entries),
        "groups": registries.routes.keys,
        "resources": sorted(registries.routes.resources),
        "routes": [_entry_view(e) for e in entries],
    }


async def list_permissions(registries: RegistriesDep) -> dict:
    """List scope rules for every model and service."""
    registry = registries.permissions
    return {
        "actions": sorted(registry.actions),
        "resources": [
            {
                "name": name,
                "kind": registry.kind(name).value,
                "description": registry.meta[name],
                "crud_scopes": registry.crud_permissions(name),
                "permissions": [
                    {"scope": rule.scope, "actions": list(rule.actions)}
                    for rule in registry.list_permissions(name)
                ],
            }
            for name in registry.resources
        ],
    }


async def lookup_route(
    registries: RegistriesDep,
    name: Annotated[str | None, Query()] = None,
    endpoint: Annotated[str | None, Query()] = None,
) -> dict:
    """Resolve one entry the same way the application does."""
    entry = registries.routes.find(name=name, endpoint=endpoint)
    return {"found": entry is not None, "route": _entry_view(entry) if entry else None}


HANDLERS = {
    "routes": list_routes,
    "permissions": list_permissions,
    "lookup": lookup_route,
}


def register(
    router: APIRouter,
    routes: RouteRegistry,
    permissions: PermissionRegistry,
    guard: Callable | None = None,
) -> list[RouteEntry]:
    return bind_group(router, routes, permissions, GROUP, HANDLERS, guard=guard)
