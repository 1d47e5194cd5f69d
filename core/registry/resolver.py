# =============================================================================
# core/registry/resolver.py - Route/Permission Wiring
# =============================================================================
# Binds route entries to handlers and required scopes, then registers them
# on a FastAPI APIRouter.
#
# For each CRUD operation selected for a resource:
#   1. required scopes come from the PermissionRegistry
#   2. the RouteEntry comes from the RouteRegistry (resource + operation)
#   3. when both exist, a handler is registered with the entry's path,
#      methods, status and description plus a scope guard
#   4. otherwise the operation is skipped - it is simply not exposed
#
# Usage:
#   config = CrudConfig.of("Wallet", "all")
#   builder = CrudRouterBuilder(routes, permissions, store, config, guard=require_scopes)
#   registered = builder.build(router)
# =============================================================================

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import BaseModel, ConfigDict, Field, create_model

from core.models.route import CrudOperation, RouteEntry
from core.registry.errors import ConfigValidationError, OperationNotAuthorizedError
from core.registry.permissions import PermissionRegistry
from core.registry.routes import RouteRegistry
from lib.utils import normalize_identifier

logger = logging.getLogger(__name__)

# Builds a FastAPI dependency that admits callers holding any of the scopes
ScopeGuard = Callable[[list[str]], Callable[..., Any]]

# Status used when an entry leaves it unset
DEFAULT_STATUS = {
    CrudOperation.CREATE: 201,
    CrudOperation.RETRIEVE: 200,
    CrudOperation.UPDATE: 200,
    CrudOperation.DESTROY: 200,
    CrudOperation.LIST: 200,
}


# =============================================================================
# Operation Selection
# =============================================================================

@dataclass(frozen=True)
class CrudConfig:
    """
    Which CRUD operations a builder exposes for one resource.

    Each builder owns its own config; nothing is shared between builders.
    """
    resource: str
    operations: frozenset[CrudOperation]

    def __post_init__(self):
        if not self.operations:
            raise OperationNotAuthorizedError(self.resource)

    @classmethod
    def of(
        cls,
        resource: str,
        selection: str | CrudOperation | Iterable[str | CrudOperation] | None,
    ) -> "CrudConfig":
        """
        Build a config from "all", a single operation, or a sequence of them.

        Raises:
            OperationNotAuthorizedError: If the selection is empty, None, or
                names an unknown operation
        """
        if selection is None or selection == "":
            raise OperationNotAuthorizedError(resource)
        if selection == "all":
            return cls(resource=resource, operations=frozenset(CrudOperation))
        if isinstance(selection, (str, CrudOperation)):
            selection = [selection]

        try:
            operations = frozenset(CrudOperation(op) for op in selection)
        except (TypeError, ValueError) as e:
            raise OperationNotAuthorizedError(resource) from e
        return cls(resource=resource, operations=operations)

    def enabled(self, operation: CrudOperation) -> bool:
        return operation in self.operations


# =============================================================================
# Registration
# =============================================================================

def bind_endpoint(
    router: APIRouter,
    entry: RouteEntry,
    handler: Callable[..., Any],
    scopes: list[str] | None = None,
    guard: ScopeGuard | None = None,
    status_code: int | None = None,
) -> RouteEntry:
    """
    Register a handler on the router using the entry's metadata.

    When scopes are given, the guard turns them into a dependency that
    rejects callers holding none of them.
    """
    dependencies = []
    if scopes and guard is not None:
        dependencies.append(Depends(guard(list(scopes))))

    responses = {}
    if entry.error:
        responses[404 if entry.crud and entry.crud.targets_item else 400] = {
            "description": entry.error
        }

    router.add_api_route(
        entry.path,
        handler,
        methods=entry.method_names,
        status_code=entry.status or status_code,
        summary=entry.key,
        description=entry.success or None,
        name=entry.endpoint,
        tags=[entry.resource or entry.name, *entry.tags],
        dependencies=dependencies,
        responses=responses or None,
        response_model=None,
    )
    logger.debug(f"Registered {entry.method_names} {entry.path} -> {entry.endpoint} (scopes={scopes})")
    return entry


def bind_group(
    router: APIRouter,
    routes: RouteRegistry,
    permissions: PermissionRegistry,
    group: str,
    handlers: Mapping[str, Callable[..., Any]],
    guard: ScopeGuard | None = None,
    public: bool = False,
) -> list[RouteEntry]:
    """
    Register hand-written handlers for the named endpoints of one group.

    Each handler key is an endpoint key ("access_token"); its scopes are the
    ones whose actions name that key. Unless the group is public, an
    endpoint without scopes is not exposed.

    Returns:
        The entries that were registered
    """
    registered = []
    for key, handler in handlers.items():
        entry = routes.find(name=group, endpoint=f"{normalize_identifier(key)}@{group}")
        if entry is None:
            logger.warning(f"No route configured for {key}@{group}; handler not exposed")
            continue

        scopes = [] if public else permissions.get_permission(entry.resource or group, entry.key)
        if not public and not scopes:
            logger.info(f"No scope grants '{entry.key}' on {entry.resource}; {entry.endpoint} not exposed")
            continue

        registered.append(bind_endpoint(router, entry, handler, scopes=scopes, guard=guard))
    return registered


def payload_model(entry: RouteEntry, partial: bool = False) -> type[BaseModel]:
    """
    Build a request body model from the entry's declared payload fields.

    Undeclared fields are kept (extra="allow"), so an entry without payload
    descriptors accepts any JSON object. With partial=True every field is
    optional, for updates.
    """
    fields: dict[str, Any] = {}
    for item in entry.payload:
        if item.required and not partial:
            fields[item.name] = (item.python_type, Field(..., description=item.description))
        else:
            fields[item.name] = (Optional[item.python_type], Field(None, description=item.description))

    suffix = "Update" if partial else "Payload"
    name = "".join(part.capitalize() for part in normalize_identifier(entry.endpoint).split("_"))
    return create_model(
        f"{name}{suffix}",
        __config__=ConfigDict(extra="allow"),
        **fields,
    )


class CrudRouterBuilder:
    """
    Wires the standard operations of one resource onto a router.

    Args:
        routes: Route registry to take paths/methods/status from
        permissions: Permission registry to take required scopes from
        store: Record store with list/get/create/update/delete
        config: Operations to expose for the resource
        guard: Scope dependency factory (see app.auth.require_scopes)
    """

    def __init__(
        self,
        routes: RouteRegistry,
        permissions: PermissionRegistry,
        store: Any,
        config: CrudConfig,
        guard: ScopeGuard | None = None,
    ):
        self.routes = routes
        self.permissions = permissions
        self.store = store
        self.config = config
        self.guard = guard

    @property
    def resource(self) -> str:
        return self.config.resource

    def build(self, router: APIRouter) -> list[RouteEntry]:
        """
        Register every selected operation that has both an entry and scopes.

        Returns:
            The entries that were registered, in operation order
        """
        if not self.permissions.crud_permissions(self.resource):
            logger.info(f"No CRUD permissions for {self.resource}; CRUD routes not generated")
            return []

        registered = []
        for operation in CrudOperation:
            if not self.config.enabled(operation):
                continue

            scopes = self.permissions.scopes_for(self.resource, operation)
            entry = self.routes.find_operation(self.resource, operation)
            if entry is None or not scopes:
                logger.debug(
                    f"Skipping {operation.value} for {self.resource} "
                    f"(entry={'yes' if entry else 'no'}, scopes={scopes})"
                )
                continue

            handler = self._handler(operation, entry)
            bind_endpoint(
                router, entry, handler,
                scopes=scopes,
                guard=self.guard,
                status_code=DEFAULT_STATUS[operation],
            )
            registered.append(entry)

        logger.info(
            f"Registered {len(registered)} CRUD routes for {self.resource}: "
            f"{[e.endpoint for e in registered]}"
        )
        return registered

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def _item_param(self, entry: RouteEntry) -> str:
        names = entry.path_param_names
        if not names:
            raise ConfigValidationError(
                f"{entry.crud.value} route '{entry.endpoint}' has no path parameter for the record id",
                location=entry.endpoint,
            )
        return names[0]

    def _handler(self, operation: CrudOperation, entry: RouteEntry) -> Callable[..., Any]:
        store = self.store
        resource = self.resource

        if operation == CrudOperation.LIST:
            async def list_records(
                skip: int = Query(0, ge=0),
                limit: int = Query(100, ge=1, le=1000),
            ):
                return store.list(resource, skip=skip, limit=limit)
            return list_records

        if operation == CrudOperation.CREATE:
            model = payload_model(entry)

            async def create_record(payload: model):
                return store.create(resource, payload.model_dump(exclude_none=True))
            return create_record

        id_param = self._item_param(entry)

        if operation == CrudOperation.RETRIEVE:
            async def retrieve_record(request: Request):
                return store.get(resource, request.path_params[id_param])
            return retrieve_record

        if operation == CrudOperation.UPDATE:
            model = payload_model(entry, partial=True)

            async def update_record(request: Request, payload: model):
                changes = payload.model_dump(exclude_unset=True)
                return store.update(resource, request.path_params[id_param], changes)
            return update_record

        success = entry.success or f"{resource} deleted"
        no_content = entry.status == 204

        async def destroy_record(request: Request):
            record_id = request.path_params[id_param]
            store.delete(resource, record_id)
            if no_content:
                return Response(status_code=204)
            return {"detail": success, "id": record_id}
        return destroy_record


def build_crud_routers(
    router: APIRouter,
    routes: RouteRegistry,
    permissions: PermissionRegistry,
    store: Any,
    guard: ScopeGuard | None = None,
    selections: Mapping[str, Any] | None = None,
) -> dict[str, list[RouteEntry]]:
    """
    Wire CRUD routes for every resource that has CRUD-tagged entries.

    Args:
        selections: Optional per-resource operation selection; resources not
            listed expose every operation they have entries for

    Returns:
        Mapping of resource -> registered entries
    """
    selections = selections or {}
    result: dict[str, list[RouteEntry]] = {}

    for resource in sorted(routes.resources):
        if not any(entry.crud for entry in routes.filter(resource=resource)):
            continue
        config = CrudConfig.of(resource, selections.get(resource, "all"))
        builder = CrudRouterBuilder(routes, permissions, store, config, guard=guard)
        result[resource] = builder.build(router)

    return result
