# =============================================================================
# core/registry/permissions.py - Permission Registry
# =============================================================================
# Read-only index of which scopes may perform which actions, per model or
# service. Built once from the permissions document.
#
# Unknown resources yield empty results. The resolver reads that as "no
# restriction wiring available" and does not expose the route.
#
# Usage:
#   scopes = registry.get_permission("Catalogue", "view")   # ["admin", "auditor"]
#   registry.has_permission("Catalogue", "delete", scopes=["auditor"])  # False
# =============================================================================

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from core.models.permission import (
    CRUD_ACTIONS,
    CRUD_VOCABULARY,
    PermissionRule,
    ResourceKind,
    ResourcePermissions,
)
from core.models.route import CrudOperation


class PermissionRegistry:
    """Mapping of resource name -> ordered permission rules."""

    def __init__(self, resources: Iterable[ResourcePermissions]):
        self._resources: dict[str, ResourcePermissions] = {}
        for item in resources:
            self._resources[item.name] = item

        actions: set[str] = set()
        for item in self._resources.values():
            for rule in item.rules:
                actions.update(rule.actions)
        self._actions = frozenset(actions)

    def __len__(self) -> int:
        return len(self._resources)

    def __contains__(self, resource: object) -> bool:
        return resource in self._resources

    def __repr__(self) -> str:
        return f"PermissionRegistry(resources={len(self._resources)})"

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def permissions(self) -> dict[str, list[PermissionRule]]:
        return {name: list(item.rules) for name, item in self._resources.items()}

    @property
    def meta(self) -> dict[str, str]:
        """Description per resource."""
        return {name: item.description for name, item in self._resources.items()}

    @property
    def actions(self) -> frozenset[str]:
        """Every distinct action named anywhere in the document."""
        return self._actions

    @property
    def resources(self) -> list[str]:
        return list(self._resources)

    def kind(self, resource: str) -> ResourceKind | None:
        item = self._resources.get(resource)
        return item.kind if item else None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_permissions(self, resource: str) -> list[PermissionRule]:
        """Ordered rules for the resource, or [] when it is unknown."""
        item = self._resources.get(resource)
        return list(item.rules) if item else []

    def _rules(self, resource: str, scopes: Iterable[str] | None) -> list[PermissionRule]:
        rules = self.list_permissions(resource)
        if scopes is None:
            return rules
        granted = set(scopes)
        return [rule for rule in rules if rule.scope in granted]

    def has_permission(
        self,
        resource: str,
        action: str,
        scopes: Iterable[str] | None = None,
    ) -> bool:
        """
        True if some scope on the resource allows the action.

        Args:
            resource: Model or service name
            action: CRUD token or endpoint name
            scopes: If given, only these scopes are considered (the scopes a
                caller actually holds)
        """
        return any(rule.allows(action) for rule in self._rules(resource, scopes))

    def get_permission(self, resource: str, action: str) -> list[str]:
        """Names of the scopes whose actions include the given token."""
        return [rule.scope for rule in self.list_permissions(resource) if rule.allows(action)]

    def crud_permissions(self, resource: str) -> list[str]:
        """
        Scopes that allow at least one CRUD-kind action on the resource.

        An empty result means standard CRUD routes should not be generated.
        """
        return [
            rule.scope for rule in self.list_permissions(resource)
            if rule.allows_any(CRUD_VOCABULARY)
        ]

    def scopes_for(self, resource: str, operation: CrudOperation | str) -> list[str]:
        """Scopes allowing any token that stands for the given CRUD operation."""
        tokens = CRUD_ACTIONS[CrudOperation(operation)]
        return [
            rule.scope for rule in self.list_permissions(resource)
            if rule.allows_any(tokens)
        ]

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_document(self) -> dict[str, Any]:
        """Serialize back to the permissions document shape (bundles expanded)."""
        document: dict[str, list[dict[str, Any]]] = {"models": [], "services": []}
        for item in self._resources.values():
            section = "models" if item.kind == ResourceKind.MODEL else "services"
            document[section].append(item.to_document())
        return document
