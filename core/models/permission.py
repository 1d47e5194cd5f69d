# =============================================================================
# core/models/permission.py - Permission Schemas
# =============================================================================
# These models describe the permissions document:
# - PermissionRule: one scope and the actions it allows
# - ResourcePermissions: every rule declared for one model or service
#
# Actions are either CRUD-kind tokens (add, view, edit, delete, list and
# their synonyms) or free-form endpoint names (balance, registry, ...).
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .route import CrudOperation


# Action tokens accepted for each CRUD operation
CRUD_ACTIONS: dict[CrudOperation, frozenset[str]] = {
    CrudOperation.CREATE: frozenset({"create", "add"}),
    CrudOperation.RETRIEVE: frozenset({"read", "view", "retrieve"}),
    CrudOperation.UPDATE: frozenset({"update", "edit", "change"}),
    CrudOperation.DESTROY: frozenset({"delete", "destroy", "remove"}),
    CrudOperation.LIST: frozenset({"list"}),
}

CRUD_VOCABULARY: frozenset[str] = frozenset().union(*CRUD_ACTIONS.values())

# Bundles available in every permissions document
DEFAULT_BUNDLES: dict[str, tuple[str, ...]] = {
    "crud": ("add", "view", "edit", "delete", "list"),
}


class ResourceKind(str, Enum):
    """Whether a permission block guards a data model or a service."""
    MODEL = "model"
    SERVICE = "service"


class PermissionRule(BaseModel):
    """
    A scope and the actions it allows.

    Example:
        PermissionRule(scope="auditor", actions=("view", "list"))
    """
    model_config = ConfigDict(frozen=True)

    scope: str = Field(..., min_length=1)
    actions: tuple[str, ...] = Field(..., min_length=1)

    @field_validator("actions", mode="before")
    @classmethod
    def _coerce_actions(cls, value: Any) -> Any:
        if isinstance(value, str):
            return (value,)
        return value

    def allows(self, action: str) -> bool:
        return action in self.actions

    def allows_any(self, actions: frozenset[str] | set[str]) -> bool:
        return not actions.isdisjoint(self.actions)


class ResourcePermissions(BaseModel):
    """All rules declared for one model or service."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    kind: ResourceKind = ResourceKind.MODEL
    description: str = ""
    rules: tuple[PermissionRule, ...] = ()

    @model_validator(mode="after")
    def _unique_scopes(self) -> "ResourcePermissions":
        seen: set[str] = set()
        for rule in self.rules:
            if rule.scope in seen:
                raise ValueError(f"scope '{rule.scope}' is declared twice for '{self.name}'")
            seen.add(rule.scope)
        return self

    def to_document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "permissions": [
                {"name": rule.scope, "action": list(rule.actions)} for rule in self.rules
            ],
        }
