# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas loaded from the config documents:
# - route.py: RouteEntry and the HTTP/CRUD enums it uses
# - permission.py: PermissionRule, ResourcePermissions and the CRUD vocabulary
# =============================================================================

# -----------------------------------------------------------------------------
# Route Models - One API operation per entry
# -----------------------------------------------------------------------------
from .route import (
    ENDPOINT_SEPARATOR,
    CrudOperation,
    HTTPMethod,
    PATH_PARAM_TYPES,
    PAYLOAD_TYPES,
    PayloadField,
    RouteEntry,
)

# -----------------------------------------------------------------------------
# Permission Models - Scopes and the actions they allow
# -----------------------------------------------------------------------------
from .permission import (
    CRUD_ACTIONS,
    CRUD_VOCABULARY,
    DEFAULT_BUNDLES,
    PermissionRule,
    ResourceKind,
    ResourcePermissions,
)

__all__ = [
    # Route
    "ENDPOINT_SEPARATOR",
    "CrudOperation",
    "HTTPMethod",
    "PATH_PARAM_TYPES",
    "PAYLOAD_TYPES",
    "PayloadField",
    "RouteEntry",
    # Permission
    "CRUD_ACTIONS",
    "CRUD_VOCABULARY",
    "DEFAULT_BUNDLES",
    "PermissionRule",
    "ResourceKind",
    "ResourcePermissions",
]
