# =============================================================================
# core/registry/ - Declarative Route & Permission Registration
# =============================================================================
# - loader.py: parses the YAML documents into registries
# - routes.py: RouteRegistry (find, find_operation, filter)
# - permissions.py: PermissionRegistry (get_permission, has_permission, ...)
# - resolver.py: binds entries + scopes to handlers on an APIRouter
# - errors.py: load-time and misuse errors
#
# Registries are built once and never mutated. Reloading builds new
# instances (see app.factory.reload_registries).
# =============================================================================

from .errors import (
    ConfigParseError,
    ConfigValidationError,
    OperationNotAuthorizedError,
    RegistryError,
)
from .permissions import PermissionRegistry
from .routes import RouteGroup, RouteRegistry
from .loader import load_permissions, load_routes, parse_permissions, parse_routes

__all__ = [
    "ConfigParseError",
    "ConfigValidationError",
    "OperationNotAuthorizedError",
    "RegistryError",
    "PermissionRegistry",
    "RouteGroup",
    "RouteRegistry",
    "load_permissions",
    "load_routes",
    "parse_permissions",
    "parse_routes",
]
