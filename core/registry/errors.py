# =============================================================================
# core/registry/errors.py - Registry Errors
# =============================================================================
# Load-time failures are fatal: the process cannot serve routes it cannot
# load. Lookup misses are NOT errors and never raise - registries return
# None or an empty list instead.
# =============================================================================

from typing import Any

from lib.utils import ApplicationError


class RegistryError(ApplicationError):
    """Base class for route/permission registry errors."""

    def __init__(self, message: str, code: str = "REGISTRY_ERROR", **kwargs: Any):
        super().__init__(message, code=code, **kwargs)


class ConfigParseError(RegistryError):
    """Raised when a config document is unreadable or not valid YAML."""

    def __init__(self, source: str, error: str):
        super().__init__(
            message=f"Failed to parse config document {source}: {error}",
            code="CONFIG_PARSE_ERROR",
            suggestion="Check that the file exists and is valid YAML with a mapping at the top level",
            details={"source": source, "error": error},
        )


class ConfigValidationError(RegistryError):
    """Raised when a config document parses but describes invalid entries."""

    def __init__(self, message: str, location: str | None = None, error: str | None = None):
        details: dict[str, Any] = {}
        if location:
            details["location"] = location
        if error:
            details["error"] = error
        super().__init__(
            message=message,
            code="CONFIG_VALIDATION_ERROR",
            suggestion="Fix the entry named in 'location' and restart the service",
            details=details,
        )


class OperationNotAuthorizedError(RegistryError):
    """
    Raised when a CRUD wiring is requested with no operations selected.

    An empty selection is rejected instead of silently registering nothing.
    """

    status_code = 403

    def __init__(self, resource: str):
        super().__init__(
            message=f"No operations selected for resource: {resource}",
            code="OPERATION_NOT_AUTHORIZED",
            suggestion="Pass 'all', a single operation, or a non-empty list of operations",
            details={"resource": resource},
        )
