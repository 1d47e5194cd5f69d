# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from lib.utils import ApplicationError


class MWalletException(Exception):
    """
    Base exception for the mWallet API.

    All HTTP-facing custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "MWALLET_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Record Exceptions
# =============================================================================

class RecordNotFoundError(MWalletException):
    """Raised when a record ID doesn't exist for a resource."""

    def __init__(self, resource: str, record_id: Any):
        super().__init__(
            message=f"{resource} not found: {record_id}",
            code="RECORD_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {resource} id is correct and hasn't been deleted",
            details={"resource": resource, "id": str(record_id)}
        )


class StorageError(MWalletException):
    """Raised when the record store cannot complete an operation."""

    def __init__(self, resource: str, error: str):
        super().__init__(
            message=f"Storage operation failed for {resource}: {error}",
            code="STORAGE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"resource": resource, "error": error}
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class InvalidCredentialsError(MWalletException):
    """Raised when a login or token cannot be verified."""

    def __init__(self, reason: str = "Invalid credentials"):
        super().__init__(
            message=reason,
            code="INVALID_CREDENTIALS",
            status_code=401,
            suggestion="Request a new token from the access_token endpoint",
            headers={"WWW-Authenticate": "Bearer"},
        )


class InsufficientScopeError(MWalletException):
    """Raised when the caller holds none of the scopes a route requires."""

    def __init__(self, required: list[str], granted: list[str]):
        super().__init__(
            message="Not enough permissions",
            code="INSUFFICIENT_SCOPE",
            status_code=403,
            suggestion=f"Use an account holding one of these scopes: {', '.join(required)}",
            details={"required": required, "granted": granted},
            headers={"WWW-Authenticate": f'Bearer scope="{" ".join(required)}"'},
        )


class UserExistsError(MWalletException):
    """Raised when registering a username that is already taken."""

    def __init__(self, username: str):
        super().__init__(
            message=f"User already exists: {username}",
            code="USER_EXISTS",
            status_code=409,
            suggestion="Pick a different username",
            details={"username": username}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def mwallet_exception_handler(
    request: Request,
    exc: MWalletException
) -> JSONResponse:
    """
    Convert MWalletException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def application_error_handler(
    request: Request,
    exc: ApplicationError
) -> JSONResponse:
    """
    Convert library-level ApplicationErrors (registry, storage) to JSON.

    Uses the error's status_code attribute when it has one.
    """
    content = {"detail": exc.message, "code": exc.code}
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(
        status_code=getattr(exc, "status_code", 500),
        content=content,
    )
