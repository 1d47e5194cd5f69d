# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import re
from typing import Any


# =============================================================================
# Identifier Utilities
# =============================================================================

_NON_WORD = re.compile(r"[^0-9a-z]+")


def normalize_identifier(value: str) -> str:
    """
    Normalize a human-written key to a lowercase, word-separated identifier.

    Runs of anything that is not a letter or digit collapse to a single
    underscore, and leading/trailing underscores are dropped.

    Example:
        normalize_identifier("Access Token")   # "access_token"
        normalize_identifier("refresh-token")  # "refresh_token"
    """
    return _NON_WORD.sub("_", str(value).strip().lower()).strip("_")


def split_csv(value: str | None) -> list[str]:
    """
    Split a comma-separated setting into a list of non-empty items.

    Example:
        split_csv("admin, auditor")  # ["admin", "auditor"]
    """
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class MyServiceError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="MY_SERVICE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
