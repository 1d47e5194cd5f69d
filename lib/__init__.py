# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for table operations
# - utils.py: Shared utilities (error base class, identifier normalization)
#
# supabase_client is imported explicitly where needed; importing the package
# does not create a client or read settings.
# =============================================================================

from lib.utils import ApplicationError, normalize_identifier, split_csv

__all__ = [
    "ApplicationError",
    "normalize_identifier",
    "split_csv",
]
