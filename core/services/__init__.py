# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .resource_service import (
    MemoryResourceStore,
    ResourceStore,
    SupabaseResourceStore,
    create_store,
)
from .user_service import UserService

__all__ = [
    "MemoryResourceStore",
    "ResourceStore",
    "SupabaseResourceStore",
    "create_store",
    "UserService",
]
