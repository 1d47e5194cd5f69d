# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains the hand-written parts of the API:
# - health.py: Health check endpoints (mounted directly)
# - wallets.py: Wallet handlers beyond CRUD (balance)
# - registry.py: Read-only views of the loaded registries
#
# Paths, methods and status codes for wallets/registry come from the routes
# document; see core/registry/resolver.py for how they are bound.
# =============================================================================

from . import health
from . import registry
from . import wallets

__all__ = [
    "health",
    "registry",
    "wallets",
]
