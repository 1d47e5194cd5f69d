# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the registry machinery and its collaborators:
# - models/: Pydantic schemas for route entries and permission rules
# - registry/: Config loader, route/permission registries, resolver
# - services/: Record storage and user accounts
#
# models/ and the registries stay framework-agnostic; only
# registry/resolver.py registers routes on a FastAPI APIRouter.
# =============================================================================
