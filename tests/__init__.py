# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the mWallet API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_loader.py: Parsing the routes and permissions documents
# - test_route_registry.py / test_permission_registry.py: Registry lookups
# - test_resolver.py: Binding entries and scopes onto an APIRouter
# - test_services.py / test_security.py: Storage, users, tokens
# - test_api.py: Integration tests through the TestClient
#
# Run tests with: pytest
# =============================================================================
