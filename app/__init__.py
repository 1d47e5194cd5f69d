# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - factory.py: Builds the app from the routes/permissions documents
# - main.py: App entry point for uvicorn
# - config.py: Environment variable loading and settings
# - auth/: Token issue/refresh and scope checks
# - routers/: Hand-written handlers (health, wallet balance, registry views)
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
