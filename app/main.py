# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the mWallet API.
# The application is built by app.factory.create_app(), which loads the
# routes and permissions documents from the working directory.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

from app.factory import create_app

app = create_app()
