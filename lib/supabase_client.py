# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase table operations.
# It implements the singleton pattern to reuse a single client connection
# and provides generic record methods used by the supabase record store:
# - fetch_records / fetch_record
# - insert_record / update_record / delete_record
#
# One table per resource; every table has an "id" primary key.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   wallets = SupabaseClient.fetch_records("wallet", limit=10)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
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
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase table operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        record = SupabaseClient.insert_record("wallet", {"label": "savings"})
        same = SupabaseClient.fetch_record("wallet", record["id"])
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_KEY:
                raise SupabaseClientError(
                    message="Supabase backend selected but not configured",
                    code="CLIENT_NOT_CONFIGURED",
                    suggestion="Set SUPABASE_URL and SUPABASE_SERVICE_KEY, or use STORAGE_BACKEND=memory"
                )
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests)."""
        cls._instance = None

    # -------------------------------------------------------------------------
    # Record Operations
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_records(
        cls,
        table: str,
        skip: int = 0,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        """
        Fetch a page of records ordered by id.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select("*")
                .order("id")
                .range(skip, skip + limit - 1)
                .execute()
            )
            records = response.data or []
            logger.debug(f"Fetched {len(records)} records from {table}")
            return records

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch records: {e}",
                code="FETCH_RECORDS_FAILED",
                suggestion=f"Check that the '{table}' table exists and is accessible",
                details={"table": table, "skip": skip, "limit": limit}
            )

    @classmethod
    def fetch_record(cls, table: str, record_id: Any) -> dict[str, Any] | None:
        """
        Fetch one record by id.

        Returns:
            Record dict, or None if not found
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select("*")
                .eq("id", str(record_id))
                .limit(1)
                .execute()
            )
            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch record: {e}",
                code="FETCH_RECORD_FAILED",
                suggestion=f"Check that the '{table}' table exists and is accessible",
                details={"table": table, "id": str(record_id)}
            )

    @classmethod
    def fetch_by(cls, table: str, column: str, value: Any) -> dict[str, Any] | None:
        """Fetch the first record whose column equals value."""
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select("*")
                .eq(column, value)
                .limit(1)
                .execute()
            )
            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch record: {e}",
                code="FETCH_RECORD_FAILED",
                suggestion=f"Check that the '{table}' table has a '{column}' column",
                details={"table": table, "column": column}
            )

    @classmethod
    def insert_record(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a record and return it as stored.

        Raises:
            SupabaseClientError: If the insert fails or returns nothing
        """
        client = cls.get_client()

        try:
            response = client.table(table).insert(data).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert record: {e}",
                code="INSERT_FAILED",
                suggestion=f"Check the payload against the '{table}' table columns",
                details={"table": table}
            )

        if not response.data:
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_FAILED",
                details={"table": table}
            )

        logger.info(f"Inserted record {response.data[0].get('id')} into {table}")
        return response.data[0]

    @classmethod
    def update_record(
        cls,
        table: str,
        record_id: Any,
        changes: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update a record by id.

        Returns:
            Updated record, or None if no row matched
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .update(changes)
                .eq("id", str(record_id))
                .execute()
            )
            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update record: {e}",
                code="UPDATE_FAILED",
                suggestion=f"Check the payload against the '{table}' table columns",
                details={"table": table, "id": str(record_id)}
            )

    @classmethod
    def delete_record(cls, table: str, record_id: Any) -> bool:
        """
        Delete a record by id.

        Returns:
            True if a row was deleted
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .delete()
                .eq("id", str(record_id))
                .execute()
            )
            return bool(response.data)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete record: {e}",
                code="DELETE_FAILED",
                details={"table": table, "id": str(record_id)}
            )
