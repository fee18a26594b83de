# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase table operations.
# It implements the singleton pattern to reuse a single client connection
# and provides generic record helpers used by every service:
# - fetch_all / fetch_by_id / fetch_one_by for reads
# - insert / update / delete for writes
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   listings = SupabaseClient.fetch_all("listings", order_by="created_at")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import is_valid_uuid, normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code for "no rows returned" on .single()
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: errors should tell HOW to fix,
    not just WHAT failed.
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

    Implements singleton pattern - one service-role client is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        listing = SupabaseClient.fetch_by_id("listings", listing_id)
        if listing is None:
            ...
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
    def get_auth_client(cls) -> Client:
        """
        Create a fresh anon-key client for password sign-in.

        Sign-in stores a session on the client it is called on, so this is
        never the shared service-role instance.
        """
        try:
            return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase auth client: {e}",
                code="AUTH_CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
            )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_all(
        cls,
        table: str,
        order_by: str | None = "created_at",
        desc: bool = True,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch every row of a table, optionally filtered by equality.

        Args:
            table: Table name
            order_by: Column to order by (None for store order)
            desc: Sort descending when True
            filters: Column -> value equality filters
            limit: Optional maximum number of rows

        Returns:
            List of row dicts (empty list if none)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            query = client.table(table).select("*")
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            if order_by:
                query = query.order(order_by, desc=desc)
            if limit:
                query = query.limit(limit)

            response = query.execute()
            rows = response.data or []

            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch {table}: {e}",
                code="FETCH_ALL_FAILED",
                suggestion=f"Check that the {table} table exists and is accessible",
                details={"table": table, "filters": filters or {}}
            )

    @classmethod
    def fetch_by_id(cls, table: str, record_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a single row by primary key.

        Returns:
            Row dict, or None if not found or the id is not a UUID

        Raises:
            SupabaseClientError: If query fails
        """
        record_id_str = normalize_uuid(record_id)
        if not is_valid_uuid(record_id_str):
            return None

        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select("*")
                .eq("id", record_id_str)
                .single()
                .execute()
            )

            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {table} record: {e}",
                code="FETCH_RECORD_FAILED",
                suggestion="Check that the id exists",
                details={"table": table, "id": record_id_str}
            )

    @classmethod
    def fetch_one_by(cls, table: str, column: str, value: Any) -> dict[str, Any] | None:
        """
        Fetch the first row where column equals value.

        Returns:
            Row dict, or None if no row matches

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select("*")
                .eq(column, value)
                .limit(1)
                .execute()
            )

            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch {table} by {column}: {e}",
                code="FETCH_RECORD_FAILED",
                details={"table": table, "column": column, "value": value}
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    def insert(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a row and return it with generated id.

        Raises:
            SupabaseClientError: If insert fails or returns nothing
        """
        client = cls.get_client()

        try:
            response = client.table(table).insert(data).execute()

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"table": table}
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                suggestion="Check that all required columns are provided",
                details={"table": table}
            )

    @classmethod
    def update(
        cls,
        table: str,
        record_id: str | UUID,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update a row by id.

        Returns:
            Updated row dict, or None if no row matched

        Raises:
            SupabaseClientError: If update fails
        """
        client = cls.get_client()
        record_id_str = normalize_uuid(record_id)

        try:
            response = (
                client.table(table)
                .update(data)
                .eq("id", record_id_str)
                .execute()
            )

            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table} record: {e}",
                code="UPDATE_FAILED",
                details={"table": table, "id": record_id_str}
            )

    @classmethod
    def delete(cls, table: str, record_id: str | UUID) -> bool:
        """
        Delete a row by id.

        Returns:
            True if a row was deleted, False if nothing matched

        Raises:
            SupabaseClientError: If delete fails
        """
        client = cls.get_client()
        record_id_str = normalize_uuid(record_id)

        try:
            response = (
                client.table(table)
                .delete()
                .eq("id", record_id_str)
                .execute()
            )

            return bool(response.data)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete {table} record: {e}",
                code="DELETE_FAILED",
                details={"table": table, "id": record_id_str}
            )
