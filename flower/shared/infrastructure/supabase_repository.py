# 📄 File: flower/shared/infrastructure/supabase_repository.py
#
# 🧭 Purpose (Layman Explanation):
# Common plumbing for every class that reads or writes a Supabase table, so each one
# handles "not found", "already exists" and "the write failed" the same way.
#
# 🧪 Purpose (Technical Summary):
# Base class for PostgREST-backed repositories: table access on the async client, single-row
# fetch by key, and translation of postgrest APIError into WriteFailure / BackendError.
#
# 🔗 Dependencies:
# - supabase (AsyncClient), postgrest.exceptions.APIError
# - flower.shared.core.exceptions
#
# 🔄 Connected Modules / Calls From:
# - Account repositories (usernames, users, profiles)
# - Watering repository

import logging
from typing import Any, Dict, Optional

from postgrest.exceptions import APIError
from supabase import AsyncClient

from flower.shared.core.exceptions import BackendError, BackendErrorCode, WriteFailure

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class SupabaseRepository:
    """
    Shared base for Supabase table repositories.

    Subclasses set ``table_name`` through the constructor and map rows
    to domain models.
    """

    def __init__(self, client: AsyncClient, table_name: str):
        self._client = client
        self.table_name = table_name

    def _table(self):
        return self._client.table(self.table_name)

    async def _fetch_one(self, column: str, value: str) -> Optional[Dict[str, Any]]:
        """Fetch the row where ``column`` equals ``value``."""
        try:
            response = await self._table().select("*").eq(column, value).limit(1).execute()
        except APIError as e:
            logger.error(f"Read from {self.table_name} failed for {column}={value}: {e.message}")
            raise BackendError(message=e.message or str(e), provider_code=e.code) from e
        rows = response.data or []
        return rows[0] if rows else None

    async def _insert(self, row: Dict[str, Any], key: str) -> Dict[str, Any]:
        try:
            response = await self._table().insert(row).execute()
        except APIError as e:
            raise self._write_failure(e, key) from e
        rows = response.data or []
        return rows[0] if rows else row

    async def _upsert(self, row: Dict[str, Any], key: str, on_conflict: str) -> Dict[str, Any]:
        try:
            response = await self._table().upsert(row, on_conflict=on_conflict).execute()
        except APIError as e:
            raise self._write_failure(e, key) from e
        rows = response.data or []
        return rows[0] if rows else row

    def _write_failure(self, error: APIError, key: str) -> WriteFailure:
        logger.error(f"Write to {self.table_name}/{key} failed: {error.message}")
        return WriteFailure(
            message=error.message or "Write failed",
            collection=self.table_name,
            key=key,
            details={"provider_code": error.code}
        )

    @staticmethod
    def is_unique_violation(error: APIError) -> bool:
        return error.code == UNIQUE_VIOLATION


def backend_error_from(error: APIError) -> BackendError:
    """Wrap a PostgREST error for callers outside a repository."""
    return BackendError(message=error.message or str(error), code=BackendErrorCode.UNKNOWN, provider_code=error.code)
