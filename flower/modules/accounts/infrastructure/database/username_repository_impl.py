# 📄 File: flower/modules/accounts/infrastructure/database/username_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Reads and writes the username "phone book" in the hosted database.
#
# 🧪 Purpose (Technical Summary):
# Supabase PostgREST implementation of UsernameRepository. A primary-key violation on insert
# is reported as DirectoryConflictError so concurrent reservations of one name fail cleanly.
#
# 🔗 Dependencies:
# - supabase AsyncClient, postgrest APIError
# - flower.shared.infrastructure.supabase_repository
#
# 🔄 Connected Modules / Calls From:
# - Application container (flower.main)
# - UsernameDirectory through the repository interface

import logging
from typing import Any, Dict, Optional

from postgrest.exceptions import APIError
from supabase import AsyncClient

from flower.shared.core.exceptions import DirectoryConflictError
from flower.shared.infrastructure.supabase_repository import SupabaseRepository
from flower.shared.utils.helpers import parse_timestamp

from ...domain.models.directory import UsernameEntry
from ...domain.repositories.username_repository import UsernameRepository

logger = logging.getLogger(__name__)


class UsernameRepositoryImpl(SupabaseRepository, UsernameRepository):
    """Supabase implementation of the UsernameRepository interface."""

    def __init__(self, client: AsyncClient, table_name: str = "usernames"):
        super().__init__(client, table_name)

    async def get(self, username_lc: str) -> Optional[UsernameEntry]:
        row = await self._fetch_one("username_lc", username_lc)
        if row is None:
            logger.debug(f"Username entry not found: {username_lc}")
            return None
        return self._row_to_domain(row)

    async def create(self, entry: UsernameEntry) -> UsernameEntry:
        try:
            response = await self._table().insert(entry.to_row()).execute()
        except APIError as e:
            if self.is_unique_violation(e):
                logger.warning(f"Username entry already exists: {entry.username_lc}")
                raise DirectoryConflictError(username=entry.username_lc) from e
            raise self._write_failure(e, entry.username_lc) from e

        rows = response.data or []
        logger.info(f"Created username entry: {entry.username_lc}")
        return self._row_to_domain(rows[0]) if rows else entry

    @staticmethod
    def _row_to_domain(row: Dict[str, Any]) -> UsernameEntry:
        return UsernameEntry(
            username_lc=row["username_lc"],
            uid=row["uid"],
            email=row.get("email"),
            created_at=parse_timestamp(row.get("created_at")),
        )
