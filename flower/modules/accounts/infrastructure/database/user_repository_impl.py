# 📄 File: flower/modules/accounts/infrastructure/database/user_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves and loads the private user record made when someone signs up.
#
# 🧪 Purpose (Technical Summary):
# Supabase PostgREST implementation of UserRepository (upsert keyed by uid).
#
# 🔗 Dependencies:
# - supabase AsyncClient
# - flower.shared.infrastructure.supabase_repository
#
# 🔄 Connected Modules / Calls From:
# - Registration service, profile service, account reconciler

import logging
from typing import Any, Dict, Optional

from supabase import AsyncClient

from flower.shared.infrastructure.supabase_repository import SupabaseRepository
from flower.shared.utils.helpers import parse_timestamp

from ...domain.models.directory import UserRecord
from ...domain.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class UserRepositoryImpl(SupabaseRepository, UserRepository):
    """Supabase implementation of the UserRepository interface."""

    def __init__(self, client: AsyncClient, table_name: str = "users"):
        super().__init__(client, table_name)

    async def get_by_uid(self, uid: str) -> Optional[UserRecord]:
        row = await self._fetch_one("uid", uid)
        if row is None:
            logger.debug(f"User record not found: {uid}")
            return None
        return self._row_to_domain(row)

    async def save(self, record: UserRecord) -> UserRecord:
        row = await self._upsert(record.to_row(), key=record.uid, on_conflict="uid")
        logger.info(f"Saved user record: {record.uid}")
        return self._row_to_domain({**record.to_row(), **row})

    @staticmethod
    def _row_to_domain(row: Dict[str, Any]) -> UserRecord:
        return UserRecord(
            uid=row["uid"],
            username=row["username"],
            username_lc=row["username_lc"],
            email=row.get("email"),
            created_at=parse_timestamp(row.get("created_at")),
        )
