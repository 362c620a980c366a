# 📄 File: flower/modules/accounts/infrastructure/database/profile_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves and loads the public profile (just the username) partners see next to a watering.
#
# 🧪 Purpose (Technical Summary):
# Supabase PostgREST implementation of ProfileRepository; saves merge by uid (upsert).
#
# 🔗 Dependencies:
# - supabase AsyncClient
# - flower.shared.infrastructure.supabase_repository
#
# 🔄 Connected Modules / Calls From:
# - Display-name cache, profile service, account reconciler

import logging
from typing import Optional

from supabase import AsyncClient

from flower.shared.infrastructure.supabase_repository import SupabaseRepository

from ...domain.models.directory import Profile
from ...domain.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)


class ProfileRepositoryImpl(SupabaseRepository, ProfileRepository):
    """Supabase implementation of the ProfileRepository interface."""

    def __init__(self, client: AsyncClient, table_name: str = "profiles"):
        super().__init__(client, table_name)

    async def get_by_uid(self, uid: str) -> Optional[Profile]:
        row = await self._fetch_one("uid", uid)
        if row is None or not row.get("username"):
            logger.debug(f"Profile not found: {uid}")
            return None
        return Profile(uid=row["uid"], username=row["username"])

    async def save(self, profile: Profile) -> Profile:
        await self._upsert(profile.to_row(), key=profile.uid, on_conflict="uid")
        logger.info(f"Saved profile: {profile.uid}")
        return profile
