# 📄 File: flower/modules/accounts/domain/services/profile_service.py
# 🧭 Purpose (Layman Explanation):
# Keeps track of everyone's username so the app can show "alice watered at 9:10" - it looks names up
# once, remembers them, and makes sure your own public profile exists.
# 🧪 Purpose (Technical Summary):
# Process-local display-name cache filled lazily from public profiles (unresolved names render as
# the empty string) and the best-effort profile preload/backfill for the signed-in account.
# Failures of these background reads/writes are logged and swallowed; they retry on next use.
# 🔗 Dependencies:
# asyncio, ProfileRepository, UserRepository, domain models
# 🔄 Connected Modules / Calls From:
# App session (owns the cache), watering screen (renders names), account reconciler

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from ..models.account import Account
from ..models.directory import Profile
from ..repositories.profile_repository import ProfileRepository
from ..repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

NameListener = Callable[[str, str], Any]


class DisplayNameCache:
    """
    uid → username cache backed by the public profiles collection.

    ``display_name`` never blocks and never returns a placeholder: a miss
    returns "" and starts a background fetch; ``listener`` is told when
    the name arrives so a view can re-render.
    """

    def __init__(
        self,
        profile_repository: ProfileRepository,
        listener: Optional[NameListener] = None
    ):
        self.profile_repository = profile_repository
        self.listener = listener
        self._names: Dict[str, str] = {}
        self._inflight: Dict[str, asyncio.Task] = {}

    def get(self, uid: str) -> Optional[str]:
        return self._names.get(uid)

    def put(self, uid: str, username: str) -> None:
        changed = self._names.get(uid) != username
        self._names[uid] = username
        if changed and self.listener:
            self.listener(uid, username)

    def __contains__(self, uid: str) -> bool:
        return uid in self._names

    def display_name(self, uid: str) -> str:
        """Cached username of ``uid`` or "" while it is being fetched."""
        name = self._names.get(uid)
        if name is not None:
            return name
        self.request(uid)
        return ""

    def request(self, uid: str) -> Optional[asyncio.Task]:
        """Start a background fetch of ``uid`` unless cached or already running."""
        if uid in self._names:
            return None
        task = self._inflight.get(uid)
        if task is not None:
            return task
        try:
            task = asyncio.get_running_loop().create_task(self.ensure_cached(uid))
        except RuntimeError:
            # No running loop; the next render inside the loop fetches it.
            return None
        self._inflight[uid] = task
        task.add_done_callback(lambda done: self._forget(uid, done))
        return task

    def _forget(self, uid: str, task: asyncio.Task) -> None:
        if self._inflight.get(uid) is task:
            del self._inflight[uid]

    async def ensure_cached(self, uid: str) -> Optional[str]:
        """
        Make sure the username of ``uid`` is cached.

        Returns:
            The username, or None if the profile is missing or unreadable
        """
        if uid in self._names:
            return self._names[uid]
        try:
            profile = await self.profile_repository.get_by_uid(uid)
        except Exception as e:
            logger.debug(f"Display name fetch failed for {uid}: {e}")
            return None
        if profile is None or not profile.username:
            return None
        self.put(uid, profile.username)
        return profile.username

    def clear(self) -> None:
        """Forget every name and cancel fetches still in flight."""
        self.cancel_pending()
        self._names.clear()

    def cancel_pending(self) -> List[asyncio.Task]:
        tasks = list(self._inflight.values())
        self._inflight.clear()
        for task in tasks:
            task.cancel()
        return tasks

    async def close(self) -> None:
        """Cancel pending fetches and wait for them to finish."""
        tasks = self.cancel_pending()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


class ProfileService:
    """
    Public profile maintenance for the signed-in account.

    Business rules:
    - The profile carries only the registered username
    - Each account writes only its own profile
    - Failures never reach the user; they are retried on next use
    """

    def __init__(
        self,
        profile_repository: ProfileRepository,
        user_repository: UserRepository
    ):
        self.profile_repository = profile_repository
        self.user_repository = user_repository

    async def preload_own_display_name(self, account: Account, cache: DisplayNameCache) -> Optional[str]:
        """
        Cache the signed-in account's username and ensure its profile exists.

        Uses the account display name when present, otherwise falls back
        to the user record written at registration.
        """
        if account.display_name:
            cache.put(account.uid, account.display_name)
            try:
                existing = await self.profile_repository.get_by_uid(account.uid)
                if existing is None:
                    await self.profile_repository.save(
                        Profile(uid=account.uid, username=account.display_name)
                    )
                    logger.info(f"Created missing profile for {account.uid}")
            except Exception as e:
                logger.warning(f"Profile preload failed for {account.uid}: {e}")
            return account.display_name

        try:
            record = await self.user_repository.get_by_uid(account.uid)
            if record is None or not record.username:
                return None
            cache.put(account.uid, record.username)
            await self.profile_repository.save(Profile(uid=account.uid, username=record.username))
            logger.info(f"Backfilled profile for {account.uid} from user record")
            return record.username
        except Exception as e:
            logger.warning(f"Profile backfill failed for {account.uid}: {e}")
            return cache.get(account.uid)
