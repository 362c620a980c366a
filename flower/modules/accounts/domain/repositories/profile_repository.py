# 📄 File: flower/modules/accounts/domain/repositories/profile_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for the public profile (just the username) that partners read to
# show who watered last.
# 🧪 Purpose (Technical Summary):
# Repository interface for Profile documents keyed by account uid.
# 🔗 Dependencies:
# Domain models (Profile), typing, abc
# 🔄 Connected Modules / Calls From:
# Profile service, display-name cache, account reconciler, infrastructure implementations

from abc import ABC, abstractmethod
from typing import Optional

from ..models.directory import Profile


class ProfileRepository(ABC):
    """Repository interface for the public profiles collection."""

    @abstractmethod
    async def get_by_uid(self, uid: str) -> Optional[Profile]:
        """
        Get the public profile of an account.

        Returns:
            Profile if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, profile: Profile) -> Profile:
        """
        Create or merge the profile of ``profile.uid``.

        Raises:
            WriteFailure: If the write fails
        """
        pass
