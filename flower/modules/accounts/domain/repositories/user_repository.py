# 📄 File: flower/modules/accounts/domain/repositories/user_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for saving and finding the private user record created at sign-up.
# 🧪 Purpose (Technical Summary):
# Repository interface for UserRecord documents keyed by account uid.
# 🔗 Dependencies:
# Domain models (UserRecord), typing, abc
# 🔄 Connected Modules / Calls From:
# Registration service, profile service, account reconciler, infrastructure implementations

from abc import ABC, abstractmethod
from typing import Optional

from ..models.directory import UserRecord


class UserRepository(ABC):
    """Repository interface for the per-account user records collection."""

    @abstractmethod
    async def get_by_uid(self, uid: str) -> Optional[UserRecord]:
        """
        Get the user record of an account.

        Returns:
            UserRecord if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, record: UserRecord) -> UserRecord:
        """
        Create or replace the user record of ``record.uid``.

        Raises:
            WriteFailure: If the write fails
        """
        pass
