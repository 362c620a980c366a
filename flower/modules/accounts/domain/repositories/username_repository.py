# 📄 File: flower/modules/accounts/domain/repositories/username_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for reading and writing the username "phone book" without saying
# which database actually stores it.
# 🧪 Purpose (Technical Summary):
# Repository interface for UsernameEntry documents keyed by lowercased username,
# following the Repository pattern and dependency inversion principle.
# 🔗 Dependencies:
# Domain models (UsernameEntry), typing, abc
# 🔄 Connected Modules / Calls From:
# Username directory service, infrastructure implementations, test fakes

from abc import ABC, abstractmethod
from typing import Optional

from ..models.directory import UsernameEntry


class UsernameRepository(ABC):
    """
    Repository interface for the username directory collection.

    Implementation Notes:
    - Keys are already lowercased by the caller
    - Methods return domain entities, not backend rows
    - All operations are async for non-blocking I/O
    """

    @abstractmethod
    async def get(self, username_lc: str) -> Optional[UsernameEntry]:
        """
        Get a directory entry by its lowercased username.

        Returns:
            UsernameEntry if present, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, entry: UsernameEntry) -> UsernameEntry:
        """
        Insert a new directory entry.

        Raises:
            DirectoryConflictError: If the key already exists in the store
            WriteFailure: If the write fails for another reason
        """
        pass
