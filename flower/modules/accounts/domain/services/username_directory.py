# 📄 File: flower/modules/accounts/domain/services/username_directory.py
# 🧭 Purpose (Layman Explanation):
# The username "phone book": it remembers which account picked which username (ignoring upper/lower
# case) and turns "alice" into alice's email so people can log in with just their username.
# 🧪 Purpose (Technical Summary):
# Domain service over the UsernameRepository implementing reserve (check-then-write, race
# closed by the store's primary key) and resolve (email passthrough or case-insensitive lookup).
# 🔗 Dependencies:
# Domain models, UsernameRepository, flower.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Registration service, auth service, account reconciler

import logging
from typing import Optional

from flower.shared.core.exceptions import DirectoryConflictError, NotFoundError

from ..models.directory import UsernameEntry, normalize_username
from ..repositories.username_repository import UsernameRepository

logger = logging.getLogger(__name__)


class UsernameDirectory:
    """
    Username → account/email directory.

    Business rules:
    - Usernames are unique case-insensitively; the key is the lowercased name
    - Entries are written once at registration, never updated or deleted
    - An input containing '@' is an email and never touches the directory
    """

    def __init__(self, username_repository: UsernameRepository):
        self.username_repository = username_repository

    async def is_taken(self, username: str) -> bool:
        """Whether a directory entry exists for ``username``."""
        entry = await self.username_repository.get(normalize_username(username))
        return entry is not None

    async def lookup(self, username: str) -> Optional[UsernameEntry]:
        return await self.username_repository.get(normalize_username(username))

    async def reserve(self, username: str, uid: str, email: Optional[str]) -> UsernameEntry:
        """
        Reserve ``username`` for the account ``uid``.

        Must only be called once the account exists; a failure here does
        not roll the account back.

        Raises:
            DirectoryConflictError: If the username already has an entry
            WriteFailure: If the store write fails
        """
        username_lc = normalize_username(username)
        existing = await self.username_repository.get(username_lc)
        if existing is not None:
            logger.info(f"Username already reserved: {username_lc}")
            raise DirectoryConflictError(username=username_lc)

        entry = await self.username_repository.create(
            UsernameEntry(username_lc=username_lc, uid=uid, email=email)
        )
        logger.info(f"Reserved username {username_lc} for account {uid}")
        return entry

    async def resolve(self, username_or_email: str) -> str:
        """
        Resolve a sign-in identifier to an email address.

        Returns:
            The input itself when it contains '@', else the directory email

        Raises:
            NotFoundError: If no entry exists or the entry has no email
        """
        trimmed = username_or_email.strip()
        if "@" in trimmed:
            return trimmed

        username_lc = normalize_username(trimmed)
        entry = await self.username_repository.get(username_lc)
        if entry is None or not entry.email:
            logger.debug(f"Username not resolvable: {username_lc}")
            raise NotFoundError(
                message="Username not found or has no email bound",
                resource_type="username",
                resource_id=username_lc
            )
        return entry.email
