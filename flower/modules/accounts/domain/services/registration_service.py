# 📄 File: flower/modules/accounts/domain/services/registration_service.py
# 🧭 Purpose (Layman Explanation):
# Signs a new person up: checks the form, makes sure the username is free, creates the account,
# stores the username records and sends the "please verify your email" message.
# 🧪 Purpose (Technical Summary):
# Domain service implementing the ordered registration sequence. Local validation short-circuits
# before any backend call; failures after account creation surface as PartialRegistrationError
# and are never compensated (the reconciler repairs them on the next authenticated access).
# 🔗 Dependencies:
# IdentityProvider, UsernameDirectory, UserRepository, validators, exceptions
# 🔄 Connected Modules / Calls From:
# Registration form view-model, application container

import logging
from typing import Awaitable, Callable, List, Tuple

from flower.shared.core.exceptions import DirectoryConflictError, PartialRegistrationError
from flower.shared.utils.validators import validate_registration

from ..models.account import Account
from ..models.directory import UserRecord
from ..repositories.user_repository import UserRepository
from .identity_provider import IdentityProvider
from .username_directory import UsernameDirectory

logger = logging.getLogger(__name__)


class RegistrationService:
    """
    Domain service for account registration.

    Sequence (each failure aborts the remaining steps, earlier steps stay):
    a. Directory existence check
    b. Create the account with email and password
    c. Set the account display name to the chosen username
    d. Write the user record
    e. Write the username directory entry
    f. Send the verification email

    Two concurrent registrations of one username can both pass (a); the
    store's primary key on the directory rejects the second at (e).
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        username_directory: UsernameDirectory,
        user_repository: UserRepository
    ):
        self.identity_provider = identity_provider
        self.username_directory = username_directory
        self.user_repository = user_repository

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        confirm_password: str
    ) -> Account:
        """
        Register a new account.

        Returns:
            The created Account (unverified)

        Raises:
            ValidationError: First violated precondition, before any network call
            DirectoryConflictError: Username already reserved
            BackendError: Account creation rejected by the identity provider
            PartialRegistrationError: Account created, a later step failed
        """
        errors = validate_registration(username, email, password, confirm_password)
        if errors:
            raise errors[0]

        username_raw = username.strip()
        email_trimmed = email.strip()

        # a) directory existence check
        if await self.username_directory.is_taken(username_raw):
            logger.info(f"Registration rejected, username taken: {username_raw.lower()}")
            raise DirectoryConflictError(username=username_raw.lower())

        # b) create the account
        account = await self.identity_provider.create_account(email_trimmed, password)
        uid = account.uid
        logger.info(f"Created account {uid} for username {username_raw}")

        steps: List[Tuple[str, Callable[[], Awaitable[object]]]] = [
            ("set_display_name", lambda: self.identity_provider.set_display_name(username_raw)),
            ("write_user_record", lambda: self.user_repository.save(
                UserRecord.for_registration(uid=uid, username=username_raw, email=email_trimmed)
            )),
            ("reserve_username", lambda: self.username_directory.reserve(username_raw, uid, email_trimmed)),
            ("send_verification_email", self.identity_provider.send_verification_email),
        ]

        for step, action in steps:
            try:
                await action()
            except Exception as e:
                logger.error(f"Registration of {uid} stopped at {step}: {e}")
                raise PartialRegistrationError(step=step, uid=uid, cause=e) from e

        logger.info(f"Registration complete for account {uid}")
        return account.model_copy(update={"display_name": username_raw})
