# 📄 File: flower/modules/accounts/domain/services/auth_service.py
# 🧭 Purpose (Layman Explanation):
# Handles logging in (with a username or an email), logging out, re-sending the verification
# email and checking whether the email has been verified yet.
# 🧪 Purpose (Technical Summary):
# Domain service implementing authentication on top of the identity provider port. Username
# resolution failures are reported exactly like bad credentials so callers cannot probe which
# usernames exist. No client-side retry or backoff.
# 🔗 Dependencies:
# IdentityProvider, UsernameDirectory, flower.shared.core.exceptions, structured logging
# 🔄 Connected Modules / Calls From:
# Sign-in form, verify-email form, watering screen (sign out), app session

from typing import Optional

from flower.shared.core.exceptions import BackendError, BackendErrorCode, NotFoundError
from flower.shared.utils.logging import get_logger

from ..models.account import Account
from .identity_provider import IdentityProvider
from .username_directory import UsernameDirectory

logger = get_logger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid login credentials"


class AuthService:
    """
    Domain service for authentication.

    Business rules:
    - The identifier may be a username or an email
    - An unknown username fails as invalid credentials
    - "Too many attempts" is a provider condition, surfaced as reported
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        username_directory: UsernameDirectory
    ):
        self.identity_provider = identity_provider
        self.username_directory = username_directory

    async def sign_in(self, username_or_email: str, password: str) -> Account:
        """
        Sign in with a username or email and a password.

        Raises:
            BackendError: INVALID_CREDENTIALS / WRONG_PASSWORD / USER_NOT_FOUND /
                USER_DISABLED / TOO_MANY_REQUESTS / UNKNOWN
        """
        try:
            email = await self.username_directory.resolve(username_or_email)
        except NotFoundError as e:
            logger.log_user_action(
                action="sign_in",
                user_id="anonymous",
                result="failure",
                extra={"reason": "unresolved_identifier"}
            )
            raise BackendError(
                message=INVALID_CREDENTIALS_MESSAGE,
                code=BackendErrorCode.INVALID_CREDENTIALS
            ) from e

        try:
            account = await self.identity_provider.sign_in_with_email_password(email, password)
        except BackendError as e:
            logger.log_user_action(
                action="sign_in",
                user_id="anonymous",
                result="failure",
                extra={"reason": e.code.value}
            )
            raise

        logger.log_user_action(action="sign_in", user_id=account.uid)
        return account

    async def sign_out(self) -> None:
        account = self.identity_provider.current_account()
        await self.identity_provider.sign_out()
        if account:
            logger.log_user_action(action="sign_out", user_id=account.uid)

    async def reload(self) -> Optional[Account]:
        """Refresh the current account from the provider."""
        return await self.identity_provider.reload_account()

    async def resend_verification(self) -> None:
        """
        Resend the verification email of the current account.

        Raises:
            BackendError: NOT_SIGNED_IN when there is no session
        """
        account = self._require_account()
        await self.identity_provider.send_verification_email()
        logger.log_user_action(action="resend_verification", user_id=account.uid)

    async def check_email_verified(self) -> bool:
        """
        Reload the current account and report whether its email is verified.

        Raises:
            BackendError: NOT_SIGNED_IN when there is no session
        """
        self._require_account()
        account = await self.identity_provider.reload_account()
        return bool(account and account.email_verified)

    def _require_account(self) -> Account:
        account = self.identity_provider.current_account()
        if account is None:
            raise BackendError(message="Not signed in", code=BackendErrorCode.NOT_SIGNED_IN)
        return account
