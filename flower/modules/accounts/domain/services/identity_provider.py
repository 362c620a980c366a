# 📄 File: flower/modules/accounts/domain/services/identity_provider.py
# 🧭 Purpose (Layman Explanation):
# Describes what we need from the outside sign-in service (create an account, sign in, send the
# verification email, sign out) without tying the app to one vendor.
# 🧪 Purpose (Technical Summary):
# Port (abstract interface) for the hosted identity provider. Adapters translate vendor errors
# into BackendError codes and vendor users into Account models.
# 🔗 Dependencies:
# abc, typing, domain models, flower.shared.core.subscriptions
# 🔄 Connected Modules / Calls From:
# Auth service, registration service, app session, Supabase auth adapter, test fakes

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from flower.shared.core.subscriptions import Subscription

from ..models.account import Account, AuthEvent

AuthStateListener = Callable[[AuthEvent, Optional[Account]], Any]


class IdentityProvider(ABC):
    """
    Identity provider contract.

    Every coroutine raises ``BackendError`` with a classified
    ``BackendErrorCode`` when the provider rejects the request.
    Operations on "the current account" act on the signed-in session.
    """

    @abstractmethod
    async def sign_in_with_email_password(self, email: str, password: str) -> Account:
        """Verify credentials and start a session."""
        pass

    @abstractmethod
    async def create_account(self, email: str, password: str) -> Account:
        """Create an account; the new account becomes the current session."""
        pass

    @abstractmethod
    async def set_display_name(self, display_name: str) -> Account:
        """Set the display name of the current account."""
        pass

    @abstractmethod
    async def send_verification_email(self) -> None:
        """(Re)send the verification email of the current account."""
        pass

    @abstractmethod
    async def reload_account(self) -> Optional[Account]:
        """Refresh the current account from the provider (e.g. verified flag)."""
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        """End the current session."""
        pass

    @abstractmethod
    def current_account(self) -> Optional[Account]:
        """Account of the current session, if any, without a network call."""
        pass

    @abstractmethod
    def on_auth_state_changed(self, listener: AuthStateListener) -> Subscription:
        """
        Register a listener for auth-state changes.

        Returns:
            Subscription whose ``unsubscribe`` detaches the listener
        """
        pass
