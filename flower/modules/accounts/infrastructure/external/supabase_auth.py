# 📄 File: flower/modules/accounts/infrastructure/external/supabase_auth.py
# 🧭 Purpose (Layman Explanation):
# Connects the app to Supabase's sign-in service: creating accounts, signing in and out, sending
# the verification email and translating Supabase's error codes into ones the app understands.
# 🧪 Purpose (Technical Summary):
# IdentityProvider adapter over the async Supabase auth client. Maps supabase_auth users to Account
# models, AuthApiError codes to BackendErrorCode, and auth-state callbacks to Subscription handles.
# 🔗 Dependencies:
# supabase (AsyncClient auth), supabase_auth.errors, flower.shared.core
# 🔄 Connected Modules / Calls From:
# Application container (flower.main), auth/registration services through the port

import asyncio
import logging
from typing import Any, Dict, Optional, Set

from supabase import AsyncClient
from supabase_auth.errors import AuthApiError, AuthError, AuthSessionMissingError

from flower.shared.core.exceptions import BackendError, BackendErrorCode
from flower.shared.core.subscriptions import CallbackSubscription, Subscription

from ...domain.models.account import Account, AuthEvent
from ...domain.services.identity_provider import AuthStateListener, IdentityProvider

logger = logging.getLogger(__name__)

# supabase_auth error codes -> client error classes
ERROR_CODE_MAP: Dict[str, BackendErrorCode] = {
    "email_exists": BackendErrorCode.EMAIL_ALREADY_IN_USE,
    "user_already_exists": BackendErrorCode.EMAIL_ALREADY_IN_USE,
    "email_address_invalid": BackendErrorCode.INVALID_EMAIL,
    "weak_password": BackendErrorCode.WEAK_PASSWORD,
    "invalid_credentials": BackendErrorCode.INVALID_CREDENTIALS,
    "user_not_found": BackendErrorCode.USER_NOT_FOUND,
    "user_banned": BackendErrorCode.USER_DISABLED,
    "over_request_rate_limit": BackendErrorCode.TOO_MANY_REQUESTS,
    "over_email_send_rate_limit": BackendErrorCode.TOO_MANY_REQUESTS,
    "email_not_confirmed": BackendErrorCode.EMAIL_NOT_VERIFIED,
    "session_not_found": BackendErrorCode.NOT_SIGNED_IN,
}

AUTH_EVENT_MAP: Dict[str, AuthEvent] = {
    "SIGNED_IN": AuthEvent.SIGNED_IN,
    "SIGNED_OUT": AuthEvent.SIGNED_OUT,
    "USER_UPDATED": AuthEvent.USER_UPDATED,
    "TOKEN_REFRESHED": AuthEvent.TOKEN_REFRESHED,
    "INITIAL_SESSION": AuthEvent.INITIAL_SESSION,
    "USER_DELETED": AuthEvent.SIGNED_OUT,
}

USERNAME_METADATA_KEY = "username"


def map_auth_error(error: Exception) -> BackendError:
    """
    Translate a supabase_auth error into a BackendError.

    Unknown codes keep the provider message so it can be shown verbatim.
    """
    message = getattr(error, "message", None) or str(error)
    provider_code = getattr(error, "code", None)
    code = ERROR_CODE_MAP.get(provider_code or "")

    if code is None:
        status = getattr(error, "status", None)
        if status == 429:
            code = BackendErrorCode.TOO_MANY_REQUESTS
        elif isinstance(error, AuthSessionMissingError):
            code = BackendErrorCode.NOT_SIGNED_IN
        else:
            code = BackendErrorCode.UNKNOWN

    return BackendError(message=message, code=code, provider_code=provider_code)


def to_account(user: Any) -> Account:
    """Map a supabase_auth User to an Account."""
    metadata = getattr(user, "user_metadata", None) or {}
    confirmed_at = getattr(user, "email_confirmed_at", None) or getattr(user, "confirmed_at", None)
    return Account(
        uid=str(user.id),
        email=getattr(user, "email", None),
        email_verified=confirmed_at is not None,
        display_name=metadata.get(USERNAME_METADATA_KEY),
    )


class SupabaseIdentityProvider(IdentityProvider):
    """
    Supabase Auth implementation of the identity provider.

    Vendor differences absorbed here:
    - sign-up already sends the confirmation email, so the first
      verification request for a freshly created account is not repeated
    - with email confirmation enabled sign-up returns no session; the
      display name is then held and applied at the first sign-in
    """

    def __init__(self, client: AsyncClient):
        self._client = client
        self._current: Optional[Account] = None
        self._has_session = False
        self._pending_display_names: Dict[str, str] = {}
        self._verification_sent: Set[str] = set()
        self._listener_tasks: Set[asyncio.Task] = set()

    @property
    def auth(self):
        return self._client.auth

    async def sign_in_with_email_password(self, email: str, password: str) -> Account:
        try:
            response = await self.auth.sign_in_with_password({"email": email, "password": password})
        except (AuthApiError, AuthError) as e:
            raise map_auth_error(e) from e

        self._has_session = response.session is not None
        account = self._remember(to_account(response.user))

        pending = self._pending_display_names.pop(account.uid, None)
        if pending and account.display_name != pending:
            account = await self.set_display_name(pending)
        return account

    async def create_account(self, email: str, password: str) -> Account:
        try:
            response = await self.auth.sign_up({"email": email, "password": password})
        except (AuthApiError, AuthError) as e:
            raise map_auth_error(e) from e

        if response.user is None:
            raise BackendError(message="Sign-up returned no user", code=BackendErrorCode.UNKNOWN)

        self._has_session = response.session is not None
        account = self._remember(to_account(response.user))
        self._verification_sent.add(account.uid)
        logger.info(f"Supabase account created: {account.uid} (session={self._has_session})")
        return account

    async def set_display_name(self, display_name: str) -> Account:
        current = self._require_current()
        if not self._has_session:
            self._pending_display_names[current.uid] = display_name
            logger.info(f"Display name for {current.uid} deferred until first sign-in")
            return self._remember(current.model_copy(update={"display_name": display_name}))

        try:
            response = await self.auth.update_user({"data": {USERNAME_METADATA_KEY: display_name}})
        except (AuthApiError, AuthError) as e:
            raise map_auth_error(e) from e
        return self._remember(to_account(response.user))

    async def send_verification_email(self) -> None:
        current = self._require_current()
        if current.uid in self._verification_sent:
            # sign-up already sent it
            self._verification_sent.discard(current.uid)
            return
        if not current.email:
            raise BackendError(message="Account has no email", code=BackendErrorCode.INVALID_EMAIL)
        try:
            await self.auth.resend({"type": "signup", "email": current.email})
        except (AuthApiError, AuthError) as e:
            raise map_auth_error(e) from e

    async def reload_account(self) -> Optional[Account]:
        if not self._has_session:
            return self._current
        try:
            response = await self.auth.get_user()
        except (AuthApiError, AuthError) as e:
            raise map_auth_error(e) from e
        if response is None or response.user is None:
            return self._current
        return self._remember(to_account(response.user))

    async def sign_out(self) -> None:
        try:
            await self.auth.sign_out()
        except (AuthApiError, AuthError) as e:
            raise map_auth_error(e) from e
        self._current = None
        self._has_session = False

    def current_account(self) -> Optional[Account]:
        return self._current

    def on_auth_state_changed(self, listener: AuthStateListener) -> Subscription:
        def handle(event: str, session: Any) -> None:
            mapped = AUTH_EVENT_MAP.get(event)
            if mapped is None:
                return
            if session is not None and getattr(session, "user", None) is not None:
                self._has_session = True
                account = self._remember(to_account(session.user))
            else:
                account = None
                if mapped == AuthEvent.SIGNED_OUT:
                    self._current = None
                    self._has_session = False
            result = listener(mapped, account)
            if asyncio.iscoroutine(result):
                task = asyncio.get_running_loop().create_task(result)
                self._listener_tasks.add(task)
                task.add_done_callback(self._listener_tasks.discard)

        registration = self.auth.on_auth_state_change(handle)
        return CallbackSubscription(registration.unsubscribe, name="auth-state listener")

    def _remember(self, account: Account) -> Account:
        self._current = account
        return account

    def _require_current(self) -> Account:
        if self._current is None:
            raise BackendError(message="Not signed in", code=BackendErrorCode.NOT_SIGNED_IN)
        return self._current
