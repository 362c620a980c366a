# 📄 File: flower/modules/accounts/application/session.py
# 🧭 Purpose (Layman Explanation):
# Remembers who is signed in right now and which screen they should see (sign in, "check your
# email", or the rose). When someone signs in it quietly fixes up any half-finished sign-up.
#
# 🧪 Purpose (Technical Summary):
# Explicit session context replacing ambient globals: holds the current account, the display-name
# cache and the couple id; follows identity-provider auth events; runs profile preload and
# account reconciliation on authenticated access; tears everything down at sign-out.
#
# 🔗 Dependencies:
# IdentityProvider, ProfileService, AccountReconciler, structured logging
#
# 🔄 Connected Modules / Calls From:
# Application container (flower.main), forms, watering screen

from enum import Enum
from typing import Any, Callable, Optional, Set

from flower.shared.core.subscriptions import Subscription
from flower.shared.utils.logging import bind_user, get_logger

from ..domain.models.account import Account, AuthEvent
from ..domain.repositories.profile_repository import ProfileRepository
from ..domain.services.identity_provider import IdentityProvider
from ..domain.services.profile_service import DisplayNameCache, ProfileService
from ..domain.services.reconciliation import AccountReconciler, ReconciliationReport

logger = get_logger(__name__)


class Route(str, Enum):
    """Screen the session routes to."""
    SIGNED_OUT = "signed_out"
    VERIFY_EMAIL = "verify_email"
    WATERING = "watering"


RouteListener = Callable[[Route], Any]


class AppSession:
    """
    Session context of one running client.

    Lifecycle:
    - created at application start (``start`` attaches the auth listener)
    - updated on every auth-state event and after form submissions
    - torn down at sign-out (name cache cleared)
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        profile_repository: ProfileRepository,
        profile_service: ProfileService,
        reconciler: AccountReconciler,
        couple_id: str,
        route_listener: Optional[RouteListener] = None
    ):
        self.identity_provider = identity_provider
        self.profile_service = profile_service
        self.reconciler = reconciler
        self.couple_id = couple_id
        self.route_listener = route_listener
        self.names = DisplayNameCache(profile_repository)

        self.account: Optional[Account] = None
        self.last_report: Optional[ReconciliationReport] = None
        self._route = Route.SIGNED_OUT
        self._auth_subscription: Optional[Subscription] = None
        self._prepared: Set[str] = set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Attach the auth listener and adopt an already restored account."""
        if self._auth_subscription is None:
            self._auth_subscription = self.identity_provider.on_auth_state_changed(self._on_auth_event)
        current = self.identity_provider.current_account()
        if current is not None:
            await self.signed_in(current)

    async def close(self) -> None:
        if self._auth_subscription is not None:
            await self._auth_subscription.unsubscribe()
            self._auth_subscription = None
        await self.names.close()

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    @property
    def route(self) -> Route:
        return self._route

    @property
    def uid(self) -> Optional[str]:
        return self.account.uid if self.account else None

    def _set_account(self, account: Optional[Account]) -> None:
        self.account = account
        bind_user(account.uid if account else None)
        if account is None:
            route = Route.SIGNED_OUT
        elif not account.email_verified:
            route = Route.VERIFY_EMAIL
        else:
            route = Route.WATERING
        if route != self._route:
            logger.info(f"Session route {self._route.value} -> {route.value}")
            self._route = route
            if self.route_listener:
                self.route_listener(route)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def signed_in(self, account: Account) -> Optional[ReconciliationReport]:
        """
        Adopt a freshly authenticated account.

        Profile preload and reconciliation run once per account and
        session; their failures are logged, never raised.
        """
        self._set_account(account)
        if account.uid in self._prepared:
            return self.last_report
        self._prepared.add(account.uid)

        await self.profile_service.preload_own_display_name(account, self.names)
        self.last_report = await self.reconciler.reconcile(account)
        if not self.last_report.consistent:
            logger.warning(
                f"Account {account.uid} is not fully consistent",
                extra={"failed": self.last_report.failed, "conflict": self.last_report.conflict}
            )
        return self.last_report

    def account_updated(self, account: Optional[Account]) -> None:
        """Adopt a reloaded account (e.g. after email verification)."""
        if account is None:
            self.signed_out()
            return
        self._set_account(account)

    def signed_out(self) -> None:
        """Tear down per-account state."""
        uid = self.uid
        self.names.clear()
        self._prepared.clear()
        self.last_report = None
        self._set_account(None)
        if uid:
            logger.info(f"Session of {uid} torn down")

    async def _on_auth_event(self, event: AuthEvent, account: Optional[Account]) -> None:
        if event == AuthEvent.SIGNED_OUT or account is None:
            if self.account is not None:
                self.signed_out()
            return
        if event in (AuthEvent.SIGNED_IN, AuthEvent.INITIAL_SESSION):
            await self.signed_in(account)
        else:
            self._set_account(account)

