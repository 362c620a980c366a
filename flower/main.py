# 📄 File: flower/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main control center that starts the shared-plant app: it reads the settings, connects to
# the hosted backend, wires all the parts together and shuts everything down cleanly at the end.
#
# 🧪 Purpose (Technical Summary):
# Application container and lifespan. Builds repositories, domain services, the session context
# and view-model factories over either the Supabase adapters or any injected implementations.
#
# 🔗 Dependencies:
# - flower.shared.config (settings, Supabase manager)
# - flower.shared.utils.logging
# - accounts and watering modules
#
# 🔄 Connected Modules / Calls From:
# - UI shell entry point
# - Tests (through build_application with in-memory fakes)

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from supabase import AsyncClient

from flower.modules.accounts.application.session import AppSession, RouteListener
from flower.modules.accounts.domain.repositories.profile_repository import ProfileRepository
from flower.modules.accounts.domain.repositories.user_repository import UserRepository
from flower.modules.accounts.domain.repositories.username_repository import UsernameRepository
from flower.modules.accounts.domain.services.auth_service import AuthService
from flower.modules.accounts.domain.services.identity_provider import IdentityProvider
from flower.modules.accounts.domain.services.profile_service import ProfileService
from flower.modules.accounts.domain.services.reconciliation import AccountReconciler
from flower.modules.accounts.domain.services.registration_service import RegistrationService
from flower.modules.accounts.domain.services.username_directory import UsernameDirectory
from flower.modules.accounts.infrastructure.database.profile_repository_impl import ProfileRepositoryImpl
from flower.modules.accounts.infrastructure.database.user_repository_impl import UserRepositoryImpl
from flower.modules.accounts.infrastructure.database.username_repository_impl import UsernameRepositoryImpl
from flower.modules.accounts.infrastructure.external.supabase_auth import SupabaseIdentityProvider
from flower.modules.accounts.presentation.forms import RegistrationForm, SignInForm, VerifyEmailForm
from flower.modules.watering.domain.repositories.watering_repository import WateringRepository
from flower.modules.watering.domain.services.watering_log import WateringLog
from flower.modules.watering.infrastructure.database.watering_repository_impl import WateringRepositoryImpl
from flower.modules.watering.presentation.watering_screen import WateringScreen
from flower.shared.config.settings import Settings, get_settings
from flower.shared.config.supabase import SupabaseManager
from flower.shared.utils.logging import (
    get_logger,
    log_context,
    log_shutdown_event,
    log_startup_event,
    setup_logging,
)

logger = get_logger(__name__)


class FlowerApp:
    """
    Wired application: services, session and view-model factories.

    View-models are created per screen visit; the session lives for
    the whole run.
    """

    def __init__(
        self,
        settings: Settings,
        identity_provider: IdentityProvider,
        username_repository: UsernameRepository,
        user_repository: UserRepository,
        profile_repository: ProfileRepository,
        watering_repository: WateringRepository,
        route_listener: Optional[RouteListener] = None
    ):
        self.settings = settings
        self.identity_provider = identity_provider

        self.username_directory = UsernameDirectory(username_repository)
        self.auth_service = AuthService(identity_provider, self.username_directory)
        self.registration_service = RegistrationService(
            identity_provider, self.username_directory, user_repository
        )
        self.profile_service = ProfileService(profile_repository, user_repository)
        self.reconciler = AccountReconciler(
            identity_provider, self.username_directory, user_repository, profile_repository
        )
        self.watering_log = WateringLog(watering_repository)

        self.session = AppSession(
            identity_provider=identity_provider,
            profile_repository=profile_repository,
            profile_service=self.profile_service,
            reconciler=self.reconciler,
            couple_id=settings.COUPLE_ID,
            route_listener=route_listener
        )

    # ------------------------------------------------------------------
    # View-model factories
    # ------------------------------------------------------------------

    def sign_in_form(self) -> SignInForm:
        return SignInForm(self.auth_service, self.session)

    def registration_form(self) -> RegistrationForm:
        return RegistrationForm(self.registration_service, self.session)

    def verify_email_form(self) -> VerifyEmailForm:
        return VerifyEmailForm(self.auth_service, self.session)

    def watering_screen(self) -> WateringScreen:
        return WateringScreen(
            watering_log=self.watering_log,
            auth_service=self.auth_service,
            session=self.session,
            dry_after=self.settings.dry_after,
            tick_interval=self.settings.DRY_CHECK_INTERVAL_SECONDS
        )

    async def start(self) -> None:
        await self.session.start()

    async def close(self) -> None:
        await self.session.close()


def build_application(
    settings: Settings,
    identity_provider: IdentityProvider,
    username_repository: UsernameRepository,
    user_repository: UserRepository,
    profile_repository: ProfileRepository,
    watering_repository: WateringRepository,
    route_listener: Optional[RouteListener] = None
) -> FlowerApp:
    """Wire the application over explicit adapter implementations."""
    return FlowerApp(
        settings=settings,
        identity_provider=identity_provider,
        username_repository=username_repository,
        user_repository=user_repository,
        profile_repository=profile_repository,
        watering_repository=watering_repository,
        route_listener=route_listener
    )


def create_application(
    client: AsyncClient,
    settings: Optional[Settings] = None,
    route_listener: Optional[RouteListener] = None
) -> FlowerApp:
    """
    Application factory over a connected Supabase client.

    Returns:
        FlowerApp: Configured application
    """
    settings = settings or get_settings()
    return build_application(
        settings=settings,
        identity_provider=SupabaseIdentityProvider(client),
        username_repository=UsernameRepositoryImpl(client, settings.USERNAMES_TABLE),
        user_repository=UserRepositoryImpl(client, settings.USERS_TABLE),
        profile_repository=ProfileRepositoryImpl(client, settings.PROFILES_TABLE),
        watering_repository=WateringRepositoryImpl(client, settings.WATERINGS_TABLE),
        route_listener=route_listener
    )


@asynccontextmanager
async def lifespan(
    settings: Optional[Settings] = None,
    route_listener: Optional[RouteListener] = None
) -> AsyncIterator[FlowerApp]:
    """
    Application lifespan context manager.

    Handles startup and shutdown: logging, the Supabase connection,
    the auth listener of the session and cleanup on every exit path.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, settings.LOG_FILE)
    log_startup_event(settings.APP_NAME, settings.APP_VERSION, extra={"environment": settings.ENVIRONMENT})
    logger.info("🌱 flower starting up...")

    manager = SupabaseManager(settings)
    app: Optional[FlowerApp] = None
    with log_context() as context:
        logger.debug(f"Client session {context['session_id']}")
        try:
            client = await manager.connect()
            logger.info("✅ Supabase client connected")

            app = create_application(client, settings, route_listener)
            await app.start()
            logger.info("✅ flower startup complete")

            yield app

        except Exception as e:
            logger.error(f"❌ Startup or runtime failure: {e}")
            raise

        finally:
            logger.info("🔄 flower shutting down...")
            if app is not None:
                await app.close()
                logger.info("✅ Session closed")
            await manager.close()
            logger.info("✅ Supabase connections closed")
            log_shutdown_event(settings.APP_NAME)
