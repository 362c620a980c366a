# 📄 File: flower/modules/accounts/presentation/forms.py
# 🧭 Purpose (Layman Explanation):
# The brains behind the sign-in, sign-up and "verify your email" screens: what is typed in, whether
# the button is busy, and which error to show where. A screen only has to draw these values.
#
# 🧪 Purpose (Technical Summary):
# Headless view-models. Each submission clears previous messages, rejects duplicates while busy,
# runs local validation before any network call and maps every failure to exactly one message
# per form region. Errors are caught here and never propagate to the caller.
#
# 🔗 Dependencies:
# AuthService, RegistrationService, AppSession, validators, messages, structured logging
#
# 🔄 Connected Modules / Calls From:
# UI shell, application container (flower.main), tests

from typing import Dict, Optional

from flower.shared.core.exceptions import (
    BackendError,
    DirectoryConflictError,
    FlowerException,
    FormRegion,
    PartialRegistrationError,
    ValidationError,
)
from flower.shared.utils.logging import get_logger
from flower.shared.utils.validators import errors_by_region, validate_registration

from ..application.session import AppSession
from ..domain.models.account import Account
from ..domain.services.auth_service import AuthService
from ..domain.services.registration_service import RegistrationService
from .messages import (
    NOT_VERIFIED_MESSAGE,
    RELOAD_FAILED_MESSAGE,
    RESEND_FAILED_MESSAGE,
    SIGN_OUT_FAILED_MESSAGE,
    USERNAME_TAKEN_MESSAGE,
    registration_message,
    sign_in_message,
)

logger = get_logger(__name__)


class SignInForm:
    """Sign in with a username or an email and a password."""

    def __init__(self, auth_service: AuthService, session: AppSession):
        self.auth_service = auth_service
        self.session = session
        self.identifier = ""
        self.password = ""
        self.error: Optional[str] = None
        self.busy = False

    @property
    def can_submit(self) -> bool:
        return bool(self.identifier) and bool(self.password) and not self.busy

    async def submit(self) -> Optional[Account]:
        """
        Attempt to sign in.

        Returns:
            The account on success; None when rejected, with ``error`` set
        """
        self.error = None
        if not self.identifier or not self.password or self.busy:
            return None

        self.busy = True
        try:
            account = await self.auth_service.sign_in(self.identifier, self.password)
        except BackendError as e:
            self.error = sign_in_message(e)
            return None
        except Exception as e:
            logger.error(f"Sign-in failed unexpectedly: {e}", exc_info=True)
            self.error = str(e)
            return None
        finally:
            self.busy = False

        await self.session.signed_in(account)
        return account


class RegistrationForm:
    """
    Sign-up form with two message regions.

    Local rule messages show once a submission was tried; backend
    messages replace them in the same region.
    """

    def __init__(self, registration_service: RegistrationService, session: AppSession):
        self.registration_service = registration_service
        self.session = session
        self.username = ""
        self.email = ""
        self.password = ""
        self.confirm_password = ""

        self.tried_submit = False
        self.basic_error: Optional[str] = None
        self.password_error: Optional[str] = None
        self.busy = False
        self.completed = False

    def local_errors(self) -> Dict[FormRegion, str]:
        """First failing local rule of each region."""
        return errors_by_region(
            validate_registration(self.username, self.email, self.password, self.confirm_password)
        )

    @property
    def is_valid(self) -> bool:
        return not self.local_errors()

    def region_message(self, region: FormRegion) -> Optional[str]:
        """The single message to render in ``region``, if any."""
        backend = self.basic_error if region == FormRegion.BASIC_INFO else self.password_error
        if backend:
            return backend
        if self.tried_submit:
            return self.local_errors().get(region)
        return None

    async def submit(self) -> Optional[Account]:
        """
        Attempt to register.

        Returns:
            The unverified account on success; None otherwise
        """
        self.tried_submit = True
        self.basic_error = None
        self.password_error = None
        if self.busy or not self.is_valid:
            return None

        self.busy = True
        try:
            account = await self.registration_service.register(
                self.username, self.email, self.password, self.confirm_password
            )
        except DirectoryConflictError:
            self.basic_error = USERNAME_TAKEN_MESSAGE
            return None
        except BackendError as e:
            region, message = registration_message(e)
            self._set_region_error(region, message)
            return None
        except PartialRegistrationError as e:
            if isinstance(e.cause, DirectoryConflictError):
                self.basic_error = USERNAME_TAKEN_MESSAGE
            else:
                self.basic_error = e.message
            return None
        except ValidationError as e:
            self._set_region_error(e.region or FormRegion.BASIC_INFO, e.message)
            return None
        except Exception as e:
            logger.error(f"Registration failed unexpectedly: {e}", exc_info=True)
            self.basic_error = str(e)
            return None
        finally:
            self.busy = False

        self.completed = True
        self.session.account_updated(account)
        return account

    def _set_region_error(self, region: FormRegion, message: str) -> None:
        if region == FormRegion.PASSWORD:
            self.password_error = message
        else:
            self.basic_error = message


class VerifyEmailForm:
    """Verify-email screen: check, resend or sign out."""

    def __init__(self, auth_service: AuthService, session: AppSession):
        self.auth_service = auth_service
        self.session = session
        self.error: Optional[str] = None
        self.is_checking = False
        self.is_resending = False

    async def check_verified(self) -> bool:
        """Reload the account; route on to the plant once verified."""
        if self.session.account is None or self.is_checking:
            return False
        self.is_checking = True
        try:
            verified = await self.auth_service.check_email_verified()
        except FlowerException as e:
            self.error = RELOAD_FAILED_MESSAGE.format(reason=e.message)
            return False
        finally:
            self.is_checking = False

        if not verified:
            self.error = NOT_VERIFIED_MESSAGE
            return False
        self.error = None
        self.session.account_updated(self.auth_service.identity_provider.current_account())
        return True

    async def resend(self) -> bool:
        if self.session.account is None or self.is_resending:
            return False
        self.is_resending = True
        try:
            await self.auth_service.resend_verification()
        except FlowerException as e:
            self.error = RESEND_FAILED_MESSAGE.format(reason=e.message)
            return False
        finally:
            self.is_resending = False
        self.error = None
        return True

    async def sign_out(self) -> bool:
        try:
            await self.auth_service.sign_out()
        except FlowerException as e:
            self.error = SIGN_OUT_FAILED_MESSAGE.format(reason=e.message)
            return False
        self.session.signed_out()
        return True
