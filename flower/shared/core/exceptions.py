# 📄 File: flower/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines all the special error types the app uses to say what went wrong
# (a bad username, a taken name, a backend refusal) instead of generic error messages.
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy with error codes, details, form-region scoping and
# dictionary serialization for view-models and structured logging.
# 🔗 Dependencies:
# typing, enum
# 🔄 Connected Modules / Calls From:
# Domain services, Supabase adapters, presentation forms, watering screen

from enum import Enum
from typing import Any, Dict, Optional


class FormRegion(str, Enum):
    """UI region an error message is rendered in."""
    BASIC_INFO = "basic_info"      # username / email on the registration form
    PASSWORD = "password"          # password / confirmation on the registration form
    CREDENTIALS = "credentials"    # sign-in form
    VERIFICATION = "verification"  # verify-email screen


class BackendErrorCode(str, Enum):
    """Provider-reported failure classes the client distinguishes."""
    EMAIL_ALREADY_IN_USE = "email_already_in_use"
    INVALID_EMAIL = "invalid_email"
    WEAK_PASSWORD = "weak_password"
    INVALID_CREDENTIALS = "invalid_credentials"
    WRONG_PASSWORD = "wrong_password"
    USER_NOT_FOUND = "user_not_found"
    USER_DISABLED = "user_disabled"
    TOO_MANY_REQUESTS = "too_many_requests"
    EMAIL_NOT_VERIFIED = "email_not_verified"
    NOT_SIGNED_IN = "not_signed_in"
    UNKNOWN = "unknown"


class FlowerException(Exception):
    """
    Base exception class for the flower client.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
        region: Optional[FormRegion] = None
    ):
        self.message = message
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        self.region = region
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
                "region": self.region.value if self.region else None,
            }
        }


# =============================================================================
# VALIDATION & DIRECTORY EXCEPTIONS
# =============================================================================

class ValidationError(FlowerException):
    """
    Exception raised for local, pre-network input validation failures.
    Always scoped to a single field and the form region holding it.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        constraint: Optional[str] = None,
        region: Optional[FormRegion] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if field:
            details["field"] = field
        if constraint:
            details["constraint"] = constraint

        self.field = field
        super().__init__(
            message=message,
            details=details,
            error_code="VALIDATION_ERROR",
            region=region
        )


class NotFoundError(FlowerException):
    """
    Exception raised when a requested record is not found.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            details=details,
            error_code="NOT_FOUND"
        )


class DirectoryConflictError(FlowerException):
    """
    Exception raised when a username is already reserved in the directory.
    """

    def __init__(
        self,
        message: str = "Username is already taken",
        username: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if username:
            details["username"] = username

        super().__init__(
            message=message,
            details=details,
            error_code="DIRECTORY_CONFLICT",
            region=FormRegion.BASIC_INFO
        )


# =============================================================================
# BACKEND EXCEPTIONS
# =============================================================================

class BackendError(FlowerException):
    """
    Exception wrapping a failure reported by the identity provider or store.

    ``code`` classifies the failure; ``message`` keeps the provider's original
    text so generic failures can be shown verbatim.
    """

    def __init__(
        self,
        message: str = "Backend request failed",
        code: BackendErrorCode = BackendErrorCode.UNKNOWN,
        provider_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if provider_code:
            details["provider_code"] = provider_code

        self.code = code
        super().__init__(
            message=message,
            details=details,
            error_code=f"BACKEND_{code.name}"
        )


class WriteFailure(FlowerException):
    """
    Exception raised when a document write fails.

    Non-critical writes (profile caching, backfill) catch and log it;
    directory and event writes let it propagate.
    """

    def __init__(
        self,
        message: str = "Write failed",
        collection: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if collection:
            details["collection"] = collection
        if key:
            details["key"] = key

        super().__init__(
            message=message,
            details=details,
            error_code="WRITE_FAILURE"
        )


class PartialRegistrationError(FlowerException):
    """
    Exception raised when the account was created but a later registration
    step failed. The account can sign in; reconciliation repairs the rest.
    """

    def __init__(
        self,
        step: str,
        uid: str,
        cause: Exception,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        details["step"] = step
        details["uid"] = uid

        self.step = step
        self.uid = uid
        self.cause = cause
        super().__init__(
            message=str(getattr(cause, "message", cause)),
            details=details,
            error_code="PARTIAL_REGISTRATION",
            region=FormRegion.BASIC_INFO
        )
