# 📄 File: flower/modules/accounts/presentation/messages.py
# 🧭 Purpose (Layman Explanation):
# The exact sentences shown to people when signing in or signing up goes wrong, and which part
# of the form each sentence appears in.
#
# 🧪 Purpose (Technical Summary):
# Maps BackendErrorCode values and directory conflicts to one human-readable message and the
# form region it belongs to. Unclassified failures keep the provider's own text.
#
# 🔗 Dependencies:
# flower.shared.core.exceptions
#
# 🔄 Connected Modules / Calls From:
# Sign-in, registration and verify-email forms

from typing import Dict, Tuple

from flower.shared.core.exceptions import BackendError, BackendErrorCode, FormRegion

USERNAME_TAKEN_MESSAGE = "This username is already taken, please choose another"
NOT_VERIFIED_MESSAGE = (
    "Your email is still not verified. Open the link we sent you, "
    "then tap \"I have verified my email\"."
)
RESEND_FAILED_MESSAGE = "Failed to send the verification email: {reason}"
RELOAD_FAILED_MESSAGE = "Failed to refresh your account: {reason}"
SIGN_OUT_FAILED_MESSAGE = "Failed to sign out: {reason}"

SIGN_IN_MESSAGES: Dict[BackendErrorCode, str] = {
    BackendErrorCode.INVALID_CREDENTIALS: "Wrong username, email or password, please try again",
    BackendErrorCode.WRONG_PASSWORD: "Wrong password, please try again",
    BackendErrorCode.INVALID_EMAIL: "Email address is not valid",
    BackendErrorCode.USER_NOT_FOUND: "User does not exist",
    BackendErrorCode.USER_DISABLED: "This account has been disabled",
    BackendErrorCode.TOO_MANY_REQUESTS: "Too many attempts, please try again later",
    BackendErrorCode.EMAIL_NOT_VERIFIED: "Please verify your email before signing in",
}

REGISTRATION_MESSAGES: Dict[BackendErrorCode, Tuple[FormRegion, str]] = {
    BackendErrorCode.EMAIL_ALREADY_IN_USE: (FormRegion.BASIC_INFO, "This email is already registered"),
    BackendErrorCode.INVALID_EMAIL: (FormRegion.BASIC_INFO, "Email address is not valid"),
    BackendErrorCode.WEAK_PASSWORD: (FormRegion.PASSWORD, "Password is too weak, use at least 6 characters"),
    BackendErrorCode.TOO_MANY_REQUESTS: (FormRegion.BASIC_INFO, "Too many attempts, please try again later"),
}


def sign_in_message(error: BackendError) -> str:
    return SIGN_IN_MESSAGES.get(error.code, error.message)


def registration_message(error: BackendError) -> Tuple[FormRegion, str]:
    """Region and message of a provider error raised while registering."""
    return REGISTRATION_MESSAGES.get(error.code, (FormRegion.BASIC_INFO, error.message))
