# 📄 File: flower/shared/utils/validators.py
# 🧭 Purpose (Layman Explanation):
# This file contains the checks run on what people type into the sign-up form
# (username shape, email shape, password length, matching confirmation) before anything is sent.
# 🧪 Purpose (Technical Summary):
# Local, pre-network validation functions for registration input returning ValidationResult
# objects, plus a form-level aggregator that scopes every failure to its field and form region.
# 🔗 Dependencies:
# re, typing, flower.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Registration service, registration form view-model

import re
from typing import Dict, List, Optional

from flower.shared.core.exceptions import FormRegion, ValidationError

USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9_]{3,20}$')
PASSWORD_MIN_LENGTH = 6

USERNAME_MESSAGE = "Username must be 3-20 letters, digits or underscores"
EMAIL_MESSAGE = "Email address does not look valid"
PASSWORD_MESSAGE = f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
CONFIRM_MESSAGE = "Passwords do not match"

# Field -> form region the message is rendered in
FIELD_REGIONS = {
    'username': FormRegion.BASIC_INFO,
    'email': FormRegion.BASIC_INFO,
    'password': FormRegion.PASSWORD,
    'confirm_password': FormRegion.PASSWORD,
}


class ValidationResult:
    """Result object for validation operations"""
    def __init__(self, is_valid: bool, errors: List[str] = None):
        self.is_valid = is_valid
        self.errors = errors or []

    def add_error(self, error: str):
        """Add validation error"""
        self.errors.append(error)
        self.is_valid = False

    @property
    def error_message(self) -> Optional[str]:
        return self.errors[0] if self.errors else None


def validate_username(username: str) -> ValidationResult:
    """
    Validate username format.

    Args:
        username: Username as typed (surrounding whitespace ignored)

    Returns:
        ValidationResult with validation status and errors
    """
    result = ValidationResult(True)
    if not isinstance(username, str) or not USERNAME_PATTERN.match(username.strip()):
        result.add_error(USERNAME_MESSAGE)
    return result


def validate_email_address(email: str) -> ValidationResult:
    """
    Validate email address shape.

    Only requires an '@' and a '.'; the identity provider is the
    authority on deliverability.
    """
    result = ValidationResult(True)
    trimmed = email.strip() if isinstance(email, str) else ""
    if "@" not in trimmed or "." not in trimmed:
        result.add_error(EMAIL_MESSAGE)
    return result


def validate_password(password: str) -> ValidationResult:
    """Validate password length."""
    result = ValidationResult(True)
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        result.add_error(PASSWORD_MESSAGE)
    return result


def validate_confirmation(password: str, confirm_password: str) -> ValidationResult:
    """Confirmation must be non-empty and equal to the password."""
    result = ValidationResult(True)
    if not confirm_password or confirm_password != password:
        result.add_error(CONFIRM_MESSAGE)
    return result


def validate_registration(
    username: str,
    email: str,
    password: str,
    confirm_password: str
) -> List[ValidationError]:
    """
    Run every registration precondition.

    Returns:
        Field-scoped ValidationError instances in form order; empty when valid
    """
    checks = [
        ('username', validate_username(username), 'pattern'),
        ('email', validate_email_address(email), 'email_shape'),
        ('password', validate_password(password), 'min_length'),
        ('confirm_password', validate_confirmation(password, confirm_password), 'equals_password'),
    ]

    errors = []
    for field, result, constraint in checks:
        if not result.is_valid:
            errors.append(ValidationError(
                message=result.error_message,
                field=field,
                constraint=constraint,
                region=FIELD_REGIONS[field]
            ))
    return errors


def errors_by_region(errors: List[ValidationError]) -> Dict[FormRegion, str]:
    """Keep the first message of each region (one message per region)."""
    messages: Dict[FormRegion, str] = {}
    for error in errors:
        if error.region not in messages:
            messages[error.region] = error.message
    return messages
