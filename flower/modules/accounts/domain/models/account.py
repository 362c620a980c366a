# 📄 File: flower/modules/accounts/domain/models/account.py
# 🧭 Purpose (Layman Explanation):
# Defines what an "account" is in the app: who you are (an id from the sign-in provider),
# your email, whether you clicked the verification link, and the username you picked.
# 🧪 Purpose (Technical Summary):
# Domain model for the identity-provider account plus the auth-state change notification,
# with helpers used by the session router to pick the screen to show.
# 🔗 Dependencies:
# pydantic, typing, enum
# 🔄 Connected Modules / Calls From:
# Identity provider adapters, auth service, registration service, app session

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Account(BaseModel):
    """
    Account issued by the identity provider.

    The provider owns ``uid``, ``email`` and ``email_verified``;
    ``display_name`` is the registered username set right after creation.
    """

    model_config = ConfigDict(frozen=True)

    uid: str = Field(..., min_length=1)
    email: Optional[str] = None
    email_verified: bool = False
    display_name: Optional[str] = None

    @property
    def username(self) -> Optional[str]:
        return self.display_name


class AuthEvent(str, Enum):
    """Auth-state transitions reported by the identity provider."""
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    USER_UPDATED = "user_updated"
    TOKEN_REFRESHED = "token_refreshed"
    INITIAL_SESSION = "initial_session"
