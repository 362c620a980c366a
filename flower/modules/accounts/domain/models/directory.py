# 📄 File: flower/modules/accounts/domain/models/directory.py
# 🧭 Purpose (Layman Explanation):
# The records that sit next to an account: the username "phone book" entry that lets people
# log in by username, the private user record, and the public profile partners can read.
# 🧪 Purpose (Technical Summary):
# Pydantic domain models for the username directory entry, user record and public profile,
# with key normalization (lowercased usernames) and backend row mapping.
# 🔗 Dependencies:
# pydantic, datetime, typing
# 🔄 Connected Modules / Calls From:
# Username directory, registration service, profile service, reconciler, repository impls

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_username(username: str) -> str:
    """Directory key for a username: trimmed and lowercased."""
    return username.strip().lower()


class UsernameEntry(BaseModel):
    """
    Username directory entry, keyed by the lowercased username.

    ``email`` is a redundant copy of the account email so that a
    username can be resolved to a sign-in email without the account.
    """

    model_config = ConfigDict(frozen=True)

    username_lc: str = Field(..., min_length=1)
    uid: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None  # server-assigned

    @field_validator('username_lc')
    @classmethod
    def validate_key(cls, v: str) -> str:
        return normalize_username(v)

    def to_row(self) -> Dict[str, Any]:
        """Row to insert; created_at is left to the server default."""
        return {"username_lc": self.username_lc, "uid": self.uid, "email": self.email}


class UserRecord(BaseModel):
    """Private per-account record written at registration."""

    model_config = ConfigDict(frozen=True)

    uid: str
    username: str
    username_lc: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def for_registration(cls, uid: str, username: str, email: str) -> "UserRecord":
        return cls(
            uid=uid,
            username=username,
            username_lc=normalize_username(username),
            email=email,
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "username": self.username,
            "username_lc": self.username_lc,
            "email": self.email,
        }


class Profile(BaseModel):
    """Public profile readable by every signed-in account."""

    model_config = ConfigDict(frozen=True)

    uid: str
    username: str

    def to_row(self) -> Dict[str, Any]:
        return {"uid": self.uid, "username": self.username}
