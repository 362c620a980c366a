# 📄 File: flower/modules/accounts/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Describes the three account tables in the hosted database: the username "phone book",
# the private user records and the public profiles partners read.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM models describing the usernames, users and profiles tables. They are the
# alembic target metadata; the client itself reaches these tables through PostgREST.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM column types
# - flower.shared.config.database (declarative base)
#
# 🔄 Connected Modules / Calls From:
# - migrations/env.py (target metadata)
# - Repository implementations (table names)

"""
SQLAlchemy Models for Accounts

Models:
- UsernameModel: username directory, keyed by the lowercased username
- UserRecordModel: private record written at registration
- ProfileModel: public username record read by partners

Account ids are issued by Supabase Auth (auth.users.id) and stored as text
so the tables stay independent of the auth schema.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, String, Text
from sqlalchemy.sql import func

from flower.shared.config.database import DatabaseBase


# =============================================================================
# USERNAME DIRECTORY
# =============================================================================

class UsernameModel(DatabaseBase):
    """
    Username directory entry.

    The primary key on ``username_lc`` makes a second reservation of the
    same username fail at insert time.
    """
    __tablename__ = "usernames"

    username_lc = Column(String(20), primary_key=True)
    uid = Column(Text, nullable=False, index=True)
    email = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("username_lc ~ '^[a-z0-9_]{3,20}$'", name="username_lc_format"),
    )

    def __repr__(self) -> str:
        return f"<UsernameModel(username_lc={self.username_lc}, uid={self.uid})>"


# =============================================================================
# USER RECORDS
# =============================================================================

class UserRecordModel(DatabaseBase):
    """Private per-account record."""
    __tablename__ = "users"

    uid = Column(Text, primary_key=True)
    username = Column(String(20), nullable=False)
    username_lc = Column(String(20), nullable=False)
    email = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<UserRecordModel(uid={self.uid}, username={self.username})>"


# =============================================================================
# PUBLIC PROFILES
# =============================================================================

class ProfileModel(DatabaseBase):
    """Public profile: only the username is exposed."""
    __tablename__ = "profiles"

    uid = Column(Text, primary_key=True)
    username = Column(String(20), nullable=False)

    def __repr__(self) -> str:
        return f"<ProfileModel(uid={self.uid}, username={self.username})>"
