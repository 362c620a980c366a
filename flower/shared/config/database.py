# 📄 File: flower/shared/config/database.py
#
# 🧭 Purpose (Layman Explanation):
# Describes how the backend tables are named and organised so the migration tool
# can create them in the hosted Postgres database.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy declarative base and constraint naming convention used as alembic
# target metadata, plus the migration connection URL derived from settings.
#
# 🔗 Dependencies:
# - SQLAlchemy declarative base
# - flower.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - flower.modules.*.infrastructure.database.models
# - migrations/env.py

import os

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

from .settings import get_settings


# =============================================================================
# DATABASE MODELS BASE CLASS
# =============================================================================

# Naming convention for database constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=convention)


class DatabaseBase(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    The client never talks SQL; these models only describe the schema
    the Supabase tables are migrated to.
    """
    metadata = metadata


def get_migration_url() -> str:
    """
    Get the synchronous database URL alembic connects with.

    Returns:
        str: Database connection URL
    """
    database_url = os.getenv("DATABASE_URL") or get_settings().DATABASE_URL
    if not database_url:
        raise RuntimeError("DATABASE_URL must be set to run migrations")

    # Convert asyncpg URL to psycopg2 for Alembic compatibility
    if "postgresql+asyncpg://" in database_url:
        database_url = database_url.replace("postgresql+asyncpg://", "postgresql://")
    return database_url
