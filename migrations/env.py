# 📄 File: migrations/env.py
# 🧭 Purpose (Layman Explanation):
# Tells the migration tool how to reach the hosted database and which tables the app needs,
# so the tables can be created the same way on every project.
# 🧪 Purpose (Technical Summary):
# Alembic environment for the Supabase Postgres schema of the flower client: imports the
# declarative models as target metadata and skips Supabase's own schemas.
# 🔗 Dependencies:
# - alembic (migration tool)
# - SQLAlchemy (engine, metadata)
# - python-dotenv (environment variables)
# 🔄 Connected Modules / Calls From:
# - alembic CLI commands (upgrade, downgrade, revision)

import os
import sys
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool

# Load environment variables
load_dotenv()

# Make the flower package importable when alembic runs from the repository root
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from flower.shared.config.database import DatabaseBase, get_migration_url  # noqa: E402

# Import all module models to ensure they're included in autogenerate
from flower.modules.accounts.infrastructure.database.models import (  # noqa: E402,F401
    ProfileModel,
    UserRecordModel,
    UsernameModel,
)
from flower.modules.watering.infrastructure.database.models import WateringModel  # noqa: E402,F401

# This is the Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Set the target metadata for 'autogenerate' support
target_metadata = DatabaseBase.metadata

SUPABASE_SCHEMAS = ['auth', 'storage', 'realtime', 'vault', 'extensions', 'graphql', 'graphql_public']


def include_object(object, name, type_, reflected, compare_to):
    """
    Filter objects to include in migrations.

    Supabase manages its own schemas; only the public tables of the
    app are compared.
    """
    schema = getattr(object, 'schema', None)
    if schema in SUPABASE_SCHEMAS:
        return False
    if type_ == "table" and reflected and name not in target_metadata.tables:
        return False
    return True


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Emits the SQL script without connecting.
    """
    context.configure(
        url=get_migration_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against the database."""
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_migration_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        do_run_migrations(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
