"""
Accounts Database Layer

- Models: SQLAlchemy schema of usernames, users and profiles (alembic target)
- Repositories: Supabase PostgREST implementations of the domain interfaces
"""
