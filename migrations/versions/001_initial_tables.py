"""Create account and watering tables

Revision ID: 001
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# Row level security: the anon role may read the directory and register,
# every other read or write needs a signed-in account.
POLICIES = [
    ("usernames", "usernames_select_all", "SELECT", "true", None),
    ("usernames", "usernames_insert_all", "INSERT", None, "true"),
    ("users", "users_insert_all", "INSERT", None, "true"),
    ("users", "users_select_own", "SELECT", "auth.uid()::text = uid", None),
    ("users", "users_update_own", "UPDATE", "auth.uid()::text = uid", "auth.uid()::text = uid"),
    ("profiles", "profiles_select_authenticated", "SELECT", "auth.role() = 'authenticated'", None),
    ("profiles", "profiles_insert_own", "INSERT", None, "auth.uid()::text = uid"),
    ("profiles", "profiles_update_own", "UPDATE", "auth.uid()::text = uid", "auth.uid()::text = uid"),
    ("waterings", "waterings_select_authenticated", "SELECT", "auth.role() = 'authenticated'", None),
    ("waterings", "waterings_insert_own", "INSERT", None, "auth.uid()::text = user_id"),
]


def upgrade() -> None:
    """Create account and watering tables"""

    # 1. Username directory (primary key closes the registration race)
    op.create_table('usernames',
        sa.Column('username_lc', sa.String(20), nullable=False),
        sa.Column('uid', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('username_lc', name='pk_usernames'),
        sa.CheckConstraint("username_lc ~ '^[a-z0-9_]{3,20}$'", name='ck_usernames_username_lc_format'),
    )
    op.create_index('ix_usernames_uid', 'usernames', ['uid'])

    # 2. Private user records
    op.create_table('users',
        sa.Column('uid', sa.Text(), nullable=False),
        sa.Column('username', sa.String(20), nullable=False),
        sa.Column('username_lc', sa.String(20), nullable=False),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('uid', name='pk_users'),
    )

    # 3. Public profiles
    op.create_table('profiles',
        sa.Column('uid', sa.Text(), nullable=False),
        sa.Column('username', sa.String(20), nullable=False),

        sa.PrimaryKeyConstraint('uid', name='pk_profiles'),
    )

    # 4. Watering events (append-only, server timestamp)
    op.create_table('waterings',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('couple_id', sa.Text(), nullable=False),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id', name='pk_waterings'),
    )
    op.create_index('ix_waterings_couple_id_timestamp', 'waterings', ['couple_id', 'timestamp'])

    # 5. Row level security
    for table in ('usernames', 'users', 'profiles', 'waterings'):
        op.execute(f'ALTER TABLE public.{table} ENABLE ROW LEVEL SECURITY')

    for table, name, command, using, check in POLICIES:
        statement = f'CREATE POLICY {name} ON public.{table} FOR {command}'
        if using:
            statement += f' USING ({using})'
        if check:
            statement += f' WITH CHECK ({check})'
        op.execute(statement)

    # 6. Live inserts for the watering feeds
    op.execute('ALTER PUBLICATION supabase_realtime ADD TABLE public.waterings')


def downgrade() -> None:
    """Drop account and watering tables"""
    op.execute('ALTER PUBLICATION supabase_realtime DROP TABLE public.waterings')

    for table, name, _command, _using, _check in reversed(POLICIES):
        op.execute(f'DROP POLICY IF EXISTS {name} ON public.{table}')

    op.drop_index('ix_waterings_couple_id_timestamp', table_name='waterings')
    op.drop_table('waterings')
    op.drop_table('profiles')
    op.drop_table('users')
    op.drop_index('ix_usernames_uid', table_name='usernames')
    op.drop_table('usernames')
