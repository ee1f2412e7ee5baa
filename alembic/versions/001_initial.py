"""Initial revision: users table.

Revision ID: 001_initial
Revises:
Create Date: 2025-11-15

Startup runs Base.metadata.create_all before migrations, so every statement
uses IF NOT EXISTS and is a no-op on a database create_all already built.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    conn = op.get_bind()
    conn.execute(
        sa.text(
            """
            CREATE TABLE IF NOT EXISTS users (
                id VARCHAR(36) PRIMARY KEY,
                email VARCHAR NOT NULL,
                hashed_password VARCHAR,
                supabase_id VARCHAR,
                subscription_plan VARCHAR NOT NULL DEFAULT 'free',
                subscription_status VARCHAR NOT NULL DEFAULT 'inactive',
                subscription_expires_at TIMESTAMP WITH TIME ZONE,
                subscription_purchased_at TIMESTAMP WITH TIME ZONE,
                last_sync_at TIMESTAMP WITH TIME ZONE,
                created_at TIMESTAMP WITH TIME ZONE DEFAULT now(),
                updated_at TIMESTAMP WITH TIME ZONE
            );
            """
        )
    )
    conn.execute(sa.text("CREATE UNIQUE INDEX IF NOT EXISTS ix_users_email ON users (email);"))
    conn.execute(sa.text("CREATE UNIQUE INDEX IF NOT EXISTS ix_users_supabase_id ON users (supabase_id);"))


def downgrade() -> None:
    op.drop_table("users")
