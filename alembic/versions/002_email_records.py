"""Email audit log table, one row per (email, user_id).

Revision ID: 002_email_records
Revises: 001_initial
Create Date: 2025-12-02

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002_email_records"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    conn = op.get_bind()
    conn.execute(
        sa.text(
            """
            CREATE TABLE IF NOT EXISTS email_records (
                id SERIAL PRIMARY KEY,
                email VARCHAR NOT NULL,
                user_id VARCHAR(36) NOT NULL,
                source VARCHAR NOT NULL,
                timestamp TIMESTAMP WITH TIME ZONE NOT NULL
            );
            """
        )
    )
    for column in ("email", "user_id", "source", "timestamp"):
        conn.execute(
            sa.text(
                f"CREATE INDEX IF NOT EXISTS ix_email_records_{column} ON email_records ({column});"
            )
        )
    conn.execute(
        sa.text(
            """
            CREATE UNIQUE INDEX IF NOT EXISTS ix_email_records_email_user_id
            ON email_records (email, user_id);
            """
        )
    )


def downgrade() -> None:
    op.drop_table("email_records")
