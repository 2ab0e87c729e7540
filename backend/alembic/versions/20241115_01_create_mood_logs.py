"""Create mood_logs table.

Revision ID: 20241115_01
Revises: 20241101_01
Create Date: 2024-11-15 00:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20241115_01"
down_revision = "20241101_01"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "mood_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("mood", sa.String(length=16), nullable=False),
        sa.Column("factors", sa.JSON(), nullable=False),
        sa.Column("journal", sa.Text(), nullable=False, server_default=""),
        sa.Column("sentiment", sa.String(length=64), nullable=False, server_default="Neutral"),
        sa.Column("confidence", sa.Float(), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True, server_default=sa.func.now()),
    )
    op.create_index("ix_mood_logs_user_id_date", "mood_logs", ["user_id", "date"])


def downgrade() -> None:
    op.drop_index("ix_mood_logs_user_id_date", table_name="mood_logs")
    op.drop_table("mood_logs")
