"""Create snapshot tables: user_records, ledger_state, wake_arrivals

Revision ID: 4c2e9a7d1b30
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c2e9a7d1b30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the tables that hold ledger / wake tracker snapshots."""
    op.create_table(
        "user_records",
        sa.Column("user_id", sa.String(32), primary_key=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("month_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("year_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("best_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("best_monthly_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("best_yearly_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_award_date", sa.Date(), nullable=True),
        sa.Column("wake_first_current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("wake_first_best_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_wake_first_date", sa.Date(), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "ledger_state",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("current_month", sa.String(7), nullable=False),
        sa.Column("current_year", sa.Integer(), nullable=False),
        sa.Column("stake_per_player_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("player_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("wake_roster", sa.JSON(), nullable=True),
        sa.Column("wake_date", sa.Date(), nullable=True),
        sa.Column(
            "saved_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "wake_arrivals",
        sa.Column("user_id", sa.String(32), primary_key=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("arrived_at", sa.Time(), nullable=False),
    )


def downgrade() -> None:
    """Drop the snapshot tables."""
    op.drop_table("wake_arrivals")
    op.drop_table("ledger_state")
    op.drop_table("user_records")
