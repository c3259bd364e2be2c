"""Add wake_arrivals.display_name and ledger_state.last_closed

Revision ID: 9d3a6f1c2e85
Revises: 4c2e9a7d1b30
Create Date: 2026-10-20 10:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "9d3a6f1c2e85"
down_revision: str | Sequence[str] | None = "4c2e9a7d1b30"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Keep names of non-first wake arrivals and the last closed month."""
    with op.batch_alter_table("wake_arrivals") as batch_op:
        batch_op.add_column(sa.Column("display_name", sa.String(100), nullable=True))

    with op.batch_alter_table("ledger_state") as batch_op:
        batch_op.add_column(sa.Column("last_closed", sa.JSON(), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("ledger_state") as batch_op:
        batch_op.drop_column("last_closed")

    with op.batch_alter_table("wake_arrivals") as batch_op:
        batch_op.drop_column("display_name")
