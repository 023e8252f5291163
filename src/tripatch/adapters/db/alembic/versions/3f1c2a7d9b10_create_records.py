"""Create records table

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from tripatch.adapters.db.sa_types import BIGINT_PK

# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f1c2a7d9b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "records",
        sa.Column(
            "id",
            BIGINT_PK,
            sa.Identity(always=False, start=1),
            nullable=False,
            comment="Store-assigned identity. Never supplied by callers.",
        ),
        sa.Column(
            "internal_id",
            sa.BigInteger(),
            nullable=False,
            comment="Caller-assigned merge key; immutable after creation.",
        ),
        sa.Column("one", sa.String(), nullable=True),
        sa.Column("two", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_records")),
        sa.UniqueConstraint("internal_id", name=op.f("uq_records_internal_id")),
        comment="Partially-updatable records addressed by internal_id.",
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("records")
