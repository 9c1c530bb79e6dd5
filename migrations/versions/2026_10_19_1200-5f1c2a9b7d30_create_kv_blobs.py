"""create kv_blobs table

Revision ID: 5f1c2a9b7d30
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy_utils import UUIDType

# revision identifiers, used by Alembic.
revision = "5f1c2a9b7d30"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "kv_blobs",
        sa.Column("uuid", UUIDType(binary=False), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_kv_blobs_key", "kv_blobs", ["key"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_kv_blobs_key", table_name="kv_blobs")
    op.drop_table("kv_blobs")
