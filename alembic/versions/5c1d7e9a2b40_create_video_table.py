"""create video table

Revision ID: 5c1d7e9a2b40
Revises:
Create Date: 2026-10-19 10:12:31.204518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1d7e9a2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "video",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("public_id", sa.String(length=255), nullable=False),
        sa.Column("original_size", sa.Text(), nullable=True),
        sa.Column("compressed_size", sa.String(length=64), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False, server_default="0"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("ix_video_public_id", "video", ["public_id"], unique=True)


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_video_public_id", table_name="video")
    op.drop_table("video")
