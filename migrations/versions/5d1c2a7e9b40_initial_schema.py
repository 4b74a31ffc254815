"""initial schema

Revision ID: 5d1c2a7e9b40
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5d1c2a7e9b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create devices, beats and absences."""
    op.create_table(
        "devices",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("token", sa.Text(), nullable=False),
        sa.Column("beat_count", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token"),
    )
    op.create_table(
        "beats",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("device_id", sa.Integer(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["device_id"], ["devices.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_beats_device_timestamp", "beats", ["device_id", "timestamp"])
    op.create_table(
        "absences",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("device_id", sa.Integer(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("begin_beat_id", sa.Integer(), nullable=False),
        sa.Column("end_beat_id", sa.Integer(), nullable=False),
        sa.CheckConstraint("duration >= 3600", name="ck_absences_threshold"),
        sa.ForeignKeyConstraint(["device_id"], ["devices.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["begin_beat_id"], ["beats.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["end_beat_id"], ["beats.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("begin_beat_id", "end_beat_id", name="uq_absences_beat_pair"),
    )
    op.create_index("ix_absences_device_timestamp", "absences", ["device_id", "timestamp"])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_absences_device_timestamp", table_name="absences")
    op.drop_table("absences")
    op.drop_index("ix_beats_device_timestamp", table_name="beats")
    op.drop_table("beats")
    op.drop_table("devices")
