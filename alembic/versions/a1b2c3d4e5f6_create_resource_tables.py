"""Create pages, blocks and users tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _record_columns() -> list[sa.Column]:
    """Columns shared by every bridgeable resource table."""
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("url", sa.String(), nullable=False),
        sa.Column("library", sa.String(), nullable=True),
        sa.Column("extra", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _record_indexes(table: str) -> None:
    op.create_index(op.f(f"ix_{table}_id"), table, ["id"], unique=False)
    op.create_index(op.f(f"ix_{table}_url"), table, ["url"], unique=True)
    op.create_index(op.f(f"ix_{table}_library"), table, ["library"], unique=False)


def upgrade() -> None:
    op.create_table(
        "pages",
        *_record_columns(),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _record_indexes("pages")
    op.create_index(op.f("ix_pages_title"), "pages", ["title"], unique=False)

    op.create_table(
        "blocks",
        *_record_columns(),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("block_type", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _record_indexes("blocks")
    op.create_index(op.f("ix_blocks_title"), "blocks", ["title"], unique=False)
    op.create_index(op.f("ix_blocks_block_type"), "blocks", ["block_type"], unique=False)

    op.create_table(
        "users",
        *_record_columns(),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    _record_indexes("users")
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)


def downgrade() -> None:
    op.drop_table("users")
    op.drop_table("blocks")
    op.drop_table("pages")
