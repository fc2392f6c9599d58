"""create accounts and postings

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00
"""

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "balance",
            sa.Numeric(precision=19, scale=4),
            nullable=False,
            server_default="0",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "postings",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(precision=19, scale=4), nullable=False),
        sa.Column("source_account_id", sa.Uuid(), nullable=False),
        sa.Column("destination_account_id", sa.Uuid(), nullable=False),
        sa.Column("category", sa.String(length=255), nullable=True),
        sa.Column("posting_date", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_postings_source_account_id"), "postings", ["source_account_id"]
    )
    op.create_index(
        op.f("ix_postings_destination_account_id"),
        "postings",
        ["destination_account_id"],
    )
    op.create_index(op.f("ix_postings_posting_date"), "postings", ["posting_date"])


def downgrade() -> None:
    op.drop_index(op.f("ix_postings_posting_date"), table_name="postings")
    op.drop_index(op.f("ix_postings_destination_account_id"), table_name="postings")
    op.drop_index(op.f("ix_postings_source_account_id"), table_name="postings")
    op.drop_table("postings")
    op.drop_table("accounts")
