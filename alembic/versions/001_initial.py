"""Initial schema: spaces, media, users, payments.

App startup also runs Base.metadata.create_all before upgrading, so each
table is only created here when it does not exist yet.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _has_table(name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def upgrade() -> None:
    if not _has_table("spaces"):
        op.create_table(
            "spaces",
            sa.Column("id", sa.String(32), primary_key=True),
            sa.Column("url_slug", sa.String(), nullable=False),
            sa.Column("user_id", sa.String(), nullable=False),
            sa.Column("first_name", sa.String(), nullable=False),
            sa.Column("last_name", sa.String(), nullable=False),
            sa.Column("partner_first_name", sa.String(), nullable=False),
            sa.Column("partner_last_name", sa.String(), nullable=False),
            sa.Column("event_date", sa.DateTime(), nullable=False),
            sa.Column("event_type", sa.String(), nullable=True),
            sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("plan", sa.String(), nullable=False, server_default="basic"),
            sa.Column("created_at", sa.DateTime(), nullable=False),
        )
        op.create_index("ix_spaces_url_slug", "spaces", ["url_slug"], unique=True)
        op.create_index("ix_spaces_user_id", "spaces", ["user_id"])

    if not _has_table("media"):
        op.create_table(
            "media",
            sa.Column("id", sa.String(32), primary_key=True),
            sa.Column("space_id", sa.String(32), sa.ForeignKey("spaces.id", ondelete="CASCADE"), nullable=False),
            sa.Column("file_name", sa.String(), nullable=False),
            sa.Column("file_url", sa.String(), nullable=False),
            sa.Column("file_type", sa.String(), nullable=False),
            sa.Column("file_size", sa.BigInteger(), nullable=False, server_default="0"),
            sa.Column("uploaded_by", sa.String(), nullable=False, server_default="Guest"),
            sa.Column("uploaded_at", sa.DateTime(), nullable=False),
        )
        op.create_index("ix_media_space_id", "media", ["space_id"])
        op.create_index("ix_media_uploaded_at", "media", ["uploaded_at"])

    if not _has_table("users"):
        op.create_table(
            "users",
            sa.Column("uid", sa.String(), primary_key=True),
            sa.Column("email", sa.String(), nullable=True),
            sa.Column("display_name", sa.String(), nullable=True),
            sa.Column("payment_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        )
        op.create_index("ix_users_email", "users", ["email"], unique=True)

    if not _has_table("payments"):
        op.create_table(
            "payments",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("reference", sa.String(), nullable=False),
            sa.Column("email", sa.String(), nullable=False),
            sa.Column("user_uid", sa.String(), sa.ForeignKey("users.uid", ondelete="SET NULL"), nullable=True),
            sa.Column("plan", sa.String(), nullable=True),
            sa.Column("amount", sa.Numeric(12, 2), nullable=True),
            sa.Column("currency", sa.String(), nullable=True),
            sa.Column("status", sa.String(), nullable=False, server_default="success"),
            sa.Column("paid_at", sa.DateTime(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
        )
        op.create_index("ix_payments_reference", "payments", ["reference"], unique=True)
        op.create_index("ix_payments_email", "payments", ["email"])


def downgrade() -> None:
    op.drop_table("payments")
    op.drop_table("media")
    op.drop_table("spaces")
    op.drop_table("users")
