"""users, tokens, hoaxes, file attachments

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(32), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("inactive", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("activation_token", sa.String(64), nullable=True),
        sa.Column("password_reset_token", sa.String(64), nullable=True),
        sa.Column("image", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_activation_token", "users", ["activation_token"])
    op.create_index("ix_users_password_reset_token", "users", ["password_reset_token"])

    op.create_table(
        "tokens",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("token", sa.String(128), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("issued_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_tokens_token", "tokens", ["token"], unique=True)
    op.create_index("ix_tokens_user_id", "tokens", ["user_id"])
    op.create_index("ix_tokens_user_issued", "tokens", ["user_id", "issued_at"])

    op.create_table(
        "hoaxes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("content", sa.String(5000), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    )
    op.create_index("ix_hoaxes_user_id", "hoaxes", ["user_id"])

    op.create_table(
        "file_attachments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("file_type", sa.String(100), nullable=True),
        sa.Column("upload_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("hoax_id", sa.Integer(), sa.ForeignKey("hoaxes.id", ondelete="SET NULL"), nullable=True),
    )
    op.create_index("ix_file_attachments_hoax_id", "file_attachments", ["hoax_id"])


def downgrade() -> None:
    op.drop_table("file_attachments")
    op.drop_table("hoaxes")
    op.drop_table("tokens")
    op.drop_table("users")
