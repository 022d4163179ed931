"""Initial schema for users, style preferences, and garment combinations."""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp_column(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("profile_image", sa.Text(), nullable=True),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "preferences",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("gender", sa.Text(), nullable=True),
        sa.Column("body_type", sa.Text(), nullable=True),
        sa.Column("body_shape", sa.Text(), nullable=True),
        sa.Column("main_style", sa.Text(), nullable=True),
        sa.Column("frequent_piece", sa.Text(), nullable=True),
        sa.Column("preferred_color", sa.Text(), nullable=True),
        sa.Column("style_to_avoid", sa.Text(), nullable=True),
        sa.Column("common_occasion", sa.Text(), nullable=True),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.UniqueConstraint("user_id", name="uq_preferences_user_id"),
    )

    op.create_table(
        "combinations",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("upper_image", sa.Text(), nullable=False),
        sa.Column("lower_image", sa.Text(), nullable=False),
        _timestamp_column("created_at"),
    )
    op.create_index(
        "ix_combinations_user_id_created_at",
        "combinations",
        ["user_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_combinations_user_id_created_at", table_name="combinations")
    op.drop_table("combinations")
    op.drop_table("preferences")
    op.drop_table("users")
