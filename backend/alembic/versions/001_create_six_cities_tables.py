"""Create users, offers, comments and favorites tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema. Primary keys are 24-character hex strings generated by
       the application (sixcities.database.generate_identifier).
Rollback: downgrade() drops all four tables (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID = sa.String(24)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", ID, nullable=False),
        sa.Column("name", sa.String(15), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("avatar", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("type", sa.String(16), nullable=False, server_default="ordinary"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "offers",
        sa.Column("id", ID, nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("city", sa.String(32), nullable=False),
        sa.Column("preview_image", sa.String(255), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("is_premium", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("bedrooms", sa.Integer(), nullable=False),
        sa.Column("max_adults", sa.Integer(), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("goods", sa.JSON(), nullable=False),
        sa.Column("comment_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("author_id", ID, nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_offers"),
        sa.ForeignKeyConstraint(
            ["author_id"], ["users.id"], name="fk_offers_author", ondelete="CASCADE"
        ),
    )
    op.create_index(
        "idx_offers_created_at", "offers", [sa.text("created_at DESC")], unique=False
    )
    op.create_index("idx_offers_city_premium", "offers", ["city", "is_premium"], unique=False)

    op.create_table(
        "comments",
        sa.Column("id", ID, nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("offer_id", ID, nullable=False),
        sa.Column("author_id", ID, nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_comments"),
        sa.ForeignKeyConstraint(
            ["offer_id"], ["offers.id"], name="fk_comments_offer", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["author_id"], ["users.id"], name="fk_comments_author", ondelete="CASCADE"
        ),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_comments_rating"),
    )
    op.create_index(
        "idx_comments_offer_created", "comments", ["offer_id", "created_at"], unique=False
    )

    op.create_table(
        "favorites",
        sa.Column("user_id", ID, nullable=False),
        sa.Column("offer_id", ID, nullable=False),
        sa.PrimaryKeyConstraint("user_id", "offer_id", name="pk_favorites"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_favorites_user", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["offer_id"], ["offers.id"], name="fk_favorites_offer", ondelete="CASCADE"
        ),
    )


def downgrade() -> None:
    op.drop_table("favorites")
    op.drop_index("idx_comments_offer_created", table_name="comments")
    op.drop_table("comments")
    op.drop_index("idx_offers_city_premium", table_name="offers")
    op.drop_index("idx_offers_created_at", table_name="offers")
    op.drop_table("offers")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
