"""Initial schema: users, food_items, swaps, swap_messages

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("rating_sum", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("trust_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("items_shared", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("items_received", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "food_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("quantity_unit", sa.String(50), nullable=False, server_default="servings"),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("vegetarian", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("vegan", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("gluten_free", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("nut_free", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("dairy_free", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("original_price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("is_free", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_pickup_only", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("address", sa.String(500), nullable=False, server_default=""),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="available"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_food_items_owner_id", "food_items", ["owner_id"])
    op.create_index("ix_food_items_title", "food_items", ["title"])
    op.create_index("ix_food_items_status", "food_items", ["status"])
    op.create_index("ix_food_items_expires_at", "food_items", ["expires_at"])

    op.create_table(
        "swaps",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("requester_id", sa.Integer(), nullable=False),
        sa.Column("provider_id", sa.Integer(), nullable=False),
        sa.Column("food_item_id", sa.Integer(), nullable=False),
        sa.Column("offered_item_id", sa.Integer(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("is_swap", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_purchase", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("amount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("requester_rating", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("provider_rating", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("requester_review", sa.Text(), nullable=True),
        sa.Column("provider_review", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["requester_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["provider_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["food_item_id"], ["food_items.id"]),
        sa.ForeignKeyConstraint(["offered_item_id"], ["food_items.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_swaps_requester_id", "swaps", ["requester_id"])
    op.create_index("ix_swaps_provider_id", "swaps", ["provider_id"])
    op.create_index("ix_swaps_food_item_id", "swaps", ["food_item_id"])
    op.create_index("ix_swaps_status", "swaps", ["status"])

    op.create_table(
        "swap_messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("swap_id", sa.Integer(), nullable=False),
        sa.Column("sender_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["swap_id"], ["swaps.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_swap_messages_swap_id", "swap_messages", ["swap_id"])


def downgrade() -> None:
    op.drop_index("ix_swap_messages_swap_id", "swap_messages")
    op.drop_table("swap_messages")
    for name in ("status", "food_item_id", "provider_id", "requester_id"):
        op.drop_index(f"ix_swaps_{name}", "swaps")
    op.drop_table("swaps")
    for name in ("expires_at", "status", "title", "owner_id"):
        op.drop_index(f"ix_food_items_{name}", "food_items")
    op.drop_table("food_items")
    op.drop_index("ix_users_email", "users")
    op.drop_table("users")
