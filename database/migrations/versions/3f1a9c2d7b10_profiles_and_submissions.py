"""profiles and submissions

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-19 10:12:31.402118
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _money(name: str, nullable: bool = True) -> sa.Column:
    return sa.Column(name, sa.Numeric(14, 2, asdecimal=False), nullable=nullable)


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    ]


def upgrade() -> None:
    # 1) profiles (id = identity provider user id)
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("discord", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("role", sa.String(16), server_default=sa.text("'user'"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("role IN ('user','admin')", name=op.f("ck_profiles_role_valid")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_profiles")),
    )
    op.create_index("ix_profiles_role", "profiles", ["role"])

    # 2) submissions
    op.create_table(
        "submissions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        _money("revenue", nullable=False),
        _money("cost", nullable=False),
        _money("profit", nullable=False),
        sa.Column("product_name", sa.Text(), nullable=True),
        sa.Column("product_category", sa.Text(), nullable=True),
        sa.Column("product_brand", sa.Text(), nullable=True),
        sa.Column("product_sku", sa.Text(), nullable=True),
        sa.Column("marketplace", sa.String(32), server_default=sa.text("'amazon_us'"), nullable=False),
        sa.Column("reporting_period", sa.String(32), server_default=sa.text("'monthly'"), nullable=False),
        sa.Column("currency", sa.String(8), server_default=sa.text("'USD'"), nullable=False),
        _money("cogs"),
        _money("amazon_fees"),
        sa.Column("units_sold", sa.Integer(), nullable=True),
        _money("average_selling_price"),
        _money("ppc_spend"),
        _money("ppc_sales"),
        sa.Column("total_clicks", sa.Integer(), nullable=True),
        sa.Column("total_impressions", sa.Integer(), nullable=True),
        sa.Column("acos", sa.Float(), nullable=True),
        sa.Column("tacos", sa.Float(), nullable=True),
        sa.Column("profit_margin", sa.Float(), nullable=True),
        sa.Column("conversion_rate", sa.Float(), nullable=True),
        sa.Column("sessions", sa.Integer(), nullable=True),
        sa.Column("page_views", sa.Integer(), nullable=True),
        sa.Column("bsr", sa.Integer(), nullable=True),
        sa.Column("reviews_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("average_rating", sa.Float(), nullable=True),
        _money("inventory_value"),
        sa.Column("return_rate", sa.Float(), nullable=True),
        sa.Column("status", sa.String(16), server_default=sa.text("'pending'"), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("proof_url", sa.Text(), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("status IN ('pending','approved','rejected')", name=op.f("ck_submissions_status_valid")),
        sa.CheckConstraint("revenue >= 0", name=op.f("ck_submissions_revenue_non_negative")),
        sa.CheckConstraint("cost >= 0", name=op.f("ck_submissions_cost_non_negative")),
        sa.CheckConstraint("profit >= 0", name=op.f("ck_submissions_profit_non_negative")),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["profiles.id"],
            name=op.f("fk_submissions_user_id_profiles"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_submissions")),
    )
    op.create_index("ix_submissions_status_created", "submissions", ["status", "created_at"])
    op.create_index("ix_submissions_user", "submissions", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_submissions_user", table_name="submissions")
    op.drop_index("ix_submissions_status_created", table_name="submissions")
    op.drop_table("submissions")
    op.drop_index("ix_profiles_role", table_name="profiles")
    op.drop_table("profiles")
