"""create_billing_tables

Revision ID: 4f2d9c1a7b3e
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "4f2d9c1a7b3e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

json_type = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column(
            "billing_address",
            json_type,
            nullable=True,
            comment="Customer billing address in Stripe's address shape",
        ),
        sa.Column(
            "payment_method",
            json_type,
            nullable=True,
            comment="Snapshot of the payment method block for its type (e.g. card)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "customers",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column(
            "stripe_customer_id",
            sa.String(length=255),
            nullable=True,
            comment="Stripe Customer ID (cus_...)",
        ),
        sa.ForeignKeyConstraint(["id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_customers_stripe_customer_id"),
        "customers",
        ["stripe_customer_id"],
        unique=True,
    )
    op.create_table(
        "products",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("metadata", json_type, nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "prices",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("product_id", sa.String(length=255), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=True),
        sa.Column(
            "currency",
            sa.String(length=3),
            nullable=True,
            comment="Three-letter ISO currency code, lowercase",
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "type",
            sa.Enum(
                "one_time", "recurring", name="pricing_type", native_enum=False
            ),
            nullable=True,
        ),
        sa.Column(
            "unit_amount",
            sa.BigInteger(),
            nullable=True,
            comment="Amount in the smallest currency unit",
        ),
        sa.Column(
            "interval",
            sa.Enum(
                "day",
                "week",
                "month",
                "year",
                name="pricing_plan_interval",
                native_enum=False,
            ),
            nullable=True,
        ),
        sa.Column("interval_count", sa.Integer(), nullable=True),
        sa.Column("trial_period_days", sa.Integer(), nullable=True),
        sa.Column("metadata", json_type, nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_prices_product_id"), "prices", ["product_id"], unique=False
    )
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("metadata", json_type, nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "trialing",
                "active",
                "canceled",
                "incomplete",
                "incomplete_expired",
                "past_due",
                "unpaid",
                "paused",
                name="subscription_status",
                native_enum=False,
            ),
            nullable=True,
        ),
        sa.Column("price_id", sa.String(length=255), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=True),
        sa.Column("cancel_at_period_end", sa.Boolean(), nullable=True),
        sa.Column("cancel_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("canceled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("current_period_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("current_period_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("trial_start", sa.DateTime(timezone=True), nullable=True),
        sa.Column("trial_end", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_subscriptions_user_id"), "subscriptions", ["user_id"], unique=False
    )
    op.create_index(
        op.f("ix_subscriptions_price_id"), "subscriptions", ["price_id"], unique=False
    )
    op.create_index(
        "ix_subscriptions_user_id_status",
        "subscriptions",
        ["user_id", "status"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_subscriptions_user_id_status", table_name="subscriptions")
    op.drop_index(op.f("ix_subscriptions_price_id"), table_name="subscriptions")
    op.drop_index(op.f("ix_subscriptions_user_id"), table_name="subscriptions")
    op.drop_table("subscriptions")
    op.drop_index(op.f("ix_prices_product_id"), table_name="prices")
    op.drop_table("prices")
    op.drop_table("products")
    op.drop_index(op.f("ix_customers_stripe_customer_id"), table_name="customers")
    op.drop_table("customers")
    op.drop_table("users")
