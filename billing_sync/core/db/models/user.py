from typing import Any

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from billing_sync.core.db.models.base import BaseModel, JSONType


class User(BaseModel):
    """
    Local user profile keyed by the identity provider's user id.

    Only ``billing_address`` and ``payment_method`` are written by the sync
    layer, as a side effect of a first subscription.
    """

    __tablename__ = "users"

    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    billing_address: Mapped[dict[str, Any] | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="Customer billing address in Stripe's address shape",
    )

    payment_method: Mapped[dict[str, Any] | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="Snapshot of the payment method block for its type (e.g. card)",
    )


class Customer(BaseModel):
    """
    Mapping from a local user id to a Stripe customer id.

    Created at most once per user and read on every subscription event.
    """

    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    stripe_customer_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
        index=True,
        comment="Stripe Customer ID (cus_...)",
    )


__all__ = ["User", "Customer"]
