"""
Subscription model mirroring the Stripe subscription of a local user.

"""

from typing import Any

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from billing_sync.core.db.models.base import BaseModel, ISODateTime, JSONType
from billing_sync.core.enums import SubscriptionStatus


class Subscription(BaseModel):
    """
    Model for Stripe subscriptions.

    Rows are always written whole from the authoritative Stripe object, so
    every column is replaced on upsert.

    Attributes:
        id: Stripe Subscription ID (sub_...).
        user_id: Local user owning the subscription.
        metadata_: Opaque Stripe metadata (stored in the ``metadata`` column).
        status: Current Stripe status.
        price_id: Price of the first subscription item.
        quantity: Subscribed quantity.
        cancel_at_period_end: Whether the subscription ends at period end.
        cancel_at: Scheduled cancellation time.
        canceled_at: When cancellation was requested.
        current_period_start: Start of current billing period.
        current_period_end: End of current billing period.
        created: When the subscription was created in Stripe.
        ended_at: When the subscription ended.
        trial_start: Trial period start (if applicable).
        trial_end: Trial period end (if applicable).
    """

    __tablename__ = "subscriptions"

    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    metadata_: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSONType, nullable=True
    )

    status: Mapped[SubscriptionStatus | None] = mapped_column(
        Enum(
            SubscriptionStatus,
            native_enum=False,
            name="subscription_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=True,
    )

    price_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
    )

    quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)

    cancel_at_period_end: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    cancel_at: Mapped[str | None] = mapped_column(ISODateTime, nullable=True)

    canceled_at: Mapped[str | None] = mapped_column(ISODateTime, nullable=True)

    current_period_start: Mapped[str] = mapped_column(ISODateTime, nullable=False)

    current_period_end: Mapped[str] = mapped_column(ISODateTime, nullable=False)

    created: Mapped[str] = mapped_column(ISODateTime, nullable=False)

    ended_at: Mapped[str | None] = mapped_column(ISODateTime, nullable=True)

    trial_start: Mapped[str | None] = mapped_column(ISODateTime, nullable=True)

    trial_end: Mapped[str | None] = mapped_column(ISODateTime, nullable=True)

    __table_args__ = (Index("ix_subscriptions_user_id_status", "user_id", "status"),)


__all__ = ["Subscription"]
