"""
Product and Price models mirroring the Stripe catalog.

"""

from typing import Any

from sqlalchemy import BigInteger, Boolean, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from billing_sync.core.db.models.base import BaseModel, JSONType
from billing_sync.core.enums import PriceType, PricingInterval


class Product(BaseModel):
    """
    Model for Stripe products.

    Attributes:
        id: Stripe Product ID (prod_...).
        active: Whether the product is available for purchase.
        name: Display name.
        description: Optional description.
        image: First product image URL, if any.
        metadata_: Opaque Stripe metadata (stored in the ``metadata`` column).
    """

    __tablename__ = "products"

    active: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    name: Mapped[str | None] = mapped_column(Text, nullable=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    image: Mapped[str | None] = mapped_column(Text, nullable=True)

    metadata_: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSONType, nullable=True
    )


class Price(BaseModel):
    """
    Model for Stripe prices.

    ``product_id`` is deliberately not a foreign key: prices may be delivered
    before their product, and expanded product references are stored as "".
    """

    __tablename__ = "prices"

    product_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        default="",
    )

    active: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    currency: Mapped[str | None] = mapped_column(
        String(3),
        nullable=True,
        comment="Three-letter ISO currency code, lowercase",
    )

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    type: Mapped[PriceType | None] = mapped_column(
        Enum(
            PriceType,
            native_enum=False,
            name="pricing_type",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=True,
    )

    unit_amount: Mapped[int | None] = mapped_column(
        BigInteger,
        nullable=True,
        comment="Amount in the smallest currency unit",
    )

    interval: Mapped[PricingInterval | None] = mapped_column(
        Enum(
            PricingInterval,
            native_enum=False,
            name="pricing_plan_interval",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=True,
    )

    interval_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    trial_period_days: Mapped[int | None] = mapped_column(Integer, nullable=True)

    metadata_: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSONType, nullable=True
    )


__all__ = ["Product", "Price"]
