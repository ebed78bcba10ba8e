"""
Normalized storage rows built from Stripe payloads.

Field names are the table's column names, so ``to_storage()`` can be handed
straight to the CRUD upsert.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from billing_sync.core.enums import PriceType, PricingInterval, SubscriptionStatus


class StorageRow(BaseModel):
    """Base schema for rows written to storage."""

    model_config = ConfigDict(from_attributes=True)

    id: str

    def to_storage(self) -> dict[str, Any]:
        """Return the row as column values, absent fields included as None."""
        return self.model_dump()


class ProductRow(StorageRow):
    """Schema for a ``products`` row."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "prod_NWjs8kKbJWmuuc",
                "active": True,
                "name": "Gold Plan",
                "description": None,
                "image": None,
                "metadata": {},
            }
        }
    )

    active: bool
    name: str
    description: str | None = None
    image: str | None = None
    metadata: dict[str, Any] = {}


class PriceRow(StorageRow):
    """Schema for a ``prices`` row."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "price_1MoBy5LkdIwHu7ixZhnattbh",
                "product_id": "prod_NWjs8kKbJWmuuc",
                "active": True,
                "currency": "usd",
                "description": None,
                "type": "recurring",
                "unit_amount": 1000,
                "interval": "month",
                "interval_count": 1,
                "trial_period_days": None,
                "metadata": {},
            }
        }
    )

    product_id: str
    active: bool
    currency: str
    description: str | None = None
    type: PriceType
    unit_amount: int | None = None
    interval: PricingInterval | None = None
    interval_count: int | None = None
    trial_period_days: int | None = None
    metadata: dict[str, Any] = {}


class SubscriptionRow(StorageRow):
    """
    Schema for a ``subscriptions`` row.

    Timestamps are ISO-8601 strings; optional ones are None when Stripe does
    not report them.
    """

    user_id: str
    metadata: dict[str, Any] = {}
    status: SubscriptionStatus
    price_id: str | None = None
    quantity: int | None = None
    cancel_at_period_end: bool = False
    cancel_at: str | None = None
    canceled_at: str | None = None
    current_period_start: str
    current_period_end: str
    created: str
    ended_at: str | None = None
    trial_start: str | None = None
    trial_end: str | None = None


__all__ = ["StorageRow", "ProductRow", "PriceRow", "SubscriptionRow"]
