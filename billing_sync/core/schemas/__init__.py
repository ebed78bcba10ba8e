"""
Row schemas for the tables written by the sync layer.

"""

from billing_sync.core.schemas.rows import (
    PriceRow,
    ProductRow,
    SubscriptionRow,
)

__all__ = [
    "PriceRow",
    "ProductRow",
    "SubscriptionRow",
]
