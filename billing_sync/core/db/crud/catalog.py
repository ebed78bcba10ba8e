"""
CRUD operations for Product, Price and Subscription models.

"""

from billing_sync.core.db.crud.base import BaseDB
from billing_sync.core.db.models.product import Price, Product
from billing_sync.core.db.models.subscription import Subscription


class ProductDB(BaseDB[Product]):
    """CRUD operations for Product model."""

    def __init__(self):
        super().__init__(Product)


class PriceDB(BaseDB[Price]):
    """CRUD operations for Price model."""

    def __init__(self):
        super().__init__(Price)


class SubscriptionDB(BaseDB[Subscription]):
    """CRUD operations for Subscription model."""

    def __init__(self):
        super().__init__(Subscription)
