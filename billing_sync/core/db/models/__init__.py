from billing_sync.core.db.models.product import Price, Product
from billing_sync.core.db.models.subscription import Subscription
from billing_sync.core.db.models.user import Customer, User

__all__ = [
    "Customer",
    "Price",
    "Product",
    "Subscription",
    "User",
]
