from billing_sync.core.db.crud.base import BaseDB
from billing_sync.core.db.crud.catalog import PriceDB, ProductDB, SubscriptionDB
from billing_sync.core.db.crud.customer import CustomerDB, UserDB

# Global CRUD instances - use these instead of creating new instances
product_db = ProductDB()
price_db = PriceDB()
subscription_db = SubscriptionDB()
customer_db = CustomerDB()
user_db = UserDB()

__all__ = [
    # Classes (for type hints and subclassing)
    "BaseDB",
    "CustomerDB",
    "PriceDB",
    "ProductDB",
    "SubscriptionDB",
    "UserDB",
    # Global instances (for actual usage)
    "customer_db",
    "price_db",
    "product_db",
    "subscription_db",
    "user_db",
]
