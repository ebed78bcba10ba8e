from billing_sync.sync.customers import create_or_retrieve_customer
from billing_sync.sync.mappers import (
    build_price_row,
    build_product_row,
    build_subscription_row,
)
from billing_sync.sync.records import (
    delete_price_record,
    delete_product_record,
    upsert_price_record,
    upsert_product_record,
)
from billing_sync.sync.subscriptions import (
    copy_billing_details_to_customer,
    manage_subscription_status_change,
)

__all__ = [
    # Mappers
    "build_price_row",
    "build_product_row",
    "build_subscription_row",
    # Customers
    "create_or_retrieve_customer",
    # Catalog records
    "delete_price_record",
    "delete_product_record",
    "upsert_price_record",
    "upsert_product_record",
    # Subscriptions
    "copy_billing_details_to_customer",
    "manage_subscription_status_change",
]
