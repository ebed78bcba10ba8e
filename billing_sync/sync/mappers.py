"""
Projection of Stripe objects onto storage rows.

"""

from billing_sync.core.schemas.rows import PriceRow, ProductRow, SubscriptionRow
from billing_sync.core.services.payment.stripe.types import Price, Product, Subscription
from billing_sync.core.utils import to_optional_storage_date, to_storage_date


def build_product_row(product: Product) -> ProductRow:
    """
    Map a Stripe product to a ``products`` row.

    Only the first product image is kept.
    """
    return ProductRow(
        id=product.id,
        active=product.active,
        name=product.name,
        description=product.description or None,
        image=product.images[0] if product.images else None,
        metadata=product.metadata,
    )


def build_price_row(price: Price) -> PriceRow:
    """
    Map a Stripe price to a ``prices`` row.

    An expanded product reference is not resolved: ``product_id`` is only
    filled when Stripe sent the bare product id, and is "" otherwise.
    """
    recurring = price.recurring
    return PriceRow(
        id=price.id,
        product_id=price.product if isinstance(price.product, str) else "",
        active=price.active,
        currency=price.currency,
        description=price.nickname,
        type=price.type,
        unit_amount=price.unit_amount,
        interval=recurring.interval if recurring else None,
        interval_count=recurring.interval_count if recurring else None,
        trial_period_days=recurring.trial_period_days if recurring else None,
        metadata=price.metadata,
    )


def build_subscription_row(subscription: Subscription, user_id: str) -> SubscriptionRow:
    """
    Map a Stripe subscription to a ``subscriptions`` row owned by ``user_id``.

    The price is taken from the first subscription item. Quantity and period
    bounds fall back to that item when the subscription itself lacks them
    (see ``Subscription._fill_from_first_item``).
    """
    first_item = subscription.items.data[0] if subscription.items.data else None
    quantity = subscription.quantity
    if quantity is None and first_item is not None:
        quantity = first_item.quantity

    return SubscriptionRow(
        id=subscription.id,
        user_id=user_id,
        metadata=subscription.metadata,
        status=subscription.status,
        price_id=first_item.price.id if first_item else None,
        quantity=quantity,
        cancel_at_period_end=subscription.cancel_at_period_end,
        cancel_at=to_optional_storage_date(subscription.cancel_at),
        canceled_at=to_optional_storage_date(subscription.canceled_at),
        current_period_start=to_storage_date(subscription.current_period_start),
        current_period_end=to_storage_date(subscription.current_period_end),
        created=to_storage_date(subscription.created),
        ended_at=to_optional_storage_date(subscription.ended_at),
        trial_start=to_optional_storage_date(subscription.trial_start),
        trial_end=to_optional_storage_date(subscription.trial_end),
    )


__all__ = ["build_product_row", "build_price_row", "build_subscription_row"]
