"""
Stripe event job handlers.

Each handler receives an open storage session and the Stripe event envelope
(``{"id", "type", "data": {"object": ...}}``) and runs one sync operation on
the event's object. Handlers are registered against event names in
``billing_sync.jobs.registry``; errors propagate to the dispatcher.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from billing_sync.core.config import job_logger
from billing_sync.core.enums import CheckoutMode
from billing_sync.core.exceptions.types import BadRequestException
from billing_sync.core.services.payment.stripe.types import (
    CheckoutSession,
    Price,
    Product,
)
from billing_sync.core.utils import resolve_stripe_id
from billing_sync.sync.records import (
    delete_price_record,
    delete_product_record,
    upsert_price_record,
    upsert_product_record,
)
from billing_sync.sync.subscriptions import manage_subscription_status_change

SUBSCRIPTION_CREATED = "customer.subscription.created"


def _event_object(event: dict[str, Any]) -> dict[str, Any]:
    """Return ``data.object`` of an event envelope."""
    obj = (event.get("data") or {}).get("object")
    if not isinstance(obj, dict):
        raise BadRequestException(
            f"Event {event.get('id')} has no data.object payload."
        )
    return obj


def _object_id(event: dict[str, Any]) -> str:
    object_id = _event_object(event).get("id")
    if not object_id:
        raise BadRequestException(f"Event {event.get('id')} object has no id.")
    return object_id


def is_subscription_checkout(payload: dict[str, Any]) -> bool:
    """Only checkout sessions in subscription mode are reconciled."""
    return payload.get("mode") == CheckoutMode.SUBSCRIPTION.value


async def handle_product_changed(session: AsyncSession, event: dict[str, Any]) -> None:
    """Handle product.created and product.updated events."""
    product = Product.model_validate(_event_object(event))
    job_logger.info(f"Processing {event.get('type')} for product {product.id}")
    await upsert_product_record(session, product)


async def handle_product_deleted(session: AsyncSession, event: dict[str, Any]) -> None:
    """Handle product.deleted events."""
    product_id = _object_id(event)
    job_logger.info(f"Processing {event.get('type')} for product {product_id}")
    await delete_product_record(session, product_id)


async def handle_price_changed(session: AsyncSession, event: dict[str, Any]) -> None:
    """Handle price.created and price.updated events."""
    price = Price.model_validate(_event_object(event))
    job_logger.info(f"Processing {event.get('type')} for price {price.id}")
    await upsert_price_record(session, price)


async def handle_price_deleted(session: AsyncSession, event: dict[str, Any]) -> None:
    """Handle price.deleted events."""
    price_id = _object_id(event)
    job_logger.info(f"Processing {event.get('type')} for price {price_id}")
    await delete_price_record(session, price_id)


async def handle_subscription_changed(
    session: AsyncSession, event: dict[str, Any]
) -> None:
    """
    Handle customer.subscription.created, .updated and .deleted events.

    Billing details are only copied for ``customer.subscription.created``.

    Raises:
        BadRequestException: If the subscription has no customer.
    """
    payload = _event_object(event)
    subscription_id = _object_id(event)
    customer_id = resolve_stripe_id(payload.get("customer"))
    if not customer_id:
        raise BadRequestException(
            f"Subscription {subscription_id} has no customer reference."
        )

    event_type = event.get("type")
    job_logger.info(
        f"Processing {event_type} for subscription {subscription_id} "
        f"(customer={customer_id})"
    )
    await manage_subscription_status_change(
        session,
        subscription_id=subscription_id,
        customer_id=customer_id,
        create_action=event_type == SUBSCRIPTION_CREATED,
    )


async def handle_checkout_session_completed(
    session: AsyncSession, event: dict[str, Any]
) -> None:
    """
    Handle checkout.session.completed events for subscription checkouts.

    The subscription created by the checkout is reconciled as a first creation.

    Raises:
        BadRequestException: If the session has no subscription or customer.
    """
    checkout = CheckoutSession.model_validate(_event_object(event))
    if not checkout.subscription or not checkout.customer:
        raise BadRequestException(
            f"Checkout session {checkout.id} has no subscription or customer reference."
        )

    job_logger.info(
        f"Processing checkout session {checkout.id} for subscription "
        f"{checkout.subscription} (customer={checkout.customer})"
    )
    await manage_subscription_status_change(
        session,
        subscription_id=checkout.subscription,
        customer_id=checkout.customer,
        create_action=True,
    )


__all__ = [
    "handle_product_changed",
    "handle_product_deleted",
    "handle_price_changed",
    "handle_price_deleted",
    "handle_subscription_changed",
    "handle_checkout_session_completed",
    "is_subscription_checkout",
]
