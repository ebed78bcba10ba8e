"""
Reconciliation of local subscriptions with Stripe.

Every subscription event re-reads the subscription from Stripe and overwrites
the local row. On the first creation the billing details of the default
payment method are also copied to the Stripe customer and the local user.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from billing_sync.core.config import sync_logger
from billing_sync.core.db.crud import customer_db, subscription_db, user_db
from billing_sync.core.exceptions.types import CustomerNotFoundException
from billing_sync.core.services.payment.stripe.main import Stripe
from billing_sync.core.services.payment.stripe.types import PaymentMethod
from billing_sync.sync.mappers import build_subscription_row


async def manage_subscription_status_change(
    session: AsyncSession,
    *,
    subscription_id: str,
    customer_id: str,
    create_action: bool = False,
) -> None:
    """
    Upsert the local copy of a Stripe subscription.

    Args:
        session: Database session.
        subscription_id: Stripe Subscription ID.
        customer_id: Stripe Customer ID owning the subscription.
        create_action: True when the subscription was just created; copies the
            payment method's billing details to the customer and the user.

    Raises:
        CustomerNotFoundException: If no local user is mapped to ``customer_id``.
        DatabaseException: If a storage read or write fails.
        StripeAPIException: If a Stripe call fails.
    """
    mapping = await customer_db.get_by_stripe_customer_id(session, customer_id)
    if mapping is None:
        sync_logger.error(f"No customer mapping found for Stripe customer {customer_id}")
        raise CustomerNotFoundException(
            f"No customer mapping found for Stripe customer {customer_id}."
        )
    user_id = mapping.id

    subscription = await Stripe.get_subscription(
        subscription_id, expand=["default_payment_method"]
    )

    row = build_subscription_row(subscription, user_id)
    await subscription_db.upsert(session, row.to_storage())
    sync_logger.info(
        f"Inserted/updated subscription [{subscription.id}] for user [{user_id}]"
    )

    if not create_action:
        return

    payment_method = subscription.default_payment_method
    if isinstance(payment_method, PaymentMethod):
        await copy_billing_details_to_customer(
            session,
            user_id=user_id,
            customer_id=customer_id,
            payment_method=payment_method,
        )


async def copy_billing_details_to_customer(
    session: AsyncSession,
    *,
    user_id: str,
    customer_id: str,
    payment_method: PaymentMethod,
) -> bool:
    """
    Copy a payment method's billing details to the Stripe customer and local user.

    Nothing is written unless name, phone and address are all present. The
    Stripe update happens first; a failure of the local update afterwards is
    not compensated.

    Returns:
        bool: True if the details were copied, False if some were missing.
    """
    billing = payment_method.billing_details
    if not billing.name or not billing.phone or not billing.address:
        sync_logger.info(
            f"Skipping billing details copy for user [{user_id}]: incomplete billing details"
        )
        return False

    address = billing.address.model_dump()
    await Stripe.update_customer(
        payment_method.customer or customer_id,
        name=billing.name,
        phone=billing.phone,
        address=billing.address,
    )
    await user_db.update_billing_details(
        session,
        user_id,
        billing_address=address,
        payment_method=payment_method.type_details,
    )
    sync_logger.info(f"Copied billing details to customer [{customer_id}]")
    return True


__all__ = ["manage_subscription_status_change", "copy_billing_details_to_customer"]
